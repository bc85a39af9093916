"""Locate static resources that end up in generated projects."""

import logging
from importlib import resources
from pathlib import Path

from ..cache import Cache

LOGGER = logging.getLogger(__name__)

PACKAGE_PREFIX = "classpath:"


class ProjectResourceLocator:
    """Read resources by location, cached by location when a cache is given.

    Locations are either filesystem paths or ``classpath:`` paths relative
    to the initializr package (``classpath:templates/project/gitignore``).
    """

    def __init__(self, cache: Cache | None = None):
        self.cache = cache

    def get_binary_resource(self, location: str) -> bytes:
        """Return the content of the resource at ``location``.

        Raises:
            FileNotFoundError: If nothing exists at the location.
        """
        if self.cache is None:
            return self._read(location)
        return self.cache.get_or_compute(location, lambda: self._read(location))

    def get_text_resource(self, location: str) -> str:
        return self.get_binary_resource(location).decode("utf-8")

    def _read(self, location: str) -> bytes:
        LOGGER.debug("Loading project resource", extra={"location": location})
        if location.startswith(PACKAGE_PREFIX):
            path = location[len(PACKAGE_PREFIX) :].lstrip("/")
            resource = resources.files("initializr").joinpath(path)
            if not resource.is_file():
                raise FileNotFoundError(f"No resource found at {location}")
            return resource.read_bytes()
        return Path(location).read_bytes()
