"""Public URLs for static resources."""

import hashlib
import logging
from importlib import resources
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class ResourceUrlProvider:
    """Resolve static resource paths to fingerprinted public URLs.

    The fingerprint is derived from the file content, so browsers fetch a
    fresh copy whenever the file changes. Fingerprints are computed once
    per path.

    Examples:
        >>> provider = ResourceUrlProvider()
        >>> provider.get_for_lookup_path("css/initializr.css")
        '/static/css/initializr.css?v=3f2a9c1e'
    """

    def __init__(self, directory: Path | None = None, url_prefix: str = "/static"):
        self.directory = directory or Path(str(resources.files("initializr").joinpath("static")))
        self.url_prefix = url_prefix.rstrip("/")
        self._fingerprints: dict[str, str] = {}

    def get_for_lookup_path(self, lookup_path: str) -> str | None:
        """Public URL of the resource, or None when it does not exist."""
        relative = lookup_path.lstrip("/")
        if relative not in self._fingerprints:
            file = self.directory / relative
            if not file.is_file():
                LOGGER.debug("No static resource found", extra={"path": relative})
                return None
            self._fingerprints[relative] = hashlib.sha256(file.read_bytes()).hexdigest()[:8]
        return f"{self.url_prefix}/{relative}?v={self._fingerprints[relative]}"
