"""Template rendering for the web pages and generated files."""

import logging
from collections.abc import Mapping
from typing import Any

from jinja2 import BaseLoader, Environment, PackageLoader, select_autoescape

LOGGER = logging.getLogger(__name__)

# jinja2 treats a cache size of -1 as unbounded and 0 as disabled.
UNBOUNDED_CACHE = -1
NO_CACHE = 0


class TemplateRenderer:
    """Render named templates with a model.

    With ``cache`` enabled compiled templates are kept for the lifetime of
    the process. With it disabled every render reads and compiles the
    template again, so edits show up without a restart.
    """

    def __init__(self, cache: bool = True, loader: BaseLoader | None = None):
        self._cache = cache
        self.environment = Environment(
            loader=loader or PackageLoader("initializr", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            cache_size=UNBOUNDED_CACHE if cache else NO_CACHE,
            auto_reload=not cache,
            keep_trailing_newline=True,
        )

    @property
    def cache(self) -> bool:
        return self._cache

    def process(self, template_name: str, model: Mapping[str, Any]) -> str:
        template = self.environment.get_template(template_name)
        LOGGER.debug("Rendering template", extra={"template": template_name})
        return template.render(**model)

    def process_string(self, source: str, model: Mapping[str, Any]) -> str:
        return self.environment.from_string(source).render(**model)

    def clear_cache(self) -> None:
        if self.environment.cache is not None:
            self.environment.cache.clear()
