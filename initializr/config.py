"""Hierarchical configuration properties and typed binding.

Properties are held as flat dotted keys (``spring.mustache.cache``) and bound
into pydantic-settings models by prefix. Keys are relaxed: ``force-ssl``,
``forceSsl`` and ``force_ssl`` all bind to the ``force_ssl`` field. Explicit
properties take precedence over environment variables, which the settings
models read through their ``env_prefix`` (e.g. ``SPRING_MUSTACHE_CACHE``).
"""

import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

LOGGER = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def canonical_key(segment: str) -> str:
    """Normalise a single key segment to snake_case.

    Examples:
        >>> canonical_key("force-ssl")
        'force_ssl'
        >>> canonical_key("springBootMetadataUrl")
        'spring_boot_metadata_url'
    """
    return _CAMEL_BOUNDARY.sub("_", segment).replace("-", "_").lower()


def _canonical_tree(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {canonical_key(str(k)): _canonical_tree(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_canonical_tree(v) for v in value]
    return value


def _canonical_path(key: str) -> str:
    return ".".join(canonical_key(part) for part in key.split("."))


def _flatten(value: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, item in value.items():
        path = _canonical_path(str(key))
        full_key = f"{prefix}.{path}" if prefix else path
        if isinstance(item, Mapping):
            flat.update(_flatten(item, full_key))
        else:
            flat[full_key] = _canonical_tree(item)
    return flat


class Environment:
    """Hierarchical key-value properties for the running process.

    Examples:
        >>> env = Environment({"spring.mustache.cache": "false"})
        >>> env.bind(MustacheProperties, "spring.mustache").cache
        False

        Nested mappings and YAML files are flattened the same way:

        >>> env = Environment({"initializr": {"env": {"force-ssl": False}}})
        >>> env.get("initializr.env.force_ssl")
        False
    """

    def __init__(self, properties: Mapping[str, Any] | None = None):
        self.properties: dict[str, Any] = _flatten(properties or {})

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Environment":
        """Load properties from a YAML document with a top-level mapping."""
        resolved = Path(path)
        with resolved.open("r", encoding="utf-8") as handle:
            parsed = yaml.safe_load(handle)

        if parsed is None:
            return cls()
        if not isinstance(parsed, dict):
            raise ConfigurationError(str(resolved), "document must contain a top-level mapping")
        return cls(parsed)

    def with_properties(self, properties: Mapping[str, Any]) -> "Environment":
        """Return a new environment where ``properties`` override these ones."""
        merged = Environment()
        merged.properties = {**self.properties, **_flatten(properties)}
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(_canonical_path(key), default)

    def subtree(self, prefix: str) -> dict[str, Any]:
        """Collect every property under ``prefix`` as a nested mapping."""
        root = _canonical_path(prefix) + "."
        tree: dict[str, Any] = {}
        for key, value in self.properties.items():
            if not key.startswith(root):
                continue
            *parents, leaf = key[len(root) :].split(".")
            node = tree
            for parent in parents:
                child = node.setdefault(parent, {})
                if not isinstance(child, dict):
                    raise ConfigurationError(
                        f"{root}{parent}", "cannot be both a value and a group of properties"
                    )
                node = child
            node[leaf] = value
        return tree

    def bind(self, model: type[M], prefix: str) -> M:
        """Bind the properties under ``prefix`` to a pydantic model.

        Unknown keys are ignored. A value that cannot be converted to the
        field's type aborts with a ConfigurationError naming the key.

        Raises:
            ConfigurationError: If any property fails validation.
        """
        values = self.subtree(prefix)
        try:
            bound = model(**values)
        except ValidationError as err:
            error = err.errors()[0]
            location = ".".join(canonical_key(str(part)) for part in error["loc"])
            key = f"{prefix}.{location}" if location else prefix
            raise ConfigurationError(key, error["msg"]) from err

        LOGGER.debug("Bound configuration properties", extra={"prefix": prefix})
        return bound


class MustacheProperties(BaseSettings):
    """Template rendering options, bound from ``spring.mustache``.

    Attributes:
        cache: Keep compiled templates for the process lifetime. Disable
            during local development to re-read templates on every render.
    """

    cache: bool = True

    model_config = SettingsConfigDict(env_prefix="SPRING_MUSTACHE_", extra="ignore")


class ProxyProperties(BaseModel):
    """Forward proxy used for outbound HTTP calls.

    The proxy is only used when ``host`` is set; credentials are sent with
    basic authentication when ``username`` is set.
    """

    host: str = ""
    port: int = 8000
    username: str = ""
    password: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"
