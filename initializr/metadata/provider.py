"""Metadata providers.

The metadata provider hands out the current InitializrMetadata and keeps its
boot versions up to date from a remote source. The dependency metadata
provider narrows the dependencies down to the ones compatible with a given
boot version.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..cache import Cache
from .model import Dependency, InitializrMetadata, MetadataElement
from .version import Version

LOGGER = logging.getLogger(__name__)


class InitializrMetadataProvider(ABC):
    @abstractmethod
    def get(self) -> InitializrMetadata:
        """Return the metadata to use for the current request."""
        ...


class ProjectRelease(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str
    version_display_name: str | None = Field(default=None, alias="versionDisplayName")
    current: bool = False
    release_status: str = Field(default="GENERAL_AVAILABILITY", alias="releaseStatus")
    snapshot: bool = False


class ProjectMetadata(BaseModel):
    project_releases: list[ProjectRelease] = Field(default_factory=list, alias="projectReleases")


def parse_boot_versions(payload: dict) -> list[MetadataElement]:
    """Turn a remote project metadata document into boot version elements."""
    releases = ProjectMetadata.model_validate(payload).project_releases
    versions = []
    for release in releases:
        name = release.version_display_name or release.version
        if release.snapshot:
            name += " (SNAPSHOT)"
        elif release.release_status == "PRERELEASE":
            name += f" ({release.version.rsplit('.', 1)[-1]})"
        versions.append(MetadataElement(id=release.version, name=name, default=release.current))
    return versions


class DefaultInitializrMetadataProvider(InitializrMetadataProvider):
    """Serve metadata, refreshing boot versions over HTTP.

    When a cache is given the refreshed metadata is stored in it, and the
    next refresh happens once the cache entry expires. Without a cache the
    boot versions are refreshed once, on first use.

    A failed refresh is logged and the previous boot versions are kept.

    Implements the HasLifecycle protocol: the HTTP client is closed on
    shutdown.
    """

    CACHE_KEY = "metadata"

    def __init__(
        self,
        metadata: InitializrMetadata,
        http_client: httpx.Client,
        cache: Cache | None = None,
    ):
        self.metadata = metadata
        self.http_client = http_client
        self.cache = cache
        self._refreshed = False

    def get(self) -> InitializrMetadata:
        if self.cache is not None:
            return self.cache.get_or_compute(self.CACHE_KEY, self.refresh)
        if not self._refreshed:
            self.refresh()
        return self.metadata

    def refresh(self) -> InitializrMetadata:
        url = self.metadata.env.spring_boot_metadata_url
        self._refreshed = True
        if not url:
            return self.metadata

        try:
            response = self.http_client.get(url)
            response.raise_for_status()
            boot_versions = parse_boot_versions(response.json())
        except (httpx.HTTPError, ValidationError, ValueError) as err:
            LOGGER.warning(
                "Failed to fetch boot versions, keeping previous ones",
                extra={"url": url, "error": str(err)},
            )
            return self.metadata

        if boot_versions:
            self.metadata.update_boot_versions(boot_versions)
            LOGGER.info(
                "Refreshed boot versions",
                extra={"url": url, "count": len(boot_versions)},
            )
        return self.metadata

    def close(self) -> None:
        self.http_client.close()

    async def on_startup(self) -> None:
        pass

    async def on_shutdown(self) -> None:
        self.close()


@dataclass
class DependencyMetadata:
    boot_version: str
    dependencies: dict[str, Dependency] = field(default_factory=dict)


class DependencyMetadataProvider(ABC):
    @abstractmethod
    def get(self, metadata: InitializrMetadata, boot_version: str) -> DependencyMetadata:
        """Dependencies of ``metadata`` that can be used with ``boot_version``."""
        ...


class DefaultDependencyMetadataProvider(DependencyMetadataProvider):
    """Resolve compatible dependencies, cached per boot version when a cache is given."""

    def __init__(self, cache: Cache | None = None):
        self.cache = cache

    def get(self, metadata: InitializrMetadata, boot_version: str) -> DependencyMetadata:
        if self.cache is None:
            return self._compute(metadata, boot_version)
        return self.cache.get_or_compute(boot_version, lambda: self._compute(metadata, boot_version))

    def _compute(self, metadata: InitializrMetadata, boot_version: str) -> DependencyMetadata:
        version = Version.parse(boot_version)
        return DependencyMetadata(
            boot_version=boot_version,
            dependencies={d.id: d for d in metadata.all_dependencies() if d.match(version)},
        )
