"""In-memory metadata model served to clients and used for generation."""

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, Field

from .properties import InitializrEnvironment
from .version import Version, VersionRange


class MetadataElement(BaseModel):
    id: str
    name: str
    description: str | None = None
    default: bool = False


class ProjectType(MetadataElement):
    action: str = "/starter.zip"
    build: str | None = None


class Dependency(MetadataElement):
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    scope: str = "compile"
    version_range: str | None = None
    starter: bool = True

    def match(self, boot_version: Version) -> bool:
        """Whether this dependency can be used with the given boot version."""
        if self.version_range is None:
            return True
        return VersionRange.parse(self.version_range).match(boot_version)


class DependencyGroup(BaseModel):
    name: str
    content: list[Dependency] = Field(default_factory=list)


class TextDefaults(BaseModel):
    group_id: str
    artifact_id: str
    version: str
    name: str
    description: str
    package_name: str


def default_element(elements: Iterable[MetadataElement]) -> MetadataElement | None:
    """The element flagged as default, or None when there is none."""
    return next((element for element in elements if element.default), None)


class InitializrMetadata(BaseModel):
    """Metadata describing what the service can generate.

    Boot versions are the only part that changes at runtime; they are
    replaced when the metadata provider refreshes from the remote source.
    """

    dependencies: list[DependencyGroup] = Field(default_factory=list)
    types: list[ProjectType] = Field(default_factory=list)
    packagings: list[MetadataElement] = Field(default_factory=list)
    java_versions: list[MetadataElement] = Field(default_factory=list)
    languages: list[MetadataElement] = Field(default_factory=list)
    boot_versions: list[MetadataElement] = Field(default_factory=list)
    defaults: TextDefaults
    env: InitializrEnvironment = Field(default_factory=InitializrEnvironment)

    def all_dependencies(self) -> Iterator[Dependency]:
        for group in self.dependencies:
            yield from group.content

    def get_dependency(self, dependency_id: str) -> Dependency | None:
        return next((d for d in self.all_dependencies() if d.id == dependency_id), None)

    def get_type(self, type_id: str) -> ProjectType | None:
        return next((t for t in self.types if t.id == type_id), None)

    def default_boot_version(self) -> str | None:
        element = default_element(self.boot_versions)
        return element.id if element else None

    def update_boot_versions(self, boot_versions: list[MetadataElement]) -> None:
        self.boot_versions = boot_versions
