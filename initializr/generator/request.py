"""Project requests and how they are resolved against the metadata."""

import logging
import re
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..exceptions import InvalidProjectRequestError
from ..metadata import Dependency, InitializrMetadata
from ..metadata.model import default_element
from ..metadata.version import Version

LOGGER = logging.getLogger(__name__)

_IDENTIFIER = r"[A-Za-z_$][A-Za-z0-9_$]*"
_PACKAGE_NAME = re.compile(rf"^{_IDENTIFIER}(?:\.{_IDENTIFIER})*$")
_CLASS_NAME = re.compile(rf"^{_IDENTIFIER}$")


def _application_name(name: str | None, fallback: str) -> str:
    if not name:
        return fallback
    words = [w for w in re.split(r"[^A-Za-z0-9]+", name) if w]
    candidate = "".join(w[:1].upper() + w[1:] for w in words)
    if not candidate or not candidate[0].isalpha():
        return fallback
    return candidate if candidate.endswith("Application") else candidate + "Application"


class ProjectRequest(BaseModel):
    """A request to generate a project, as sent by clients.

    Field names accept their camelCase form (``groupId``, ``bootVersion``).
    Unset fields are filled from the metadata defaults on resolution.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    style: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)

    name: str | None = None
    type: str | None = None
    description: str | None = None
    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    boot_version: str | None = None
    packaging: str | None = None
    application_name: str | None = None
    language: str | None = None
    package_name: str | None = None
    java_version: str | None = None
    base_dir: str | None = None

    build: str | None = None
    resolved_dependencies: list[Dependency] = Field(default_factory=list, exclude=True)

    def initialize(self, metadata: InitializrMetadata) -> None:
        """Fill every unset field with its default from the metadata."""
        defaults = metadata.defaults
        self.group_id = self.group_id or defaults.group_id
        self.artifact_id = self.artifact_id or defaults.artifact_id
        self.version = self.version or defaults.version
        self.name = self.name or defaults.name
        self.description = self.description or defaults.description
        self.package_name = self.package_name or defaults.package_name
        self.boot_version = self.boot_version or metadata.default_boot_version()
        for attribute, elements in (
            ("type", metadata.types),
            ("packaging", metadata.packagings),
            ("java_version", metadata.java_versions),
            ("language", metadata.languages),
        ):
            if getattr(self, attribute) is None:
                element = default_element(elements)
                setattr(self, attribute, element.id if element else None)

    def resolve(self, metadata: InitializrMetadata) -> None:
        """Resolve dependency ids and the build type against the metadata.

        Raises:
            InvalidProjectRequestError: If a dependency, type or language is
                unknown, a dependency is not compatible with the requested boot
                version, or a name that ends up in file paths is unsafe.
        """
        self.initialize(metadata)

        resolved = []
        for dependency_id in dict.fromkeys([*self.style, *self.dependencies]):
            dependency = metadata.get_dependency(dependency_id)
            if dependency is None:
                raise InvalidProjectRequestError(f"Unknown dependency '{dependency_id}' check project metadata")
            resolved.append(dependency)

        if self.boot_version:
            try:
                version = Version.parse(self.boot_version)
            except ValueError as err:
                raise InvalidProjectRequestError(str(err)) from err
            for dependency in resolved:
                if not dependency.match(version):
                    raise InvalidProjectRequestError(
                        f"Dependency '{dependency.id}' is not compatible with "
                        f"Spring Boot {self.boot_version}"
                    )
        self.resolved_dependencies = resolved

        if self.type is not None:
            project_type = metadata.get_type(self.type)
            if project_type is None:
                raise InvalidProjectRequestError(f"Unknown type '{self.type}' check project metadata")
            self.build = project_type.build

        if self.language is not None and all(lang.id != self.language for lang in metadata.languages):
            raise InvalidProjectRequestError(f"Unknown language '{self.language}' check project metadata")
        if self.base_dir and (
            self.base_dir.startswith("/") or ".." in self.base_dir or "\\" in self.base_dir
        ):
            raise InvalidProjectRequestError(f"Invalid base directory '{self.base_dir}'")
        if self.package_name and not _PACKAGE_NAME.match(self.package_name):
            raise InvalidProjectRequestError(f"Invalid package name '{self.package_name}'")

        self.application_name = self.application_name or _application_name(
            self.name, metadata.env.fallback_application_name
        )
        if not _CLASS_NAME.match(self.application_name):
            raise InvalidProjectRequestError(f"Invalid application name '{self.application_name}'")


class ProjectRequestPostProcessor:
    """Hook invoked around the resolution of a ProjectRequest.

    Both methods are no-ops by default; override the one you need. Hooks may
    mutate the request or raise to reject it.
    """

    def post_process_before_resolution(self, request: ProjectRequest, metadata: InitializrMetadata) -> None:
        pass

    def post_process_after_resolution(self, request: ProjectRequest, metadata: InitializrMetadata) -> None:
        pass


class ProjectRequestResolver:
    """Resolve requests, running the post-processors in the given order."""

    def __init__(self, post_processors: Sequence[ProjectRequestPostProcessor] = ()):
        self.post_processors = list(post_processors)

    def resolve(self, request: ProjectRequest, metadata: InitializrMetadata) -> ProjectRequest:
        for processor in self.post_processors:
            processor.post_process_before_resolution(request, metadata)

        request.resolve(metadata)

        for processor in self.post_processors:
            processor.post_process_after_resolution(request, metadata)

        LOGGER.debug(
            "Resolved project request",
            extra={
                "artifact_id": request.artifact_id,
                "dependencies": [d.id for d in request.resolved_dependencies],
            },
        )
        return request
