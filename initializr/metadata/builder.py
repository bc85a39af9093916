"""Build InitializrMetadata from bound configuration properties."""

import re
from collections.abc import Callable

from ..exceptions import ConfigurationError
from .model import (
    Dependency,
    DependencyGroup,
    InitializrMetadata,
    MetadataElement,
    ProjectType,
    TextDefaults,
)
from .properties import ElementProperties, InitializrProperties
from .version import VersionRange

MetadataCustomizer = Callable[[InitializrMetadata], None]


def _element(properties: ElementProperties) -> dict:
    values = properties.model_dump()
    values["name"] = properties.name or properties.id
    return values


def _package_name(group_id: str, artifact_id: str) -> str:
    candidate = f"{group_id}.{artifact_id}".lower()
    return re.sub(r"[^a-z0-9_.]", "", candidate)


class InitializrMetadataBuilder:
    """Builder for InitializrMetadata.

    Examples:
        >>> metadata = (
        ...     InitializrMetadataBuilder.from_initializr_properties(properties)
        ...     .with_customizer(lambda m: m.update_boot_versions([]))
        ...     .build()
        ... )
    """

    def __init__(self, properties: InitializrProperties):
        self.properties = properties
        self.customizers: list[MetadataCustomizer] = []

    @classmethod
    def from_initializr_properties(cls, properties: InitializrProperties) -> "InitializrMetadataBuilder":
        return cls(properties)

    def with_customizer(self, customizer: MetadataCustomizer) -> "InitializrMetadataBuilder":
        self.customizers.append(customizer)
        return self

    def build(self) -> InitializrMetadata:
        """Build and validate the metadata.

        Raises:
            ConfigurationError: If a dependency id is declared twice or a
                version range cannot be parsed.
        """
        props = self.properties
        metadata = InitializrMetadata(
            dependencies=self._build_dependencies(),
            types=[ProjectType(**_element(t)) for t in props.types],
            packagings=[MetadataElement(**_element(p)) for p in props.packagings],
            java_versions=[MetadataElement(**_element(j)) for j in props.java_versions],
            languages=[MetadataElement(**_element(lang)) for lang in props.languages],
            boot_versions=[MetadataElement(**_element(b)) for b in props.boot_versions],
            defaults=TextDefaults(
                group_id=props.group_id,
                artifact_id=props.artifact_id,
                version=props.version,
                name=props.name,
                description=props.description,
                package_name=props.package_name or _package_name(props.group_id, props.artifact_id),
            ),
            env=props.env,
        )
        for customizer in self.customizers:
            customizer(metadata)
        return metadata

    def _build_dependencies(self) -> list[DependencyGroup]:
        seen: set[str] = set()
        groups = []
        for index, group in enumerate(self.properties.dependencies):
            content = []
            for dependency in group.content:
                key = f"initializr.dependencies.{index}.content"
                if dependency.id in seen:
                    raise ConfigurationError(key, f"duplicate dependency id {dependency.id!r}")
                seen.add(dependency.id)

                values = _element(dependency)
                # Dependencies inherit the version range of their group.
                values["version_range"] = dependency.version_range or group.version_range
                if values["version_range"] is not None:
                    try:
                        VersionRange.parse(values["version_range"])
                    except ValueError as err:
                        raise ConfigurationError(key, str(err)) from err
                if values["artifact_id"] is None and dependency.starter:
                    values["artifact_id"] = f"spring-boot-starter-{dependency.id}"
                if values["group_id"] is None and dependency.starter:
                    values["group_id"] = "org.springframework.boot"
                content.append(Dependency(**values))
            groups.append(DependencyGroup(name=group.name, content=content))
        return groups
