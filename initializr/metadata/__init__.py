"""Service metadata: the model, how it is built, and who provides it."""

from .builder import InitializrMetadataBuilder
from .model import (
    Dependency,
    DependencyGroup,
    InitializrMetadata,
    MetadataElement,
    ProjectType,
    TextDefaults,
)
from .properties import InitializrEnvironment, InitializrProperties
from .provider import (
    DefaultDependencyMetadataProvider,
    DefaultInitializrMetadataProvider,
    DependencyMetadata,
    DependencyMetadataProvider,
    InitializrMetadataProvider,
)

__all__ = [
    "DefaultDependencyMetadataProvider",
    "DefaultInitializrMetadataProvider",
    "Dependency",
    "DependencyGroup",
    "DependencyMetadata",
    "DependencyMetadataProvider",
    "InitializrEnvironment",
    "InitializrMetadata",
    "InitializrMetadataBuilder",
    "InitializrMetadataProvider",
    "InitializrProperties",
    "MetadataElement",
    "ProjectType",
    "TextDefaults",
]
