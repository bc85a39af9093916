"""Application bootstrapping and dependency injection for initializr.

This package contains the container holding one service per role, the
builder an embedding application uses to pre-register its own services,
and the profiles that fill in initializr's defaults around them.
"""

from .application import Application, ApplicationBuilder, HasLifecycle
from .configurators import (
    ApplicationProfile,
    CacheProfile,
    InitializrProfile,
    PostProcessorsInPackage,
)
from .container import (
    DependencyCircularReferenceError,
    DependencyContainer,
    DependencyNotFoundError,
)

__all__ = [
    # Application
    "Application",
    "ApplicationBuilder",
    "HasLifecycle",
    # Profiles
    "ApplicationProfile",
    "CacheProfile",
    "InitializrProfile",
    "PostProcessorsInPackage",
    # Container
    "DependencyCircularReferenceError",
    "DependencyContainer",
    "DependencyNotFoundError",
]
