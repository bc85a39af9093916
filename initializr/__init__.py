"""initializr - project generation service with pluggable defaults.

This module provides the public API for assembling the service: register
your own implementations on the builder, and initializr fills in a default
for every role you leave free.
"""

from .application import Application, ApplicationBuilder, HasLifecycle
from .cache import CacheManager, ExpiryPolicy
from .config import Environment
from .exceptions import ConfigurationError, InitializrError, InvalidProjectRequestError
from .generator import ProjectRequest, ProjectRequestPostProcessor
from .web import create_web_app

__all__ = [
    # Application
    "Application",
    "ApplicationBuilder",
    "HasLifecycle",
    "create_web_app",
    # Configuration
    "Environment",
    "CacheManager",
    "ExpiryPolicy",
    # Extension points
    "ProjectRequest",
    "ProjectRequestPostProcessor",
    # Errors
    "ConfigurationError",
    "InitializrError",
    "InvalidProjectRequestError",
]
