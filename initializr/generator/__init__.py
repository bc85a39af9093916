"""Project requests, their resolution, and project generation."""

from .generator import ProjectGenerator
from .request import ProjectRequest, ProjectRequestPostProcessor, ProjectRequestResolver
from .resources import ProjectResourceLocator

__all__ = [
    "ProjectGenerator",
    "ProjectRequest",
    "ProjectRequestPostProcessor",
    "ProjectRequestResolver",
    "ProjectResourceLocator",
]
