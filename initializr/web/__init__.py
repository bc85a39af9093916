"""HTTP surface: controllers, static resources and the FastAPI factory."""

from .app import create_web_app
from .main import MainController
from .resources import ResourceUrlProvider
from .ui import UiController

__all__ = [
    "MainController",
    "ResourceUrlProvider",
    "UiController",
    "create_web_app",
]
