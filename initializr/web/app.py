"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from ..exceptions import InvalidProjectRequestError
from .main import MainController
from .resources import ResourceUrlProvider
from .ui import UiController

if TYPE_CHECKING:
    from ..application import Application

LOGGER = logging.getLogger(__name__)


async def _invalid_request(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.info("Rejected project request", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(status_code=400, content={"message": str(exc)})


def create_web_app(application: "Application") -> FastAPI:
    """Expose the application's controllers over HTTP.

    The application is started and shut down with the FastAPI lifespan.

    Examples:
        >>> app = create_web_app(ApplicationBuilder().build())
        >>> uvicorn.run(app)
    """

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        async with application:
            yield

    web_app = FastAPI(title="initializr", lifespan=lifespan)
    web_app.include_router(application.resolve(MainController).router)
    web_app.include_router(application.resolve(UiController).router)

    resource_url_provider = application.resolve(ResourceUrlProvider)
    web_app.mount(
        resource_url_provider.url_prefix,
        StaticFiles(directory=resource_url_provider.directory),
        name="static",
    )
    web_app.add_exception_handler(InvalidProjectRequestError, _invalid_request)
    web_app.add_exception_handler(ValidationError, _invalid_request)
    return web_app
