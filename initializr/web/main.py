"""Controller for the main pages and the project generation endpoints."""

import asyncio
import logging
import re
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.datastructures import QueryParams

from ..exceptions import InvalidProjectRequestError
from ..generator import ProjectGenerator, ProjectRequest
from ..metadata import (
    DependencyMetadataProvider,
    InitializrMetadata,
    InitializrMetadataProvider,
    MetadataElement,
)
from ..metadata.model import default_element
from ..rendering import TemplateRenderer
from .resources import ResourceUrlProvider

LOGGER = logging.getLogger(__name__)

LIST_PARAMETERS = ("style", "dependencies")
_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]")


def _select(kind: str, elements: list[MetadataElement]) -> dict[str, Any]:
    default = default_element(elements)
    return {
        "type": kind,
        "default": default.id if default else None,
        "values": [{"id": e.id, "name": e.name} for e in elements],
    }


def client_metadata(metadata: InitializrMetadata) -> dict[str, Any]:
    """Metadata in the shape expected by client tools."""
    return {
        "dependencies": {
            "type": "hierarchical-multi-select",
            "values": [
                {
                    "name": group.name,
                    "values": [
                        {"id": d.id, "name": d.name, "description": d.description}
                        for d in group.content
                    ],
                }
                for group in metadata.dependencies
            ],
        },
        "type": {
            **_select("action", list(metadata.types)),
            "values": [{"id": t.id, "name": t.name, "action": t.action} for t in metadata.types],
        },
        "packaging": _select("single-select", metadata.packagings),
        "javaVersion": _select("single-select", metadata.java_versions),
        "language": _select("single-select", metadata.languages),
        "bootVersion": _select("single-select", metadata.boot_versions),
        "groupId": {"type": "text", "default": metadata.defaults.group_id},
        "artifactId": {"type": "text", "default": metadata.defaults.artifact_id},
        "version": {"type": "text", "default": metadata.defaults.version},
        "name": {"type": "text", "default": metadata.defaults.name},
        "description": {"type": "text", "default": metadata.defaults.description},
        "packageName": {"type": "text", "default": metadata.defaults.package_name},
    }


def archive_name(artifact_id: str | None) -> str:
    """File name of the generated archive, safe to quote in a header."""
    stem = _UNSAFE_FILENAME.sub("", artifact_id or "").strip(".")
    return f"{stem or 'demo'}.zip"


def project_request(query: QueryParams) -> ProjectRequest:
    """Build a ProjectRequest from query parameters.

    List parameters may be repeated or comma separated
    (``style=web&style=jpa`` or ``dependencies=web,jpa``).
    """
    values: dict[str, Any] = {k: v for k, v in query.items() if k not in LIST_PARAMETERS}
    for name in LIST_PARAMETERS:
        values[name] = [
            item.strip() for raw in query.getlist(name) for item in raw.split(",") if item.strip()
        ]
    return ProjectRequest.model_validate(values)


class MainController:
    """Serve the home page, metadata documents and generated projects."""

    def __init__(
        self,
        metadata_provider: InitializrMetadataProvider,
        template_renderer: TemplateRenderer,
        resource_url_provider: ResourceUrlProvider,
        project_generator: ProjectGenerator,
        dependency_metadata_provider: DependencyMetadataProvider,
    ):
        self.metadata_provider = metadata_provider
        self.template_renderer = template_renderer
        self.resource_url_provider = resource_url_provider
        self.project_generator = project_generator
        self.dependency_metadata_provider = dependency_metadata_provider

        self.router = APIRouter()
        self.router.add_api_route("/", self.home, methods=["GET"], response_class=HTMLResponse)
        self.router.add_api_route("/metadata/client", self.metadata_client, methods=["GET"])
        self.router.add_api_route("/metadata/config", self.metadata_config, methods=["GET"])
        self.router.add_api_route("/dependencies", self.dependencies, methods=["GET"])
        self.router.add_api_route("/starter.zip", self.starter_zip, methods=["GET", "POST"])

    async def _metadata(self) -> InitializrMetadata:
        # The provider may refresh over blocking HTTP, keep it off the event loop.
        return await asyncio.to_thread(self.metadata_provider.get)

    async def home(self) -> HTMLResponse:
        metadata = await self._metadata()
        project_type = default_element(metadata.types)
        html = self.template_renderer.process(
            "home.html",
            {
                "title": "Spring Initializr",
                "stylesheet": self.resource_url_provider.get_for_lookup_path("css/initializr.css"),
                "action": getattr(project_type, "action", "/starter.zip"),
                "defaults": metadata.defaults,
                "boot_versions": metadata.boot_versions,
                "dependency_groups": metadata.dependencies,
            },
        )
        return HTMLResponse(html)

    async def metadata_client(self) -> JSONResponse:
        return JSONResponse(client_metadata(await self._metadata()))

    async def metadata_config(self) -> JSONResponse:
        return JSONResponse((await self._metadata()).model_dump(mode="json"))

    async def dependencies(self, request: Request) -> JSONResponse:
        metadata = await self._metadata()
        boot_version = request.query_params.get("bootVersion") or metadata.default_boot_version()
        if boot_version is None:
            raise InvalidProjectRequestError("No boot version given and no default is available")

        try:
            dependency_metadata = self.dependency_metadata_provider.get(metadata, boot_version)
        except ValueError as err:
            raise InvalidProjectRequestError(str(err)) from err

        return JSONResponse(
            {
                "bootVersion": dependency_metadata.boot_version,
                "dependencies": {
                    dependency_id: {
                        "groupId": d.group_id,
                        "artifactId": d.artifact_id,
                        "version": d.version,
                        "scope": d.scope,
                    }
                    for dependency_id, d in dependency_metadata.dependencies.items()
                },
            }
        )

    async def starter_zip(self, request: Request) -> Response:
        project = project_request(request.query_params)
        metadata = await self._metadata()
        content = await asyncio.to_thread(self.project_generator.generate_project_zip, project, metadata)
        return Response(
            content,
            media_type="application/zip",
            headers={"Content-Disposition": f'attachment; filename="{archive_name(project.artifact_id)}"'},
        )
