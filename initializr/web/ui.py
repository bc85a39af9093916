"""Controller backing the interactive UI."""

import asyncio

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from ..exceptions import InvalidProjectRequestError
from ..metadata import InitializrMetadataProvider
from ..metadata.version import Version


class UiController:
    def __init__(self, metadata_provider: InitializrMetadataProvider):
        self.metadata_provider = metadata_provider
        self.router = APIRouter(prefix="/ui")
        self.router.add_api_route("/dependencies", self.dependencies, methods=["GET"])

    async def dependencies(self, version: str | None = Query(default=None)) -> JSONResponse:
        """List dependencies, restricted to the ones compatible with ``version`` if given."""
        metadata = await asyncio.to_thread(self.metadata_provider.get)
        try:
            boot_version = Version.parse(version) if version else None
        except ValueError as err:
            raise InvalidProjectRequestError(str(err)) from err

        content = [
            {
                "id": dependency.id,
                "name": dependency.name,
                "description": dependency.description,
                "group": group.name,
            }
            for group in metadata.dependencies
            for dependency in group.content
            if boot_version is None or dependency.match(boot_version)
        ]
        return JSONResponse({"dependencies": content})
