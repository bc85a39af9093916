"""Generate project skeletons from resolved requests."""

import io
import logging
import zipfile

from ..metadata import InitializrMetadata
from ..rendering import TemplateRenderer
from .request import ProjectRequest, ProjectRequestResolver
from .resources import ProjectResourceLocator

LOGGER = logging.getLogger(__name__)

BUILD_FILES = {"maven": "pom.xml", "gradle": "build.gradle"}
SOURCE_EXTENSIONS = {"java": "java", "kotlin": "kt", "groovy": "groovy"}
GITIGNORE = "classpath:templates/project/gitignore"


class ProjectGenerator:
    """Produce the files of a project from a ProjectRequest.

    Usable without any collaborator; a resolver without post-processors, a
    template renderer and a resource locator are created when none is given.
    """

    def __init__(
        self,
        request_resolver: ProjectRequestResolver | None = None,
        template_renderer: TemplateRenderer | None = None,
        resource_locator: ProjectResourceLocator | None = None,
    ):
        self.request_resolver = request_resolver or ProjectRequestResolver()
        self.template_renderer = template_renderer or TemplateRenderer()
        self.resource_locator = resource_locator or ProjectResourceLocator()

    def generate_project_structure(
        self, request: ProjectRequest, metadata: InitializrMetadata
    ) -> dict[str, str]:
        """Resolve the request and map each generated file path to its content.

        Raises:
            InvalidProjectRequestError: If the request cannot be resolved.
        """
        self.request_resolver.resolve(request, metadata)
        build = request.build or "maven"
        language = request.language or "java"
        extension = SOURCE_EXTENSIONS.get(language, "java")
        package_path = (request.package_name or "").replace(".", "/")
        build_file = BUILD_FILES.get(build, "pom.xml")
        model = {"request": request, "dependencies": request.resolved_dependencies}

        files = {
            build_file: self.template_renderer.process(f"project/{build_file}.j2", model),
            f"src/main/{language}/{package_path}/{request.application_name}.{extension}": (
                self.template_renderer.process(f"project/Application.{extension}.j2", model)
            ),
            ".gitignore": self.resource_locator.get_text_resource(GITIGNORE),
        }
        if request.base_dir:
            files = {f"{request.base_dir}/{path}": content for path, content in files.items()}

        LOGGER.info(
            "Generated project",
            extra={"artifact_id": request.artifact_id, "build": build, "files": len(files)},
        )
        return files

    def generate_project_zip(self, request: ProjectRequest, metadata: InitializrMetadata) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for path, content in self.generate_project_structure(request, metadata).items():
                archive.writestr(path, content)
        return buffer.getvalue()
