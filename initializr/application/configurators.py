"""Configuration profiles registering initializr's default services.

Every default is registered only if the embedding application has not
already registered something for the same role, with one exception: the
ProjectResourceLocator is always registered and replaces any existing one.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import timedelta
from typing import TYPE_CHECKING

from ..cache import Cache, CacheConfiguration, CacheManager, ExpiryPolicy
from ..config import MustacheProperties
from ..generator import (
    ProjectGenerator,
    ProjectRequestPostProcessor,
    ProjectRequestResolver,
    ProjectResourceLocator,
)
from ..http import HttpClientFactory
from ..metadata import (
    DefaultDependencyMetadataProvider,
    DefaultInitializrMetadataProvider,
    DependencyMetadataProvider,
    InitializrMetadataBuilder,
    InitializrMetadataProvider,
    InitializrProperties,
)
from ..rendering import TemplateRenderer
from ..web import MainController, ResourceUrlProvider, UiController
from .container import DependencyContainer, FactoryDependency
from .discovery import ClassScanner, ModuleScanner

if TYPE_CHECKING:
    from .application import ApplicationBuilder

LOGGER = logging.getLogger(__name__)

INITIALIZR_CACHE = "initializr"
DEPENDENCY_METADATA_CACHE = "dependency-metadata"
PROJECT_RESOURCES_CACHE = "project-resources"
METADATA_TTL = timedelta(minutes=10)


def cache_configuration(expiry_policy: ExpiryPolicy | None = None) -> CacheConfiguration:
    """Configuration shared by the initializr caches.

    Values are stored by reference, with management and statistics enabled.
    """
    return CacheConfiguration(
        store_by_value=False,
        management_enabled=True,
        statistics_enabled=True,
        expiry_policy=expiry_policy or ExpiryPolicy.eternal(),
    )


def _cache(container: DependencyContainer, name: str) -> Cache | None:
    if not container.contains(CacheManager):
        return None
    return container.resolve(CacheManager).get_cache(name)


class ApplicationProfile(ABC):
    """Base class for application configuration profiles.

    Profiles encapsulate a set of configuration logic that can be applied
    to an ApplicationBuilder.
    """

    @abstractmethod
    def configure(self, builder: "ApplicationBuilder") -> None:
        """Apply this profile's configuration to the builder.

        Args:
            builder: ApplicationBuilder to configure
        """
        pass


class InitializrProfile(ApplicationProfile):
    """Register the default implementation of every initializr service.

    Registrations are lazy: nothing is constructed here, so a default that
    yields to an existing registration is never built.

    Args:
        post_processors: Hooks handed to the ProjectRequestResolver, in the
            order they run. Classes are instantiated when the resolver is
            first resolved, so their annotated parameters can name any
            registered role, defaults included.
    """

    def __init__(
        self,
        post_processors: Sequence[ProjectRequestPostProcessor | type[ProjectRequestPostProcessor]] = (),
    ):
        self.post_processors = tuple(post_processors)

    def configure(self, builder: "ApplicationBuilder") -> None:
        container = builder.container
        environment = builder.environment

        # Supporting services
        container.register_singleton_if_missing(
            dependency_type=InitializrProperties,
            factory=lambda: environment.bind(InitializrProperties, "initializr"),
        )
        container.register_singleton_if_missing(ResourceUrlProvider)
        container.register_singleton_if_missing(
            dependency_type=HttpClientFactory,
            factory=lambda: HttpClientFactory(container.resolve(InitializrProperties).env.proxy),
        )

        # Controllers
        container.register_singleton_if_missing(MainController)
        container.register_singleton_if_missing(UiController)

        # Generation
        container.register_singleton_if_missing(
            dependency_type=ProjectGenerator,
            factory=lambda: ProjectGenerator(
                request_resolver=container.resolve(ProjectRequestResolver),
                template_renderer=container.resolve(TemplateRenderer),
                resource_locator=container.resolve(ProjectResourceLocator),
            ),
        )
        container.register_singleton_if_missing(
            dependency_type=TemplateRenderer,
            factory=lambda: TemplateRenderer(
                cache=environment.bind(MustacheProperties, "spring.mustache").cache
            ),
        )
        container.register_singleton_if_missing(
            dependency_type=ProjectRequestResolver,
            factory=lambda: ProjectRequestResolver(self._build_post_processors(container)),
        )
        container.register_singleton(
            dependency_type=ProjectResourceLocator,
            factory=lambda: ProjectResourceLocator(cache=_cache(container, PROJECT_RESOURCES_CACHE)),
        )

        # Metadata
        container.register_singleton_if_missing(
            dependency_type=InitializrMetadataProvider,
            factory=lambda: self._build_metadata_provider(container),
        )
        container.register_singleton_if_missing(
            dependency_type=DependencyMetadataProvider,
            factory=lambda: DefaultDependencyMetadataProvider(
                cache=_cache(container, DEPENDENCY_METADATA_CACHE)
            ),
        )

    def _build_post_processors(self, container: DependencyContainer) -> list[ProjectRequestPostProcessor]:
        return [
            FactoryDependency(p).resolve(container) if isinstance(p, type) else p
            for p in self.post_processors
        ]

    def _build_metadata_provider(self, container: DependencyContainer) -> InitializrMetadataProvider:
        properties = container.resolve(InitializrProperties)
        metadata = InitializrMetadataBuilder.from_initializr_properties(properties).build()
        return DefaultInitializrMetadataProvider(
            metadata=metadata,
            http_client=container.resolve(HttpClientFactory).create_client(),
            cache=_cache(container, INITIALIZR_CACHE),
        )


class CacheProfile(ApplicationProfile):
    """Create the initializr caches when a caching subsystem is present.

    The subsystem is present when a CacheManager is registered. Without one
    this profile does nothing and the services run uncached.
    """

    def configure(self, builder: "ApplicationBuilder") -> None:
        if not builder.container.contains(CacheManager):
            LOGGER.debug("No cache manager registered, skipping cache configuration")
            return

        cache_manager = builder.container.resolve(CacheManager)
        cache_manager.create_cache(
            INITIALIZR_CACHE, cache_configuration(ExpiryPolicy.created(METADATA_TTL))
        )
        cache_manager.create_cache(DEPENDENCY_METADATA_CACHE, cache_configuration())
        cache_manager.create_cache(PROJECT_RESOURCES_CACHE, cache_configuration())


class PostProcessorsInPackage(ApplicationProfile):
    """Discover and register all ProjectRequestPostProcessor subclasses in a package.

    Scans for post-processors in:
    - myapp/post_processor.py / post_processors.py (direct files)
    - myapp/post_processor/ / post_processors/ (package directories)

    Discovered post-processors run in module name order, then class name
    order within a module.
    """

    def __init__(self, package_name: str):
        self.scanner = ModuleScanner(package_name)

    def configure(self, builder: "ApplicationBuilder") -> None:
        for module in self.scanner.find_modules("post_processor"):
            for cls in ClassScanner.find_subclasses(module, ProjectRequestPostProcessor):
                builder.register_post_processor(cls)
