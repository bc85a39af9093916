import logging
from collections.abc import Callable
from types import TracebackType
from typing import Protocol, TypeVar, runtime_checkable

from ..cache import CacheManager
from ..config import Environment
from ..generator import ProjectRequestPostProcessor
from .container import DependencyContainer

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class HasLifecycle(Protocol):
    async def on_startup(self) -> None:
        """Called when the application is started."""
        ...

    async def on_shutdown(self) -> None:
        """Called when the application is shutdown."""
        ...


class Application:
    def __init__(self, container: DependencyContainer):
        self.container = container

    def resolve(self, type_to_resolve: type[T]) -> T:
        """Resolve a service from the application.

        Args:
            type_to_resolve: The role of the service to resolve.

        Returns:
            The registered service.

        Raises:
            DependencyNotFoundError: If nothing is registered for the role.
        """
        return self.container.resolve(type_to_resolve)

    def _lifecycle_components(self) -> list[HasLifecycle]:
        components: dict[int, HasLifecycle] = {}
        for instance in self.container.resolve_all():
            if isinstance(instance, HasLifecycle):
                components.setdefault(id(instance), instance)
        return list(components.values())

    async def startup(self) -> None:
        """Startup the application.

        Calls on_startup on every service implementing the `HasLifecycle`
        protocol, in the order of their registration.
        """
        for component in self._lifecycle_components():
            await component.on_startup()

    async def shutdown(self) -> None:
        """Shutdown the application.

        Calls on_shutdown on every service implementing the `HasLifecycle`
        protocol, in the reverse order of their registration.
        """
        for component in reversed(self._lifecycle_components()):
            await component.on_shutdown()

    async def __aenter__(self) -> "Application":
        await self.startup()
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_value: BaseException | None,
        _traceback: TracebackType | None,
    ) -> None:
        await self.shutdown()


# The builder is the embedding application's side of the composition root.
# Anything registered on it before build() takes precedence over the
# defaults: build() applies the profiles, whose registrations are conditional
# on the role still being free, and then instantiates every singleton so that
# configuration errors surface at startup rather than on first request.


class ApplicationBuilder:
    """Builder for creating Application instances."""

    def __init__(self, environment: Environment | None = None) -> None:
        self.container = DependencyContainer()
        self.environment = environment or Environment()
        self.post_processors: list[ProjectRequestPostProcessor | type[ProjectRequestPostProcessor]] = []
        self.container.register_instance(Environment, self.environment)
        self._application: Application | None = None

    def register_dependency(
        self,
        dependency_type: type[T],
        factory: Callable[..., T] | None = None,
    ) -> "ApplicationBuilder":
        """Register a service with the application.

        Services are singletons created on first resolution by calling the
        factory, or the type itself when no factory is given. Annotated
        parameters without defaults are resolved from the container.

        Args:
            dependency_type: The role to register
            factory: The factory function to create the service

        Returns:
            The application builder
        """
        self.container.register_singleton(dependency_type, factory or dependency_type)
        return self

    def register_instance(self, dependency_type: type[T], instance: T) -> "ApplicationBuilder":
        """Register an already built service for a role."""
        self.container.register_instance(dependency_type, instance)
        return self

    def register_post_processor(
        self,
        post_processor: ProjectRequestPostProcessor | type[ProjectRequestPostProcessor],
    ) -> "ApplicationBuilder":
        """Append a hook to the project request resolver.

        Hooks run in the order they are registered. A class is instantiated
        at build time, with its annotated parameters resolved from the
        container.
        """
        self.post_processors.append(post_processor)
        return self

    def use_cache_manager(self, cache_manager: CacheManager | None = None) -> "ApplicationBuilder":
        """Make a caching subsystem available, in-memory unless one is given."""
        return self.register_instance(CacheManager, cache_manager or CacheManager.in_memory())

    def convention_based(self, package_name: str) -> "ApplicationBuilder":
        """Register the post-processors found in a package.

        Args:
            package_name: The name of the package to scan.

        Returns:
            The application builder.
        """
        from .configurators import PostProcessorsInPackage

        PostProcessorsInPackage(package_name).configure(self)
        return self

    def build(self) -> Application:
        """Apply the default profiles and build the application.

        The profiles are applied once; calling build() again returns the
        same Application.

        Returns:
            The configured Application instance

        Raises:
            ConfigurationError: If configuration properties cannot be bound.
            DependencyNotFoundError: If a service depends on an unregistered role.
        """
        if self._application is not None:
            return self._application

        from .configurators import CacheProfile, InitializrProfile

        for profile in (InitializrProfile(self.post_processors), CacheProfile()):
            profile.configure(self)

        application = Application(self.container)
        instances = self.container.resolve_all()
        LOGGER.info("Application built", extra={"services": len(instances)})
        self._application = application
        return application

