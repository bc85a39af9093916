import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar, cast, get_origin

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)


def _role_name(dependency_type: Any) -> str:
    return getattr(dependency_type, "__name__", str(dependency_type))


class DependencyNotFoundError(Exception):
    @classmethod
    def from_type(cls, dependency_type: type[T]) -> "DependencyNotFoundError":
        return cls(f"Dependency {_role_name(dependency_type)} not found")


class DependencyCircularReferenceError(Exception):
    @classmethod
    def from_container(cls, container: "DependencyContainer") -> "DependencyCircularReferenceError":
        names = [_role_name(t) for t in container.all_resolving()]
        return cls(f"Circular reference detected while resolving {names}")


class Dependency(ABC, Generic[T]):
    @abstractmethod
    def resolve(self, container: "DependencyContainer") -> T:
        pass


class InstanceDependency(Dependency[T]):
    def __init__(self, instance: T):
        self.instance = instance

    def resolve(self, container: "DependencyContainer") -> T:
        return self.instance


class FactoryDependency(Dependency[T]):
    def __init__(self, factory: Callable[..., T]):
        self.factory = factory

    def resolve(self, container: "DependencyContainer") -> T:
        return self.factory(**self.get_dependencies(container))

    def get_dependencies(self, container: "DependencyContainer") -> dict[str, Any]:
        return {
            k: container.resolve(v.annotation)
            for k, v in inspect.signature(self.factory, eval_str=True).parameters.items()
            if v.annotation is not inspect.Parameter.empty and v.default is inspect.Parameter.empty
        }


class SingletonDependency(Dependency[T]):
    def __init__(self, factory: FactoryDependency[T]):
        self.factory = factory
        self.instance: T | None = None
        self._resolving: bool = False

    def resolve(self, container: "DependencyContainer") -> T:
        if self._resolving:
            raise DependencyCircularReferenceError.from_container(container)

        if self.instance is None:
            self._resolving = True
            try:
                self.instance = self.factory.resolve(container)
            finally:
                self._resolving = False
        return self.instance


class DependencyContainer:
    """Registry mapping a service role to the dependency that provides it.

    A role is any type (usually an ABC) used as the lookup key. At most one
    dependency is held per role; registering again replaces the previous
    one unless the ``if_missing`` variant is used.
    """

    def __init__(self) -> None:
        self.dependencies: dict[type, Dependency[Any]] = {}

    def all_resolving(self) -> list[type]:
        return [k for k in self.dependencies if getattr(self.dependencies[k], "_resolving", False)]

    def contains(self, dependency_type: type) -> bool:
        """Whether a dependency is already registered for the role."""
        return dependency_type in self.dependencies

    def resolve(self, dependency_type: type[T]) -> T:
        if dependency_type in self.dependencies:
            return cast("T", self.dependencies[dependency_type].resolve(self))

        # Generic roles (e.g. Cache[str]) fall back to their origin type.
        origin = get_origin(dependency_type)
        if origin is not None and origin in self.dependencies:
            return cast("T", self.dependencies[origin].resolve(self))

        raise DependencyNotFoundError.from_type(dependency_type)

    def resolve_all(self) -> list[Any]:
        """Resolve every registered dependency in registration order."""
        return [dep.resolve(self) for dep in list(self.dependencies.values())]

    def register(
        self,
        dependency_type: type[T],
        dependency: Dependency[T],
    ) -> None:
        self.dependencies[dependency_type] = dependency

    def register_factory(
        self,
        dependency_type: type[T],
        factory: Callable[..., T],
    ) -> None:
        self.register(dependency_type, FactoryDependency(factory))

    def register_instance(self, dependency_type: type[T], instance: T) -> None:
        self.register(dependency_type, InstanceDependency(instance))

    def register_singleton(
        self, dependency_type: type[T], factory: Callable[..., T] | None = None
    ) -> None:
        factory_dependency = FactoryDependency(factory or dependency_type)
        self.register(dependency_type, SingletonDependency(factory_dependency))

    def register_singleton_if_missing(
        self, dependency_type: type[T], factory: Callable[..., T] | None = None
    ) -> bool:
        """Register a singleton only when nothing provides the role yet.

        The factory is never invoked when the registration is skipped.

        Returns:
            True if the default was registered, False if an existing
            registration was kept.
        """
        if self.contains(dependency_type):
            LOGGER.debug(
                "Skipped default, role already registered",
                extra={"role": _role_name(dependency_type)},
            )
            return False

        self.register_singleton(dependency_type, factory)
        LOGGER.debug("Registered default", extra={"role": _role_name(dependency_type)})
        return True
