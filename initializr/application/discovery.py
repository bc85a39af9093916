"""Module and class discovery for convention-based configuration.

This module scans Python packages for components an embedding application
wants registered, such as project request post-processors.
"""

import importlib
import inspect
import pkgutil
from collections.abc import Iterable
from types import ModuleType
from typing import TypeVar

T = TypeVar("T")


def _should_skip_module(module_name: str) -> bool:
    """Check if a module should be skipped during scanning.

    Args:
        module_name: Base name of the module to check

    Returns:
        True if module should be skipped
    """
    return module_name.startswith("test_") or (
        module_name.startswith("_") and module_name != "__init__"
    )


def _get_module_variants(name: str) -> list[str]:
    """Get singular and plural variants of a module name.

    Examples:
        >>> _get_module_variants("post_processor")
        ["post_processor", "post_processors"]
    """
    if name.endswith("s"):
        return [name]
    return [name, name + "s"]


def _try_import_module(module_name: str) -> ModuleType | None:
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError:
        return None


class ModuleScanner:
    """Recursively scan packages for Python modules.

    Handles direct files (``myapp/post_processors.py``) as well as packages
    (``myapp/post_processors/__init__.py``) and their nested submodules.
    Test files (``test_*.py``) and private modules are skipped.
    """

    def __init__(self, package_name: str):
        """Initialize scanner for a package.

        Args:
            package_name: Fully qualified package name (e.g., "myapp")

        Raises:
            ImportError: If the package cannot be imported
        """
        self.package_name = package_name
        self.root_module = importlib.import_module(package_name)

    def find_modules(self, subpackage: str) -> Iterable[ModuleType]:
        """Find all modules in a subpackage, singular or plural form.

        Args:
            subpackage: Name of subpackage to scan (e.g., "post_processor")

        Yields:
            ModuleType: Discovered modules, in name order
        """
        for variant in _get_module_variants(subpackage):
            module = _try_import_module(f"{self.package_name}.{variant}")

            if module is None:
                continue

            basename = module.__name__.split(".")[-1]
            if not _should_skip_module(basename):
                yield module

            if hasattr(module, "__path__"):
                yield from self._scan_package_recursive(module)

    def _scan_package_recursive(self, package: ModuleType) -> Iterable[ModuleType]:
        for _importer, modname, is_pkg in pkgutil.iter_modules(
            package.__path__, prefix=f"{package.__name__}."
        ):
            basename = modname.split(".")[-1]
            if _should_skip_module(basename):
                continue

            try:
                module = importlib.import_module(modname)
            except ImportError as e:
                msg = (
                    f"Failed to import module {modname} "
                    f"while scanning {package.__name__}. Error: {e}"
                )
                raise ImportError(msg) from e

            yield module
            if is_pkg:
                yield from self._scan_package_recursive(module)


class ClassScanner:
    """Extract classes from modules by type."""

    @staticmethod
    def find_subclasses(module: ModuleType, base_class: type[T]) -> Iterable[type[T]]:
        """Find the concrete subclasses of base_class defined in module.

        The base class itself, abstract classes, private classes and classes
        imported from elsewhere are left out.

        Examples:
            >>> module = importlib.import_module("myapp.post_processors")
            >>> [c.__name__ for c in ClassScanner.find_subclasses(module, ProjectRequestPostProcessor)]
            ['ForceJavaVersion']
        """
        for name, obj in inspect.getmembers(module, inspect.isclass):
            if (
                issubclass(obj, base_class)
                and obj is not base_class
                and not name.startswith("_")
                and not inspect.isabstract(obj)
                and obj.__module__ == module.__name__
            ):
                yield obj
