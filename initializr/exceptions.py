"""Exceptions raised by initializr."""


class InitializrError(Exception):
    """Base class for initializr errors."""

    pass


class ConfigurationError(InitializrError):
    """Raised when configuration properties cannot be bound.

    Startup is aborted when this is raised; the offending property key is
    available as ``key`` so the operator can fix it.
    """

    def __init__(self, key: str, message: str):
        super().__init__(f"Failed to bind property '{key}': {message}")
        self.key = key
        self.message = message


class InvalidProjectRequestError(InitializrError):
    """Raised when a project request references unknown metadata."""

    pass


class CacheExistsError(InitializrError):
    """Raised when creating a cache whose name is already taken."""

    pass
