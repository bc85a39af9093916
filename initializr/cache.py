"""Named caches with per-cache expiry policies.

A ``CacheManager`` is the caching subsystem: when one is registered with the
application, the initializr caches are created on it at startup. Without
one, nothing is cached and every lookup goes to the underlying provider.
"""

import copy
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from .exceptions import CacheExistsError

LOGGER = logging.getLogger(__name__)

Clock = Callable[[], float]


class ExpiryPolicy(ABC):
    """Decides how long an entry lives after it is created."""

    @staticmethod
    def eternal() -> "ExpiryPolicy":
        return EternalExpiryPolicy()

    @staticmethod
    def created(duration: timedelta) -> "ExpiryPolicy":
        return CreatedExpiryPolicy(duration)

    @abstractmethod
    def expiry_for_creation(self) -> timedelta | None:
        """Lifetime of a newly created entry, None for no expiry."""
        ...


class EternalExpiryPolicy(ExpiryPolicy):
    def expiry_for_creation(self) -> timedelta | None:
        return None


class CreatedExpiryPolicy(ExpiryPolicy):
    """Entries expire a fixed duration after creation; reads do not extend it."""

    def __init__(self, duration: timedelta):
        self.duration = duration

    def expiry_for_creation(self) -> timedelta | None:
        return self.duration

    def __eq__(self, other: object) -> bool:
        return isinstance(other, CreatedExpiryPolicy) and other.duration == self.duration

    def __repr__(self) -> str:
        return f"CreatedExpiryPolicy({self.duration!r})"


@dataclass
class CacheConfiguration:
    """Configuration of a single named cache.

    Attributes:
        store_by_value: Copy values on put and get. When False, callers get
            back the very object they stored.
        management_enabled: Expose the cache through the manager's
            management view.
        statistics_enabled: Record hit/miss/put/eviction counters.
        expiry_policy: When entries expire.
    """

    store_by_value: bool = True
    management_enabled: bool = False
    statistics_enabled: bool = False
    expiry_policy: ExpiryPolicy = field(default_factory=ExpiryPolicy.eternal)


@dataclass
class CacheStatistics:
    hits: int = 0
    misses: int = 0
    puts: int = 0
    removals: int = 0
    evictions: int = 0


class Cache(ABC):
    """A named key-value store."""

    def __init__(self, name: str, configuration: CacheConfiguration):
        self.name = name
        self.configuration = configuration
        self.statistics = CacheStatistics()

    @abstractmethod
    def get(self, key: Hashable) -> Any | None: ...

    @abstractmethod
    def put(self, key: Hashable, value: Any) -> None: ...

    @abstractmethod
    def remove(self, key: Hashable) -> bool: ...

    @abstractmethod
    def clear(self) -> None: ...

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """Return the cached value, computing and storing it on a miss."""
        value = self.get(key)
        if value is None:
            value = compute()
            self.put(key, value)
        return value


class CacheManager(ABC):
    """Creates and owns named caches."""

    @staticmethod
    def in_memory(clock: Clock = time.monotonic) -> "CacheManager":
        return InMemoryCacheManager(clock)

    @abstractmethod
    def create_cache(self, name: str, configuration: CacheConfiguration) -> Cache: ...

    @abstractmethod
    def get_cache(self, name: str) -> Cache | None: ...

    @property
    @abstractmethod
    def cache_names(self) -> list[str]: ...

    def management_view(self) -> dict[str, dict[str, Any]]:
        """Configuration and statistics of every management-enabled cache."""
        view: dict[str, dict[str, Any]] = {}
        for name in self.cache_names:
            cache = self.get_cache(name)
            if cache is None or not cache.configuration.management_enabled:
                continue
            expiry = cache.configuration.expiry_policy.expiry_for_creation()
            view[name] = {
                "store_by_value": cache.configuration.store_by_value,
                "expiry_seconds": expiry.total_seconds() if expiry is not None else None,
                "statistics": (
                    vars(cache.statistics).copy()
                    if cache.configuration.statistics_enabled
                    else None
                ),
            }
        return view


class InMemoryCache(Cache):
    """Thread-safe in-process cache.

    Expired entries are evicted lazily when they are next read.
    """

    def __init__(self, name: str, configuration: CacheConfiguration, clock: Clock = time.monotonic):
        super().__init__(name, configuration)
        self._clock = clock
        self._entries: dict[Hashable, tuple[Any, float | None]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._record("misses")
                return None

            value, expires_at = entry
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[key]
                self._record("evictions")
                self._record("misses")
                return None

            self._record("hits")
            return self._copy(value)

    def put(self, key: Hashable, value: Any) -> None:
        lifetime = self.configuration.expiry_policy.expiry_for_creation()
        expires_at = self._clock() + lifetime.total_seconds() if lifetime is not None else None
        with self._lock:
            self._entries[key] = (self._copy(value), expires_at)
            self._record("puts")

    def remove(self, key: Hashable) -> bool:
        with self._lock:
            removed = self._entries.pop(key, None) is not None
            if removed:
                self._record("removals")
            return removed

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _copy(self, value: Any) -> Any:
        return copy.deepcopy(value) if self.configuration.store_by_value else value

    def _record(self, counter: str) -> None:
        if self.configuration.statistics_enabled:
            setattr(self.statistics, counter, getattr(self.statistics, counter) + 1)


class InMemoryCacheManager(CacheManager):
    """Cache manager keeping every cache in process memory."""

    def __init__(self, clock: Clock = time.monotonic):
        self._clock = clock
        self._caches: dict[str, InMemoryCache] = {}

    def create_cache(self, name: str, configuration: CacheConfiguration) -> Cache:
        if name in self._caches:
            raise CacheExistsError(f"Cache {name!r} already exists")

        cache = InMemoryCache(name, configuration, self._clock)
        self._caches[name] = cache
        LOGGER.info(
            "Created cache",
            extra={
                "cache": name,
                "expiry": repr(configuration.expiry_policy.expiry_for_creation()),
            },
        )
        return cache

    def get_cache(self, name: str) -> Cache | None:
        return self._caches.get(name)

    @property
    def cache_names(self) -> list[str]:
        return list(self._caches)
