"""In-memory, single-flight cache of parsed documents and fragments.

``get`` memoises the result of a loader per key. Concurrent misses on the same key share
one loader task. Loader failures propagate and are never cached. ``invalidate`` drops the
entry and, through the dependency tracker, every key that recorded a dependency on it.

Every key has a version that ``invalidate`` bumps. A load that was started before an
invalidation still returns its value to the caller but is not cached, and ``is_current``
lets writers reject outputs computed from superseded versions.
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from docs_pipeline_core.document_store.dependencies import DependencyTracker
from docs_pipeline_core.logging import get_pipeline_logger

logger = get_pipeline_logger(__name__)

Loader = Callable[[], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class CacheStats:
    """``joined`` counts lookups that waited on a load already in flight; they are neither hits nor misses."""

    hits: int
    misses: int
    joined: int
    loads: int
    entries: int


class ContentStore:
    """Keyed cache of immutable values with dependency-driven invalidation.

    Cached values are shared by reference; they must be immutable.
    """

    def __init__(self, tracker: DependencyTracker | None = None) -> None:
        self.tracker = tracker or DependencyTracker()
        self._values: dict[str, Any] = {}
        self._versions: dict[str, int] = {}
        self._in_flight: dict[str, asyncio.Task[Any]] = {}
        self._hits = 0
        self._misses = 0
        self._joined = 0
        self._loads = 0

    async def get(self, key: str, loader: Loader) -> Any:
        """Return the cached value for ``key``, running ``loader`` on a miss.

        The edges recorded for ``key`` are cleared before its loader runs, so the loader
        records the current set of dependencies from scratch.
        """
        if key in self._values:
            self._hits += 1
            return self._values[key]

        if (task := self._in_flight.get(key)) is not None:
            self._joined += 1
            return await asyncio.shield(task)

        self._misses += 1
        self.tracker.clear(key)
        version = self.version(key)
        task = asyncio.create_task(self._load(key, version, loader), name=f"load:{key}")
        self._in_flight[key] = task
        return await asyncio.shield(task)

    async def _load(self, key: str, version: int, loader: Loader) -> Any:
        try:
            self._loads += 1
            value = await loader()
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]
        if self.is_current(key, version):
            self._values[key] = value
        else:
            logger.debug("Discarding stale load of %s (version %d)", key, version)
        return value

    def peek(self, key: str) -> Any | None:
        return self._values.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def version(self, key: str) -> int:
        return self._versions.get(key, 0)

    def is_current(self, key: str, version: int) -> bool:
        return self.version(key) == version

    def record_dependency(self, dependent: str, dependency: str) -> None:
        self.tracker.record(dependent, dependency)

    def invalidate(self, key: str) -> set[str]:
        """Drop ``key`` and every key that depends on it, transitively.

        Returns:
            All invalidated keys, ``key`` included.
        """
        invalidated: set[str] = set()
        pending = [key]
        while pending:
            current = pending.pop()
            if current in invalidated:
                continue
            invalidated.add(current)
            self._values.pop(current, None)
            self._in_flight.pop(current, None)
            self._versions[current] = self.version(current) + 1
            pending.extend(self.tracker.dependents_of(current))
        logger.debug("Invalidated %s (%d key(s))", key, len(invalidated))
        return invalidated

    def clear(self) -> None:
        for key in list(self._values):
            self._versions[key] = self.version(key) + 1
        self._values.clear()
        self._in_flight.clear()

    @property
    def stats(self) -> CacheStats:
        return CacheStats(hits=self._hits, misses=self._misses, joined=self._joined, loads=self._loads, entries=len(self._values))


__all__ = ["CacheStats", "ContentStore", "Loader"]
