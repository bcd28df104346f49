"""Dependency edges between cache keys.

Edges are plain key pairs. The tracker never holds cached values, so the store stays the
only owner of content.
"""

from collections.abc import Iterable


class DependencyTracker:
    """Many-to-many ``dependent -> dependency`` graph with a reverse index for invalidation."""

    def __init__(self) -> None:
        self._dependencies: dict[str, set[str]] = {}  # dependent -> keys it uses
        self._dependents: dict[str, set[str]] = {}  # dependency -> keys using it

    def record(self, dependent: str, dependency: str) -> None:
        if dependent == dependency:
            raise ValueError(f"A key cannot depend on itself: {dependent}")
        self._dependencies.setdefault(dependent, set()).add(dependency)
        self._dependents.setdefault(dependency, set()).add(dependent)

    def clear(self, dependent: str) -> None:
        """Drop every outgoing edge of ``dependent`` (done before it is reprocessed)."""
        for dependency in self._dependencies.pop(dependent, set()):
            users = self._dependents.get(dependency)
            if users is None:
                continue
            users.discard(dependent)
            if not users:
                del self._dependents[dependency]

    def dependencies_of(self, dependent: str) -> frozenset[str]:
        return frozenset(self._dependencies.get(dependent, ()))

    def dependents_of(self, dependency: str) -> frozenset[str]:
        return frozenset(self._dependents.get(dependency, ()))

    def edges(self) -> Iterable[tuple[str, str]]:
        for dependent, dependencies in self._dependencies.items():
            for dependency in dependencies:
                yield dependent, dependency

    def __len__(self) -> int:
        return sum(len(dependencies) for dependencies in self._dependencies.values())


__all__ = ["DependencyTracker"]
