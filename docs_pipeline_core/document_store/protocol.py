"""Source reader protocol.

Readers enumerate and read raw source files. Paths are relative to the section root:
``guides/overview.mdx`` and ``guides/_partials/setup.mdx`` for the docs folder,
``clerk-react/use-auth.mdx`` for the typedoc folder.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

from docs_pipeline_core._types import Section


@dataclass(frozen=True, slots=True)
class SourceLocation:
    section: Section
    path: str


@runtime_checkable
class SourceReader(Protocol):
    """Protocol for source backends.

    Implementations: FileSystemSource (builds and watch mode), MemorySource (testing).
    """

    async def list_documents(self) -> list[str]:
        """Paths of every document (``.mdx`` files outside ``_partials`` folders), sorted."""
        ...

    async def read(self, location: SourceLocation) -> str:
        """Raw text of a source file. Raises SourceNotFoundError when it does not exist."""
        ...

    def locate(self, path: str | Path) -> SourceLocation | None:
        """Map a changed file path back to its section, or None when it is not a source file."""
        ...


__all__ = ["SourceLocation", "SourceReader"]
