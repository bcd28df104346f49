"""In-memory source reader for testing.

Not for production use: contents live only in the two dicts below.
"""

from pathlib import Path

from docs_pipeline_core._types import Section
from docs_pipeline_core.document_store.protocol import SourceLocation
from docs_pipeline_core.exceptions import SourceNotFoundError

TYPEDOC_PREFIX = "typedoc/"


def is_partial_path(path: str) -> bool:
    return "_partials" in path.split("/")


class MemorySource:
    """Dict-based source reader.

    ``docs`` holds documents and partials keyed by docs-relative path; ``typedoc`` holds
    typedoc pages keyed by typedoc-relative path. ``locate`` understands ``typedoc/...``
    for typedoc pages and treats any other path as docs-relative.
    """

    def __init__(self, docs: dict[str, str] | None = None, typedoc: dict[str, str] | None = None) -> None:
        self.docs: dict[str, str] = dict(docs or {})
        self.typedoc: dict[str, str] = dict(typedoc or {})
        self.reads: list[SourceLocation] = []

    async def list_documents(self) -> list[str]:
        return sorted(path for path in self.docs if path.endswith(".mdx") and not is_partial_path(path))

    async def read(self, location: SourceLocation) -> str:
        self.reads.append(location)
        files = self.typedoc if location.section is Section.TYPEDOC else self.docs
        try:
            return files[location.path]
        except KeyError:
            raise SourceNotFoundError(f"No {location.section} source at {location.path}") from None

    def locate(self, path: str | Path) -> SourceLocation | None:
        text = Path(path).as_posix()
        if text.startswith(TYPEDOC_PREFIX):
            return SourceLocation(Section.TYPEDOC, text.removeprefix(TYPEDOC_PREFIX))
        if not text.endswith(".mdx"):
            return None
        return SourceLocation(Section.PARTIALS if is_partial_path(text) else Section.DOCS, text)

    def write(self, path: str, text: str) -> None:
        """Create or replace a file (``typedoc/...`` for typedoc pages)."""
        if path.startswith(TYPEDOC_PREFIX):
            self.typedoc[path.removeprefix(TYPEDOC_PREFIX)] = text
        else:
            self.docs[path] = text

    def delete(self, path: str) -> None:
        if path.startswith(TYPEDOC_PREFIX):
            self.typedoc.pop(path.removeprefix(TYPEDOC_PREFIX), None)
        else:
            self.docs.pop(path, None)


__all__ = ["MemorySource", "is_partial_path"]
