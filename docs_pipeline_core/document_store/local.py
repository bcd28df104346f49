"""Filesystem source reader.

Layout:
    {docs_dir}/**/*.mdx                  <- documents
    {docs_dir}/**/_partials/**/*.mdx     <- partials
    {typedoc_dir}/**/*.mdx               <- typedoc pages (folder may be missing)
"""

import asyncio
from pathlib import Path

from docs_pipeline_core._types import Section
from docs_pipeline_core.document_store.memory import is_partial_path
from docs_pipeline_core.document_store.protocol import SourceLocation
from docs_pipeline_core.exceptions import SourceNotFoundError
from docs_pipeline_core.logging import get_pipeline_logger

logger = get_pipeline_logger(__name__)


class FileSystemSource:
    """Reads documents, partials and typedoc pages from disk via worker threads."""

    def __init__(self, docs_dir: Path, typedoc_dir: Path | None = None) -> None:
        self.docs_dir = docs_dir.resolve()
        self.typedoc_dir = typedoc_dir.resolve() if typedoc_dir is not None else None

    def _root(self, section: Section) -> Path:
        if section is Section.TYPEDOC:
            if self.typedoc_dir is None:
                raise SourceNotFoundError("No typedoc folder configured")
            return self.typedoc_dir
        return self.docs_dir

    async def list_documents(self) -> list[str]:
        return await asyncio.to_thread(self._list_documents_sync)

    def _list_documents_sync(self) -> list[str]:
        if not self.docs_dir.is_dir():
            raise SourceNotFoundError(f"Docs folder {self.docs_dir} does not exist")
        paths = (path.relative_to(self.docs_dir).as_posix() for path in self.docs_dir.rglob("*.mdx"))
        return sorted(path for path in paths if not is_partial_path(path))

    async def read(self, location: SourceLocation) -> str:
        path = self._root(location.section) / location.path
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError) as e:
            raise SourceNotFoundError(f"No {location.section} source at {path}") from e

    def locate(self, path: str | Path) -> SourceLocation | None:
        candidate = Path(path).resolve()
        if candidate.suffix != ".mdx":
            return None
        if self.typedoc_dir is not None and candidate.is_relative_to(self.typedoc_dir):
            return SourceLocation(Section.TYPEDOC, candidate.relative_to(self.typedoc_dir).as_posix())
        if candidate.is_relative_to(self.docs_dir):
            relative = candidate.relative_to(self.docs_dir).as_posix()
            return SourceLocation(Section.PARTIALS if is_partial_path(relative) else Section.DOCS, relative)
        logger.debug("Ignoring change outside source folders: %s", candidate)
        return None


__all__ = ["FileSystemSource"]
