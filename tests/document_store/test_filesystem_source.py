"""Tests for FileSystemSource."""

from pathlib import Path

import pytest

from docs_pipeline_core._types import Section
from docs_pipeline_core.document_store import FileSystemSource, SourceLocation
from docs_pipeline_core.exceptions import SourceNotFoundError


@pytest.fixture
def layout(tmp_path: Path) -> FileSystemSource:
    docs = tmp_path / "docs"
    (docs / "guides" / "_partials").mkdir(parents=True)
    (docs / "guides" / "overview.mdx").write_text("# Overview\n", encoding="utf-8")
    (docs / "guides" / "_partials" / "setup.mdx").write_text("setup\n", encoding="utf-8")
    (docs / "index.mdx").write_text("# Home\n", encoding="utf-8")
    (docs / "manifest.json").write_text("{}", encoding="utf-8")
    typedoc = tmp_path / "typedoc"
    (typedoc / "clerk-react").mkdir(parents=True)
    (typedoc / "clerk-react" / "use-auth.mdx").write_text("## Returns\n", encoding="utf-8")
    return FileSystemSource(docs, typedoc)


class TestFileSystemSource:
    @pytest.mark.asyncio
    async def test_lists_documents_without_partials(self, layout: FileSystemSource):
        assert await layout.list_documents() == ["guides/overview.mdx", "index.mdx"]

    @pytest.mark.asyncio
    async def test_reads_each_section(self, layout: FileSystemSource):
        assert await layout.read(SourceLocation(Section.DOCS, "index.mdx")) == "# Home\n"
        assert await layout.read(SourceLocation(Section.PARTIALS, "guides/_partials/setup.mdx")) == "setup\n"
        assert await layout.read(SourceLocation(Section.TYPEDOC, "clerk-react/use-auth.mdx")) == "## Returns\n"

    @pytest.mark.asyncio
    async def test_missing_file(self, layout: FileSystemSource):
        with pytest.raises(SourceNotFoundError):
            await layout.read(SourceLocation(Section.DOCS, "missing.mdx"))

    @pytest.mark.asyncio
    async def test_missing_docs_folder(self, tmp_path: Path):
        with pytest.raises(SourceNotFoundError):
            await FileSystemSource(tmp_path / "nope").list_documents()

    @pytest.mark.asyncio
    async def test_typedoc_without_folder(self, tmp_path: Path):
        source = FileSystemSource(tmp_path)
        with pytest.raises(SourceNotFoundError):
            await source.read(SourceLocation(Section.TYPEDOC, "x.mdx"))

    def test_locate(self, layout: FileSystemSource):
        docs = layout.docs_dir
        assert layout.locate(docs / "index.mdx") == SourceLocation(Section.DOCS, "index.mdx")
        assert layout.locate(docs / "guides" / "_partials" / "setup.mdx") == SourceLocation(
            Section.PARTIALS, "guides/_partials/setup.mdx"
        )
        assert layout.locate(layout.typedoc_dir / "clerk-react" / "use-auth.mdx") == SourceLocation(
            Section.TYPEDOC, "clerk-react/use-auth.mdx"
        )
        assert layout.locate(docs / "manifest.json") is None
        assert layout.locate(docs.parent / "elsewhere.mdx") is None
