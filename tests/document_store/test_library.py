"""Tests for ContentLibrary keys, loading and invalidation."""

import pytest

from docs_pipeline_core.content import Embed, EmbedKind
from docs_pipeline_core.document_store import ContentLibrary, FragmentRef, MemorySource
from docs_pipeline_core.exceptions import ContentParseError, FragmentNotFoundError, SourceNotFoundError


class TestKeys:
    def test_document_key_round_trip(self, library: ContentLibrary):
        assert library.document_key("guides/overview.mdx") == "/docs/guides/overview"
        assert library.document_path("/docs/guides/overview") == "guides/overview.mdx"

    @pytest.mark.parametrize(
        ("src", "document_path", "expected"),
        [
            ("_partials/setup.mdx", "guides/overview.mdx", "_partials/setup.mdx"),
            ("_partials/setup", "guides/overview.mdx", "_partials/setup.mdx"),
            ("./_partials/setup.mdx", "guides/overview.mdx", "guides/_partials/setup.mdx"),
            ("../_partials/setup.mdx", "guides/deep/page.mdx", "guides/_partials/setup.mdx"),
        ],
    )
    def test_partial_refs(self, library: ContentLibrary, src: str, document_path: str, expected: str):
        ref = library.fragment_ref(Embed(kind=EmbedKind.PARTIAL, src=src), document_path)
        assert ref == FragmentRef(kind=EmbedKind.PARTIAL, key=expected, path=expected)

    def test_partial_outside_partials_folder(self, library: ContentLibrary):
        assert library.fragment_ref(Embed(kind=EmbedKind.PARTIAL, src="guides/setup.mdx"), "a.mdx") is None

    def test_typedoc_ref(self, library: ContentLibrary):
        ref = library.fragment_ref(Embed(kind=EmbedKind.TYPEDOC, src="clerk-react/use-auth"), "a.mdx")
        assert ref is not None
        assert ref.key == "typedoc:clerk-react/use-auth.mdx"
        assert ref.path == "clerk-react/use-auth.mdx"


class TestGetDocument:
    @pytest.mark.asyncio
    async def test_frontmatter_and_declared_sdks(self, source: MemorySource, library: ContentLibrary):
        source.write("guides/a.mdx", "---\ntitle: A\ndescription: About A\nsdk: vue, react, svelte\n---\n# A\n")
        document = await library.get_document("/docs/guides/a")
        assert document.title == "A"
        assert document.description == "About A"
        assert document.declared_sdks == frozenset({"react", "vue"})
        assert document.invalid_sdks == ("svelte",)

    @pytest.mark.asyncio
    async def test_only_unknown_sdks_leave_declaration_unset(self, source: MemorySource, library: ContentLibrary):
        source.write("a.mdx", "---\ntitle: A\nsdk: svelte\n---\n")
        document = await library.get_document("/docs/a")
        assert document.declared_sdks is None
        assert document.invalid_sdks == ("svelte",)

    @pytest.mark.asyncio
    async def test_anchors_include_fragment_headings(self, source: MemorySource, library: ContentLibrary):
        source.write("a.mdx", '---\ntitle: A\n---\n## Intro\n<Include src="_partials/setup.mdx" />\n')
        source.write("_partials/setup.mdx", "## Install the SDK\n")
        document = await library.get_document("/docs/a")
        assert document.anchors == {"intro", "install-the-sdk"}
        assert library.store.tracker.dependencies_of("/docs/a") == {"_partials/setup.mdx"}

    @pytest.mark.asyncio
    async def test_missing_fragment_still_records_dependency(self, source: MemorySource, library: ContentLibrary):
        source.write("a.mdx", '---\ntitle: A\n---\n<Include src="_partials/later.mdx" />\n')
        first = await library.get_document("/docs/a")
        assert first.anchors == frozenset()

        source.write("_partials/later.mdx", "## Later\n")
        assert library.invalidate_path("_partials/later.mdx") == {"_partials/later.mdx", "/docs/a"}
        second = await library.get_document("/docs/a")
        assert second.anchors == {"later"}

    @pytest.mark.asyncio
    async def test_missing_document(self, library: ContentLibrary):
        with pytest.raises(SourceNotFoundError):
            await library.get_document("/docs/missing")

    @pytest.mark.asyncio
    async def test_invalid_frontmatter(self, source: MemorySource, library: ContentLibrary):
        source.write("a.mdx", "---\ntitle: [1, 2]\n---\n")
        with pytest.raises(ContentParseError, match="invalid frontmatter"):
            await library.get_document("/docs/a")

    @pytest.mark.asyncio
    async def test_missing_fragment_raises(self, library: ContentLibrary):
        ref = FragmentRef(kind=EmbedKind.TYPEDOC, key="typedoc:x.mdx", path="x.mdx")
        with pytest.raises(FragmentNotFoundError):
            await library.get_fragment(ref)

    @pytest.mark.asyncio
    async def test_typedoc_fragment(self, source: MemorySource, library: ContentLibrary):
        source.write("typedoc/clerk-react/use-auth.mdx", "## Returns\n")
        ref = FragmentRef(kind=EmbedKind.TYPEDOC, key="typedoc:clerk-react/use-auth.mdx", path="clerk-react/use-auth.mdx")
        fragment = await library.get_fragment(ref, dependent="/docs/a")
        assert fragment.key == "typedoc:clerk-react/use-auth.mdx"
        assert library.invalidate_path("typedoc/clerk-react/use-auth.mdx") == {fragment.key, "/docs/a"}


class TestListing:
    @pytest.mark.asyncio
    async def test_partials_are_not_documents(self, source: MemorySource, library: ContentLibrary):
        source.write("b.mdx", "")
        source.write("a/index.mdx", "")
        source.write("a/_partials/x.mdx", "")
        assert await library.list_documents() == ["/docs/a/index", "/docs/b"]

    def test_non_source_paths_are_ignored(self, library: ContentLibrary):
        assert library.invalidate_path("manifest.json") == set()
