"""Cache-aware access to documents and fragments.

``ContentLibrary`` binds a source reader to a content store. Documents are keyed by href
(``/docs/guides/overview``), partials by their docs-relative path
(``guides/_partials/setup.mdx``) and typedoc pages by ``typedoc:<path>``. Loading a
document loads the fragments it embeds and records a dependency on each of them, so
invalidating a fragment drops every document that embeds it.
"""

import posixpath
from collections.abc import Iterator
from pathlib import Path

from pydantic import ValidationError

from docs_pipeline_core._types import Section
from docs_pipeline_core.content.nodes import Block, ContentTree, Embed, EmbedKind
from docs_pipeline_core.content.parser import parse_content
from docs_pipeline_core.content.slugs import collect_heading_ids
from docs_pipeline_core.content.transform import iter_blocks
from docs_pipeline_core.document_store._models import Fragment, FragmentRef, Frontmatter, SourceDocument
from docs_pipeline_core.document_store.content_store import ContentStore
from docs_pipeline_core.document_store.protocol import SourceLocation, SourceReader
from docs_pipeline_core.exceptions import ContentParseError, FragmentNotFoundError, SourceNotFoundError
from docs_pipeline_core.logging import get_pipeline_logger
from docs_pipeline_core.sdks import SdkUniverse

logger = get_pipeline_logger(__name__)

TYPEDOC_KEY_PREFIX = "typedoc:"
MDX_SUFFIX = ".mdx"
_PARTIAL_PREFIXES = ("_partials/", "./_partials/", "../_partials/")


def _with_suffix(path: str) -> str:
    return path if path.endswith(MDX_SUFFIX) else path + MDX_SUFFIX


class ContentLibrary:
    """Documents and fragments read through a reader and memoised in a content store."""

    def __init__(
        self,
        reader: SourceReader,
        universe: SdkUniverse,
        *,
        store: ContentStore | None = None,
        base_docs_link: str = "/docs/",
    ) -> None:
        self.reader = reader
        self.universe = universe
        self.store = store or ContentStore()
        self.base_docs_link = base_docs_link

    # keys

    def document_key(self, path: str) -> str:
        return self.base_docs_link + path.removesuffix(MDX_SUFFIX)

    def document_path(self, key: str) -> str:
        return _with_suffix(key.removeprefix(self.base_docs_link))

    def fragment_ref(self, embed: Embed, document_path: str) -> FragmentRef | None:
        """Resolve an embed's ``src`` against the including document.

        Returns None when a partial ``src`` does not start with one of the allowed
        ``_partials`` prefixes.
        """
        src = embed.src.strip()
        if embed.kind is EmbedKind.TYPEDOC:
            path = _with_suffix(src.lstrip("/"))
            return FragmentRef(kind=EmbedKind.TYPEDOC, key=TYPEDOC_KEY_PREFIX + path, path=path)

        if not src.startswith(_PARTIAL_PREFIXES):
            return None
        if src.startswith("_partials/"):
            path = src
        else:
            path = posixpath.normpath(posixpath.join(posixpath.dirname(document_path), src))
        path = _with_suffix(path)
        return FragmentRef(kind=EmbedKind.PARTIAL, key=path, path=path)

    def key_for_location(self, location: SourceLocation) -> str:
        match location.section:
            case Section.DOCS:
                return self.document_key(location.path)
            case Section.PARTIALS:
                return location.path
            case Section.TYPEDOC:
                return TYPEDOC_KEY_PREFIX + location.path

    # loading

    async def list_documents(self) -> list[str]:
        """Keys of every document the reader knows about."""
        return [self.document_key(path) for path in await self.reader.list_documents()]

    async def get_document(self, key: str) -> SourceDocument:
        """Parsed document for ``key``.

        Raises:
            SourceNotFoundError: When the document does not exist.
            ContentParseError: When the document or one of its fragments cannot be parsed.
        """
        return await self.store.get(key, lambda: self._load_document(key))

    async def get_fragment(self, ref: FragmentRef, *, dependent: str | None = None) -> Fragment:
        """Parsed fragment for ``ref``, recording that ``dependent`` embeds it.

        The edge is recorded before the load, so a dependent of a missing fragment is still
        invalidated once the fragment is created.

        Raises:
            FragmentNotFoundError: When the fragment does not exist.
        """
        if dependent is not None:
            self.store.record_dependency(dependent, ref.key)
        return await self.store.get(ref.key, lambda: self._load_fragment(ref))

    async def _load_fragment(self, ref: FragmentRef) -> Fragment:
        try:
            text = await self.reader.read(SourceLocation(ref.section, ref.path))
        except SourceNotFoundError as e:
            raise FragmentNotFoundError(f"{ref.kind} {ref.path} not found") from e
        parsed = parse_content(text, path=ref.path, frontmatter=False)
        logger.debug("Parsed %s %s", ref.kind, ref.path)
        return Fragment(ref=ref, tree=parsed.tree)

    async def _load_document(self, key: str) -> SourceDocument:
        path = self.document_path(key)
        text = await self.reader.read(SourceLocation(Section.DOCS, path))
        parsed = parse_content(text, path=path)
        try:
            frontmatter = Frontmatter.model_validate(parsed.frontmatter or {})
        except ValidationError as e:
            raise ContentParseError(path, f"invalid frontmatter: {e}", line=1) from e

        fragments: dict[Embed, ContentTree] = {}
        for block in iter_blocks(parsed.tree):
            if not isinstance(block, Embed) or (ref := self.fragment_ref(block, path)) is None:
                continue
            try:
                fragments[block] = (await self.get_fragment(ref, dependent=key)).tree
            except FragmentNotFoundError:
                continue

        declared = None
        invalid: tuple[str, ...] = ()
        if frontmatter.sdk is not None:
            invalid = tuple(self.universe.invalid(frontmatter.sdk))
            valid = frozenset(self.universe.ordered(frontmatter.sdk))  # type: ignore[arg-type]
            # a document with only unknown SDKs is reported, not treated as empty
            declared = valid if valid or not invalid else None

        anchors = frozenset(collect_heading_ids(_spliced(parsed.tree, fragments)))
        logger.debug("Parsed document %s (%d anchors)", key, len(anchors))
        return SourceDocument(
            key=key,
            path=path,
            frontmatter=frontmatter,
            tree=parsed.tree,
            anchors=anchors,
            declared_sdks=declared,
            invalid_sdks=invalid,
        )

    # invalidation

    def invalidate_path(self, path: str | Path) -> set[str]:
        """Invalidate the cache entry of a changed source file and everything depending on it.

        Returns:
            The invalidated keys (empty when the path is not a source file).
        """
        location = self.reader.locate(path)
        if location is None:
            return set()
        return self.store.invalidate(self.key_for_location(location))


def _spliced(tree: ContentTree, fragments: dict[Embed, ContentTree]) -> Iterator[Block]:
    for block in iter_blocks(tree):
        if isinstance(block, Embed) and block in fragments:
            yield from iter_blocks(fragments[block])
        else:
            yield block


__all__ = ["MDX_SUFFIX", "TYPEDOC_KEY_PREFIX", "ContentLibrary"]
