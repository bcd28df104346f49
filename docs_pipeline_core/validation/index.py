"""Global index of every loaded document: heading anchors and resolved SDK scope."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from docs_pipeline_core._types import SdkScope
from docs_pipeline_core.document_store import SourceDocument
from docs_pipeline_core.scoping.resolver import ScopedTree


@dataclass(frozen=True, slots=True)
class IndexEntry:
    anchors: frozenset[str]
    scope: SdkScope


@dataclass(frozen=True, slots=True)
class DocumentIndex:
    """Link targets known to a build, keyed by document href."""

    entries: Mapping[str, IndexEntry]

    @classmethod
    def build(cls, documents: Iterable[SourceDocument], scoped: ScopedTree) -> "DocumentIndex":
        """Index documents; a document's scope is its manifest scope, else its own declaration.

        An empty declaration is reported by the document checks and indexed as unrestricted.
        """
        entries = {}
        for document in documents:
            scope = scoped.lookup(document.key) if document.key in scoped else scoped.universe.normalize(document.declared_sdks)
            if scope is not None and not scope:
                scope = None
            entries[document.key] = IndexEntry(anchors=document.anchors, scope=scope)
        return cls(entries)

    def __contains__(self, href: object) -> bool:
        return href in self.entries

    def get(self, href: str) -> IndexEntry | None:
        return self.entries.get(href)

    def scope_of(self, href: str) -> SdkScope:
        entry = self.entries.get(href)
        return entry.scope if entry is not None else None


__all__ = ["DocumentIndex", "IndexEntry"]
