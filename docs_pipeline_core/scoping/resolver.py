"""Two-pass SDK scope resolution over the navigation manifest.

Pass 1 walks top-down carrying the nearest ancestor declaration and checks every
declaration against it. Pass 2 runs bottom-up once a group's children are resolved and
aggregates their working sets. A group whose children jointly cover every SDK is
unrestricted (``None``), regardless of what it declares.

The resolver is a pure function: same navigation and declarations, same ``ScopedTree``.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import assert_never

from docs_pipeline_core._types import SDK, SdkScope
from docs_pipeline_core.exceptions import ScopeConflictError
from docs_pipeline_core.logging import get_pipeline_logger
from docs_pipeline_core.manifest.models import ManifestGroup, ManifestItem, Navigation, NavigationNode
from docs_pipeline_core.sdks import SdkUniverse, union_scopes

logger = get_pipeline_logger(__name__)


class ConflictCode(StrEnum):
    DOC_SDK_EMPTY = "doc-sdk-empty"
    DOC_SDK_FILTERED_BY_PARENT = "doc-sdk-filtered-by-parent"
    GROUP_SDK_EMPTY = "group-sdk-empty"
    GROUP_SDK_FILTERED_BY_PARENT = "group-sdk-filtered-by-parent"


@dataclass(frozen=True, slots=True)
class ScopeConflict:
    """One contradiction between a declaration and the scope its ancestors allow."""

    code: ConflictCode
    title: str
    href: str | None
    declared: tuple[SDK, ...]
    parent: tuple[SDK, ...] = ()
    parent_title: str | None = None

    @property
    def message(self) -> str:
        subject = f'Doc "{self.href}"' if self.href is not None else f'Group "{self.title}"'
        match self.code:
            case ConflictCode.DOC_SDK_EMPTY | ConflictCode.GROUP_SDK_EMPTY:
                return f"{subject} declares an empty SDK list; remove the sdk key or list at least one SDK"
            case ConflictCode.DOC_SDK_FILTERED_BY_PARENT | ConflictCode.GROUP_SDK_FILTERED_BY_PARENT:
                return (
                    f'{subject} declares SDKs {list(self.declared)} but its parent group "{self.parent_title}" '
                    f"only allows {list(self.parent)}"
                )


@dataclass(frozen=True, slots=True)
class ScopedLeaf:
    node: ManifestItem
    resolved_sdks: SdkScope


@dataclass(frozen=True, slots=True)
class ScopedGroup:
    node: ManifestGroup
    resolved_sdks: SdkScope
    items: "tuple[tuple[ScopedNode, ...], ...]" = ()


ScopedNode = ScopedLeaf | ScopedGroup

ScopedNavigation = tuple[tuple[ScopedNode, ...], ...]


@dataclass(frozen=True, slots=True)
class ScopedTree:
    """Navigation after scope resolution, plus the flat document lookup derived from it."""

    navigation: ScopedNavigation
    universe: SdkUniverse
    _documents: dict[str, SdkScope] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        documents: dict[str, list[SdkScope]] = {}
        for leaf in self.leaves():
            documents.setdefault(leaf.node.href, []).append(leaf.resolved_sdks)
        self._documents.update({href: union_scopes(scopes) for href, scopes in documents.items()})

    def nodes(self) -> Iterator[ScopedNode]:
        """Every scoped node in document order."""
        stack: list[ScopedNode] = [node for section in reversed(self.navigation) for node in reversed(section)]
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, ScopedGroup):
                stack.extend(child for section in reversed(node.items) for child in reversed(section))

    def leaves(self) -> Iterator[ScopedLeaf]:
        for node in self.nodes():
            if isinstance(node, ScopedLeaf):
                yield node

    def document_scopes(self) -> dict[str, SdkScope]:
        """Document href -> SDKs the manifest makes it available for (union over its entries)."""
        return dict(self._documents)

    def __contains__(self, href: object) -> bool:
        return href in self._documents

    def lookup(self, href: str) -> SdkScope:
        """Manifest scope of a document.

        Raises:
            KeyError: When no navigation entry points at ``href``.
        """
        return self._documents[href]


class _Resolver:
    def __init__(self, doc_scopes: Mapping[str, SdkScope], universe: SdkUniverse) -> None:
        self._doc_scopes = doc_scopes
        self._universe = universe
        self.conflicts: list[ScopeConflict] = []

    def sections(self, sections: Iterable[tuple[NavigationNode, ...]], inherited: SdkScope, parent: ManifestGroup | None) -> ScopedNavigation:
        return tuple(tuple(self.node(node, inherited, parent) for node in section) for section in sections)

    def node(self, node: NavigationNode, inherited: SdkScope, parent: ManifestGroup | None) -> ScopedNode:
        match node:
            case ManifestItem():
                return self.leaf(node, inherited, parent)
            case ManifestGroup():
                return self.group(node, inherited, parent)
            case _:
                assert_never(node)

    def _declared_for(self, item: ManifestItem) -> SdkScope:
        declared = self._doc_scopes.get(item.href)
        if declared is None and item.sdk is not None:
            return frozenset(item.sdk)
        return declared

    def _check(self, declared: SdkScope, inherited: SdkScope, node: NavigationNode, parent: ManifestGroup | None) -> bool:
        is_leaf = isinstance(node, ManifestItem)
        href = node.href if isinstance(node, ManifestItem) else None
        if declared is None:
            return True
        if not declared:
            code = ConflictCode.DOC_SDK_EMPTY if is_leaf else ConflictCode.GROUP_SDK_EMPTY
            self.conflicts.append(ScopeConflict(code=code, title=node.title, href=href, declared=()))
            return False
        if inherited is not None and not declared <= inherited:
            code = ConflictCode.DOC_SDK_FILTERED_BY_PARENT if is_leaf else ConflictCode.GROUP_SDK_FILTERED_BY_PARENT
            self.conflicts.append(
                ScopeConflict(
                    code=code,
                    title=node.title,
                    href=href,
                    declared=tuple(self._universe.ordered(declared)),
                    parent=tuple(self._universe.ordered(inherited)),
                    parent_title=parent.title if parent is not None else None,
                )
            )
            return False
        return True

    def leaf(self, item: ManifestItem, inherited: SdkScope, parent: ManifestGroup | None) -> ScopedLeaf:
        declared = self._declared_for(item)
        if declared is not None and self._check(declared, inherited, item, parent):
            return ScopedLeaf(node=item, resolved_sdks=self._universe.normalize(declared))
        return ScopedLeaf(node=item, resolved_sdks=inherited)

    def group(self, group: ManifestGroup, inherited: SdkScope, parent: ManifestGroup | None) -> ScopedGroup:
        declared = frozenset(group.sdk) if group.sdk is not None else None
        explicit = declared is not None and self._check(declared, inherited, group, parent)
        working = declared if explicit else inherited

        items = self.sections(group.items, working, group)
        children = [child for section in items for child in section]
        if not children:
            resolved = self._universe.normalize(working)
        else:
            union = union_scopes(child.resolved_sdks for child in children)
            if self._universe.covers(union):
                resolved = None
            elif explicit:
                resolved = self._universe.normalize(declared)
            else:
                resolved = union
        return ScopedGroup(node=group, resolved_sdks=resolved, items=items)


def resolve_scopes(navigation: Navigation, doc_scopes: Mapping[str, SdkScope], universe: SdkUniverse) -> ScopedTree:
    """Compute the resolved SDK set of every navigation node.

    Args:
        navigation: Raw manifest navigation.
        doc_scopes: Declared SDKs per document href (``None`` when the document declares none).
            Documents missing from the mapping fall back to the manifest item's own ``sdk``.
        universe: The closed set of valid SDKs.

    Returns:
        The scoped tree. ``resolved_sdks`` is ``None`` for unrestricted nodes.

    Raises:
        ScopeConflictError: Carrying every conflict found in the tree.
    """
    resolver = _Resolver(doc_scopes, universe)
    scoped = resolver.sections(navigation, None, None)
    if resolver.conflicts:
        logger.error("Scope resolution found %d conflict(s)", len(resolver.conflicts))
        raise ScopeConflictError(tuple(resolver.conflicts))
    tree = ScopedTree(navigation=scoped, universe=universe)
    logger.debug("Resolved scopes for %d document(s)", len(tree.document_scopes()))
    return tree


__all__ = [
    "ConflictCode",
    "ScopeConflict",
    "ScopedGroup",
    "ScopedLeaf",
    "ScopedNavigation",
    "ScopedNode",
    "ScopedTree",
    "resolve_scopes",
]
