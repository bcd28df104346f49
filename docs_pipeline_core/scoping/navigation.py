"""Per-SDK views and serialisation of the scoped navigation."""

from typing import Any, assert_never

from docs_pipeline_core._types import SDK
from docs_pipeline_core.scoping.resolver import ScopedGroup, ScopedLeaf, ScopedNavigation, ScopedNode, ScopedTree

SDK_PLACEHOLDER = ":sdk:"


def scope_href_to_sdk(href: str, sdk: str, base_docs_link: str = "/docs/") -> str:
    """Insert an SDK segment (or the ``:sdk:`` placeholder) after the docs prefix.

    ``/docs/guides/x`` becomes ``/docs/react/guides/x``. Links outside the docs prefix and
    links already scoped to ``sdk`` are returned unchanged.
    """
    if not href.startswith(base_docs_link):
        return href
    rest = href[len(base_docs_link) :]
    if rest.split("/", 1)[0] == sdk:
        return href
    return f"{base_docs_link}{sdk}/{rest}"


def filter_navigation_for_sdk(tree: ScopedTree, sdk: SDK) -> ScopedNavigation:
    """Navigation holding only the nodes available for ``sdk``. Sections left empty are dropped."""

    def keep(node: ScopedNode) -> bool:
        return node.resolved_sdks is None or sdk in node.resolved_sdks

    def visit(sections: ScopedNavigation) -> ScopedNavigation:
        result = []
        for section in sections:
            kept: list[ScopedNode] = []
            for node in section:
                if not keep(node):
                    continue
                if isinstance(node, ScopedGroup):
                    node = ScopedGroup(node=node.node, resolved_sdks=node.resolved_sdks, items=visit(node.items))
                kept.append(node)
            if kept:
                result.append(tuple(kept))
        return tuple(result)

    return visit(tree.navigation)


def render_navigation(tree: ScopedTree, base_docs_link: str = "/docs/") -> list[list[dict[str, Any]]]:
    """JSON-ready navigation for ``manifest.json``.

    Restricted nodes carry their SDK list in universe order; restricted leaves link to the
    ``:sdk:`` placeholder path so the site can route readers to their SDK.
    """

    def render(node: ScopedNode) -> dict[str, Any]:
        data = node.node.model_dump(by_alias=True, exclude_none=True, exclude={"sdk", "items"})
        if node.resolved_sdks is not None:
            data["sdk"] = tree.universe.ordered(node.resolved_sdks)
        match node:
            case ScopedLeaf():
                if node.resolved_sdks is not None:
                    data["href"] = scope_href_to_sdk(node.node.href, SDK_PLACEHOLDER, base_docs_link)
            case ScopedGroup():
                data["items"] = [[render(child) for child in section] for section in node.items]
            case _:
                assert_never(node)
        return data

    return [[render(node) for node in section] for section in tree.navigation]


__all__ = ["SDK_PLACEHOLDER", "filter_navigation_for_sdk", "render_navigation", "scope_href_to_sdk"]
