"""Traversal helpers for the double-nested navigation shape."""

from collections.abc import Iterator

from docs_pipeline_core.manifest.models import ManifestGroup, ManifestItem, Navigation, NavigationNode


def iter_nodes(navigation: Navigation) -> Iterator[tuple[NavigationNode, tuple[ManifestGroup, ...]]]:
    """Every node in document order, paired with its chain of ancestor groups (outermost first)."""
    stack: list[tuple[NavigationNode, tuple[ManifestGroup, ...]]] = [
        (node, ()) for section in reversed(navigation) for node in reversed(section)
    ]
    while stack:
        node, ancestors = stack.pop()
        yield node, ancestors
        if isinstance(node, ManifestGroup):
            chain = (*ancestors, node)
            stack.extend((child, chain) for section in reversed(node.items) for child in reversed(section))


def iter_items(navigation: Navigation) -> Iterator[ManifestItem]:
    for node, _ in iter_nodes(navigation):
        if isinstance(node, ManifestItem):
            yield node


def count_nodes(navigation: Navigation) -> int:
    return sum(1 for _ in iter_nodes(navigation))


__all__ = ["count_nodes", "iter_items", "iter_nodes"]
