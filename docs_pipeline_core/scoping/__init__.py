"""SDK scoping: resolution of the navigation manifest and per-SDK views of it."""

from .navigation import SDK_PLACEHOLDER, filter_navigation_for_sdk, render_navigation, scope_href_to_sdk
from .resolver import ConflictCode, ScopeConflict, ScopedGroup, ScopedLeaf, ScopedNode, ScopedTree, resolve_scopes

__all__ = [
    "SDK_PLACEHOLDER",
    "ConflictCode",
    "ScopeConflict",
    "ScopedGroup",
    "ScopedLeaf",
    "ScopedNode",
    "ScopedTree",
    "filter_navigation_for_sdk",
    "render_navigation",
    "resolve_scopes",
    "scope_href_to_sdk",
]
