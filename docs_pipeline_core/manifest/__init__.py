"""Navigation manifest: schema, loading and traversal."""

from .loader import load_manifest, parse_manifest
from .models import Manifest, ManifestGroup, ManifestItem, Navigation, NavigationNode
from .tree import iter_items, iter_nodes

__all__ = [
    "Manifest",
    "ManifestGroup",
    "ManifestItem",
    "Navigation",
    "NavigationNode",
    "iter_items",
    "iter_nodes",
    "load_manifest",
    "parse_manifest",
]
