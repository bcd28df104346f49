"""Content store, dependency tracking and source readers.

@public
"""

from ._models import Fragment, FragmentRef, Frontmatter, SourceDocument
from .content_store import CacheStats, ContentStore
from .dependencies import DependencyTracker
from .library import ContentLibrary
from .local import FileSystemSource
from .memory import MemorySource
from .protocol import SourceLocation, SourceReader

__all__ = [
    "CacheStats",
    "ContentLibrary",
    "ContentStore",
    "DependencyTracker",
    "FileSystemSource",
    "Fragment",
    "FragmentRef",
    "Frontmatter",
    "MemorySource",
    "SourceDocument",
    "SourceLocation",
    "SourceReader",
]
