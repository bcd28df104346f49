"""SDK-scoped documentation build pipeline.

@public

Turns authored documents, reusable fragments and a navigation manifest into validated,
SDK-specialised output documents.
"""

from . import build, content, document_store, manifest, scoping, validation
from .build import BuildResult, DocsBuilder, OutputArtifact, WatchSession
from .document_store import ContentLibrary, ContentStore, DependencyTracker, FileSystemSource, MemorySource
from .exceptions import (
    BuildFailedError,
    ContentParseError,
    DocsPipelineError,
    DocumentReferenceError,
    FragmentNotFoundError,
    ManifestError,
    ScopeConflictError,
    SourceNotFoundError,
    StructuralError,
)
from .logging import get_pipeline_logger, setup_logging
from .scoping import ScopedTree, resolve_scopes
from .sdks import SdkUniverse
from .settings import BuildSettings, settings
from .validation import BuildReport, Diagnostic, DiagnosticCode, ValidationResult, validate_and_embed

__version__ = "0.1.0"

__all__ = [
    "BuildFailedError",
    "BuildReport",
    "BuildResult",
    "BuildSettings",
    "ContentLibrary",
    "ContentParseError",
    "ContentStore",
    "DependencyTracker",
    "Diagnostic",
    "DiagnosticCode",
    "DocsBuilder",
    "DocsPipelineError",
    "DocumentReferenceError",
    "FileSystemSource",
    "FragmentNotFoundError",
    "ManifestError",
    "MemorySource",
    "OutputArtifact",
    "ScopeConflictError",
    "ScopedTree",
    "SdkUniverse",
    "SourceNotFoundError",
    "StructuralError",
    "ValidationResult",
    "WatchSession",
    "build",
    "content",
    "document_store",
    "get_pipeline_logger",
    "manifest",
    "resolve_scopes",
    "scoping",
    "settings",
    "setup_logging",
    "validate_and_embed",
]
