"""Exception hierarchy for docs-pipeline-core.

All exceptions inherit from DocsPipelineError, providing a consistent error handling interface.
Scope conflicts and manifest errors abort a build; reference and structural problems inside a
single document are normally reported as diagnostics instead of being raised.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docs_pipeline_core.scoping.resolver import ScopeConflict
    from docs_pipeline_core.validation.diagnostics import BuildReport


class DocsPipelineError(Exception):
    """Base exception for all docs-pipeline-core errors."""


class ManifestError(DocsPipelineError):
    """Raised when the navigation manifest cannot be parsed or fails schema validation."""


class ScopeConflictError(DocsPipelineError):
    """Raised when manifest and document SDK declarations contradict each other.

    Always fatal: the scoped manifest would be unsound. Carries every conflict found
    in the tree so they can all be reported in one pass.
    """

    def __init__(self, conflicts: "tuple[ScopeConflict, ...]") -> None:
        self.conflicts = conflicts
        lines = "\n".join(f"  - {conflict.message}" for conflict in conflicts)
        super().__init__(f"{len(conflicts)} SDK scope conflict(s) in the manifest:\n{lines}")


class DocumentReferenceError(DocsPipelineError):
    """Base for broken references between documents, fragments and sources."""


class SourceNotFoundError(DocumentReferenceError):
    """Raised by a source reader when no source exists for a key."""


class FragmentNotFoundError(DocumentReferenceError):
    """Raised when an embedded partial or typedoc page does not exist."""


class StructuralError(DocsPipelineError):
    """Raised when a document is structurally invalid (only that document fails)."""


class ContentParseError(StructuralError):
    """Raised when raw content cannot be turned into a content tree."""

    def __init__(self, path: str, reason: str, line: int | None = None) -> None:
        self.path = path
        self.reason = reason
        self.line = line
        location = f"{path}:{line}" if line is not None else path
        super().__init__(f"{location}: {reason}")


class BuildFailedError(DocsPipelineError):
    """Raised when a build finished with at least one hard failure."""

    def __init__(self, report: "BuildReport") -> None:
        self.report = report
        super().__init__(f"Build failed with {len(report.failures)} error(s)")
