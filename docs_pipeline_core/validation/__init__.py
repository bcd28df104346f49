"""Reference & embedding validation.

@public
"""

from .diagnostics import BuildReport, Diagnostic, DiagnosticCode, DiagnosticPolicy, ErrorKind, Severity
from .document_checks import check_document, check_manifest_targets
from .index import DocumentIndex, IndexEntry
from .validator import ValidationResult, validate_and_embed

__all__ = [
    "BuildReport",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticPolicy",
    "DocumentIndex",
    "ErrorKind",
    "IndexEntry",
    "Severity",
    "ValidationResult",
    "check_document",
    "check_manifest_targets",
    "validate_and_embed",
]
