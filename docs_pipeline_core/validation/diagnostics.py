"""Diagnostics produced while checking documents, and the policy that grades them.

Every problem found in a document is a ``Diagnostic`` with a stable code. Codes belong to
one of three kinds:

* scope: SDK declarations or filters that contradict the resolved scoping
* reference: broken links, anchors, partials or typedoc pages
* structural: malformed documents (duplicate ids, nested partials, bad filters)

Reference diagnostics are warnings unless the policy escalates them, either globally or for
specific documents. Any code can be suppressed for a single file through ``ignore_warnings``.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import StrEnum
from itertools import groupby

from docs_pipeline_core._types import Section
from docs_pipeline_core.exceptions import BuildFailedError
from docs_pipeline_core.settings import BuildSettings, IgnoreWarnings


class Severity(StrEnum):
    ERROR = "error"
    WARNING = "warning"


class ErrorKind(StrEnum):
    SCOPE = "scope"
    REFERENCE = "reference"
    STRUCTURAL = "structural"


class DiagnosticCode(StrEnum):
    # document checks
    FRONTMATTER_MISSING_TITLE = "frontmatter-missing-title"
    FRONTMATTER_MISSING_DESCRIPTION = "frontmatter-missing-description"
    INVALID_SDK_IN_FRONTMATTER = "invalid-sdk-in-frontmatter"
    DOC_SDK_EMPTY = "doc-sdk-empty"
    INVALID_HREF_ENCODING = "invalid-href-encoding"
    DOC_NOT_IN_MANIFEST = "doc-not-in-manifest"
    DOC_NOT_FOUND = "doc-not-found"
    DOC_PARSE_FAILED = "doc-parse-failed"
    SDK_PATH_CONFLICT = "sdk-path-conflict"
    # embedding
    INCLUDE_SRC_NOT_PARTIALS = "include-src-not-partials"
    PARTIAL_NOT_FOUND = "partial-not-found"
    TYPEDOC_NOT_FOUND = "typedoc-not-found"
    PARTIALS_INSIDE_PARTIALS = "partials-inside-partials"
    # links
    LINK_DOC_NOT_FOUND = "link-doc-not-found"
    LINK_HASH_NOT_FOUND = "link-hash-not-found"
    DOC_LINK_MUST_START_WITH_A_SLASH = "doc-link-must-start-with-a-slash"
    # conditional blocks
    IF_SDK_AND_NOT_SDK = "if-component-sdk-and-not-sdk-props-cannot-be-used-together"
    INVALID_SDK_IN_IF = "invalid-sdk-in-if"
    IF_SDK_NOT_IN_FRONTMATTER = "if-component-sdk-not-in-frontmatter"
    IF_SDK_NOT_IN_MANIFEST = "if-component-sdk-not-in-manifest"
    # headings
    DUPLICATE_HEADING_ID = "duplicate-heading-id"

    @property
    def kind(self) -> ErrorKind:
        return _CODE_KINDS[self]

    @property
    def default_severity(self) -> Severity:
        if self in _WARNING_CODES or self.kind is ErrorKind.REFERENCE:
            return Severity.WARNING
        return Severity.ERROR


_CODE_KINDS: dict[DiagnosticCode, ErrorKind] = {
    DiagnosticCode.FRONTMATTER_MISSING_TITLE: ErrorKind.STRUCTURAL,
    DiagnosticCode.FRONTMATTER_MISSING_DESCRIPTION: ErrorKind.STRUCTURAL,
    DiagnosticCode.INVALID_SDK_IN_FRONTMATTER: ErrorKind.SCOPE,
    DiagnosticCode.DOC_SDK_EMPTY: ErrorKind.SCOPE,
    DiagnosticCode.INVALID_HREF_ENCODING: ErrorKind.STRUCTURAL,
    DiagnosticCode.DOC_NOT_IN_MANIFEST: ErrorKind.STRUCTURAL,
    DiagnosticCode.DOC_NOT_FOUND: ErrorKind.STRUCTURAL,
    DiagnosticCode.DOC_PARSE_FAILED: ErrorKind.STRUCTURAL,
    DiagnosticCode.SDK_PATH_CONFLICT: ErrorKind.STRUCTURAL,
    DiagnosticCode.INCLUDE_SRC_NOT_PARTIALS: ErrorKind.REFERENCE,
    DiagnosticCode.PARTIAL_NOT_FOUND: ErrorKind.REFERENCE,
    DiagnosticCode.TYPEDOC_NOT_FOUND: ErrorKind.REFERENCE,
    DiagnosticCode.PARTIALS_INSIDE_PARTIALS: ErrorKind.STRUCTURAL,
    DiagnosticCode.LINK_DOC_NOT_FOUND: ErrorKind.REFERENCE,
    DiagnosticCode.LINK_HASH_NOT_FOUND: ErrorKind.REFERENCE,
    DiagnosticCode.DOC_LINK_MUST_START_WITH_A_SLASH: ErrorKind.REFERENCE,
    DiagnosticCode.IF_SDK_AND_NOT_SDK: ErrorKind.STRUCTURAL,
    DiagnosticCode.INVALID_SDK_IN_IF: ErrorKind.STRUCTURAL,
    DiagnosticCode.IF_SDK_NOT_IN_FRONTMATTER: ErrorKind.SCOPE,
    DiagnosticCode.IF_SDK_NOT_IN_MANIFEST: ErrorKind.SCOPE,
    DiagnosticCode.DUPLICATE_HEADING_ID: ErrorKind.STRUCTURAL,
}

_WARNING_CODES = frozenset({DiagnosticCode.FRONTMATTER_MISSING_DESCRIPTION, DiagnosticCode.DOC_NOT_IN_MANIFEST})


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One problem found in one source file."""

    code: DiagnosticCode
    message: str
    document: str
    path: str
    section: Section = Section.DOCS
    line: int | None = None
    severity: Severity | None = None

    def __post_init__(self) -> None:
        if self.severity is None:
            object.__setattr__(self, "severity", self.code.default_severity)

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind

    @property
    def is_failure(self) -> bool:
        return self.severity is Severity.ERROR

    def format(self) -> str:
        location = f"{self.path}:{self.line}" if self.line is not None else self.path
        return f"{location}  {self.severity}  {self.message}  [{self.code}]"


@dataclass(frozen=True, slots=True)
class DiagnosticPolicy:
    """Decides which diagnostics are reported and how severe they are."""

    ignore_warnings: IgnoreWarnings = field(default_factory=IgnoreWarnings)
    fail_on_reference_errors: bool = False
    strict_reference_docs: frozenset[str] = frozenset()

    @classmethod
    def from_settings(cls, config: BuildSettings) -> "DiagnosticPolicy":
        return cls(
            ignore_warnings=config.ignore_warnings,
            fail_on_reference_errors=config.fail_on_reference_errors,
            strict_reference_docs=frozenset(config.strict_reference_docs),
        )

    def is_ignored(self, diagnostic: Diagnostic) -> bool:
        match diagnostic.section:
            case Section.DOCS:
                table = self.ignore_warnings.docs
            case Section.PARTIALS:
                table = self.ignore_warnings.partials
            case Section.TYPEDOC:
                table = self.ignore_warnings.typedoc
        return diagnostic.code in table.get(diagnostic.path, ())

    def apply(self, diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
        """Drop ignored diagnostics and escalate reference problems where configured."""
        result: list[Diagnostic] = []
        for diagnostic in diagnostics:
            if self.is_ignored(diagnostic):
                continue
            if diagnostic.kind is ErrorKind.REFERENCE and (
                self.fail_on_reference_errors or diagnostic.document in self.strict_reference_docs
            ):
                diagnostic = replace(diagnostic, severity=Severity.ERROR)
            result.append(diagnostic)
        return result


@dataclass(frozen=True, slots=True)
class BuildReport:
    """All diagnostics of one build, deduplicated, in the order they were found."""

    diagnostics: tuple[Diagnostic, ...] = ()

    @classmethod
    def of(cls, diagnostics: Iterable[Diagnostic]) -> "BuildReport":
        return cls(tuple(dict.fromkeys(diagnostics)))

    @property
    def failures(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.is_failure)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if not d.is_failure)

    @property
    def ok(self) -> bool:
        return not self.failures

    def by_document(self) -> dict[str, list[Diagnostic]]:
        ordered = sorted(self.diagnostics, key=lambda d: d.document)
        return {document: list(group) for document, group in groupby(ordered, key=lambda d: d.document)}

    def format(self) -> str:
        """Human-readable listing grouped by document, with a summary line."""
        lines: list[str] = []
        for document, diagnostics in self.by_document().items():
            lines.append(document)
            lines.extend(f"  {d.format()}" for d in diagnostics)
        lines.append(f"{len(self.failures)} error(s), {len(self.warnings)} warning(s)")
        return "\n".join(lines)

    def raise_for_failures(self) -> None:
        """Raise if any diagnostic is a hard failure.

        Raises:
            BuildFailedError: When at least one diagnostic is a hard failure.
        """
        if self.failures:
            raise BuildFailedError(self)


__all__ = [
    "BuildReport",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticPolicy",
    "ErrorKind",
    "Section",
    "Severity",
]
