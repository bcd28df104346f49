"""Checks on a document as a whole, run once per build before validation."""

from collections.abc import Collection
from urllib.parse import quote

from docs_pipeline_core.document_store import SourceDocument
from docs_pipeline_core.scoping.resolver import ScopedTree
from docs_pipeline_core.validation.diagnostics import Diagnostic, DiagnosticCode

# characters encodeURI leaves alone
_URI_SAFE = "/;,?:@&=+$-_.!~*'()#"


def check_document(document: SourceDocument, scoped: ScopedTree) -> tuple[Diagnostic, ...]:
    universe = scoped.universe
    found: list[tuple[DiagnosticCode, str]] = []

    if not document.title:
        found.append((DiagnosticCode.FRONTMATTER_MISSING_TITLE, 'Frontmatter must have a "title" property'))
    if not document.description:
        found.append((DiagnosticCode.FRONTMATTER_MISSING_DESCRIPTION, 'Frontmatter should have a "description" property'))
    if document.invalid_sdks:
        found.append(
            (DiagnosticCode.INVALID_SDK_IN_FRONTMATTER, f"Invalid SDK(s) {list(document.invalid_sdks)}, the valid SDKs are {list(universe.sdks)}")
        )
    if document.declared_sdks is not None and not document.declared_sdks and document.key not in scoped:
        found.append((DiagnosticCode.DOC_SDK_EMPTY, "Frontmatter declares an empty sdk list; list at least one SDK or remove the property"))
    if quote(document.key, safe=_URI_SAFE) != document.key:
        found.append((DiagnosticCode.INVALID_HREF_ENCODING, f'Href "{document.key}" contains characters that will be encoded by the browser'))
    if document.key not in scoped:
        found.append((DiagnosticCode.DOC_NOT_IN_MANIFEST, "Not in manifest.json; still published and linkable"))
    first_segment = document.path.split("/", 1)[0]
    if "/" in document.path and first_segment in universe:
        found.append(
            (DiagnosticCode.SDK_PATH_CONFLICT, f'{document.path} starts with the SDK folder "{first_segment}" and would collide with SDK variants')
        )

    return tuple(Diagnostic(code=code, message=message, document=document.key, path=document.path) for code, message in found)


def check_manifest_targets(scoped: ScopedTree, known: Collection[str], *, base_docs_link: str = "/docs/", manifest_path: str = "manifest.json") -> tuple[Diagnostic, ...]:
    """Report manifest leaves pointing at documents that do not exist."""
    seen: set[str] = set()
    diagnostics: list[Diagnostic] = []
    for leaf in scoped.leaves():
        href = leaf.node.href
        if not href.startswith(base_docs_link) or href in known or href in seen:
            continue
        seen.add(href)
        diagnostics.append(
            Diagnostic(
                code=DiagnosticCode.DOC_NOT_FOUND,
                message=f'"{leaf.node.title}" in manifest.json points at {href} which has no document',
                document=href,
                path=manifest_path,
            )
        )
    return tuple(diagnostics)


__all__ = ["check_document", "check_manifest_targets"]
