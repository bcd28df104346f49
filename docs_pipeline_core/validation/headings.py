"""Heading id uniqueness within one expanded document."""

from collections import Counter

from docs_pipeline_core.content.nodes import ContentTree
from docs_pipeline_core.content.slugs import collect_heading_ids
from docs_pipeline_core.content.transform import has_conditional_blocks, iter_blocks
from docs_pipeline_core.document_store import SourceDocument
from docs_pipeline_core.validation.diagnostics import Diagnostic, DiagnosticCode


def check_heading_ids(tree: ContentTree, document: SourceDocument) -> tuple[Diagnostic, ...]:
    """Report ids used by more than one heading.

    Documents with conditional blocks are skipped: headings in mutually exclusive branches
    never appear in the same rendered variant.
    """
    if has_conditional_blocks(tree):
        return ()
    counts = Counter(collect_heading_ids(iter_blocks(tree)))
    return tuple(
        Diagnostic(
            code=DiagnosticCode.DUPLICATE_HEADING_ID,
            message=f'{document.key} contains the heading id "{heading_id}" {count} times',
            document=document.key,
            path=document.path,
        )
        for heading_id, count in counts.items()
        if count > 1
    )


__all__ = ["check_heading_ids"]
