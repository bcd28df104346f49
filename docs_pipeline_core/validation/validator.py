"""Reference & embedding validator.

``validate_and_embed`` runs the passes over one document for one build target:

1. embedding: partials and typedoc pages are spliced in
2. links: internal links checked against the document index and rewritten
3. conditional blocks: filters validated, blocks invisible for the target removed
4. heading ids: duplicates in the expanded tree reported

Each pass maps the immutable tree to a new one; diagnostics are concatenated in pass order
and then graded by the diagnostic policy.
"""

from dataclasses import dataclass

from docs_pipeline_core._types import CORE_TARGET, BuildTarget
from docs_pipeline_core.content.nodes import ContentTree
from docs_pipeline_core.document_store import ContentLibrary, SourceDocument
from docs_pipeline_core.logging import get_pipeline_logger
from docs_pipeline_core.scoping.resolver import ScopedTree
from docs_pipeline_core.settings import BuildSettings
from docs_pipeline_core.validation.conditionals import filter_conditionals
from docs_pipeline_core.validation.diagnostics import Diagnostic, DiagnosticPolicy
from docs_pipeline_core.validation.embedding import embed_fragments
from docs_pipeline_core.validation.headings import check_heading_ids
from docs_pipeline_core.validation.index import DocumentIndex
from docs_pipeline_core.validation.links import check_links

logger = get_pipeline_logger(__name__)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Validated tree for one target plus everything found on the way."""

    tree: ContentTree
    diagnostics: tuple[Diagnostic, ...]
    target: BuildTarget = CORE_TARGET

    @property
    def has_failures(self) -> bool:
        return any(d.is_failure for d in self.diagnostics)


async def validate_and_embed(
    document: SourceDocument,
    scoped_manifest: ScopedTree,
    library: ContentLibrary,
    index: DocumentIndex,
    target: BuildTarget = CORE_TARGET,
    *,
    config: BuildSettings | None = None,
    policy: DiagnosticPolicy | None = None,
) -> ValidationResult:
    """Validate and rewrite ``document`` for ``target`` (``"core"`` or one SDK).

    Reference and structural problems are returned as diagnostics, never raised.
    """
    config = config or BuildSettings()
    policy = policy or DiagnosticPolicy.from_settings(config)
    universe = scoped_manifest.universe

    embedded = await embed_fragments(document.tree, document, library)
    linked = check_links(
        embedded.tree,
        document,
        index,
        universe,
        base_docs_link=library.base_docs_link,
        is_ignored=config.is_ignored_link,
    )
    in_manifest = document.key in scoped_manifest
    manifest_scope = scoped_manifest.lookup(document.key) if in_manifest else None
    filtered = filter_conditionals(linked.tree, document, universe, target, manifest_scope=manifest_scope, in_manifest=in_manifest)
    headings = check_heading_ids(linked.tree, document)

    diagnostics = policy.apply((*embedded.diagnostics, *linked.diagnostics, *filtered.diagnostics, *headings))
    if diagnostics:
        logger.debug("%s [%s]: %d diagnostic(s)", document.key, target, len(diagnostics))
    return ValidationResult(tree=filtered.tree, diagnostics=tuple(diagnostics), target=target)


__all__ = ["ValidationResult", "validate_and_embed"]
