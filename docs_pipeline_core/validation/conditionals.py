"""Conditional block validation and per-target filtering.

``<If sdk="...">`` keeps its content only for the listed SDKs, ``<If notSdk="...">`` for
every SDK except the listed ones. The core output keeps every block. Kept blocks retain
their ``<If>`` wrapper.
"""

from docs_pipeline_core._types import CORE_TARGET, BuildTarget, SdkScope
from docs_pipeline_core.content.nodes import Block, ConditionalBlock, ContentTree
from docs_pipeline_core.content.transform import map_blocks
from docs_pipeline_core.document_store import SourceDocument
from docs_pipeline_core.sdks import SdkUniverse, parse_sdk_list
from docs_pipeline_core.validation.diagnostics import Diagnostic, DiagnosticCode
from docs_pipeline_core.validation.passes import PassResult


def is_visible(block: ConditionalBlock, target: BuildTarget) -> bool:
    """Whether a block survives in the output for ``target``."""
    if target == CORE_TARGET:
        return True
    if block.sdk is not None:
        return target in parse_sdk_list(block.sdk)
    if block.not_sdk is not None:
        return target not in parse_sdk_list(block.not_sdk)
    return True


def filter_conditionals(
    tree: ContentTree,
    document: SourceDocument,
    universe: SdkUniverse,
    target: BuildTarget,
    *,
    manifest_scope: SdkScope = None,
    in_manifest: bool = True,
) -> PassResult:
    """Validate every conditional block and drop those not visible for ``target``.

    SDKs named by ``sdk`` or ``notSdk`` must be allowed by the frontmatter and the manifest
    scope. Both checks are skipped for documents the manifest does not list.

    Args:
        manifest_scope: Scope the manifest gives the document's navigation entry (None when
            unrestricted).
        in_manifest: Whether the manifest lists the document at all.
    """
    diagnostics: list[Diagnostic] = []

    def report(code: DiagnosticCode, message: str, block: ConditionalBlock) -> None:
        diagnostics.append(Diagnostic(code=code, message=message, document=document.key, path=document.path, line=block.line))

    def visit(block: Block) -> Block | None:
        if not isinstance(block, ConditionalBlock):
            return block
        if block.sdk is not None and block.not_sdk is not None:
            report(DiagnosticCode.IF_SDK_AND_NOT_SDK, 'Cannot pass both "sdk" and "notSdk" props to <If />', block)
            return block

        raw = block.sdk if block.sdk is not None else block.not_sdk
        values = parse_sdk_list(raw) if raw is not None else []
        if raw is not None and not values:
            report(DiagnosticCode.INVALID_SDK_IN_IF, "<If /> filter does not list any SDK", block)
        if invalid := universe.invalid(values):
            report(DiagnosticCode.INVALID_SDK_IN_IF, f"SDK(s) {invalid} in <If /> are not valid SDKs", block)

        if in_manifest:
            for sdk in values:
                if sdk not in universe:
                    continue
                if document.declared_sdks is not None and sdk not in document.declared_sdks:
                    report(
                        DiagnosticCode.IF_SDK_NOT_IN_FRONTMATTER,
                        f'<If /> filters on sdk "{sdk}" but the frontmatter only allows {universe.ordered(document.declared_sdks)}',
                        block,
                    )
                if manifest_scope is not None and sdk not in manifest_scope:
                    report(
                        DiagnosticCode.IF_SDK_NOT_IN_MANIFEST,
                        f'<If /> filters on sdk "{sdk}" but manifest.json only makes {document.key} available for {universe.ordered(manifest_scope)}',
                        block,
                    )

        return block if is_visible(block, target) else None

    return PassResult(tree=map_blocks(tree, visit), diagnostics=tuple(diagnostics))


__all__ = ["filter_conditionals", "is_visible"]
