"""Fragment embedding: splice partials and typedoc pages into the including document."""

from docs_pipeline_core.content.nodes import Block, ContentTree, Embed, EmbedKind
from docs_pipeline_core.content.transform import iter_blocks, map_blocks
from docs_pipeline_core.document_store import ContentLibrary, Fragment, SourceDocument
from docs_pipeline_core.exceptions import FragmentNotFoundError
from docs_pipeline_core.validation.diagnostics import Diagnostic, DiagnosticCode
from docs_pipeline_core.validation.passes import PassResult


def _without_nested_embeds(fragment: Fragment, diagnostics: list[Diagnostic], document: SourceDocument) -> tuple[Block, ...]:
    def drop(block: Block) -> Block | None:
        if isinstance(block, Embed):
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.PARTIALS_INSIDE_PARTIALS,
                    message=f"<{block.kind.component} src=\"{block.src}\" /> inside {fragment.ref.path}: fragments cannot embed other fragments",
                    document=document.key,
                    path=fragment.ref.path,
                    section=fragment.ref.section,
                    line=block.line,
                )
            )
            return None
        return block

    return map_blocks(fragment.tree, drop).children


async def embed_fragments(tree: ContentTree, document: SourceDocument, library: ContentLibrary) -> PassResult:
    """Replace every embed with the children of its fragment, one level deep.

    Each resolved fragment is recorded as a dependency of the document. Embeds whose target
    is missing or whose ``src`` is malformed are left in place and reported.
    """
    diagnostics: list[Diagnostic] = []
    spliced: dict[Embed, tuple[Block, ...]] = {}

    for block in iter_blocks(tree):
        if not isinstance(block, Embed) or block in spliced:
            continue
        ref = library.fragment_ref(block, document.path)
        if ref is None:
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.INCLUDE_SRC_NOT_PARTIALS,
                    message=f'<Include /> src "{block.src}" must start with "_partials/", "./_partials/" or "../_partials/"',
                    document=document.key,
                    path=document.path,
                    line=block.line,
                )
            )
            continue
        try:
            fragment = await library.get_fragment(ref, dependent=document.key)
        except FragmentNotFoundError:
            code = DiagnosticCode.PARTIAL_NOT_FOUND if ref.kind is EmbedKind.PARTIAL else DiagnosticCode.TYPEDOC_NOT_FOUND
            diagnostics.append(
                Diagnostic(code=code, message=f"{ref.kind.capitalize()} {ref.path} not found", document=document.key, path=document.path, line=block.line)
            )
            continue
        spliced[block] = _without_nested_embeds(fragment, diagnostics, document)

    def splice(block: Block) -> Block | tuple[Block, ...]:
        if isinstance(block, Embed) and block in spliced:
            return spliced[block]
        return block

    return PassResult(tree=map_blocks(tree, splice), diagnostics=tuple(diagnostics))


__all__ = ["embed_fragments"]
