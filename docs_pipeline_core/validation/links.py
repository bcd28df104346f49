"""Internal link validation and rewriting.

Links under the docs prefix and hash-only links are checked against the document index:
the target must exist and, when the link has a hash, carry that anchor. ``.mdx`` suffixes
are stripped. Links to SDK-restricted documents become ``SDKLink`` nodes pointing at the
``:sdk:`` placeholder path.
"""

from collections.abc import Callable
from dataclasses import replace

from docs_pipeline_core.content.nodes import ContentTree, Inline, InlineCode, Link, SDKLink, Text
from docs_pipeline_core.content.transform import map_inlines
from docs_pipeline_core.document_store import SourceDocument
from docs_pipeline_core.document_store.library import MDX_SUFFIX
from docs_pipeline_core.scoping.navigation import SDK_PLACEHOLDER, scope_href_to_sdk
from docs_pipeline_core.sdks import SdkUniverse
from docs_pipeline_core.validation.diagnostics import Diagnostic, DiagnosticCode
from docs_pipeline_core.validation.index import DocumentIndex
from docs_pipeline_core.validation.passes import PassResult


def split_link(url: str) -> tuple[str, str | None]:
    """Split ``/docs/x.mdx#hash`` into ``("/docs/x", "hash")``."""
    path, sep, hash_ = url.partition("#")
    return path.removesuffix(MDX_SUFFIX), (hash_ if sep else None)


def check_links(
    tree: ContentTree,
    document: SourceDocument,
    index: DocumentIndex,
    universe: SdkUniverse,
    *,
    base_docs_link: str = "/docs/",
    is_ignored: Callable[[str], bool] = lambda url: False,
) -> PassResult:
    diagnostics: list[Diagnostic] = []
    relative_prefix = base_docs_link.lstrip("/")

    def report(code: DiagnosticCode, message: str, link: Link) -> None:
        diagnostics.append(Diagnostic(code=code, message=message, document=document.key, path=document.path, line=link.line))

    def visit(node: Inline) -> Inline:
        if not isinstance(node, Link):
            return node
        url = node.url
        if url.startswith(relative_prefix):
            report(DiagnosticCode.DOC_LINK_MUST_START_WITH_A_SLASH, f"Doc link must start with a slash ({base_docs_link}...): {url}", node)
            return node
        if not url.startswith((base_docs_link, "#")):
            return node

        path, hash_ = split_link(url)
        if not path:
            path = document.key
        rewritten = replace(node, url=path + (f"#{hash_}" if hash_ is not None else "")) if url.startswith(base_docs_link) else node
        if is_ignored(path):
            return rewritten

        entry = index.get(path)
        if entry is None:
            report(DiagnosticCode.LINK_DOC_NOT_FOUND, f"Link target {path} does not exist (expected {path.removeprefix(base_docs_link)}{MDX_SUFFIX})", node)
            return rewritten
        if hash_ is not None and hash_ not in entry.anchors:
            report(DiagnosticCode.LINK_HASH_NOT_FOUND, f'Hash "{hash_}" not found in {path}', node)

        if entry.scope is None or url.startswith("#"):
            return rewritten
        href = scope_href_to_sdk(path, SDK_PLACEHOLDER, base_docs_link) + (f"#{hash_}" if hash_ is not None else "")
        children = node.children
        code = bool(children) and isinstance(children[0], InlineCode)
        if code:
            children = (Text(children[0].value), *children[1:])  # type: ignore[union-attr]
        return SDKLink(href=href, sdks=tuple(universe.ordered(entry.scope)), children=children, code=code, line=node.line)

    return PassResult(tree=map_inlines(tree, visit), diagnostics=tuple(diagnostics))


__all__ = ["check_links", "split_link"]
