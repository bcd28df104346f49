"""Serialise content trees back to MDX text."""

import json
from collections.abc import Mapping
from typing import Any, assert_never

import yaml

from docs_pipeline_core.content.nodes import (
    Block,
    CodeBlock,
    ConditionalBlock,
    ContentTree,
    Embed,
    Heading,
    Inline,
    InlineCode,
    Link,
    Paragraph,
    SDKLink,
    Text,
)


def _attribute(name: str, value: str) -> str:
    # list filters were authored as expressions (sdk={["a", "b"]})
    if value.startswith("["):
        return f"{name}={{{value}}}"
    return f'{name}="{value}"'


def render_inlines(inlines: tuple[Inline, ...]) -> str:
    parts: list[str] = []
    for node in inlines:
        match node:
            case Text(value=value):
                parts.append(value)
            case InlineCode(value=value):
                parts.append(f"`{value}`")
            case Link(url=url, children=children):
                parts.append(f"[{render_inlines(children)}]({url})")
            case SDKLink(href=href, sdks=sdks, children=children, code=code):
                code_attribute = " code={true}" if code else ""
                parts.append(f'<SDKLink href="{href}" sdks={{{json.dumps(list(sdks))}}}{code_attribute}>{render_inlines(children)}</SDKLink>')
            case _:
                assert_never(node)
    return "".join(parts)


def _render_block(block: Block) -> str:
    match block:
        case Heading(depth=depth, children=children, explicit_id=explicit_id):
            suffix = f" {{{{ id: '{explicit_id}' }}}}" if explicit_id else ""
            return f"{'#' * depth} {render_inlines(children)}{suffix}"
        case Paragraph(children=children):
            return render_inlines(children)
        case CodeBlock(lang=lang, value=value):
            return f"```{lang}\n{value}\n```"
        case Embed(kind=kind, src=src):
            return f'<{kind.component} src="{src}" />'
        case ConditionalBlock(sdk=sdk, not_sdk=not_sdk, children=children):
            attributes = []
            if sdk is not None:
                attributes.append(_attribute("sdk", sdk))
            if not_sdk is not None:
                attributes.append(_attribute("notSdk", not_sdk))
            body = render_blocks(children)
            opening = f"<If {' '.join(attributes)}>"
            return f"{opening}\n{body}\n</If>" if body else f"{opening}\n</If>"
        case _:
            assert_never(block)


def render_blocks(blocks: tuple[Block, ...]) -> str:
    return "\n\n".join(_render_block(block) for block in blocks)


def render_frontmatter(frontmatter: Mapping[str, Any]) -> str:
    dumped = yaml.safe_dump(dict(frontmatter), sort_keys=False, allow_unicode=True, default_flow_style=False)
    return f"---\n{dumped}---\n"


def render_document(frontmatter: Mapping[str, Any] | None, tree: ContentTree) -> str:
    """Full MDX text: frontmatter block (when given) followed by the rendered tree."""
    body = render_blocks(tree.children)
    head = render_frontmatter(frontmatter) if frontmatter is not None else ""
    if not body:
        return head
    return f"{head}\n{body}\n" if head else f"{body}\n"


__all__ = ["render_blocks", "render_document", "render_frontmatter", "render_inlines"]
