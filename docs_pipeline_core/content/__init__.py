"""Structured content trees: node types, parser, renderer and pure tree transforms."""

from .nodes import (
    Block,
    CodeBlock,
    ConditionalBlock,
    ContentTree,
    Embed,
    EmbedKind,
    Heading,
    Inline,
    InlineCode,
    Link,
    Paragraph,
    SDKLink,
    Text,
    plain_text,
)
from .parser import ParsedSource, parse_content
from .render import render_document
from .slugs import HeadingSlugger

__all__ = [
    "Block",
    "CodeBlock",
    "ConditionalBlock",
    "ContentTree",
    "Embed",
    "EmbedKind",
    "Heading",
    "HeadingSlugger",
    "Inline",
    "InlineCode",
    "Link",
    "Paragraph",
    "ParsedSource",
    "SDKLink",
    "Text",
    "parse_content",
    "plain_text",
    "render_document",
]
