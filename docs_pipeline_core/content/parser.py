"""Line-oriented parser for the MDX-flavoured markdown used by the docs.

The content format itself is owned by the authoring side; this parser only recognises
what the pipeline has to reason about:

* YAML frontmatter between ``---`` fences
* ATX headings, with an optional ``{{ id: 'custom-id' }}`` suffix
* fenced code blocks (content is opaque)
* ``<Include src="..." />`` and ``<Typedoc src="..." />`` embeds
* ``<If sdk="...">`` / ``<If notSdk="...">`` blocks, nestable, closed by ``</If>``
* links ``[text](url)`` and inline code inside headings and paragraphs

Anything else is kept as paragraph text.
"""

import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from docs_pipeline_core.content.nodes import (
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
    Text,
)
from docs_pipeline_core.exceptions import ContentParseError

_HEADING = re.compile(r"^(#{1,6})\s+(.*?)\s*$")
_HEADING_META = re.compile(r"\{\{(.*?)\}\}\s*$")
_HEADING_ID = re.compile(r"""\bid\s*:\s*['"]([^'"]+)['"]""")
_FENCE = re.compile(r"^\s*(```+|~~~+)\s*([\w+-]*)")
_EMBED = re.compile(r"^\s*<(Include|Typedoc)\b(.*?)/>\s*$")
_IF_OPEN = re.compile(r"^\s*<If\b(.*?)>\s*$")
_IF_INLINE = re.compile(r"^\s*<If\b(.*?)>(.*)</If>\s*$")
_IF_CLOSE = re.compile(r"^\s*</If>\s*$")
_ATTRIBUTE = re.compile(r"""(\w+)\s*=\s*(?:"([^"]*)"|'([^']*)'|\{([^}]*)\})""")
_INLINE = re.compile(r"`([^`]+)`|\[([^\]]*)\]\(([^)\s]+)\)")


@dataclass(frozen=True, slots=True)
class ParsedSource:
    """Raw frontmatter mapping (None when the file has no frontmatter) and content tree."""

    frontmatter: dict[str, Any] | None
    tree: ContentTree


@dataclass
class _OpenBlock:
    sdk: str | None
    not_sdk: str | None
    line: int
    children: list[Block] = field(default_factory=list)


def parse_attributes(text: str) -> dict[str, str]:
    """Parse JSX-like attributes; ``{...}`` expression values are returned without braces."""
    attributes: dict[str, str] = {}
    for match in _ATTRIBUTE.finditer(text):
        name, double, single, expression = match.groups()
        if double is not None:
            attributes[name] = double
        elif single is not None:
            attributes[name] = single
        else:
            attributes[name] = expression.strip()
    return attributes


def parse_inlines(text: str) -> tuple[Inline, ...]:
    nodes: list[Inline] = []
    position = 0
    for match in _INLINE.finditer(text):
        if match.start() > position:
            nodes.append(Text(text[position : match.start()]))
        code, label, url = match.groups()
        if code is not None:
            nodes.append(InlineCode(code))
        else:
            nodes.append(Link(url=url, children=parse_inlines(label)))
        position = match.end()
    if position < len(text):
        nodes.append(Text(text[position:]))
    return tuple(nodes)


def _with_lines(inlines: tuple[Inline, ...], line: int) -> tuple[Inline, ...]:
    return tuple(Link(url=node.url, children=node.children, line=line) if isinstance(node, Link) else node for node in inlines)


def _split_frontmatter(text: str, path: str) -> tuple[dict[str, Any] | None, list[str], int]:
    lines = text.splitlines()
    if not lines or lines[0].strip() != "---":
        return None, lines, 0
    for index in range(1, len(lines)):
        if lines[index].strip() == "---":
            raw = "\n".join(lines[1:index])
            try:
                data = yaml.safe_load(raw) if raw.strip() else {}
            except yaml.YAMLError as e:
                raise ContentParseError(path, f"invalid frontmatter YAML: {e}", line=1) from e
            if data is None:
                data = {}
            if not isinstance(data, dict):
                raise ContentParseError(path, "frontmatter must be a mapping", line=1)
            return data, lines[index + 1 :], index + 1
    raise ContentParseError(path, "frontmatter is not closed with '---'", line=1)


def parse_content(text: str, *, path: str = "<memory>", frontmatter: bool = True) -> ParsedSource:  # noqa: C901, PLR0912
    """Parse raw document or fragment text into frontmatter and a content tree.

    Raises:
        ContentParseError: On unclosed ``<If>`` blocks, stray ``</If>``, unclosed code fences
            or malformed frontmatter.
    """
    if frontmatter:
        meta, lines, offset = _split_frontmatter(text, path)
    else:
        meta, lines, offset = None, text.splitlines(), 0

    root: list[Block] = []
    stack: list[_OpenBlock] = []
    paragraph: list[str] = []
    paragraph_line = 0

    def emit(block: Block) -> None:
        (stack[-1].children if stack else root).append(block)

    def flush_paragraph() -> None:
        if paragraph:
            emit(Paragraph(children=_with_lines(parse_inlines("\n".join(paragraph)), paragraph_line), line=paragraph_line))
            paragraph.clear()

    index = 0
    while index < len(lines):
        line = lines[index]
        line_no = offset + index + 1
        index += 1

        if fence := _FENCE.match(line):
            flush_paragraph()
            marker = fence.group(1)
            body: list[str] = []
            while index < len(lines) and not lines[index].strip().startswith(marker):
                body.append(lines[index])
                index += 1
            if index >= len(lines):
                raise ContentParseError(path, "code fence is never closed", line=line_no)
            index += 1
            emit(CodeBlock(lang=fence.group(2), value="\n".join(body), line=line_no))
            continue

        if not line.strip():
            flush_paragraph()
            continue

        if heading := _HEADING.match(line):
            flush_paragraph()
            title = heading.group(2)
            explicit_id = None
            if meta_match := _HEADING_META.search(title):
                if id_match := _HEADING_ID.search(meta_match.group(1)):
                    explicit_id = id_match.group(1)
                title = title[: meta_match.start()].rstrip()
            emit(Heading(depth=len(heading.group(1)), children=_with_lines(parse_inlines(title), line_no), explicit_id=explicit_id, line=line_no))
            continue

        if embed := _EMBED.match(line):
            flush_paragraph()
            kind = EmbedKind.PARTIAL if embed.group(1) == "Include" else EmbedKind.TYPEDOC
            attributes = parse_attributes(embed.group(2))
            if "src" not in attributes:
                raise ContentParseError(path, f"<{embed.group(1)} /> component has no \"src\" attribute", line=line_no)
            emit(Embed(kind=kind, src=attributes["src"], line=line_no))
            continue

        if inline_if := _IF_INLINE.match(line):
            flush_paragraph()
            attributes = parse_attributes(inline_if.group(1))
            body_text = inline_if.group(2).strip()
            children: tuple[Block, ...] = (Paragraph(children=_with_lines(parse_inlines(body_text), line_no), line=line_no),) if body_text else ()
            emit(ConditionalBlock(sdk=attributes.get("sdk"), not_sdk=attributes.get("notSdk"), children=children, line=line_no))
            continue

        if opening := _IF_OPEN.match(line):
            flush_paragraph()
            attributes = parse_attributes(opening.group(1))
            stack.append(_OpenBlock(sdk=attributes.get("sdk"), not_sdk=attributes.get("notSdk"), line=line_no))
            continue

        if _IF_CLOSE.match(line):
            flush_paragraph()
            if not stack:
                raise ContentParseError(path, "</If> without a matching <If>", line=line_no)
            block = stack.pop()
            emit(ConditionalBlock(sdk=block.sdk, not_sdk=block.not_sdk, children=tuple(block.children), line=block.line))
            continue

        if not paragraph:
            paragraph_line = line_no
        paragraph.append(line)

    flush_paragraph()
    if stack:
        raise ContentParseError(path, "<If> block is never closed", line=stack[-1].line)
    return ParsedSource(frontmatter=meta, tree=ContentTree(tuple(root)))


__all__ = ["ParsedSource", "parse_attributes", "parse_content", "parse_inlines"]
