"""Closed set of content tree node types.

Every node is a frozen dataclass, so trees are immutable values that can be shared between
the content store and any number of validation passes without copying. Traversals
``match`` on the node class and end in ``assert_never`` so a new node kind cannot be
silently skipped.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import assert_never

from docs_pipeline_core._types import SDK


class EmbedKind(StrEnum):
    """Kind of fragment an ``Embed`` node refers to."""

    PARTIAL = "partial"
    TYPEDOC = "typedoc"

    @property
    def component(self) -> str:
        return "Include" if self is EmbedKind.PARTIAL else "Typedoc"


@dataclass(frozen=True, slots=True)
class Text:
    value: str


@dataclass(frozen=True, slots=True)
class InlineCode:
    value: str


@dataclass(frozen=True, slots=True)
class Link:
    url: str
    children: tuple["Inline", ...] = ()
    line: int | None = None


@dataclass(frozen=True, slots=True)
class SDKLink:
    """Link to an SDK-restricted document, routed to the right variant at render time."""

    href: str
    sdks: tuple[SDK, ...]
    children: tuple["Inline", ...] = ()
    code: bool = False
    line: int | None = None


Inline = Text | InlineCode | Link | SDKLink


@dataclass(frozen=True, slots=True)
class Heading:
    depth: int
    children: tuple[Inline, ...]
    explicit_id: str | None = None
    line: int | None = None


@dataclass(frozen=True, slots=True)
class Paragraph:
    children: tuple[Inline, ...]
    line: int | None = None


@dataclass(frozen=True, slots=True)
class CodeBlock:
    lang: str
    value: str
    line: int | None = None


@dataclass(frozen=True, slots=True)
class Embed:
    """Reference to a partial (``<Include src=... />``) or typedoc page (``<Typedoc src=... />``)."""

    kind: EmbedKind
    src: str
    line: int | None = None


@dataclass(frozen=True, slots=True)
class ConditionalBlock:
    """Region visible only for some SDKs (``<If sdk=...>`` / ``<If notSdk=...>``).

    The filters are kept as authored; they are parsed and validated by the conditional pass.
    """

    sdk: str | None
    not_sdk: str | None
    children: tuple["Block", ...] = ()
    line: int | None = None


Block = Heading | Paragraph | CodeBlock | Embed | ConditionalBlock


@dataclass(frozen=True, slots=True)
class ContentTree:
    children: tuple[Block, ...] = field(default_factory=tuple)


def plain_text(inlines: tuple[Inline, ...]) -> str:
    """Concatenated text content of inline nodes (markup dropped)."""
    parts: list[str] = []
    for node in inlines:
        match node:
            case Text(value=value) | InlineCode(value=value):
                parts.append(value)
            case Link(children=children) | SDKLink(children=children):
                parts.append(plain_text(children))
            case _:
                assert_never(node)
    return "".join(parts)


__all__ = [
    "Block",
    "CodeBlock",
    "ConditionalBlock",
    "ContentTree",
    "Embed",
    "EmbedKind",
    "Heading",
    "Inline",
    "InlineCode",
    "Link",
    "Paragraph",
    "SDKLink",
    "Text",
    "plain_text",
]
