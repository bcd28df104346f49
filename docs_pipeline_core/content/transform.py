"""Pure map/fold helpers over content trees.

Validation passes are written as functions from one tree to a new tree. Nothing here
mutates a node; unchanged subtrees are returned as the same objects.
"""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import replace
from typing import assert_never

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

BlockMapper = Callable[[Block], Block | Sequence[Block] | None]
"""Returns the replacement for a block: a block, several blocks spliced in place, or None to drop it."""

InlineMapper = Callable[[Inline], Inline]


def map_blocks(tree: ContentTree, fn: BlockMapper) -> ContentTree:
    """Apply ``fn`` to every block, children of conditional blocks first (post-order)."""
    children = _map_block_list(tree.children, fn)
    return tree if children == tree.children else ContentTree(children)


def _map_block_list(blocks: tuple[Block, ...], fn: BlockMapper) -> tuple[Block, ...]:
    result: list[Block] = []
    for block in blocks:
        if isinstance(block, ConditionalBlock):
            inner = _map_block_list(block.children, fn)
            if inner != block.children:
                block = replace(block, children=inner)
        mapped = fn(block)
        if mapped is None:
            continue
        if isinstance(mapped, (Heading, Paragraph, CodeBlock, Embed, ConditionalBlock)):
            result.append(mapped)
        else:
            result.extend(mapped)
    return tuple(result)


def map_inlines(tree: ContentTree, fn: InlineMapper) -> ContentTree:
    """Apply ``fn`` to every inline node of headings and paragraphs (link children included)."""

    def visit_block(block: Block) -> Block:
        match block:
            case Heading(children=children) | Paragraph(children=children):
                mapped = _map_inline_list(children, fn)
                return block if mapped == children else replace(block, children=mapped)
            case CodeBlock() | Embed() | ConditionalBlock():
                return block
            case _:
                assert_never(block)

    return map_blocks(tree, visit_block)


def _map_inline_list(inlines: tuple[Inline, ...], fn: InlineMapper) -> tuple[Inline, ...]:
    result: list[Inline] = []
    for node in inlines:
        match node:
            case Link(children=children) | SDKLink(children=children):
                inner = _map_inline_list(children, fn)
                if inner != children:
                    node = replace(node, children=inner)
            case Text() | InlineCode():
                pass
            case _:
                assert_never(node)
        result.append(fn(node))
    return tuple(result)


def iter_blocks(tree: ContentTree | Sequence[Block]) -> Iterator[Block]:
    """Depth-first, document-order iteration over every block (conditional blocks before their children)."""
    stack = list(reversed(tree.children if isinstance(tree, ContentTree) else tuple(tree)))
    while stack:
        block = stack.pop()
        yield block
        if isinstance(block, ConditionalBlock):
            stack.extend(reversed(block.children))


def iter_inlines(tree: ContentTree) -> Iterator[tuple[Block, Inline]]:
    """Every inline node together with the block that holds it, in document order."""
    for block in iter_blocks(tree):
        if isinstance(block, (Heading, Paragraph)):
            yield from ((block, node) for node in _walk_inlines(block.children))


def _walk_inlines(inlines: tuple[Inline, ...]) -> Iterator[Inline]:
    for node in inlines:
        yield node
        if isinstance(node, (Link, SDKLink)):
            yield from _walk_inlines(node.children)


def has_conditional_blocks(tree: ContentTree) -> bool:
    return any(isinstance(block, ConditionalBlock) for block in iter_blocks(tree))


def has_embeds(blocks: ContentTree | Sequence[Block]) -> bool:
    return any(isinstance(block, Embed) for block in iter_blocks(blocks))


__all__ = [
    "BlockMapper",
    "InlineMapper",
    "has_conditional_blocks",
    "has_embeds",
    "iter_blocks",
    "iter_inlines",
    "map_blocks",
    "map_inlines",
]
