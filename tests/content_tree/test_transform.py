"""Tests for pure tree transforms."""

from docs_pipeline_core.content import (
    ConditionalBlock,
    ContentTree,
    Embed,
    EmbedKind,
    Heading,
    Link,
    Paragraph,
    Text,
)
from docs_pipeline_core.content.transform import (
    has_conditional_blocks,
    has_embeds,
    iter_blocks,
    iter_inlines,
    map_blocks,
    map_inlines,
)

HEADING = Heading(depth=1, children=(Text("Title"),))
EMBED = Embed(kind=EmbedKind.PARTIAL, src="_partials/x")
INNER = Paragraph(children=(Link(url="/docs/a", children=(Text("a"),)),))
TREE = ContentTree((HEADING, ConditionalBlock(sdk="react", not_sdk=None, children=(EMBED, INNER))))


class TestMapBlocks:
    def test_identity_returns_same_tree(self):
        assert map_blocks(TREE, lambda block: block) is TREE

    def test_splice_and_drop(self):
        replacement = (Paragraph(children=(Text("one"),)), Paragraph(children=(Text("two"),)))

        def fn(block):
            if isinstance(block, Embed):
                return replacement
            if isinstance(block, Heading):
                return None
            return block

        result = map_blocks(TREE, fn)
        assert len(result.children) == 1
        block = result.children[0]
        assert isinstance(block, ConditionalBlock)
        assert block.children == (*replacement, INNER)

    def test_original_is_untouched(self):
        map_blocks(TREE, lambda block: None)
        assert len(TREE.children) == 2


class TestMapInlines:
    def test_rewrites_nested_link(self):
        def fn(node):
            return Link(url="/docs/b", children=node.children) if isinstance(node, Link) else node

        result = map_inlines(TREE, fn)
        links = [node for _, node in iter_inlines(result) if isinstance(node, Link)]
        assert [link.url for link in links] == ["/docs/b"]


class TestIteration:
    def test_document_order(self):
        assert list(iter_blocks(TREE)) == [HEADING, TREE.children[1], EMBED, INNER]

    def test_predicates(self):
        assert has_conditional_blocks(TREE)
        assert has_embeds(TREE)
        assert not has_embeds(ContentTree((HEADING,)))
