"""Tests for two-pass SDK scope resolution."""

import pytest

from docs_pipeline_core.exceptions import ScopeConflictError
from docs_pipeline_core.manifest import Manifest
from docs_pipeline_core.scoping import ConflictCode, ScopedGroup, ScopedLeaf, resolve_scopes
from docs_pipeline_core.sdks import SdkUniverse


def _navigation(sections):
    return Manifest.model_validate({"navigation": sections}).navigation


def _scopes(tree):
    return {node.node.title: node.resolved_sdks for node in tree.nodes()}


XY = SdkUniverse.of(["x", "y"])


class TestResolveScopes:
    def test_children_covering_universe_make_group_unrestricted(self):
        navigation = _navigation(
            [[{"title": "GroupA", "sdk": ["x", "y"], "items": [[
                {"title": "Leaf1", "href": "/docs/one"},
                {"title": "Leaf2", "href": "/docs/two"},
            ]]}]]
        )
        tree = resolve_scopes(navigation, {"/docs/one": frozenset({"x"}), "/docs/two": frozenset({"y"})}, XY)
        assert _scopes(tree) == {"GroupA": None, "Leaf1": frozenset({"x"}), "Leaf2": frozenset({"y"})}

    def test_doc_outside_parent_declaration_conflicts(self):
        navigation = _navigation(
            [[{"title": "Group", "sdk": ["y"], "items": [[{"title": "Leaf", "href": "/docs/leaf"}]]}]]
        )
        with pytest.raises(ScopeConflictError) as exc_info:
            resolve_scopes(navigation, {"/docs/leaf": frozenset({"x"})}, XY)
        (conflict,) = exc_info.value.conflicts
        assert conflict.code == ConflictCode.DOC_SDK_FILTERED_BY_PARENT
        assert conflict.href == "/docs/leaf"
        assert conflict.declared == ("x",)
        assert conflict.parent == ("y",)
        assert '"/docs/leaf"' in str(exc_info.value)
        assert "['x']" in conflict.message and "['y']" in conflict.message

    def test_nested_group_outside_parent_conflicts(self):
        navigation = _navigation(
            [[{"title": "Outer", "sdk": ["react"], "items": [[
                {"title": "Inner", "sdk": ["vue"], "items": [[{"title": "Leaf", "href": "/docs/leaf"}]]},
            ]]}]]
        )
        with pytest.raises(ScopeConflictError) as exc_info:
            resolve_scopes(navigation, {}, SdkUniverse.of(["react", "nextjs", "vue"]))
        assert [conflict.code for conflict in exc_info.value.conflicts] == [ConflictCode.GROUP_SDK_FILTERED_BY_PARENT]
        assert exc_info.value.conflicts[0].parent_title == "Outer"

    def test_all_conflicts_are_collected(self, universe: SdkUniverse):
        navigation = _navigation(
            [[{"title": "Group", "sdk": ["react"], "items": [[
                {"title": "A", "href": "/docs/a"},
                {"title": "B", "href": "/docs/b"},
            ]]}]]
        )
        with pytest.raises(ScopeConflictError) as exc_info:
            resolve_scopes(navigation, {"/docs/a": frozenset({"vue"}), "/docs/b": frozenset()}, universe)
        codes = {conflict.code for conflict in exc_info.value.conflicts}
        assert codes == {ConflictCode.DOC_SDK_FILTERED_BY_PARENT, ConflictCode.DOC_SDK_EMPTY}

    def test_empty_group_declaration_conflicts(self, universe: SdkUniverse):
        navigation = _navigation([[{"title": "Group", "sdk": [], "items": [[{"title": "A", "href": "/docs/a"}]]}]])
        with pytest.raises(ScopeConflictError) as exc_info:
            resolve_scopes(navigation, {}, universe)
        assert exc_info.value.conflicts[0].code == ConflictCode.GROUP_SDK_EMPTY

    def test_leaf_inherits_parent_declaration(self, universe: SdkUniverse):
        navigation = _navigation(
            [[{"title": "Group", "sdk": ["react", "nextjs"], "items": [[{"title": "A", "href": "/docs/a"}]]}]]
        )
        tree = resolve_scopes(navigation, {"/docs/a": None}, universe)
        assert tree.lookup("/docs/a") == frozenset({"react", "nextjs"})
        assert _scopes(tree)["Group"] == frozenset({"react", "nextjs"})

    def test_group_without_declaration_takes_union_of_children(self, universe: SdkUniverse):
        navigation = _navigation(
            [[{"title": "Group", "items": [[
                {"title": "A", "href": "/docs/a"},
                {"title": "B", "href": "/docs/b"},
            ]]}]]
        )
        tree = resolve_scopes(navigation, {"/docs/a": frozenset({"react"}), "/docs/b": frozenset({"vue"})}, universe)
        assert _scopes(tree)["Group"] == frozenset({"react", "vue"})

    def test_unrestricted_child_makes_group_unrestricted(self, universe: SdkUniverse):
        navigation = _navigation(
            [[{"title": "Group", "items": [[
                {"title": "A", "href": "/docs/a"},
                {"title": "B", "href": "/docs/b"},
            ]]}]]
        )
        tree = resolve_scopes(navigation, {"/docs/a": frozenset({"react"})}, universe)
        assert _scopes(tree)["Group"] is None

    def test_explicit_group_declaration_wins_over_narrower_union(self, universe: SdkUniverse):
        navigation = _navigation(
            [[{"title": "Group", "sdk": ["react", "nextjs"], "items": [[{"title": "A", "href": "/docs/a"}]]}]]
        )
        tree = resolve_scopes(navigation, {"/docs/a": frozenset({"react"})}, universe)
        assert _scopes(tree) == {"Group": frozenset({"react", "nextjs"}), "A": frozenset({"react"})}

    def test_declaration_covering_universe_normalizes(self, universe: SdkUniverse):
        navigation = _navigation([[{"title": "A", "href": "/docs/a"}]])
        tree = resolve_scopes(navigation, {"/docs/a": frozenset({"react", "nextjs", "vue"})}, universe)
        assert tree.lookup("/docs/a") is None

    def test_group_without_children(self, universe: SdkUniverse):
        navigation = _navigation(
            [[
                {"title": "Empty", "sdk": ["vue"], "items": []},
                {"title": "Bare", "items": [[]]},
            ]]
        )
        tree = resolve_scopes(navigation, {}, universe)
        assert _scopes(tree) == {"Empty": frozenset({"vue"}), "Bare": None}

    def test_item_sdk_used_when_document_declares_none(self, universe: SdkUniverse):
        navigation = _navigation([[{"title": "External", "href": "https://example.com", "sdk": ["nextjs"]}]])
        tree = resolve_scopes(navigation, {}, universe)
        assert tree.lookup("https://example.com") == frozenset({"nextjs"})

    def test_document_scope_is_union_over_entries(self, universe: SdkUniverse):
        navigation = _navigation(
            [
                [{"title": "React", "sdk": ["react"], "items": [[{"title": "A", "href": "/docs/a"}]]}],
                [{"title": "Vue", "sdk": ["vue"], "items": [[{"title": "A again", "href": "/docs/a"}]]}],
            ]
        )
        tree = resolve_scopes(navigation, {}, universe)
        assert tree.document_scopes() == {"/docs/a": frozenset({"react", "vue"})}
        assert "/docs/a" in tree
        assert "/docs/b" not in tree


class TestResolverInvariants:
    NAVIGATION = [
        [
            {"title": "Overview", "href": "/docs/overview"},
            {"title": "Frameworks", "sdk": ["react", "nextjs"], "items": [[
                {"title": "Hooks", "href": "/docs/hooks"},
                {"title": "Server", "href": "/docs/server"},
                {"title": "Deep", "items": [[{"title": "Routing", "href": "/docs/routing"}]]},
            ]]},
        ]
    ]
    DECLARED = {
        "/docs/hooks": frozenset({"react"}),
        "/docs/server": frozenset({"nextjs"}),
        "/docs/routing": None,
    }

    def test_idempotent(self, universe: SdkUniverse):
        navigation = _navigation(self.NAVIGATION)
        first = resolve_scopes(navigation, self.DECLARED, universe)
        second = resolve_scopes(navigation, self.DECLARED, universe)
        assert first == second
        assert _scopes(first) == _scopes(second)

    def test_leaves_are_subsets_of_explicit_parents(self, universe: SdkUniverse):
        tree = resolve_scopes(_navigation(self.NAVIGATION), self.DECLARED, universe)

        def check(group: ScopedGroup) -> None:
            for section in group.items:
                for child in section:
                    if group.node.sdk is not None and group.resolved_sdks is not None:
                        assert child.resolved_sdks is not None
                        assert child.resolved_sdks <= group.resolved_sdks
                    if isinstance(child, ScopedGroup):
                        check(child)

        groups = [node for node in tree.nodes() if isinstance(node, ScopedGroup)]
        assert groups
        for group in groups:
            check(group)

    def test_inherited_scope_reaches_nested_leaves(self, universe: SdkUniverse):
        tree = resolve_scopes(_navigation(self.NAVIGATION), self.DECLARED, universe)
        leaves = {leaf.node.href: leaf.resolved_sdks for leaf in tree.leaves() if isinstance(leaf, ScopedLeaf)}
        assert leaves["/docs/routing"] == frozenset({"react", "nextjs"})
        assert leaves["/docs/overview"] is None
