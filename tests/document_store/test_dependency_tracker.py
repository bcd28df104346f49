"""Tests for DependencyTracker."""

import pytest

from docs_pipeline_core.document_store import DependencyTracker


class TestDependencyTracker:
    def test_record_and_query_both_directions(self):
        tracker = DependencyTracker()
        tracker.record("/docs/a", "_partials/x.mdx")
        tracker.record("/docs/b", "_partials/x.mdx")
        tracker.record("/docs/a", "typedoc:y.mdx")

        assert tracker.dependents_of("_partials/x.mdx") == {"/docs/a", "/docs/b"}
        assert tracker.dependencies_of("/docs/a") == {"_partials/x.mdx", "typedoc:y.mdx"}
        assert len(tracker) == 3

    def test_duplicate_edges_are_stored_once(self):
        tracker = DependencyTracker()
        tracker.record("a", "b")
        tracker.record("a", "b")
        assert list(tracker.edges()) == [("a", "b")]

    def test_self_dependency_rejected(self):
        with pytest.raises(ValueError, match="itself"):
            DependencyTracker().record("a", "a")

    def test_clear_drops_outgoing_edges_only(self):
        tracker = DependencyTracker()
        tracker.record("a", "x")
        tracker.record("b", "x")
        tracker.record("x", "y")
        tracker.clear("a")

        assert tracker.dependencies_of("a") == frozenset()
        assert tracker.dependents_of("x") == {"b"}
        assert tracker.dependents_of("y") == {"x"}

    def test_clear_unknown_key_is_noop(self):
        tracker = DependencyTracker()
        tracker.clear("missing")
        assert len(tracker) == 0
