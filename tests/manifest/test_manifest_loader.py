"""Tests for manifest parsing and validation."""

import json
from pathlib import Path

import pytest

from docs_pipeline_core.exceptions import ManifestError
from docs_pipeline_core.manifest import ManifestGroup, ManifestItem, iter_items, iter_nodes, load_manifest, parse_manifest
from docs_pipeline_core.sdks import SdkUniverse

NAVIGATION = [
    [
        {"title": "Overview", "href": "/docs/overview"},
        {
            "title": "React",
            "sdk": ["react"],
            "hideTitle": True,
            "items": [[{"title": "Hooks", "href": "/docs/react/hooks", "tag": "(Beta)"}]],
        },
    ],
    [{"title": "Changelog", "href": "https://example.com/changelog", "target": "_blank"}],
]


def _text(navigation) -> str:
    return json.dumps({"navigation": navigation})


class TestParseManifest:
    def test_parses_items_and_groups(self, universe: SdkUniverse):
        manifest = parse_manifest(_text(NAVIGATION), universe)
        overview, group = manifest.navigation[0]
        assert isinstance(overview, ManifestItem)
        assert isinstance(group, ManifestGroup)
        assert group.hide_title is True
        assert group.sdk == ("react",)
        assert [node.title for node, _ in iter_nodes(manifest.navigation)] == ["Overview", "React", "Hooks", "Changelog"]

    def test_iter_items_yields_leaves_only(self, universe: SdkUniverse):
        manifest = parse_manifest(_text(NAVIGATION), universe)
        assert [item.href for item in iter_items(manifest.navigation)] == [
            "/docs/overview",
            "/docs/react/hooks",
            "https://example.com/changelog",
        ]

    def test_ancestors_are_reported(self, universe: SdkUniverse):
        manifest = parse_manifest(_text(NAVIGATION), universe)
        ancestry = {node.title: [group.title for group in ancestors] for node, ancestors in iter_nodes(manifest.navigation)}
        assert ancestry["Hooks"] == ["React"]
        assert ancestry["Overview"] == []

    def test_models_are_frozen(self, universe: SdkUniverse):
        manifest = parse_manifest(_text(NAVIGATION), universe)
        with pytest.raises(Exception):
            manifest.navigation[0][0].title = "changed"  # type: ignore[misc]

    def test_unknown_key_rejected(self, universe: SdkUniverse):
        with pytest.raises(ManifestError, match="Failed to parse"):
            parse_manifest(_text([[{"title": "x", "href": "/docs/x", "colour": "red"}]]), universe)

    def test_invalid_json(self, universe: SdkUniverse):
        with pytest.raises(ManifestError):
            parse_manifest("{not json", universe)

    def test_unknown_sdk_rejected_with_trail(self, universe: SdkUniverse):
        navigation = [[{"title": "Group", "items": [[{"title": "Leaf", "href": "/docs/x", "sdk": ["svelte"]}]]}]]
        with pytest.raises(ManifestError) as exc_info:
            parse_manifest(_text(navigation), universe)
        assert 'item "Group > Leaf"' in str(exc_info.value)
        assert "svelte" in str(exc_info.value)


class TestLoadManifest:
    def test_missing_file(self, tmp_path: Path, universe: SdkUniverse):
        with pytest.raises(ManifestError, match="not found"):
            load_manifest(tmp_path / "manifest.json", universe)

    def test_reads_file(self, tmp_path: Path, universe: SdkUniverse):
        path = tmp_path / "manifest.json"
        path.write_text(_text(NAVIGATION), encoding="utf-8")
        assert len(load_manifest(path, universe).navigation) == 2
