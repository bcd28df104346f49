"""Shared test helpers: a small documentation repository written to disk."""

import json
from pathlib import Path
from typing import Any

TEST_SDKS = ("react", "nextjs", "vue")

NAVIGATION: list[list[dict[str, Any]]] = [
    [
        {"title": "Overview", "href": "/docs/overview"},
        {
            "title": "Frameworks",
            "sdk": ["react", "nextjs"],
            "items": [[{"title": "Hooks", "href": "/docs/hooks"}]],
        },
    ]
]

FILES = {
    "overview.mdx": (
        "---\ntitle: Overview\ndescription: Start here\n---\n"
        "## Start\n\nRead [the hooks](/docs/hooks#usage).\n\n<Include src=\"_partials/note.mdx\" />\n"
    ),
    "hooks.mdx": (
        "---\ntitle: Hooks\ndescription: Hook docs\nsdk: react, nextjs\n---\n"
        "## Usage\n\n<If sdk=\"react\">React only.</If>\n<If sdk=\"nextjs\">Next.js only.</If>\n"
    ),
    "_partials/note.mdx": "Shared note.\n",
}


def write_repo(root: Path, files: dict[str, str] = FILES, navigation: list[list[dict[str, Any]]] = NAVIGATION) -> Path:
    """Write ``docs/`` with the given files and manifest under ``root``. Returns the docs folder."""
    docs = root / "docs"
    for path, text in files.items():
        target = docs / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    (docs / "manifest.json").write_text(json.dumps({"navigation": navigation}), encoding="utf-8")
    return docs
