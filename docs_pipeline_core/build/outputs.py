"""Output artifacts and the dist writer.

Layout under the dist folder:

    <path>.mdx           unrestricted document, or landing stub of a restricted one
    ~/<path>.mdx         instant-redirect landing stub of a restricted document
    <sdk>/<path>.mdx     one variant per SDK of a restricted document
    manifest.json        scoped navigation
    directory.json       every written document path
"""

import asyncio
import html
import json
import shutil
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from docs_pipeline_core._types import SDK
from docs_pipeline_core.content.nodes import ContentTree
from docs_pipeline_core.content.render import render_document, render_frontmatter
from docs_pipeline_core.document_store import ContentStore, SourceDocument
from docs_pipeline_core.logging import get_pipeline_logger
from docs_pipeline_core.scoping.navigation import SDK_PLACEHOLDER, render_navigation, scope_href_to_sdk
from docs_pipeline_core.scoping.resolver import ScopedTree

logger = get_pipeline_logger(__name__)

INSTANT_PREFIX = "~"
MANIFEST_OUTPUT = "manifest.json"
DIRECTORY_OUTPUT = "directory.json"


@dataclass(frozen=True, slots=True)
class OutputArtifact:
    """One file to write, relative to the dist folder.

    ``versions`` are the content store versions the artifact was computed from; the writer
    skips the artifact when any of them has since been superseded.
    """

    output_path: str
    content: str
    document: str | None = None
    versions: tuple[tuple[str, int], ...] = ()


def document_output_path(key: str, base_docs_link: str = "/docs/") -> str:
    return key.removeprefix(base_docs_link) + ".mdx"


def landing_stub(document: SourceDocument, sdks: Sequence[SDK], *, base_docs_link: str = "/docs/", instant: bool = False) -> str:
    """Page that sends readers to the variant of their SDK."""
    href = scope_href_to_sdk(document.key, SDK_PLACEHOLDER, base_docs_link)
    attributes = [
        f'title="{html.escape(document.title or "", quote=True)}"',
        f'description="{html.escape(document.description or "", quote=True)}"',
        f'href="{href}"',
        f"sdks={{{json.dumps(list(sdks))}}}",
    ]
    if instant:
        attributes.append("instant")
    return render_frontmatter({"template": "wide"}) + f"<SDKDocRedirectPage {' '.join(attributes)} />\n"


def core_artifact(document: SourceDocument, tree: ContentTree, version: int, *, base_docs_link: str = "/docs/") -> OutputArtifact:
    return OutputArtifact(
        output_path=document_output_path(document.key, base_docs_link),
        content=render_document(document.frontmatter.to_output(), tree),
        document=document.key,
        versions=((document.key, version),),
    )


def restricted_artifacts(
    document: SourceDocument,
    variants: Sequence[tuple[SDK, ContentTree]],
    version: int,
    *,
    base_docs_link: str = "/docs/",
) -> list[OutputArtifact]:
    """Landing stub, instant stub and one output per SDK variant."""
    path = document_output_path(document.key, base_docs_link)
    versions = ((document.key, version),)
    sdks = [sdk for sdk, _ in variants]
    canonical = scope_href_to_sdk(document.key, SDK_PLACEHOLDER, base_docs_link)
    artifacts = [
        OutputArtifact(path, landing_stub(document, sdks, base_docs_link=base_docs_link), document.key, versions),
        OutputArtifact(f"{INSTANT_PREFIX}/{path}", landing_stub(document, sdks, base_docs_link=base_docs_link, instant=True), document.key, versions),
    ]
    for sdk, tree in variants:
        content = render_document(document.frontmatter.to_output(canonical=canonical), tree)
        artifacts.append(OutputArtifact(f"{sdk}/{path}", content, document.key, versions))
    return artifacts


def manifest_artifact(scoped: ScopedTree, *, base_docs_link: str = "/docs/") -> OutputArtifact:
    navigation = render_navigation(scoped, base_docs_link)
    return OutputArtifact(MANIFEST_OUTPUT, json.dumps({"navigation": navigation}, indent=2) + "\n")


def directory_artifact(artifacts: Iterable[OutputArtifact]) -> OutputArtifact:
    paths = sorted(artifact.output_path for artifact in artifacts if artifact.document is not None)
    return OutputArtifact(DIRECTORY_OUTPUT, json.dumps(paths, indent=2) + "\n")


class OutputWriter:
    """Writes artifacts under ``dist_dir``, rejecting those built from superseded content."""

    def __init__(self, dist_dir: Path, store: ContentStore | None = None) -> None:
        self.dist_dir = dist_dir
        self.store = store

    def is_current(self, artifact: OutputArtifact) -> bool:
        if self.store is None:
            return True
        return all(self.store.is_current(key, version) for key, version in artifact.versions)

    async def clean(self) -> None:
        await asyncio.to_thread(shutil.rmtree, self.dist_dir, ignore_errors=True)

    async def write(self, artifact: OutputArtifact) -> bool:
        """Write one artifact. Returns False when it was stale and skipped."""
        if not self.is_current(artifact):
            logger.info("Skipping stale output %s", artifact.output_path)
            return False
        await asyncio.to_thread(self._write_sync, artifact)
        return True

    def _write_sync(self, artifact: OutputArtifact) -> None:
        target = self.dist_dir / artifact.output_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(artifact.content, encoding="utf-8")


__all__ = [
    "DIRECTORY_OUTPUT",
    "INSTANT_PREFIX",
    "MANIFEST_OUTPUT",
    "OutputArtifact",
    "OutputWriter",
    "core_artifact",
    "directory_artifact",
    "document_output_path",
    "landing_stub",
    "manifest_artifact",
    "restricted_artifacts",
]
