"""Full documentation build.

Stages, in order:

1. read the manifest and load every document through the content store
2. resolve SDK scopes over the whole navigation (fatal on conflicts)
3. validate each document for the core target, or for each SDK of a restricted document
4. write outputs that are still current

Loading and validation are bounded by one semaphore of ``max_concurrency`` permits.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TypeVar

from docs_pipeline_core._types import CORE_TARGET, SDK
from docs_pipeline_core.build.outputs import (
    OutputArtifact,
    OutputWriter,
    core_artifact,
    directory_artifact,
    manifest_artifact,
    restricted_artifacts,
)
from docs_pipeline_core.content.nodes import ContentTree
from docs_pipeline_core.document_store import ContentLibrary, FileSystemSource, SourceDocument
from docs_pipeline_core.exceptions import ContentParseError, SourceNotFoundError
from docs_pipeline_core.logging import get_pipeline_logger
from docs_pipeline_core.manifest import load_manifest
from docs_pipeline_core.scoping.resolver import ScopedTree, resolve_scopes
from docs_pipeline_core.settings import BuildSettings
from docs_pipeline_core.validation import (
    BuildReport,
    Diagnostic,
    DiagnosticCode,
    DiagnosticPolicy,
    DocumentIndex,
    check_document,
    check_manifest_targets,
    validate_and_embed,
)

logger = get_pipeline_logger(__name__)

_T = TypeVar("_T")


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of one build."""

    report: BuildReport
    scoped: ScopedTree
    artifacts: tuple[OutputArtifact, ...]
    written: tuple[str, ...] = ()
    stale: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.report.ok


@dataclass(frozen=True, slots=True)
class _Loaded:
    document: SourceDocument
    version: int


class DocsBuilder:
    """Builds the dist folder from the configured sources.

    The library (and so the content store) is kept between builds, so repeated builds in
    watch mode only re-parse what was invalidated.
    """

    def __init__(self, config: BuildSettings, library: ContentLibrary | None = None) -> None:
        self.config = config
        self.universe = config.universe
        self.library = library or ContentLibrary(
            FileSystemSource(config.docs_dir, config.typedoc_dir),
            self.universe,
            base_docs_link=config.base_docs_link,
        )
        self.policy = DiagnosticPolicy.from_settings(config)
        self.writer = OutputWriter(config.dist_dir, self.library.store)

    async def _bounded(self, semaphore: asyncio.Semaphore, coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    async def _load(self, key: str) -> _Loaded | Diagnostic:
        version = self.library.store.version(key)
        try:
            document = await self.library.get_document(key)
        except (ContentParseError, SourceNotFoundError) as e:
            logger.warning("Failed to load %s: %s", key, e)
            path = self.library.document_path(key)
            line = e.line if isinstance(e, ContentParseError) else None
            return Diagnostic(code=DiagnosticCode.DOC_PARSE_FAILED, message=str(e), document=key, path=path, line=line)
        return _Loaded(document, version)

    async def _render(
        self, loaded: _Loaded, scoped: ScopedTree, index: DocumentIndex
    ) -> tuple[list[OutputArtifact], list[Diagnostic]]:
        document = loaded.document
        scope = index.scope_of(document.key)
        base = self.config.base_docs_link

        if scope is None:
            result = await validate_and_embed(document, scoped, self.library, index, CORE_TARGET, config=self.config, policy=self.policy)
            return [core_artifact(document, result.tree, loaded.version, base_docs_link=base)], list(result.diagnostics)

        sdks = self.universe.ordered(scope)
        results = await asyncio.gather(
            *(validate_and_embed(document, scoped, self.library, index, sdk, config=self.config, policy=self.policy) for sdk in sdks)
        )
        variants: list[tuple[SDK, ContentTree]] = [(sdk, result.tree) for sdk, result in zip(sdks, results, strict=True)]
        diagnostics = [d for result in results for d in result.diagnostics]
        return restricted_artifacts(document, variants, loaded.version, base_docs_link=base), diagnostics

    async def build(self, *, write: bool = True, clean: bool = False) -> BuildResult:
        """Run a full build.

        Args:
            write: Write artifacts to the dist folder (False for ``check``).
            clean: Remove the dist folder before writing.

        Raises:
            ManifestError: When the manifest cannot be loaded.
            ScopeConflictError: When SDK declarations contradict each other.
        """
        manifest = await asyncio.to_thread(load_manifest, self.config.manifest_file, self.universe)
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        keys = await self.library.list_documents()
        loaded_or_failed = await asyncio.gather(*(self._bounded(semaphore, self._load(key)) for key in keys))
        loaded = [item for item in loaded_or_failed if isinstance(item, _Loaded)]
        diagnostics: list[Diagnostic] = [item for item in loaded_or_failed if isinstance(item, Diagnostic)]
        logger.info("Loaded %d document(s), %d failed", len(loaded), len(diagnostics))

        documents = [item.document for item in loaded]
        scoped = resolve_scopes(manifest.navigation, {d.key: d.declared_sdks for d in documents}, self.universe)
        index = DocumentIndex.build(documents, scoped)

        for document in documents:
            diagnostics.extend(check_document(document, scoped))
        diagnostics.extend(
            check_manifest_targets(
                scoped,
                set(keys),
                base_docs_link=self.config.base_docs_link,
                manifest_path=self.config.manifest_path.as_posix(),
            )
        )
        diagnostics = self.policy.apply(diagnostics)

        rendered = await asyncio.gather(*(self._bounded(semaphore, self._render(item, scoped, index)) for item in loaded))
        artifacts = [artifact for outputs, _ in rendered for artifact in outputs]
        diagnostics.extend(d for _, found in rendered for d in found)
        artifacts.append(manifest_artifact(scoped, base_docs_link=self.config.base_docs_link))
        artifacts.append(directory_artifact(artifacts))

        report = BuildReport.of(diagnostics)
        written: list[str] = []
        stale: list[str] = []
        if write:
            if clean:
                await self.writer.clean()
            for artifact in artifacts:
                (written if await self.writer.write(artifact) else stale).append(artifact.output_path)

        logger.info(
            "Build finished: %d artifact(s), %d error(s), %d warning(s)",
            len(artifacts),
            len(report.failures),
            len(report.warnings),
        )
        return BuildResult(report=report, scoped=scoped, artifacts=tuple(artifacts), written=tuple(written), stale=tuple(stale))


__all__ = ["BuildResult", "DocsBuilder"]
