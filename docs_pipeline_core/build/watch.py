"""Watch mode: rebuild on source changes.

File events arrive on watchdog's observer thread and are handed to the event loop. Each
changed path is invalidated in the content store as soon as it arrives, so a build that
is still running cannot write outputs computed from the old content. Rebuilds wait for a
quiet period and never overlap.
"""

import asyncio
from collections.abc import Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from docs_pipeline_core.build.pipeline import BuildResult, DocsBuilder
from docs_pipeline_core.exceptions import DocsPipelineError
from docs_pipeline_core.logging import get_pipeline_logger, log_diagnostics

logger = get_pipeline_logger(__name__)


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, session: "WatchSession", loop: asyncio.AbstractEventLoop) -> None:
        self._session = session
        self._loop = loop

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type in ("opened", "closed", "closed_no_write"):
            return
        paths = [event.src_path]
        if dest := getattr(event, "dest_path", ""):
            paths.append(dest)
        for path in paths:
            self._loop.call_soon_threadsafe(self._session.notify, Path(str(path)))


class WatchSession:
    """Serialised, debounced rebuilds driven by file changes."""

    def __init__(self, builder: DocsBuilder, *, debounce: float | None = None) -> None:
        self.builder = builder
        self.debounce = builder.config.watch_debounce_seconds if debounce is None else debounce
        self._lock = asyncio.Lock()
        self._pending: set[Path] = set()
        self._changed = asyncio.Event()
        self.builds = 0

    @property
    def has_pending_changes(self) -> bool:
        return self._changed.is_set()

    def is_source_change(self, path: Path) -> bool:
        """Whether ``path`` is a source file or the manifest. Build outputs never are."""
        config = self.builder.config
        resolved = path.resolve()
        if resolved.is_relative_to(config.dist_dir.resolve()):
            return False
        return resolved == config.manifest_file.resolve() or self.builder.library.reader.locate(resolved) is not None

    def notify(self, path: Path) -> set[str]:
        """Record a changed path and invalidate its cache entry and dependents right away.

        Paths that are not sources are ignored and do not schedule a rebuild.
        """
        if not self.is_source_change(path):
            logger.debug("Ignoring change to %s", path)
            return set()
        self._pending.add(path)
        self._changed.set()
        invalidated = self.builder.library.invalidate_path(path)
        if invalidated:
            logger.info("%s changed, invalidated %d cached entr(y/ies)", path, len(invalidated))
        return invalidated

    async def rebuild(self, paths: Iterable[Path] = ()) -> BuildResult | None:
        """Invalidate ``paths`` and run one build, after any build already in progress.

        Returns None when the build aborted on a fatal error; the error is logged.
        """
        for path in paths:
            self.notify(path)
        async with self._lock:
            self._pending.clear()
            self._changed.clear()
            self.builds += 1
            try:
                result = await self.builder.build(clean=self.builds == 1)
            except DocsPipelineError as e:
                logger.error("Build failed: %s", e)
                return None
            log_diagnostics(logger, result.report.diagnostics)
            logger.info("Rebuild #%d: %d error(s), %d warning(s)", self.builds, len(result.report.failures), len(result.report.warnings))
            return result

    async def run(self, stop: asyncio.Event | None = None) -> None:
        """Build once, then rebuild after every batch of changes until ``stop`` is set."""
        stop = stop or asyncio.Event()
        config = self.builder.config
        observer = Observer()
        handler = _ChangeHandler(self, asyncio.get_running_loop())
        for folder in sorted({config.docs_dir.resolve(), config.typedoc_dir.resolve(), config.manifest_file.parent.resolve()}):
            if folder.is_dir():
                observer.schedule(handler, str(folder), recursive=True)
        observer.start()
        logger.info("Watching %s for changes", config.docs_dir)
        try:
            await self.rebuild()
            while not stop.is_set():
                changed = asyncio.create_task(self._changed.wait())
                stopped = asyncio.create_task(stop.wait())
                await asyncio.wait({changed, stopped}, return_when=asyncio.FIRST_COMPLETED)
                changed.cancel()
                stopped.cancel()
                if stop.is_set():
                    break
                await asyncio.sleep(self.debounce)
                await self.rebuild()
        finally:
            observer.stop()
            await asyncio.to_thread(observer.join)


__all__ = ["WatchSession"]
