"""Tests for watch-mode rebuilds."""

import asyncio
from pathlib import Path

import pytest

from docs_pipeline_core.build import DocsBuilder, WatchSession
from docs_pipeline_core.settings import BuildSettings
from tests.support.helpers import TEST_SDKS, write_repo


async def _wait_for(predicate, timeout: float = 5.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.01)


class TestWatchSession:
    @pytest.mark.asyncio
    async def test_notify_invalidates_dependents(self, repo: BuildSettings):
        session = WatchSession(DocsBuilder(repo), debounce=0)
        await session.rebuild()
        invalidated = session.notify(repo.docs_dir / "_partials" / "note.mdx")
        assert invalidated == {"_partials/note.mdx", "/docs/overview"}
        assert session.notify(repo.docs_dir / "manifest.json") == set()

    @pytest.mark.asyncio
    async def test_build_outputs_do_not_schedule_rebuilds(self, tmp_path: Path):
        write_repo(tmp_path)
        (tmp_path / "docs" / "manifest.json").rename(tmp_path / "manifest.json")
        config = BuildSettings(base_path=tmp_path, manifest_path="manifest.json", valid_sdks=TEST_SDKS)
        session = WatchSession(DocsBuilder(config), debounce=0)
        await session.rebuild()

        assert session.notify(config.dist_dir / "overview.mdx") == set()
        assert session.notify(tmp_path / "docs" / "image.png") == set()
        assert not session.has_pending_changes

        session.notify(tmp_path / "manifest.json")
        assert session.has_pending_changes

    @pytest.mark.asyncio
    async def test_rebuild_picks_up_changes(self, repo: BuildSettings):
        session = WatchSession(DocsBuilder(repo), debounce=0)
        await session.rebuild()
        note = repo.docs_dir / "_partials" / "note.mdx"
        note.write_text("Updated note.\n", encoding="utf-8")

        result = await session.rebuild([note])
        assert result is not None and result.ok
        assert "Updated note." in (repo.dist_dir / "overview.mdx").read_text()
        assert session.builds == 2

    @pytest.mark.asyncio
    async def test_only_first_build_cleans(self, repo: BuildSettings):
        session = WatchSession(DocsBuilder(repo), debounce=0)
        await session.rebuild()
        extra = repo.dist_dir / "extra.mdx"
        extra.write_text("kept")
        await session.rebuild()
        assert extra.exists()

    @pytest.mark.asyncio
    async def test_fatal_errors_do_not_stop_the_session(self, repo: BuildSettings):
        session = WatchSession(DocsBuilder(repo), debounce=0)
        manifest = repo.manifest_file
        good = manifest.read_text()
        manifest.write_text("{broken")
        assert await session.rebuild([manifest]) is None

        manifest.write_text(good)
        result = await session.rebuild([manifest])
        assert result is not None and result.ok

    @pytest.mark.asyncio
    async def test_concurrent_rebuilds_are_serialised(self, repo: BuildSettings):
        builder = DocsBuilder(repo)
        session = WatchSession(builder, debounce=0)
        active = 0
        peak = 0
        build = builder.build

        async def tracked(**kwargs):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            try:
                return await build(**kwargs)
            finally:
                active -= 1

        builder.build = tracked  # type: ignore[method-assign]
        await asyncio.gather(session.rebuild(), session.rebuild(), session.rebuild())
        assert peak == 1
        assert session.builds == 3

    @pytest.mark.asyncio
    async def test_run_builds_until_stopped(self, repo: BuildSettings):
        session = WatchSession(DocsBuilder(repo), debounce=0)
        stop = asyncio.Event()
        task = asyncio.create_task(session.run(stop))

        await _wait_for(lambda: session.builds >= 1)
        session.notify(repo.docs_dir / "hooks.mdx")
        await _wait_for(lambda: session.builds >= 2)
        stop.set()
        await asyncio.wait_for(task, timeout=5)
        assert (repo.dist_dir / "react" / "hooks.mdx").exists()
