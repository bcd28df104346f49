"""CLI for building and checking the documentation."""

import argparse
import asyncio
import sys
from pathlib import Path

from docs_pipeline_core.build import BuildResult, DocsBuilder, WatchSession
from docs_pipeline_core.exceptions import ManifestError, ScopeConflictError
from docs_pipeline_core.logging import setup_logging
from docs_pipeline_core.settings import BuildSettings


def _settings_from_args(args: argparse.Namespace) -> BuildSettings:
    """Environment settings with command-line paths applied on top."""
    overrides: dict[str, Path] = {}
    if args.base_path is not None:
        overrides["base_path"] = args.base_path
    if args.dist is not None:
        overrides["dist_path"] = args.dist
    return BuildSettings(**overrides)  # pyright: ignore[reportCallIssue]


def _print_result(result: BuildResult) -> int:
    if result.report.diagnostics:
        print(result.report.format())
    if result.stale:
        print(f"  skipped {len(result.stale)} stale output(s)")
    if result.ok:
        print(f"OK: {len(result.artifacts)} output(s)")
        return 0
    print(f"FAIL: {len(result.report.failures)} error(s)", file=sys.stderr)
    return 1


async def _run(config: BuildSettings, *, write: bool, watch: bool) -> int:
    builder = DocsBuilder(config)
    if watch:
        await WatchSession(builder).run()
        return 0
    try:
        result = await builder.build(write=write, clean=write)
    except (ManifestError, ScopeConflictError) as e:
        print(f"FAIL: {e}", file=sys.stderr)
        return 1
    return _print_result(result)


def main(argv: list[str] | None = None) -> int:
    """Entry point with build/check subcommands."""
    parser = argparse.ArgumentParser(prog="docs-pipeline", description="SDK-scoped documentation build")
    parser.add_argument("--base-path", type=Path, help="Repository root (default: current directory)")
    parser.add_argument("--dist", type=Path, help="Output folder")
    parser.add_argument("--log-level", help="Log level override (DEBUG, INFO, ...)")
    subparsers = parser.add_subparsers(dest="command")
    build_parser = subparsers.add_parser("build", help="Validate and write the dist folder")
    build_parser.add_argument("--watch", action="store_true", help="Rebuild when sources change")
    subparsers.add_parser("check", help="Validate without writing outputs")

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    setup_logging(level=args.log_level)
    config = _settings_from_args(args)
    watch = args.command == "build" and args.watch
    try:
        return asyncio.run(_run(config, write=args.command == "build", watch=watch))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
