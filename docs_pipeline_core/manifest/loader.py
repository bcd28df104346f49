"""Reading and validating ``manifest.json``."""

import json
from pathlib import Path

from pydantic import ValidationError

from docs_pipeline_core.exceptions import ManifestError
from docs_pipeline_core.logging import get_pipeline_logger
from docs_pipeline_core.manifest.models import Manifest, ManifestGroup
from docs_pipeline_core.manifest.tree import count_nodes, iter_nodes
from docs_pipeline_core.sdks import SdkUniverse

logger = get_pipeline_logger(__name__)


def parse_manifest(text: str, universe: SdkUniverse, *, source: str = "manifest.json") -> Manifest:
    """Parse manifest JSON and check every declared SDK against the universe.

    Raises:
        ManifestError: On invalid JSON, schema violations or unknown SDK identifiers.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Failed to parse {source}: {e}") from e

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Failed to parse {source}: {e}") from e

    problems: list[str] = []
    for node, ancestors in iter_nodes(manifest.navigation):
        if node.sdk is None:
            continue
        if invalid := universe.invalid(node.sdk):
            trail = " > ".join([*(group.title for group in ancestors), node.title])
            kind = "group" if isinstance(node, ManifestGroup) else "item"
            problems.append(f'{kind} "{trail}" declares unknown SDK(s) {invalid}')
    if problems:
        raise ManifestError(f"Invalid SDKs in {source} (valid: {list(universe.sdks)}):\n" + "\n".join(f"  - {p}" for p in problems))

    logger.debug("Loaded %s with %d navigation nodes", source, count_nodes(manifest.navigation))
    return manifest


def load_manifest(path: Path, universe: SdkUniverse) -> Manifest:
    """Load the manifest file at ``path``.

    Raises:
        ManifestError: When the file is missing or invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest file not found: {path}") from e
    return parse_manifest(text, universe, source=str(path))


__all__ = ["load_manifest", "parse_manifest"]
