"""Build orchestration: outputs, full builds and watch mode."""

from .outputs import OutputArtifact, OutputWriter
from .pipeline import BuildResult, DocsBuilder
from .watch import WatchSession

__all__ = ["BuildResult", "DocsBuilder", "OutputArtifact", "OutputWriter", "WatchSession"]
