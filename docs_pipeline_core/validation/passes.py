"""Result type shared by the validator passes."""

from dataclasses import dataclass

from docs_pipeline_core.content.nodes import ContentTree
from docs_pipeline_core.validation.diagnostics import Diagnostic


@dataclass(frozen=True, slots=True)
class PassResult:
    tree: ContentTree
    diagnostics: tuple[Diagnostic, ...] = ()


__all__ = ["PassResult"]
