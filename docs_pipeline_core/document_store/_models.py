"""Immutable values held by the content store."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from docs_pipeline_core._types import SdkScope, Section
from docs_pipeline_core.content.nodes import ContentTree, EmbedKind
from docs_pipeline_core.sdks import parse_sdk_list


class Frontmatter(BaseModel):
    """Document frontmatter. Keys other than title/description/sdk are kept as extras."""

    model_config = ConfigDict(frozen=True, extra="allow")

    title: str | None = None
    description: str | None = None
    sdk: tuple[str, ...] | None = None

    @field_validator("sdk", mode="before")
    @classmethod
    def _split_sdk_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(parse_sdk_list(value))
        if isinstance(value, (list, tuple)):
            return tuple(parse_sdk_list([str(item) for item in value]))
        return value

    def to_output(self, **overrides: Any) -> dict[str, Any]:
        """Frontmatter mapping for rendered output; ``sdk`` is written back as a comma list."""
        data = self.model_dump(exclude_none=True)
        if self.sdk is not None:
            data["sdk"] = ", ".join(self.sdk)
        data.update(overrides)
        return data


@dataclass(frozen=True, slots=True)
class FragmentRef:
    """Resolved location of an embed target."""

    kind: EmbedKind
    key: str
    path: str

    @property
    def section(self) -> Section:
        return Section.PARTIALS if self.kind is EmbedKind.PARTIAL else Section.TYPEDOC


@dataclass(frozen=True, slots=True)
class Fragment:
    """Parsed partial or typedoc page. Has no frontmatter and no SDK scope of its own."""

    ref: FragmentRef
    tree: ContentTree

    @property
    def key(self) -> str:
        return self.ref.key


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """Parsed document as read from its source file.

    ``tree`` is the document as authored (embeds unexpanded); ``anchors`` are the heading ids
    of the tree with its fragments spliced in.
    """

    key: str
    path: str
    frontmatter: Frontmatter
    tree: ContentTree
    anchors: frozenset[str]
    declared_sdks: SdkScope
    invalid_sdks: tuple[str, ...] = ()

    @property
    def title(self) -> str | None:
        return self.frontmatter.title

    @property
    def description(self) -> str | None:
        return self.frontmatter.description


__all__ = ["Fragment", "FragmentRef", "Frontmatter", "SourceDocument"]
