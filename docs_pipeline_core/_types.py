"""Domain-specific types shared across the pipeline."""

from enum import StrEnum
from typing import Literal, NewType

SDK = NewType("SDK", str)
"""Identifier of one client SDK (e.g. ``nextjs``). Always a member of the configured universe once validated."""

SdkScope = frozenset[SDK] | None
"""Resolved SDK availability. ``None`` means valid for every SDK."""

CORE_TARGET: Literal["core"] = "core"

BuildTarget = SDK | Literal["core"]
"""What a validation pass renders for: the generic core output or one SDK variant."""


class Section(StrEnum):
    """Source section a file belongs to."""

    DOCS = "docs"
    PARTIALS = "partials"
    TYPEDOC = "typedoc"


__all__ = ["CORE_TARGET", "SDK", "BuildTarget", "SdkScope", "Section"]
