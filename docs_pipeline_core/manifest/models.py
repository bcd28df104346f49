"""Navigation manifest schema.

The manifest is a list of sections, each a list of nodes; groups nest the same shape in
``items``. Unknown keys are rejected so typos in the hand-maintained file surface at load time.
"""

from pydantic import BaseModel, ConfigDict, Field

from docs_pipeline_core._types import SDK


class ManifestItem(BaseModel):
    """Navigation leaf pointing at one document by href."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    href: str
    tag: str | None = None
    wrap: bool = True
    icon: str | None = None
    target: str | None = None
    sdk: tuple[SDK, ...] | None = None
    shortcut: bool | None = None


class ManifestGroup(BaseModel):
    """Titled group of navigation sections."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    title: str
    items: "tuple[tuple[NavigationNode, ...], ...]"
    collapse: bool | None = None
    tag: str | None = None
    wrap: bool = True
    icon: str | None = None
    hide_title: bool = Field(default=False, alias="hideTitle")
    sdk: tuple[SDK, ...] | None = None
    skip: bool | None = None


NavigationNode = ManifestItem | ManifestGroup

Navigation = tuple[tuple[NavigationNode, ...], ...]


class Manifest(BaseModel):
    """Root of ``manifest.json``: ``{"navigation": [[...], ...]}``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    navigation: Navigation


ManifestGroup.model_rebuild()
Manifest.model_rebuild()

__all__ = ["Manifest", "ManifestGroup", "ManifestItem", "Navigation", "NavigationNode"]
