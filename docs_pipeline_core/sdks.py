"""The closed set of SDK identifiers and helpers for SDK scopes.

A scope is either ``None`` (valid for every SDK) or a non-empty frozenset of SDKs.
Lists are always emitted in universe order so output stays deterministic.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass

from docs_pipeline_core._types import SDK, SdkScope

DEFAULT_SDKS: tuple[str, ...] = (
    "nextjs",
    "react",
    "js-frontend",
    "chrome-extension",
    "expo",
    "android",
    "ios",
    "expressjs",
    "fastify",
    "react-router",
    "remix",
    "tanstack-react-start",
    "go",
    "astro",
    "nuxt",
    "vue",
    "ruby",
    "js-backend",
)


@dataclass(frozen=True, slots=True)
class SdkUniverse:
    """Fixed enumeration of valid SDK identifiers."""

    sdks: tuple[SDK, ...]

    def __post_init__(self) -> None:
        if not self.sdks:
            raise ValueError("SDK universe must contain at least one SDK")
        if len(set(self.sdks)) != len(self.sdks):
            raise ValueError(f"SDK universe contains duplicates: {list(self.sdks)}")

    @classmethod
    def of(cls, sdks: Iterable[str]) -> "SdkUniverse":
        return cls(tuple(SDK(sdk) for sdk in sdks))

    @property
    def all(self) -> frozenset[SDK]:
        return frozenset(self.sdks)

    def __contains__(self, value: object) -> bool:
        return value in self.sdks

    def invalid(self, values: Iterable[str]) -> list[str]:
        """Return the values that are not recognised SDK identifiers, in input order."""
        return [value for value in values if value not in self.sdks]

    def covers(self, scope: SdkScope) -> bool:
        """True when the scope includes every SDK of the universe."""
        return scope is None or scope >= self.all

    def normalize(self, scope: SdkScope) -> SdkScope:
        """Collapse a scope that covers the whole universe to ``None``."""
        return None if self.covers(scope) else scope

    def ordered(self, scope: Iterable[SDK]) -> list[SDK]:
        members = set(scope)
        return [sdk for sdk in self.sdks if sdk in members]


def parse_sdk_list(value: str | Iterable[str]) -> list[str]:
    """Parse an SDK list as written by authors.

    Accepts ``"react"``, ``"react, nextjs"``, ``'["react", "nextjs"]'`` (also with single
    quotes) or an already-split iterable. Values are stripped; empty entries are dropped.
    """
    if not isinstance(value, str):
        return [str(item).strip() for item in value if str(item).strip()]
    text = value.strip()
    if text.startswith("[") and text.endswith("]"):
        try:
            parsed = json.loads(text.replace("'", '"'))
        except json.JSONDecodeError:
            parsed = text[1:-1].split(",")
        return [str(item).strip().strip("'\"") for item in parsed if str(item).strip().strip("'\"")]
    return [item.strip() for item in text.split(",") if item.strip()]


def is_restricted(scope: SdkScope) -> bool:
    return scope is not None


def union_scopes(scopes: Iterable[SdkScope]) -> SdkScope:
    """Union of scopes where any unrestricted member makes the result unrestricted."""
    result: set[SDK] = set()
    for scope in scopes:
        if scope is None:
            return None
        result |= scope
    return frozenset(result)


__all__ = ["DEFAULT_SDKS", "SdkUniverse", "is_restricted", "parse_sdk_list", "union_scopes"]
