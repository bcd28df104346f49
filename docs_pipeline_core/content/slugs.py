"""Heading anchor ids: slugified heading text, disambiguated with a counter."""

from collections.abc import Iterable

from slugify import slugify

from docs_pipeline_core.content.nodes import Block, Heading, plain_text

FALLBACK_SLUG = "section"


class HeadingSlugger:
    """Produces ``foo``, ``foo-2``, ``foo-3`` for repeated heading texts within one document.

    Headings with no sluggable text use ``section``.
    """

    def __init__(self) -> None:
        self._occurrences: dict[str, int] = {}

    def slug(self, text: str) -> str:
        base = slugify(text.strip()) or FALLBACK_SLUG
        count = self._occurrences.get(base, 0) + 1
        self._occurrences[base] = count
        return base if count == 1 else f"{base}-{count}"

    def reset(self) -> None:
        self._occurrences.clear()


def heading_id(heading: Heading, slugger: HeadingSlugger) -> str:
    """Anchor id of a heading: its explicit ``{{ id: '...' }}`` override, else its slug.

    Explicit ids do not advance the slug counter.
    """
    if heading.explicit_id is not None:
        return heading.explicit_id
    return slugger.slug(plain_text(heading.children))


def collect_heading_ids(blocks: Iterable[Block]) -> list[str]:
    """Anchor ids of every heading among ``blocks``, in order, duplicates kept."""
    slugger = HeadingSlugger()
    return [heading_id(block, slugger) for block in blocks if isinstance(block, Heading)]
