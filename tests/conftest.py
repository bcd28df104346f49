"""Shared fixtures: a small SDK universe and in-memory sources."""

import pytest

from docs_pipeline_core.document_store import ContentLibrary, MemorySource
from docs_pipeline_core.sdks import SdkUniverse


@pytest.fixture
def universe() -> SdkUniverse:
    return SdkUniverse.of(["react", "nextjs", "vue"])


@pytest.fixture
def source() -> MemorySource:
    return MemorySource()


@pytest.fixture
def library(source: MemorySource, universe: SdkUniverse) -> ContentLibrary:
    return ContentLibrary(source, universe)
