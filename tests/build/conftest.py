"""Build fixtures: the helper repository written to a temporary folder."""

from pathlib import Path

import pytest

from docs_pipeline_core.settings import BuildSettings
from tests.support.helpers import TEST_SDKS, write_repo


@pytest.fixture
def repo(tmp_path: Path) -> BuildSettings:
    write_repo(tmp_path)
    return BuildSettings(base_path=tmp_path, valid_sdks=TEST_SDKS)
