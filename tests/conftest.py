from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.fake_parser import parse
from tests._fixtures.repo_builder import RepoBuilder
from waymark.parsers import ParseFn


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def fake_parse() -> ParseFn:
    """Provide the line-oriented parser stand-in for the external grammar."""
    return parse
