from __future__ import annotations

import pytest

from tests._fixtures.github_api import FakeGitHub


@pytest.fixture
def github() -> FakeGitHub:
    """Provide an empty fake GitHub account named ``octo``."""
    return FakeGitHub()
