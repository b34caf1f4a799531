"""
Shared pytest fixtures.

Settings are built with `_env_file=None` so a developer's .env never leaks
into tests, and commit retries do not sleep.
"""

import pytest

from backend.engine import WorkoutEngine
from backend.settings import Settings
from tests.fakes import create_repos


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        environment="test",
        commit_retry_min_wait_seconds=0,
        commit_retry_max_wait_seconds=0,
        _env_file=None,
    )


@pytest.fixture
def engine(test_settings) -> WorkoutEngine:
    return WorkoutEngine(test_settings)


@pytest.fixture
def repos():
    """Fresh (session_repo, record_repo, template_repo) sharing one record store."""
    return create_repos()
