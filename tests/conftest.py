"""Pytest configuration and shared fixtures.

Usage Guide:
- For GitHub API payloads: use dict fixtures from tests.fixtures
- For mocked githubkit responses and errors: import from tests.factories
- For workflow tests without HTTP: use the ``mock_client`` fixture
"""

from datetime import UTC, datetime

import pytest

from tpm_github.config import GitHubConfig, get_settings
from tpm_github.logging import reset_logging

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# A fixed "now" for deterministic due-date and reset-time assertions.
# -----------------------------------------------------------------------------
SPRINT_START = datetime(2024, 1, 1, 9, 0, 0, tzinfo=UTC)
SPRINT_1_DUE = datetime(2024, 1, 15, 9, 0, 0, tzinfo=UTC)  # start + 14 days
SPRINT_2_DUE = datetime(2024, 1, 29, 9, 0, 0, tzinfo=UTC)  # start + 28 days
SPRINT_3_DUE = datetime(2024, 2, 12, 9, 0, 0, tzinfo=UTC)  # start + 42 days

SPRINT_1_DUE_ISO = "2024-01-15T09:00:00Z"
SPRINT_2_DUE_ISO = "2024-01-29T09:00:00Z"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read settings fresh from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Reset loguru handlers between tests."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def github_config() -> GitHubConfig:
    """Client config with fast retries."""
    return GitHubConfig(max_retries=3, retry_delay_ms=10, max_delay_ms=100)


@pytest.fixture
def mock_client():
    """A GitHubClient double whose API methods are AsyncMocks."""
    from tests.factories import make_mock_client

    return make_mock_client()
