"""Shared fixtures for battle engine tests."""

import pytest

from creature_battle.config import Settings


@pytest.fixture
def settings():
    """Default settings, isolated from any .env file."""
    return Settings(_env_file=None)
