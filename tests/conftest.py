"""Shared test fixtures."""

import pytest

from talentscout.config import Settings
from talentscout.core.seeding import generate_career
from talentscout.models.state import GameState


@pytest.fixture
def settings() -> Settings:
    """Test settings with defaults."""
    return Settings(talentscout_env="development", talentscout_seed=7)


@pytest.fixture
def career() -> GameState:
    """A freshly seeded career."""
    return generate_career(seed=7)
