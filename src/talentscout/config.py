"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

from pydantic import model_validator
from pydantic_settings import BaseSettings

from talentscout.models.tuning import DEFAULT_TUNING, Tuning


class Settings(BaseSettings):
    """Talentscout configuration.

    All values can be overridden via environment variables or .env file.
    """

    # Environment
    talentscout_env: str = "development"

    # Career
    talentscout_seed: int = 42
    talentscout_scout_name: str = "Alex Morgan"
    talentscout_starting_balance: int = 2000

    # Attribute scale shown to the player (true values and readings share it)
    talentscout_attribute_min: int = 0
    talentscout_attribute_max: int = 20

    # Logging
    talentscout_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_attribute_scale(self) -> Settings:
        """The attribute scale must be a non-empty integer range."""
        if self.talentscout_attribute_min >= self.talentscout_attribute_max:
            raise ValueError(
                "talentscout_attribute_min must be below talentscout_attribute_max"
            )
        return self

    def tuning(self) -> Tuning:
        """Default tuning with the configured attribute scale applied."""
        return Tuning.model_validate(
            {
                **DEFAULT_TUNING.model_dump(),
                "attribute_min": self.talentscout_attribute_min,
                "attribute_max": self.talentscout_attribute_max,
            }
        )
