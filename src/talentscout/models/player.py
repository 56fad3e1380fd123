"""Player (scouting target) model.

True attributes are fixed at creation and never shown to the player directly;
the API exposes only merged observation readings.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

PlayerStatus = Literal["available", "signed"]


class Player(BaseModel):
    """A scoutable footballer with a hidden true attribute vector."""

    id: str
    name: str
    age: int = Field(ge=14, le=40)
    position: str
    country: str
    club_id: str = ""
    true_attributes: dict[str, int]
    # Same configured scale as true_attributes, which may go below zero.
    potential: int
    buzz: int = Field(default=0, ge=0, le=100)
    market_value: int = Field(default=0, ge=0)
    status: PlayerStatus = "available"
    signed_by: str | None = None
    signed_week: int | None = None

    @property
    def is_available(self) -> bool:
        return self.status == "available"

    def true_quality(self) -> float:
        """Mean of the true attribute vector."""
        if not self.true_attributes:
            return 0.0
        return sum(self.true_attributes.values()) / len(self.true_attributes)
