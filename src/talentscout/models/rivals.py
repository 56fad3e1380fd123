"""Rival scout models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

RivalPersonality = Literal["aggressive", "methodical", "connected", "lucky"]
RivalActivityType = Literal["target_acquired", "spotted", "report_submitted", "player_signed"]


class RivalActivity(BaseModel):
    """A display record of something a rival did."""

    week: int
    season: int
    activity_type: RivalActivityType
    player_id: str
    description: str = ""


class RivalScout(BaseModel):
    """A competing scout pursuing overlapping targets."""

    id: str
    name: str
    club_name: str
    quality: int = Field(ge=1, le=5)
    personality: RivalPersonality
    aggression: float = Field(default=0.5, ge=0.0, le=1.0)
    budget_tier: int = Field(default=2, ge=1, le=4)
    reputation: int = Field(default=20, ge=0, le=100)
    current_target: str | None = None
    scouting_progress: dict[str, int] = Field(default_factory=dict)
    signed_targets: list[str] = Field(default_factory=list)
    activity_log: list[RivalActivity] = Field(default_factory=list)

    @property
    def target_ids(self) -> set[str]:
        """Every player this rival is tracking or has tracked."""
        ids = set(self.scouting_progress)
        if self.current_target:
            ids.add(self.current_target)
        return ids
