"""Scheduling models: planned activities, day results, and the week simulation."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from talentscout.models.observation import Observation

ActivityType = Literal[
    "attend_match",
    "watch_video",
    "write_report",
    "network_meeting",
    "training_visit",
    "travel",
    "study",
    "rest",
    "academy_visit",
    "youth_tournament",
]
DayStatus = Literal["idle", "resolving", "resolved"]


class Activity(BaseModel):
    """One planned day-slot."""

    type: ActivityType
    target_player_ids: list[str] = Field(default_factory=list)


class DayResult(BaseModel):
    """Everything that happened on one resolved day."""

    day: int = Field(ge=1, le=7)
    activity: ActivityType | None = None
    summary: str
    observations: list[Observation] = Field(default_factory=list)
    xp_gained: dict[str, int] = Field(default_factory=dict)
    fatigue_delta: int = 0
    inbox_message_ids: list[str] = Field(default_factory=list)
    degraded: bool = False


class WeekSimulation(BaseModel):
    """Transient per-week resolution state. Reset when a new week starts."""

    season: int
    week: int
    current_day: int = Field(default=0, ge=0, le=7)
    plan: list[Activity | None] = Field(default_factory=lambda: [None] * 7)
    day_status: list[DayStatus] = Field(default_factory=lambda: ["idle"] * 7)
    day_results: list[DayResult] = Field(default_factory=list)
    rest_days: int = 0

    @property
    def started(self) -> bool:
        return self.current_day > 0

    @property
    def complete(self) -> bool:
        return self.current_day >= 7
