"""GameState — the single shared, versioned career snapshot.

Every subsystem writes into this structure. It holds no behavior beyond
lookups, so ``model_dump()`` is a complete, self-describing save.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from talentscout.models.constants import WEEKS_PER_SEASON
from talentscout.models.finance import Finances
from talentscout.models.narrative import EventChain, NarrativeEvent
from talentscout.models.observation import Observation, Report, ReportOutcome
from talentscout.models.player import Player
from talentscout.models.rivals import RivalScout
from talentscout.models.schedule import WeekSimulation
from talentscout.models.scout import Scout

ToastLevel = Literal["info", "success", "warning", "danger"]


class InboxMessage(BaseModel):
    """A message delivered to the scout's inbox."""

    id: str
    season: int
    week: int
    category: str
    title: str
    body: str = ""
    read: bool = False


class Toast(BaseModel):
    """A short-lived notification for the presentation layer."""

    id: str
    level: ToastLevel = "info"
    message: str


class GameState(BaseModel):
    """The complete career state."""

    version: int = 0
    seed: int
    season: int = 1
    week: int = 1
    scout: Scout
    players: dict[str, Player] = Field(default_factory=dict)
    observations: list[Observation] = Field(default_factory=list)
    reports: list[Report] = Field(default_factory=list)
    report_outcomes: list[ReportOutcome] = Field(default_factory=list)
    finances: Finances = Field(default_factory=Finances)
    rivals: list[RivalScout] = Field(default_factory=list)
    narrative_events: list[NarrativeEvent] = Field(default_factory=list)
    event_chains: list[EventChain] = Field(default_factory=list)
    inbox: list[InboxMessage] = Field(default_factory=list)
    pending_toasts: list[Toast] = Field(default_factory=list)
    watchlist: list[str] = Field(default_factory=list)
    condition_streaks: dict[str, int] = Field(default_factory=dict)
    known_shared_targets: list[str] = Field(default_factory=list)
    week_simulation: WeekSimulation
    id_counter: int = 0

    @property
    def absolute_week(self) -> int:
        return absolute_week(self.season, self.week)

    def next_id(self, prefix: str) -> str:
        """Deterministic id: the same command sequence yields the same ids."""
        self.id_counter += 1
        return f"{prefix}-{self.season}-{self.week}-{self.id_counter}"

    def find_event(self, event_id: str) -> NarrativeEvent | None:
        return next((e for e in self.narrative_events if e.id == event_id), None)

    def find_chain(self, chain_id: str) -> EventChain | None:
        return next((c for c in self.event_chains if c.id == chain_id), None)

    def find_rival(self, rival_id: str) -> RivalScout | None:
        return next((r for r in self.rivals if r.id == rival_id), None)


def absolute_week(season: int, week: int) -> int:
    """Weeks elapsed since the start of the career, 1-based."""
    return (season - 1) * WEEKS_PER_SEASON + week
