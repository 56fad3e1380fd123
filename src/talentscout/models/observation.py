"""Observation, Report, and ReportOutcome models.

Observations and Reports are frozen: readings are only ever filtered or
merged at read time, never edited.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ConvictionLevel = Literal["note", "recommend", "strong_recommend", "table_pound"]


class AttributeReading(BaseModel):
    """A single (attribute, perceived value, confidence) triple."""

    model_config = ConfigDict(frozen=True)

    attribute: str
    perceived_value: int
    confidence: float = Field(ge=0.0, le=1.0)
    observed_at: int = 0  # absolute day index, used to break merge ties


class Observation(BaseModel):
    """One scouting activity's readings for one player."""

    model_config = ConfigDict(frozen=True)

    id: str
    player_id: str
    season: int
    week: int
    day: int
    activity: str
    observer: str = "scout"
    readings: tuple[AttributeReading, ...] = ()


class Report(BaseModel):
    """A submitted scouting report. Immutable once filed."""

    model_config = ConfigDict(frozen=True)

    id: str
    player_id: str
    conviction: ConvictionLevel
    summary: str = ""
    strengths: tuple[str, ...] = ()
    weaknesses: tuple[str, ...] = ()
    perceived_attributes: dict[str, int] = Field(default_factory=dict)
    estimated_quality: float = 0.0
    season: int
    week: int
    absolute_week: int
    consulting_contract_id: str | None = None
    retainer_contract_id: str | None = None


class ReportOutcome(BaseModel):
    """How a report turned out once the player's level became known."""

    model_config = ConfigDict(frozen=True)

    report_id: str
    player_id: str
    accuracy: float = Field(ge=0.0, le=1.0)
    proven_right: bool
    reputation_delta: float
    revealed_week: int
