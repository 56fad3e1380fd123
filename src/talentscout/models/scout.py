"""Scout, assistant, enrollment, and travel models.

The Scout is the player's avatar. Skills, fatigue, and reputation are mutated
by the scheduler; career tier and equipment by the financial engine.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from talentscout.models.constants import SKILL_ORDER


def _default_skills() -> dict[str, int]:
    return {skill: 5 for skill in SKILL_ORDER}


class CourseEnrollment(BaseModel):
    """A course in progress."""

    course_id: str
    start_week: int
    weeks_remaining: int = Field(ge=0)


class TravelBooking(BaseModel):
    """An international trip. Departs the week after booking."""

    country: str
    continent: str
    cost: int = Field(ge=0)
    depart_week: int
    return_week: int
    departed: bool = False


class Assistant(BaseModel):
    """An employed assistant scout who observes watchlisted players weekly."""

    id: str
    name: str
    skill: int = Field(ge=1, le=20)
    weekly_salary: int = Field(ge=0)


class Scout(BaseModel):
    """The player-controlled talent scout."""

    name: str
    skills: dict[str, int] = Field(default_factory=_default_skills)
    skill_xp: dict[str, int] = Field(default_factory=dict)
    fatigue: int = Field(default=0, ge=0)
    reputation: float = Field(default=10.0, ge=0.0, le=100.0)
    career_tier: int = Field(default=1, ge=1, le=5)
    equipment_level: int = Field(default=1, ge=1, le=5)
    home_country: str = "england"
    country_familiarity: dict[str, int] = Field(default_factory=dict)
    travel_booking: TravelBooking | None = None
    enrollment: CourseEnrollment | None = None
    completed_courses: list[str] = Field(default_factory=list)
    assistants: list[Assistant] = Field(default_factory=list)
    forced_rest: bool = False

    def skill(self, name: str) -> int:
        """Current level of a discipline, defaulting to 1 for unknown skills."""
        return self.skills.get(name, 1)
