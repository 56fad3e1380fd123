"""Activity catalog and the per-day fatigue and XP rules.

Each activity costs one day-slot. Observing activities expose a subset of
attribute domains at a given quality; the rest only move fatigue and XP.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from talentscout.models.scout import Scout
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityDefinition:
    """Static properties of a schedulable activity.

    Attributes:
        key: Activity type identifier.
        label: Human-readable name used in day summaries.
        fatigue: Fatigue added when the activity is performed.
        xp: Skill XP granted per discipline.
        domain_slots: Attributes exposed per domain; empty for non-observing activities.
        quality: Viewing quality; higher means less noise and more confidence.
        max_targets: How many players can be focused in one slot.
    """

    key: str
    label: str
    fatigue: int
    xp: dict[str, int] = field(default_factory=dict)
    domain_slots: dict[str, int] = field(default_factory=dict)
    quality: float = 1.0
    max_targets: int = 0

    @property
    def observes(self) -> bool:
        return self.max_targets > 0 and any(v > 0 for v in self.domain_slots.values())


ACTIVITIES: dict[str, ActivityDefinition] = {
    a.key: a
    for a in [
        ActivityDefinition(
            key="attend_match",
            label="Attended a live match",
            fatigue=10,
            xp={
                "technical_eye": 3,
                "physical_assessment": 2,
                "tactical_understanding": 2,
                "player_judgment": 2,
            },
            domain_slots={"technical": 3, "physical": 2, "mental": 1, "tactical": 2},
            quality=1.0,
            max_targets=2,
        ),
        ActivityDefinition(
            key="watch_video",
            label="Watched match video",
            fatigue=5,
            xp={"tactical_understanding": 2, "technical_eye": 2, "data_literacy": 1},
            domain_slots={"technical": 2, "tactical": 3},
            quality=0.67,
            max_targets=3,
        ),
        ActivityDefinition(
            key="write_report",
            label="Wrote up notes",
            fatigue=5,
            xp={"player_judgment": 2, "data_literacy": 1},
        ),
        ActivityDefinition(
            key="network_meeting",
            label="Met contacts",
            fatigue=3,
            xp={"player_judgment": 1},
        ),
        ActivityDefinition(
            key="training_visit",
            label="Visited a training session",
            fatigue=8,
            xp={"physical_assessment": 2, "psychological_read": 2, "technical_eye": 1},
            domain_slots={"technical": 2, "physical": 2, "mental": 2, "tactical": 1},
            quality=1.43,
            max_targets=3,
        ),
        ActivityDefinition(key="travel", label="Travelled", fatigue=6),
        ActivityDefinition(
            key="study",
            label="Studied",
            fatigue=3,
            xp={"data_literacy": 2, "potential_assessment": 1},
        ),
        ActivityDefinition(key="rest", label="Rested", fatigue=0),
        ActivityDefinition(
            key="academy_visit",
            label="Visited an academy",
            fatigue=8,
            xp={"potential_assessment": 3, "psychological_read": 1},
            domain_slots={"technical": 2, "physical": 1, "mental": 2},
            quality=1.25,
            max_targets=4,
        ),
        ActivityDefinition(
            key="youth_tournament",
            label="Scouted a youth tournament",
            fatigue=12,
            xp={"potential_assessment": 2, "technical_eye": 2, "physical_assessment": 1},
            domain_slots={"technical": 2, "physical": 2, "mental": 1, "tactical": 1},
            quality=0.91,
            max_targets=5,
        ),
    ]
}


def rest_recovery(rest_days_so_far: int, tuning: Tuning = DEFAULT_TUNING) -> int:
    """Fatigue recovered by a rest day. Each extra rest day in a week recovers less."""
    return round(tuning.rest_recovery * tuning.rest_diminishing_factor**rest_days_so_far)


def apply_fatigue(scout: Scout, delta: int, tuning: Tuning = DEFAULT_TUNING) -> int:
    """Apply a fatigue delta, clamped to [0, max]. Returns the delta actually applied."""
    before = scout.fatigue
    scout.fatigue = max(0, min(tuning.max_fatigue, before + delta))
    return scout.fatigue - before


def accrue_xp(scout: Scout, xp: dict[str, int], tuning: Tuning = DEFAULT_TUNING) -> list[str]:
    """Add discipline XP and convert it to levels. Returns skills that levelled up."""
    levelled: list[str] = []
    for skill, amount in xp.items():
        total = scout.skill_xp.get(skill, 0) + amount
        level = scout.skills.get(skill, 1)
        while total >= tuning.xp_per_level and level < tuning.skill_max:
            total -= tuning.xp_per_level
            level += 1
            levelled.append(skill)
        if level >= tuning.skill_max:
            total = min(total, tuning.xp_per_level - 1)
        scout.skill_xp[skill] = total
        scout.skills[skill] = level
    if levelled:
        logger.info("skill_levelled skills=%s", ",".join(levelled))
    return levelled
