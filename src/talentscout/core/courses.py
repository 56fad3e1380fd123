"""Coaching and scouting courses: enrollment, weekly progress, completion.

Completing a course grants reputation and skill bonuses, and the licence
courses raise the career tier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from talentscout.core.inbox import post_message, push_toast
from talentscout.core.ledger import record
from talentscout.models.commands import CommandResult
from talentscout.models.scout import CourseEnrollment
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Course:
    id: str
    name: str
    cost: int
    weeks: int
    min_tier: int = 1
    prerequisites: tuple[str, ...] = ()
    reputation_bonus: float = 0.0
    skill_bonus: dict[str, int] = field(default_factory=dict)
    tier_gate: int | None = None


COURSES: dict[str, Course] = {
    c.id: c
    for c in [
        Course(
            "fa_level_1",
            "FA Level 1 Talent Identification",
            cost=500,
            weeks=4,
            reputation_bonus=2,
            skill_bonus={"player_judgment": 1},
            tier_gate=2,
        ),
        Course(
            "fa_level_2",
            "FA Level 2 Talent Identification",
            cost=1500,
            weeks=6,
            min_tier=2,
            prerequisites=("fa_level_1",),
            reputation_bonus=4,
            skill_bonus={"tactical_understanding": 1, "player_judgment": 1},
            tier_gate=3,
        ),
        Course(
            "fa_level_3",
            "FA Level 3 Advanced Scouting",
            cost=4000,
            weeks=10,
            min_tier=3,
            prerequisites=("fa_level_2",),
            reputation_bonus=6,
            skill_bonus={"tactical_understanding": 2},
            tier_gate=4,
        ),
        Course(
            "uefa_a",
            "UEFA A Licence",
            cost=10000,
            weeks=16,
            min_tier=4,
            prerequisites=("fa_level_3",),
            reputation_bonus=10,
            skill_bonus={"tactical_understanding": 2, "technical_eye": 1},
            tier_gate=5,
        ),
        Course(
            "uefa_pro",
            "UEFA Pro Licence",
            cost=25000,
            weeks=24,
            min_tier=5,
            prerequisites=("uefa_a",),
            reputation_bonus=15,
            skill_bonus={"player_judgment": 2, "potential_assessment": 2},
        ),
        Course(
            "data_analytics",
            "Football Data Analytics",
            cost=800,
            weeks=3,
            skill_bonus={"data_literacy": 2},
        ),
        Course(
            "youth_development",
            "Youth Development Certificate",
            cost=1000,
            weeks=4,
            skill_bonus={"potential_assessment": 2},
        ),
        Course(
            "sports_psychology",
            "Sports Psychology",
            cost=1200,
            weeks=4,
            min_tier=2,
            skill_bonus={"psychological_read": 2},
        ),
        Course(
            "business_management",
            "Business Management for Scouts",
            cost=2000,
            weeks=6,
            min_tier=2,
            reputation_bonus=3,
        ),
    ]
}


def enroll_in_course(
    state: GameState, course_id: str, tuning: Tuning = DEFAULT_TUNING
) -> CommandResult:
    """Enroll and pay up front."""
    scout = state.scout
    if scout.enrollment is not None:
        return CommandResult.rejected(
            "already_enrolled", f"already enrolled in {scout.enrollment.course_id}"
        )
    course = COURSES.get(course_id)
    if course is None:
        return CommandResult.rejected("not_found", f"no course {course_id}")
    if course_id in scout.completed_courses:
        return CommandResult.rejected("already_completed", f"{course.name} already completed")
    missing_prereqs = [p for p in course.prerequisites if p not in scout.completed_courses]
    if missing_prereqs:
        return CommandResult.rejected(
            "prerequisite_missing", f"requires {', '.join(missing_prereqs)}"
        )
    if scout.career_tier < course.min_tier:
        return CommandResult.rejected(
            "tier_too_low", f"{course.name} requires tier {course.min_tier}"
        )
    if state.finances.balance < course.cost:
        return CommandResult.rejected(
            "insufficient_funds", f"{course.name} costs {course.cost}"
        )

    record(state, -course.cost, "course", course.name)
    scout.enrollment = CourseEnrollment(
        course_id=course_id, start_week=state.absolute_week, weeks_remaining=course.weeks
    )
    logger.info("course_enrolled id=%s cost=%d weeks=%d", course_id, course.cost, course.weeks)
    return CommandResult.success(course_id=course_id, weeks=course.weeks)


def progress_course(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> Course | None:
    """Advance the current course one week. Returns the course if it completed."""
    scout = state.scout
    enrollment = scout.enrollment
    if enrollment is None:
        return None
    enrollment.weeks_remaining = max(0, enrollment.weeks_remaining - 1)
    if enrollment.weeks_remaining > 0:
        return None

    course = COURSES[enrollment.course_id]
    scout.enrollment = None
    scout.completed_courses.append(course.id)
    scout.reputation = min(100.0, scout.reputation + course.reputation_bonus)
    for skill, bonus in course.skill_bonus.items():
        scout.skills[skill] = min(tuning.skill_max, scout.skills.get(skill, 1) + bonus)
    if course.tier_gate is not None and scout.career_tier < course.tier_gate:
        scout.career_tier = course.tier_gate
        push_toast(state, f"Promoted to tier {scout.career_tier}", "success")
    post_message(state, "course", f"Completed {course.name}", "Certificate received.")
    logger.info("course_completed id=%s tier=%d", course.id, scout.career_tier)
    return course
