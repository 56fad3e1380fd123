"""Shared constants for talentscout models.

Placed here so the observation model, the scheduler, and the API layer can
import attribute and ladder orderings without a layer violation.
"""

from __future__ import annotations

ATTRIBUTE_DOMAINS: dict[str, list[str]] = {
    "technical": [
        "first_touch",
        "passing",
        "dribbling",
        "crossing",
        "finishing",
        "heading",
    ],
    "physical": ["pace", "strength", "stamina", "agility"],
    "mental": [
        "composure",
        "positioning",
        "work_rate",
        "decision_making",
        "leadership",
    ],
    "tactical": ["off_the_ball", "pressing", "defensive_awareness"],
}

ATTRIBUTE_ORDER: list[str] = [attr for attrs in ATTRIBUTE_DOMAINS.values() for attr in attrs]

DOMAIN_OF: dict[str, str] = {
    attr: domain for domain, attrs in ATTRIBUTE_DOMAINS.items() for attr in attrs
}

# Which scout discipline reads which domain.
DOMAIN_SKILL: dict[str, str] = {
    "technical": "technical_eye",
    "physical": "physical_assessment",
    "mental": "psychological_read",
    "tactical": "tactical_understanding",
}

SKILL_ORDER: list[str] = [
    "technical_eye",
    "physical_assessment",
    "psychological_read",
    "tactical_understanding",
    "data_literacy",
    "player_judgment",
    "potential_assessment",
]

DISTRESS_ORDER: list[str] = ["healthy", "warning", "distressed", "critical", "bankruptcy"]

CONVICTION_ORDER: list[str] = ["note", "recommend", "strong_recommend", "table_pound"]

POSITIONS: list[str] = ["GK", "CB", "FB", "DM", "CM", "AM", "W", "ST"]

DAYS_PER_WEEK = 7
WEEKS_PER_SEASON = 38
WEEKS_PER_MONTH = 4
