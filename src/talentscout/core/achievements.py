"""Achievements — pure evaluation plus a store behind a persistence port.

``evaluate_achievements`` is a pure function of the game state: it returns
every achievement id the state satisfies. ``AchievementStore`` compares that
set against what was already unlocked and hands new unlocks to whatever
persistence adapter it was given. The evaluator knows nothing about storage.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from talentscout.models.state import GameState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AchievementDefinition:
    """A named condition over the game state.

    Attributes:
        id: Stable identifier used for persistence.
        name: Display name.
        description: Human-readable unlock condition.
        check: Predicate over the state.
    """

    id: str
    name: str
    description: str
    check: Callable[[GameState], bool]


def _repaid_a_loan(state: GameState) -> bool:
    return state.finances.loan is None and any(
        t.category == "loan_repayment" for t in state.finances.ledger
    )


def _recovered_from_bankruptcy(state: GameState) -> bool:
    went_bust = any(t.category == "liquidation" for t in state.finances.ledger)
    return went_bust and state.finances.distress_level == "healthy"


ACHIEVEMENTS: list[AchievementDefinition] = [
    AchievementDefinition(
        "first_look", "First Look", "Record your first observation", lambda s: bool(s.observations)
    ),
    AchievementDefinition(
        "first_report", "On Paper", "Submit your first report", lambda s: bool(s.reports)
    ),
    AchievementDefinition(
        "prolific", "Prolific", "Submit ten reports", lambda s: len(s.reports) >= 10
    ),
    AchievementDefinition(
        "table_pounder",
        "Table Pounder",
        "Submit a report at maximum conviction",
        lambda s: any(r.conviction == "table_pound" for r in s.reports),
    ),
    AchievementDefinition(
        "called_it",
        "Called It",
        "Have a report proved right",
        lambda s: any(o.proven_right for o in s.report_outcomes),
    ),
    AchievementDefinition(
        "placement",
        "Deal Maker",
        "Earn a placement fee",
        lambda s: any(t.category == "placement_fee" for t in s.finances.ledger),
    ),
    AchievementDefinition("debt_free", "Debt Free", "Pay off a loan", _repaid_a_loan),
    AchievementDefinition(
        "phoenix", "Phoenix", "Recover to healthy after bankruptcy", _recovered_from_bankruptcy
    ),
    AchievementDefinition(
        "licensed", "Licensed", "Reach career tier 3", lambda s: s.scout.career_tier >= 3
    ),
    AchievementDefinition(
        "sharp_eye",
        "Sharp Eye",
        "Reach level 15 in any discipline",
        lambda s: any(level >= 15 for level in s.scout.skills.values()),
    ),
    AchievementDefinition(
        "saga",
        "Saga",
        "See an event chain through to the end",
        lambda s: any(c.resolved for c in s.event_chains),
    ),
    AchievementDefinition(
        "globetrotter",
        "Globetrotter",
        "Build familiarity in three countries",
        lambda s: sum(1 for v in s.scout.country_familiarity.values() if v > 0) >= 3,
    ),
]


def evaluate_achievements(state: GameState) -> set[str]:
    """Every achievement id the state currently satisfies."""
    return {a.id for a in ACHIEVEMENTS if a.check(state)}


class AchievementPersistence(Protocol):
    """Where unlocked achievement ids are kept between sessions."""

    def load(self) -> set[str]: ...

    def save(self, unlocked: set[str]) -> None: ...


class InMemoryAchievementPersistence:
    """Persistence adapter that keeps unlocks in process memory."""

    def __init__(self, initial: set[str] | None = None) -> None:
        self._unlocked: set[str] = set(initial or ())
        self.save_count = 0

    def load(self) -> set[str]:
        return set(self._unlocked)

    def save(self, unlocked: set[str]) -> None:
        self._unlocked = set(unlocked)
        self.save_count += 1


class AchievementStore:
    """Tracks unlocked achievements and decides when to persist."""

    def __init__(self, persistence: AchievementPersistence | None = None) -> None:
        self._persistence = persistence or InMemoryAchievementPersistence()
        self._unlocked = self._persistence.load()

    @property
    def unlocked(self) -> frozenset[str]:
        return frozenset(self._unlocked)

    def sync(self, satisfied: set[str]) -> list[str]:
        """Unlock newly satisfied ids. Unlocks are permanent; persists only on change."""
        new = sorted(satisfied - self._unlocked)
        if new:
            self._unlocked.update(new)
            self._persistence.save(set(self._unlocked))
            logger.info("achievements_unlocked ids=%s", ",".join(new))
        return new


def achievement_name(achievement_id: str) -> str:
    return next((a.name for a in ACHIEVEMENTS if a.id == achievement_id), achievement_id)
