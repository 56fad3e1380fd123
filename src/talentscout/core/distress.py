"""Financial distress ladder.

healthy -> warning -> distressed -> critical -> bankruptcy, and back down.
Each weekly evaluation moves at most one rung in either direction, so a
single catastrophic week cannot skip straight to bankruptcy. Descending
requires a positive balance. After bankruptcy a cooldown suspends
evaluation; once it expires the ladder walks back down one rung per
positive week.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from talentscout.core.inbox import post_message, push_toast
from talentscout.core.ledger import adjust_credit, record
from talentscout.models.constants import DISTRESS_ORDER
from talentscout.models.finance import DistressLevel
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistressTransition:
    """A single-rung move on the ladder."""

    from_level: DistressLevel
    to_level: DistressLevel

    @property
    def escalated(self) -> bool:
        return DISTRESS_ORDER.index(self.to_level) > DISTRESS_ORDER.index(self.from_level)


def target_level(balance: int, weeks_negative: int, tuning: Tuning = DEFAULT_TUNING) -> str:
    """The rung the current numbers point at, ignoring the one-step rule."""
    rungs = [
        ("bankruptcy", tuning.bankruptcy_balance, tuning.bankruptcy_weeks),
        ("critical", tuning.critical_balance, tuning.critical_weeks),
        ("distressed", tuning.distressed_balance, tuning.distressed_weeks),
        ("warning", tuning.warning_balance, tuning.warning_weeks),
    ]
    for level, max_balance, min_weeks in rungs:
        if balance <= max_balance and weeks_negative >= min_weeks:
            return level
    return "healthy"


def equipment_value(level: int, tuning: Tuning = DEFAULT_TUNING) -> int:
    """What was spent getting equipment to ``level``."""
    return sum(cost for lvl, cost in tuning.equipment_upgrade_costs.items() if lvl <= level)


def update_weeks_negative(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> int:
    fin = state.finances
    if fin.balance < 0:
        fin.weeks_negative += 1
    else:
        fin.weeks_negative = max(0, fin.weeks_negative - tuning.weeks_negative_recovery)
    return fin.weeks_negative


def evaluate_distress(
    state: GameState, tuning: Tuning = DEFAULT_TUNING
) -> DistressTransition | None:
    """Run one weekly evaluation of the ladder.

    Returns the transition taken, or None if the level held.
    """
    fin = state.finances
    if fin.bankruptcy_cooldown > 0:
        fin.bankruptcy_cooldown -= 1
        logger.debug("distress_cooldown remaining=%d", fin.bankruptcy_cooldown)
        return None

    update_weeks_negative(state, tuning)
    current = DISTRESS_ORDER.index(fin.distress_level)
    target = DISTRESS_ORDER.index(target_level(fin.balance, fin.weeks_negative, tuning))

    if target > current:
        new = current + 1
    elif target < current and fin.balance > 0:
        new = current - 1
    else:
        new = current

    transition = None
    if new != current:
        transition = DistressTransition(
            from_level=fin.distress_level,
            to_level=DISTRESS_ORDER[new],  # type: ignore[arg-type]
        )
        fin.distress_level = transition.to_level
        _apply_transition(state, transition, tuning)
        logger.info(
            "distress_transition from=%s to=%s balance=%d weeks_negative=%d",
            transition.from_level,
            transition.to_level,
            fin.balance,
            fin.weeks_negative,
        )

    _apply_ongoing(state, tuning)
    return transition


def _apply_transition(
    state: GameState, transition: DistressTransition, tuning: Tuning
) -> None:
    fin = state.finances
    scout = state.scout
    level = transition.to_level

    if not transition.escalated:
        if level == "healthy":
            fin.subscriptions_cancelled = False
            fin.travel_reduced = False
            post_message(state, "finance", "Back on your feet", "Your finances have recovered.")
            push_toast(state, "Finances recovered", "success")
        else:
            post_message(
                state, "finance", "Finances improving", f"Your situation eased to {level}."
            )
        return

    if level == "warning":
        post_message(
            state,
            "finance",
            "Money is getting tight",
            "Your balance has been negative for several weeks.",
        )
        push_toast(state, "Financial warning", "warning")
    elif level == "distressed":
        fin.subscriptions_cancelled = True
        fin.travel_reduced = True
        post_message(
            state,
            "finance",
            "Cutbacks",
            "Subscriptions cancelled and travel reduced to stem the losses.",
        )
        push_toast(state, "Financial distress: cutbacks applied", "warning")
    elif level == "critical":
        quit_count = len(scout.assistants)
        scout.assistants = []
        lost = next((r for r in fin.retainers if r.status == "active"), None)
        if lost is not None:
            lost.status = "cancelled"
        post_message(
            state,
            "finance",
            "Critical finances",
            f"{quit_count} assistant(s) quit"
            + (f" and {lost.club_name} ended their retainer." if lost else "."),
        )
        push_toast(state, "Critical finances", "danger")
    elif level == "bankruptcy":
        _declare_bankruptcy(state, tuning)


def _declare_bankruptcy(state: GameState, tuning: Tuning) -> None:
    fin = state.finances
    scout = state.scout

    value = equipment_value(scout.equipment_level, tuning)
    proceeds = round(value * tuning.equipment_liquidation_rate)
    if proceeds:
        record(state, proceeds, "liquidation", "equipment sold")
    scout.equipment_level = 1

    for retainer in fin.retainers:
        if retainer.status in ("pending", "active", "suspended"):
            retainer.status = "cancelled"
    for job in fin.consulting:
        if job.status in ("pending", "active"):
            job.status = "failed"
    if fin.loan is not None:
        adjust_credit(fin, tuning.credit_loan_default)
        fin.loan = None

    scout.assistants = []
    scout.reputation = round(scout.reputation / 2, 2)
    scout.career_tier = 1
    scout.forced_rest = True
    fin.bankruptcy_cooldown = tuning.bankruptcy_cooldown_weeks
    post_message(
        state,
        "finance",
        "Bankruptcy",
        f"Equipment liquidated for {proceeds}. All contracts terminated. "
        "Your reputation has been badly damaged.",
    )
    push_toast(state, "Bankrupt", "danger")
    logger.warning("bankruptcy proceeds=%d reputation=%.1f", proceeds, scout.reputation)


def _apply_ongoing(state: GameState, tuning: Tuning) -> None:
    fin = state.finances
    scout = state.scout
    match fin.distress_level:
        case "warning":
            adjust_credit(fin, -tuning.warning_credit_decay)
        case "distressed":
            scout.reputation = max(0.0, scout.reputation - tuning.distressed_reputation_decay)
        case "critical":
            scout.reputation = max(0.0, scout.reputation - tuning.critical_reputation_decay)
        case _:
            pass
