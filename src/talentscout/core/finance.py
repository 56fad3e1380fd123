"""Weekly financial engine — income, expenses, monthly cycles, and distress.

Runs once per week during finalization. Monthly obligations (retainer checks,
loan payments, the credit-score month review) fall on every fourth week.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from talentscout.core.contracts import (
    check_consulting_deadlines,
    generate_offers,
    process_monthly_retainers,
)
from talentscout.core.distress import DistressTransition, evaluate_distress
from talentscout.core.ledger import adjust_credit, record
from talentscout.core.loans import PaymentOutcome, process_loan_payment
from talentscout.core.reports import collect_report_income
from talentscout.models.commands import CommandResult
from talentscout.models.constants import WEEKS_PER_MONTH
from talentscout.models.finance import ConsultingContract, RetainerContract
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)


@dataclass
class FinanceWeek:
    """What the financial engine did this week."""

    income: int = 0
    expenses: int = 0
    expense_lines: dict[str, int] = field(default_factory=dict)
    month_end: bool = False
    transition: DistressTransition | None = None
    suspended_retainers: list[RetainerContract] = field(default_factory=list)
    failed_consulting: list[ConsultingContract] = field(default_factory=list)
    loan_outcome: PaymentOutcome | None = None
    new_offer_ids: list[str] = field(default_factory=list)


def weekly_expenses(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> dict[str, int]:
    """Recurring expense lines for the week, after any distress cutbacks."""
    scout = state.scout
    fin = state.finances
    travel = tuning.travel_for(scout.career_tier)
    if fin.travel_reduced:
        travel //= 2
    lines = {
        "rent": tuning.rent_for(scout.career_tier),
        "travel": travel,
        "subscriptions": (
            0 if fin.subscriptions_cancelled else tuning.subscription_for(scout.equipment_level)
        ),
        "other": tuning.other_expenses,
    }
    if scout.assistants:
        lines["assistants"] = sum(a.weekly_salary for a in scout.assistants)
    return lines


def is_month_end(state: GameState) -> bool:
    return state.absolute_week % WEEKS_PER_MONTH == 0


def run_weekly_finances(
    state: GameState, rng: random.Random, tuning: Tuning = DEFAULT_TUNING
) -> FinanceWeek:
    """Apply one week of income and expenses, then re-evaluate distress."""
    fin = state.finances
    week = FinanceWeek(month_end=is_month_end(state))
    balance_before = fin.balance

    salary = tuning.salary_for(state.scout.career_tier)
    record(state, salary, "salary", f"tier {state.scout.career_tier} salary")
    week.income += salary
    week.income += collect_report_income(state, tuning)

    week.expense_lines = weekly_expenses(state, tuning)
    for category, amount in week.expense_lines.items():
        if amount:
            record(state, -amount, category)
    week.expenses = sum(week.expense_lines.values())

    if week.month_end:
        before_retainers = fin.balance
        week.suspended_retainers = process_monthly_retainers(state, tuning)
        week.income += fin.balance - before_retainers
        before_loan = fin.balance
        week.loan_outcome = process_loan_payment(state, tuning)
        week.expenses += before_loan - fin.balance
        month_delta = (
            tuning.credit_positive_month if fin.balance >= 0 else tuning.credit_negative_month
        )
        adjust_credit(fin, month_delta)

    week.failed_consulting = check_consulting_deadlines(state)
    week.new_offer_ids = generate_offers(state, rng, tuning)
    week.transition = evaluate_distress(state, tuning)

    fin.last_week_income = week.income
    fin.last_week_expenses = week.expenses
    logger.info(
        "finances_week week=%d income=%d expenses=%d balance=%d->%d distress=%s credit=%d",
        state.absolute_week,
        week.income,
        week.expenses,
        balance_before,
        fin.balance,
        fin.distress_level,
        fin.credit_score,
    )
    return week


def upgrade_equipment(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> CommandResult:
    """Buy the next equipment level."""
    scout = state.scout
    next_level = scout.equipment_level + 1
    cost = tuning.equipment_upgrade_costs.get(next_level)
    if cost is None:
        return CommandResult.rejected("max_level", "equipment is already at the top level")
    if state.finances.balance < cost:
        return CommandResult.rejected(
            "insufficient_funds", f"upgrade costs {cost}, balance is {state.finances.balance}"
        )
    record(state, -cost, "equipment", f"upgrade to level {next_level}")
    scout.equipment_level = next_level
    logger.info("equipment_upgraded level=%d cost=%d", next_level, cost)
    return CommandResult.success(level=next_level, cost=cost)
