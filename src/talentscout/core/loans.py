"""Loans — eligibility, amortized payments, early repayment, and default.

Payments fall due every fourth week. A missed payment costs credit, nudges
the distress ladder via ``weeks_negative``, and after enough misses the loan
defaults and is written off.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Literal

from talentscout.core.inbox import post_message
from talentscout.core.ledger import adjust_credit, record
from talentscout.models.commands import CommandResult
from talentscout.models.constants import DISTRESS_ORDER
from talentscout.models.finance import Loan, LoanType
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)

PaymentOutcome = Literal["paid", "closed", "missed", "defaulted"]


@dataclass(frozen=True)
class LoanTerms:
    """Static terms for a loan product."""

    loan_type: LoanType
    max_amount: int
    term_months: int
    fixed_rate: float | None = None  # None: priced from credit score


LOAN_TERMS: dict[str, LoanTerms] = {
    "business": LoanTerms("business", max_amount=20000, term_months=12),
    "equipment": LoanTerms("equipment", max_amount=10000, term_months=6),
    "emergency": LoanTerms("emergency", max_amount=2000, term_months=4, fixed_rate=0.08),
}

EMERGENCY_BALANCE_CEILING = 500


def monthly_rate(credit_score: int, terms: LoanTerms, tuning: Tuning = DEFAULT_TUNING) -> float:
    """Better credit buys a cheaper rate."""
    if terms.fixed_rate is not None:
        return terms.fixed_rate
    return round(tuning.loan_base_rate - credit_score / 100 * tuning.loan_credit_discount, 4)


def amortized_payment(principal: int, rate: float, term_months: int) -> int:
    """Fixed monthly payment that clears ``principal`` over ``term_months``."""
    if rate <= 0:
        return math.ceil(principal / term_months)
    return math.ceil(principal * rate / (1 - (1 + rate) ** -term_months))


def check_eligibility(
    state: GameState, loan_type: str, amount: int, tuning: Tuning = DEFAULT_TUNING
) -> CommandResult | None:
    """Return a rejection if the loan cannot be taken, else None."""
    fin = state.finances
    terms = LOAN_TERMS.get(loan_type)
    if terms is None:
        return CommandResult.rejected("not_found", f"unknown loan type {loan_type}")
    if fin.loan is not None:
        return CommandResult.rejected("active_loan", "repay the current loan first")
    if amount <= 0:
        return CommandResult.rejected("invalid_amount", "loan amount must be positive")
    if amount > terms.max_amount:
        return CommandResult.rejected(
            "amount_exceeds_max", f"{loan_type} loans are capped at {terms.max_amount}"
        )
    if fin.distress_level == "bankruptcy":
        return CommandResult.rejected("not_eligible", "no lender will deal with a bankrupt scout")
    minimum = tuning.credit_tier_minimum.get(state.scout.career_tier, 50)
    if fin.credit_score < minimum:
        return CommandResult.rejected(
            "not_eligible", f"credit score {fin.credit_score} below minimum {minimum}"
        )
    if loan_type == "business" and (
        fin.balance < 0 or DISTRESS_ORDER.index(fin.distress_level) > 1
    ):
        return CommandResult.rejected(
            "not_eligible", "business loans need a non-negative balance and stable finances"
        )
    if loan_type == "emergency" and fin.balance >= EMERGENCY_BALANCE_CEILING:
        return CommandResult.rejected(
            "not_eligible", f"emergency loans need a balance below {EMERGENCY_BALANCE_CEILING}"
        )
    return None


def take_loan(
    state: GameState, loan_type: str, amount: int, tuning: Tuning = DEFAULT_TUNING
) -> CommandResult:
    """Take out a loan, crediting the principal immediately."""
    rejection = check_eligibility(state, loan_type, amount, tuning)
    if rejection is not None:
        return rejection

    terms = LOAN_TERMS[loan_type]
    rate = monthly_rate(state.finances.credit_score, terms, tuning)
    loan = Loan(
        id=state.next_id("loan"),
        loan_type=terms.loan_type,
        principal=amount,
        monthly_rate=rate,
        term_months=terms.term_months,
        monthly_payment=amortized_payment(amount, rate, terms.term_months),
        remaining=float(amount),
        taken_week=state.absolute_week,
    )
    state.finances.loan = loan
    record(state, amount, "loan", f"{loan_type} loan")
    logger.info(
        "loan_taken type=%s amount=%d rate=%.4f payment=%d",
        loan_type,
        amount,
        rate,
        loan.monthly_payment,
    )
    return CommandResult.success(loan_id=loan.id, monthly_payment=loan.monthly_payment)


def repay_loan(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> CommandResult:
    """Repay the outstanding principal in full. Partial early repayment is not offered."""
    fin = state.finances
    if fin.loan is None:
        return CommandResult.rejected("not_found", "no active loan")
    owed = math.ceil(fin.loan.remaining)
    if fin.balance < owed:
        return CommandResult.rejected(
            "insufficient_funds", f"need {owed} to clear the loan, have {fin.balance}"
        )
    record(state, -owed, "loan_repayment", "early repayment")
    adjust_credit(fin, tuning.credit_on_time_payment)
    logger.info("loan_repaid id=%s amount=%d", fin.loan.id, owed)
    fin.loan = None
    return CommandResult.success(amount=owed)


def process_loan_payment(
    state: GameState, tuning: Tuning = DEFAULT_TUNING
) -> PaymentOutcome | None:
    """Collect the scheduled monthly payment, if a loan is active."""
    fin = state.finances
    loan = fin.loan
    if loan is None:
        return None

    interest = loan.remaining * loan.monthly_rate
    if fin.balance >= loan.monthly_payment:
        payment = min(loan.monthly_payment, math.ceil(loan.remaining + interest))
        record(state, -payment, "loan_repayment", f"{loan.loan_type} loan payment")
        loan.remaining = max(0.0, loan.remaining + interest - payment)
        loan.payments_made += 1
        adjust_credit(fin, tuning.credit_on_time_payment)
        if loan.remaining < 1.0:
            fin.loan = None
            post_message(state, "finance", "Loan cleared", "Your loan has been paid off.")
            logger.info("loan_closed id=%s", loan.id)
            return "closed"
        return "paid"

    loan.remaining += interest
    loan.missed_payments += 1
    fin.weeks_negative += 1
    adjust_credit(fin, tuning.credit_missed_payment)
    logger.info("loan_payment_missed id=%s missed=%d", loan.id, loan.missed_payments)
    if loan.missed_payments >= tuning.loan_default_after_misses:
        adjust_credit(fin, tuning.credit_loan_default)
        fin.loan = None
        post_message(
            state,
            "finance",
            "Loan defaulted",
            "The lender has written off your loan. Your credit has taken a heavy hit.",
        )
        logger.warning("loan_defaulted id=%s", loan.id)
        return "defaulted"
    post_message(
        state,
        "finance",
        "Loan payment missed",
        f"You could not cover the {loan.monthly_payment} payment.",
    )
    return "missed"
