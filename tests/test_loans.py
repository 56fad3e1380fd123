"""Tests for loans."""

from talentscout.core.loans import (
    LOAN_TERMS,
    amortized_payment,
    monthly_rate,
    process_loan_payment,
    repay_loan,
    take_loan,
)
from talentscout.models.finance import Finances
from talentscout.models.schedule import WeekSimulation
from talentscout.models.scout import Scout
from talentscout.models.state import GameState


def _make_state(balance: int = 2000, credit: int = 50) -> GameState:
    return GameState(
        seed=1,
        scout=Scout(name="Test Scout"),
        finances=Finances(balance=balance, credit_score=credit),
        week_simulation=WeekSimulation(season=1, week=1),
    )


class TestPricing:
    def test_better_credit_cheaper_rate(self) -> None:
        terms = LOAN_TERMS["business"]
        assert monthly_rate(90, terms) < monthly_rate(40, terms)

    def test_emergency_rate_fixed(self) -> None:
        assert monthly_rate(10, LOAN_TERMS["emergency"]) == 0.08
        assert monthly_rate(95, LOAN_TERMS["emergency"]) == 0.08

    def test_payment_clears_principal(self) -> None:
        payment = amortized_payment(1200, 0.0, 12)
        assert payment == 100
        assert amortized_payment(1200, 0.05, 12) > payment


class TestTakeLoan:
    def test_business_loan_credits_balance(self) -> None:
        state = _make_state()
        result = take_loan(state, "business", 5000)
        assert result.ok
        assert state.finances.balance == 7000
        assert state.finances.loan is not None
        assert state.finances.loan.remaining == 5000.0

    def test_one_loan_at_a_time(self) -> None:
        state = _make_state()
        take_loan(state, "equipment", 1000)
        assert take_loan(state, "business", 1000).reason == "active_loan"

    def test_rejections(self) -> None:
        state = _make_state()
        assert take_loan(state, "payday", 100).reason == "not_found"
        assert take_loan(state, "business", 0).reason == "invalid_amount"
        assert take_loan(state, "business", 20001).reason == "amount_exceeds_max"
        assert take_loan(state, "emergency", 500).reason == "not_eligible"
        assert state.finances.loan is None
        assert state.finances.balance == 2000

    def test_low_credit_not_eligible(self) -> None:
        state = _make_state(credit=20)
        assert take_loan(state, "business", 1000).reason == "not_eligible"

    def test_business_loan_needs_stable_finances(self) -> None:
        state = _make_state(balance=-100)
        assert take_loan(state, "business", 1000).reason == "not_eligible"
        assert take_loan(state, "emergency", 1000).ok


class TestRepayment:
    def test_early_repayment(self) -> None:
        state = _make_state()
        take_loan(state, "business", 1000)
        result = repay_loan(state)
        assert result.ok
        assert state.finances.loan is None
        assert state.finances.balance == 2000
        assert state.finances.credit_score == 53

    def test_repay_without_funds(self) -> None:
        state = _make_state(balance=0)
        take_loan(state, "emergency", 1000)
        state.finances.balance = 10
        assert repay_loan(state).reason == "insufficient_funds"
        assert repay_loan(_make_state()).reason == "not_found"

    def test_scheduled_payment_reduces_remaining(self) -> None:
        state = _make_state()
        take_loan(state, "business", 5000)
        assert process_loan_payment(state) == "paid"
        assert state.finances.loan.remaining < 5000
        assert state.finances.loan.payments_made == 1

    def test_loan_closes_after_term(self) -> None:
        state = _make_state(balance=20000)
        take_loan(state, "equipment", 3000)
        outcomes = [process_loan_payment(state) for _ in range(6)]
        assert outcomes[-1] == "closed"
        assert state.finances.loan is None

    def test_missed_payments_default(self) -> None:
        state = _make_state(balance=0)
        take_loan(state, "emergency", 1000)
        state.finances.balance = 0
        outcomes = [process_loan_payment(state) for _ in range(3)]
        assert outcomes == ["missed", "missed", "defaulted"]
        assert state.finances.loan is None
        assert state.finances.credit_score == 50 - 5 * 3 - 10
        assert state.finances.weeks_negative == 3
