"""Tests for the financial distress ladder."""

from talentscout.core.distress import equipment_value, evaluate_distress, target_level
from talentscout.models.constants import DISTRESS_ORDER
from talentscout.models.finance import Finances, Loan, RetainerContract
from talentscout.models.schedule import WeekSimulation
from talentscout.models.scout import Assistant, Scout
from talentscout.models.state import GameState


def _make_state(balance: int, weeks_negative: int = 0, level: str = "healthy") -> GameState:
    return GameState(
        seed=1,
        scout=Scout(name="Test Scout", reputation=40.0, career_tier=3, equipment_level=3),
        finances=Finances(balance=balance, weeks_negative=weeks_negative, distress_level=level),
        week_simulation=WeekSimulation(season=1, week=1),
    )


class TestTargetLevel:
    def test_positive_balance_is_healthy(self) -> None:
        assert target_level(500, 10) == "healthy"

    def test_thresholds(self) -> None:
        assert target_level(-50, 1) == "healthy"
        assert target_level(-50, 2) == "warning"
        assert target_level(-50, 4) == "distressed"
        assert target_level(-50, 20) == "distressed"
        assert target_level(-2500, 8) == "critical"
        assert target_level(-6000, 12) == "bankruptcy"


class TestLadder:
    def test_single_negative_week_reaches_warning(self) -> None:
        state = _make_state(-50, weeks_negative=1)
        transition = evaluate_distress(state)
        assert transition is not None
        assert (transition.from_level, transition.to_level) == ("healthy", "warning")
        assert state.finances.weeks_negative == 2
        assert any(m.category == "finance" for m in state.inbox)

    def test_warning_then_distressed(self) -> None:
        state = _make_state(-50, weeks_negative=1)
        levels = []
        for _ in range(4):
            evaluate_distress(state)
            levels.append(state.finances.distress_level)
        assert levels == ["warning", "warning", "distressed", "distressed"]
        assert state.finances.subscriptions_cancelled
        assert state.finances.travel_reduced

    def test_never_skips_a_rung(self) -> None:
        state = _make_state(-20000, weeks_negative=30)
        seen = [state.finances.distress_level]
        for _ in range(6):
            evaluate_distress(state)
            seen.append(state.finances.distress_level)
        for before, after in zip(seen, seen[1:]):
            assert abs(DISTRESS_ORDER.index(after) - DISTRESS_ORDER.index(before)) <= 1
        assert "bankruptcy" in seen

    def test_descends_one_rung_with_positive_balance(self) -> None:
        state = _make_state(100, weeks_negative=4, level="distressed")
        transition = evaluate_distress(state)
        assert transition is not None
        assert not transition.escalated
        assert state.finances.distress_level == "warning"

    def test_no_descent_without_positive_balance(self) -> None:
        state = _make_state(0, weeks_negative=5, level="distressed")
        assert evaluate_distress(state) is None
        assert state.finances.distress_level == "distressed"

    def test_recovery_to_healthy_lifts_cutbacks(self) -> None:
        state = _make_state(300, weeks_negative=0, level="warning")
        state.finances.subscriptions_cancelled = True
        state.finances.travel_reduced = True
        evaluate_distress(state)
        assert state.finances.distress_level == "healthy"
        assert not state.finances.subscriptions_cancelled
        assert not state.finances.travel_reduced

    def test_critical_loses_assistants_and_a_retainer(self) -> None:
        state = _make_state(-2500, weeks_negative=8, level="distressed")
        state.scout.assistants = [Assistant(id="a1", name="Sam", skill=8, weekly_salary=150)]
        state.finances.retainers = [
            RetainerContract(
                id="r1", club_name="Harbour City", tier=2, monthly_fee=1000,
                reports_per_month=2, status="active",
            )
        ]  # fmt: skip
        evaluate_distress(state)
        assert state.finances.distress_level == "critical"
        assert state.scout.assistants == []
        assert state.finances.retainers[0].status == "cancelled"


class TestBankruptcy:
    def _bankrupt(self) -> GameState:
        state = _make_state(-6000, weeks_negative=11, level="critical")
        state.finances.loan = Loan(
            id="l1", loan_type="business", principal=5000, monthly_rate=0.05,
            term_months=12, monthly_payment=600, remaining=4000.0,
        )  # fmt: skip
        evaluate_distress(state)
        return state

    def test_bankruptcy_consequences(self) -> None:
        state = self._bankrupt()
        fin = state.finances
        assert fin.distress_level == "bankruptcy"
        assert fin.balance == -6000 + round(equipment_value(3) * 0.4)
        assert fin.loan is None
        assert state.scout.equipment_level == 1
        assert state.scout.career_tier == 1
        assert state.scout.reputation == 20.0
        assert state.scout.forced_rest
        assert fin.bankruptcy_cooldown == 10

    def test_cooldown_suspends_evaluation(self) -> None:
        state = self._bankrupt()
        state.finances.balance = 5000
        assert evaluate_distress(state) is None
        assert state.finances.distress_level == "bankruptcy"
        assert state.finances.bankruptcy_cooldown == 9

    def test_walks_down_after_cooldown(self) -> None:
        state = self._bankrupt()
        state.finances.bankruptcy_cooldown = 0
        state.finances.balance = 5000
        evaluate_distress(state)
        assert state.finances.distress_level == "critical"
