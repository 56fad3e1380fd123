"""Tests for the narrative event engine."""

import random

from talentscout.core.distress import DistressTransition
from talentscout.core.narrative import (
    WeekSignals,
    acknowledge,
    compute_escalation,
    refresh_escalation,
    resolve_choice,
    run_narrative,
    trigger_events,
    update_condition_streaks,
)
from talentscout.models.finance import Finances
from talentscout.models.narrative import BudgetShortfallEvent, NarrativeEvent
from talentscout.models.observation import Observation
from talentscout.models.player import Player
from talentscout.models.rivals import RivalScout
from talentscout.models.schedule import WeekSimulation
from talentscout.models.scout import Scout
from talentscout.models.state import GameState
from talentscout.models.tuning import Tuning

QUIET = Tuning(narrative_event_chance=0.0, chain_start_chance=0.0)


def _make_player(player_id: str) -> Player:
    return Player(
        id=player_id,
        name=f"Player {player_id}",
        age=18,
        position="LW",
        country="brazil",
        true_attributes={"dribbling": 14},
        potential=17,
    )


def _make_state(balance: int = 1000) -> GameState:
    rival = RivalScout(
        id="r1",
        name="Mara Lindqvist",
        club_name="Riverside Rovers",
        quality=3,
        personality="connected",
        current_target="p1",
        scouting_progress={"p1": 2},
    )
    return GameState(
        seed=1,
        scout=Scout(name="Test Scout", reputation=30.0),
        players={p.id: p for p in (_make_player("p1"), _make_player("p2"))},
        rivals=[rival],
        finances=Finances(balance=balance),
        week_simulation=WeekSimulation(season=1, week=1),
    )


def _trigger(state: GameState, signals: WeekSignals | None = None) -> list[NarrativeEvent]:
    return trigger_events(state, signals or WeekSignals(), random.Random(1), QUIET)


def _of_kind(state: GameState, kind: str) -> list[NarrativeEvent]:
    return [e for e in state.narrative_events if e.kind == kind]


class TestEscalation:
    def test_levels(self) -> None:
        assert [compute_escalation(w) for w in range(6)] == [0, 0, 1, 1, 2, 2]

    def test_persisting_condition_escalates_open_event(self) -> None:
        state = _make_state(balance=-100)
        update_condition_streaks(state, QUIET)
        _trigger(state)
        event = _of_kind(state, "budget_shortfall")[0]
        assert event.escalation_level == 0
        for _ in range(3):
            update_condition_streaks(state, QUIET)
            refresh_escalation(state, QUIET)
        assert state.condition_streaks["budget_shortfall"] == 4
        assert event.escalation_level == 2

    def test_lapsed_condition_resets_streak(self) -> None:
        state = _make_state(balance=-100)
        update_condition_streaks(state, QUIET)
        state.finances.balance = 50
        update_condition_streaks(state, QUIET)
        assert "budget_shortfall" not in state.condition_streaks


class TestTriggers:
    def test_budget_shortfall_triggers_once(self) -> None:
        state = _make_state(balance=-100)
        _trigger(state)
        _trigger(state)
        events = _of_kind(state, "budget_shortfall")
        assert len(events) == 1
        assert isinstance(events[0], BudgetShortfallEvent)
        assert events[0].awaiting_choice

    def test_distress_transition_triggers_event(self) -> None:
        state = _make_state()
        _trigger(state, WeekSignals(transition=DistressTransition("distressed", "critical")))
        event = _of_kind(state, "distress_change")[0]
        assert event.escalation_level == 2

    def test_rival_signing_only_for_tracked_players(self) -> None:
        state = _make_state()
        state.watchlist = ["p1"]
        _trigger(state, WeekSignals(signings=[("r1", "p1"), ("r1", "p2")]))
        events = _of_kind(state, "rival_signing")
        assert [e.player_id for e in events] == ["p1"]

    def test_shared_target_announced_once(self) -> None:
        state = _make_state()
        state.observations.append(
            Observation(id="o1", player_id="p1", season=1, week=1, day=1, activity="watch_video")
        )
        _trigger(state)
        _trigger(state)
        events = _of_kind(state, "shared_target")
        assert len(events) == 1
        assert events[0].rival_id == "r1"

    def test_contact_tip_adds_to_watchlist(self) -> None:
        state = _make_state()
        tuning = Tuning(narrative_event_chance=1.0, chain_start_chance=0.0)
        trigger_events(state, WeekSignals(), random.Random(1), tuning)
        tips = _of_kind(state, "contact_tip")
        assert len(tips) == 1
        assert tips[0].player_id in state.watchlist

    def test_burnout(self) -> None:
        state = _make_state()
        state.scout.fatigue = 85
        _trigger(state)
        assert len(_of_kind(state, "burnout")) == 1


class TestResolution:
    def test_choice_applies_effects_once(self) -> None:
        state = _make_state(balance=-100)
        _trigger(state)
        event = _of_kind(state, "budget_shortfall")[0]
        result = resolve_choice(state, event.id, 1)
        assert result.ok
        assert state.finances.balance == 200
        assert state.scout.reputation == 29.0

        again = resolve_choice(state, event.id, 0)
        assert again.reason == "already_resolved"
        assert state.finances.balance == 200

    def test_invalid_choice_index(self) -> None:
        state = _make_state(balance=-100)
        _trigger(state)
        event = _of_kind(state, "budget_shortfall")[0]
        assert resolve_choice(state, event.id, 2).reason == "invalid_choice"
        assert resolve_choice(state, event.id, -1).reason == "invalid_choice"
        assert not event.resolved

    def test_acknowledge_requires_no_pending_choice(self) -> None:
        state = _make_state(balance=-100)
        _trigger(state)
        event = _of_kind(state, "budget_shortfall")[0]
        assert acknowledge(state, event.id).reason == "choice_required"

    def test_acknowledge_informational_event(self) -> None:
        state = _make_state()
        _trigger(state, WeekSignals(transition=DistressTransition("healthy", "warning")))
        event = _of_kind(state, "distress_change")[0]
        assert resolve_choice(state, event.id, 0).reason == "invalid_choice"
        assert acknowledge(state, event.id).ok
        assert acknowledge(state, event.id).reason == "already_resolved"

    def test_unknown_event(self) -> None:
        state = _make_state()
        assert acknowledge(state, "evt-x").reason == "not_found"
        assert resolve_choice(state, "evt-x", 0).reason == "not_found"

    def test_shared_target_choice_raises_rival_aggression(self) -> None:
        state = _make_state()
        state.watchlist = ["p1"]
        _trigger(state)
        event = _of_kind(state, "shared_target")[0]
        before = state.rivals[0].aggression
        resolve_choice(state, event.id, 0)
        assert state.rivals[0].aggression > before


class TestRunNarrative:
    def test_deterministic(self) -> None:
        a, b = _make_state(balance=-50), _make_state(balance=-50)
        a.watchlist = ["p1"]
        b.watchlist = ["p1"]
        tuning = Tuning(narrative_event_chance=0.5, chain_start_chance=0.5)
        for week in range(1, 6):
            a.week = b.week = week
            run_narrative(a, WeekSignals(), tuning)
            run_narrative(b, WeekSignals(), tuning)
        assert a.model_dump() == b.model_dump()
