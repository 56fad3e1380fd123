"""Tests for rival scout competition."""

import random

from talentscout.core.rivals import (
    RivalWeek,
    advance_rival,
    run_rivals,
    select_target,
    shared_targets,
    threat_level,
)
from talentscout.core.scheduler import plan_week
from talentscout.models.finance import Finances
from talentscout.models.player import Player
from talentscout.models.rivals import RivalScout
from talentscout.models.schedule import Activity, WeekSimulation
from talentscout.models.scout import Scout
from talentscout.models.state import GameState


def _make_player(player_id: str, market_value: int = 500_000, **kwargs) -> Player:
    return Player(
        id=player_id,
        name=f"Player {player_id}",
        age=19,
        position="ST",
        country="england",
        true_attributes={"finishing": 12},
        potential=14,
        market_value=market_value,
        **kwargs,
    )


def _make_rival(**kwargs) -> RivalScout:
    fields = {
        "id": "r1",
        "name": "Victor Crane",
        "club_name": "Northgate Athletic",
        "quality": 3,
        "personality": "methodical",
        "aggression": 0.3,
        "budget_tier": 2,
    }
    fields.update(kwargs)
    return RivalScout(**fields)


def _make_state(players: list[Player], rivals: list[RivalScout]) -> GameState:
    return GameState(
        seed=1,
        scout=Scout(name="Test Scout"),
        players={p.id: p for p in players},
        rivals=rivals,
        finances=Finances(balance=1000),
        week_simulation=WeekSimulation(season=1, week=1),
    )


class TestAdvanceRival:
    def test_signs_at_threshold(self) -> None:
        rival = _make_rival(current_target="p1", scouting_progress={"p1": 4})
        state = _make_state([_make_player("p1")], [rival])
        week = RivalWeek()
        advance_rival(state, rival, random.Random(1), week)

        player = state.players["p1"]
        assert player.status == "signed"
        assert player.signed_by == "r1"
        assert week.signings == [("r1", "p1")]
        assert rival.current_target is None
        kinds = [a.activity_type for a in rival.activity_log]
        assert kinds[-2:] == ["report_submitted", "player_signed"]

    def test_signed_player_cannot_be_planned(self) -> None:
        rival = _make_rival(current_target="p1", scouting_progress={"p1": 4})
        state = _make_state([_make_player("p1")], [rival])
        advance_rival(state, rival, random.Random(1), RivalWeek())
        result = plan_week(state, [Activity(type="attend_match", target_player_ids=["p1"])])
        assert not result.ok
        assert result.reason == "player_unavailable"

    def test_progress_below_threshold_does_not_sign(self) -> None:
        rival = _make_rival(current_target="p1", scouting_progress={"p1": 2})
        state = _make_state([_make_player("p1")], [rival])
        advance_rival(state, rival, random.Random(1), RivalWeek())
        assert rival.scouting_progress["p1"] == 3
        assert state.players["p1"].is_available

    def test_high_quality_rival_moves_faster(self) -> None:
        rival = _make_rival(quality=5, current_target="p1", scouting_progress={"p1": 0})
        state = _make_state([_make_player("p1")], [rival])
        advance_rival(state, rival, random.Random(1), RivalWeek())
        assert rival.scouting_progress["p1"] == 2

    def test_no_intent_switches_without_signing(self) -> None:
        rival = _make_rival(budget_tier=1, current_target="p1", scouting_progress={"p1": 4})
        state = _make_state([_make_player("p1", market_value=5_000_000)], [rival])
        advance_rival(state, rival, random.Random(1), RivalWeek())
        assert state.players["p1"].is_available
        assert rival.current_target is None
        assert rival.scouting_progress["p1"] == 5

    def test_abandoned_progress_is_frozen(self) -> None:
        rival = _make_rival(current_target="p1", scouting_progress={"p1": 2})
        state = _make_state(
            [_make_player("p1", status="signed"), _make_player("p2")], [rival]
        )
        advance_rival(state, rival, random.Random(1), RivalWeek())
        assert rival.current_target == "p2"
        assert rival.scouting_progress == {"p1": 2, "p2": 0}
        assert rival.activity_log[-1].activity_type == "target_acquired"


class TestSelectTarget:
    def test_skips_unaffordable_players(self) -> None:
        rival = _make_rival(budget_tier=1)
        state = _make_state(
            [_make_player("p1", market_value=9_000_000), _make_player("p2")], [rival]
        )
        assert select_target(rival, state, random.Random(1)) == "p2"

    def test_none_when_nobody_available(self) -> None:
        rival = _make_rival()
        state = _make_state([_make_player("p1", status="signed")], [rival])
        assert select_target(rival, state, random.Random(1)) is None

    def test_methodical_prefers_prior_work(self) -> None:
        rival = _make_rival(scouting_progress={"p2": 3})
        state = _make_state([_make_player("p1"), _make_player("p2")], [rival])
        assert select_target(rival, state, random.Random(1)) == "p2"


class TestSharedTargets:
    def test_shared_target_detected(self) -> None:
        rival = _make_rival(current_target="p1", scouting_progress={"p1": 1})
        state = _make_state([_make_player("p1"), _make_player("p2")], [rival])
        state.watchlist = ["p1", "p2"]
        shared = shared_targets(state)
        assert [(s.player_id, s.rival_ids) for s in shared] == [("p1", ("r1",))]

    def test_shared_targets_is_pure(self) -> None:
        rival = _make_rival(current_target="p1", scouting_progress={"p1": 1})
        state = _make_state([_make_player("p1")], [rival])
        state.watchlist = ["p1"]
        before = state.model_dump()
        shared_targets(state)
        assert state.model_dump() == before

    def test_signed_players_not_shared(self) -> None:
        rival = _make_rival(scouting_progress={"p1": 5}, signed_targets=["p1"])
        state = _make_state([_make_player("p1", status="signed")], [rival])
        state.watchlist = ["p1"]
        assert shared_targets(state) == []


class TestRunRivals:
    def test_deterministic(self) -> None:
        def build() -> GameState:
            players = [_make_player(f"p{i}", buzz=i * 10) for i in range(5)]
            rivals = [
                _make_rival(id="r1", personality="aggressive"),
                _make_rival(id="r2", personality="lucky"),
            ]
            return _make_state(players, rivals)

        a, b = build(), build()
        for _ in range(8):
            run_rivals(a)
            run_rivals(b)
            a.week += 1
            b.week += 1
        assert a.model_dump() == b.model_dump()

    def test_threat_level(self) -> None:
        assert threat_level(_make_rival(quality=5, reputation=60)) == "high"
        assert threat_level(_make_rival(quality=1, reputation=10)) == "low"
