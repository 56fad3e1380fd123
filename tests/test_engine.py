"""Tests for the CareerEngine command boundary."""

from talentscout.config import Settings
from talentscout.core.achievements import AchievementStore, InMemoryAchievementPersistence
from talentscout.core.engine import CareerEngine
from talentscout.core.seeding import generate_career
from talentscout.models.schedule import Activity
from talentscout.models.tuning import Tuning


def _make_engine(seed: int = 7) -> CareerEngine:
    return CareerEngine(generate_career(seed=seed))


def _first_player(engine: CareerEngine) -> str:
    return sorted(engine.snapshot().players)[0]


class TestCommandBoundary:
    def test_rejection_leaves_state_untouched(self) -> None:
        engine = _make_engine()
        before = engine.snapshot().model_dump()
        result = engine.take_loan("business", 999_999)
        assert not result.ok
        assert result.reason == "amount_exceeds_max"
        assert engine.version == 0
        assert engine.snapshot().model_dump() == before

    def test_success_bumps_version(self) -> None:
        engine = _make_engine()
        assert engine.add_to_watchlist(_first_player(engine)).ok
        assert engine.version == 1
        assert engine.plan_week([Activity(type="rest")]).ok
        assert engine.version == 2

    def test_snapshot_is_a_copy(self) -> None:
        engine = _make_engine()
        snapshot = engine.snapshot()
        snapshot.finances.balance = -99_999
        snapshot.scout.name = "Mallory"
        assert engine.snapshot().finances.balance == 2000
        assert engine.snapshot().scout.name == "Alex Morgan"

    def test_from_settings(self, settings: Settings) -> None:
        engine = CareerEngine.from_settings(settings)
        state = engine.snapshot()
        assert state.seed == 7
        assert state.finances.balance == settings.talentscout_starting_balance


class TestCommands:
    def test_observe_then_report(self) -> None:
        engine = _make_engine()
        player_id = _first_player(engine)
        assert engine.submit_report(player_id, "note").reason == "missing_observations"

        engine.plan_week([Activity(type="attend_match", target_player_ids=[player_id])])
        day = engine.advance_day()
        assert day.ok
        assert day.data["day_result"]["day"] == 1
        assert engine.readings_for(player_id)

        result = engine.submit_report(player_id, "recommend", summary="One to watch")
        assert result.ok
        assert engine.snapshot().reports[0].player_id == player_id

    def test_fast_forward_returns_remaining_days(self) -> None:
        engine = _make_engine()
        engine.plan_week([Activity(type="rest")] * 2)
        engine.advance_day()
        result = engine.fast_forward_week()
        assert len(result.data["day_results"]) == 6
        assert engine.snapshot().week == 2

    def test_watchlist_rejects_unknown_player(self) -> None:
        engine = _make_engine()
        assert engine.add_to_watchlist("nobody").reason == "not_found"

    def test_unknown_event_and_toast(self) -> None:
        engine = _make_engine()
        assert engine.acknowledge_narrative_event("evt-1").reason == "not_found"
        assert engine.resolve_narrative_event_choice("evt-1", 0).reason == "not_found"
        assert engine.dismiss_toast("toast-1").reason == "not_found"
        assert engine.version == 0

    def test_week_on_scale_below_zero(self) -> None:
        tuning = Tuning(attribute_min=-10, attribute_max=10)
        engine = CareerEngine(generate_career(seed=7, tuning=tuning), tuning)
        player_id = _first_player(engine)
        engine.plan_week([Activity(type="attend_match", target_player_ids=[player_id])])
        assert engine.fast_forward_week().ok
        readings = engine.readings_for(player_id)
        assert readings
        assert all(-10 <= r.perceived_value <= 10 for r in readings.values())


class TestWeekEquivalence:
    def test_fast_forward_matches_daily_advances(self) -> None:
        daily, forwarded = _make_engine(), _make_engine()
        player_id = _first_player(daily)
        plan = [
            Activity(type="attend_match", target_player_ids=[player_id]),
            Activity(type="watch_video", target_player_ids=[player_id]),
            Activity(type="training_visit", target_player_ids=[player_id]),
        ]
        assert daily.plan_week(plan).ok
        assert forwarded.plan_week(plan).ok

        for _ in range(7):
            assert daily.advance_day().ok
        assert forwarded.fast_forward_week().ok

        a = daily.snapshot().model_dump(exclude={"version"})
        b = forwarded.snapshot().model_dump(exclude={"version"})
        assert a == b
        assert "toast-ach-first_look" in {t["id"] for t in a["pending_toasts"]}

    def test_plan_does_not_alias_caller_activities(self) -> None:
        engine = _make_engine()
        player_id = _first_player(engine)
        activity = Activity(type="attend_match", target_player_ids=[player_id])
        assert engine.plan_week([activity]).ok

        activity.target_player_ids.append("ghost")
        assert engine.snapshot().week_simulation.plan[0].target_player_ids == [player_id]
        assert engine.advance_day().ok


class TestAchievements:
    def test_unlock_toasts_once_the_week_completes(self) -> None:
        persistence = InMemoryAchievementPersistence()
        engine = CareerEngine(generate_career(seed=7), achievements=AchievementStore(persistence))
        player_id = _first_player(engine)
        engine.plan_week([Activity(type="attend_match", target_player_ids=[player_id])])
        engine.advance_day()
        assert "first_look" not in engine.achievements.unlocked

        engine.fast_forward_week()
        toasts = [t.message for t in engine.snapshot().pending_toasts]
        assert "Achievement unlocked: First Look" in toasts
        assert "first_look" in engine.achievements.unlocked
        saves = persistence.save_count

        engine.fast_forward_week()
        toasts = [t.message for t in engine.snapshot().pending_toasts]
        assert toasts.count("Achievement unlocked: First Look") == 1
        assert persistence.save_count == saves

    def test_toast_can_be_dismissed(self) -> None:
        engine = _make_engine()
        player_id = _first_player(engine)
        engine.plan_week([Activity(type="attend_match", target_player_ids=[player_id])])
        engine.fast_forward_week()
        toast = engine.snapshot().pending_toasts[0]
        assert engine.dismiss_toast(toast.id).ok
        assert toast.id not in {t.id for t in engine.snapshot().pending_toasts}
