"""Tests for the attribute observation model."""

import random

from talentscout.core.calendar import ACTIVITIES
from talentscout.core.perception import (
    domain_coverage,
    estimated_quality,
    merge_readings,
    noise_band,
    observe_player,
    score_reading,
)
from talentscout.models.observation import AttributeReading, Observation
from talentscout.models.player import Player
from talentscout.models.scout import Scout
from talentscout.models.tuning import Tuning


def _make_player(attrs: dict[str, int] | None = None) -> Player:
    return Player(
        id="p1",
        name="Luca Silva",
        age=18,
        position="ST",
        country="england",
        true_attributes=attrs if attrs is not None else {"finishing": 15},
        potential=16,
    )


def _make_scout(technical: int = 10, fatigue: int = 0) -> Scout:
    scout = Scout(name="Test Scout", fatigue=fatigue)
    scout.skills["technical_eye"] = technical
    return scout


def _make_obs(obs_id: str, *readings: AttributeReading) -> Observation:
    return Observation(
        id=obs_id, player_id="p1", season=1, week=1, day=1, activity="attend_match",
        readings=readings,
    )  # fmt: skip


def _reading(attr: str, value: int, confidence: float) -> AttributeReading:
    return AttributeReading(attribute=attr, perceived_value=value, confidence=confidence)


class TestScoreReading:
    def test_confidence_increases_with_skill(self) -> None:
        low = score_reading(skill=5, fatigue=0, quality=1.0, prior_count=0)
        mid = score_reading(skill=10, fatigue=0, quality=1.0, prior_count=0)
        high = score_reading(skill=15, fatigue=0, quality=1.0, prior_count=0)
        assert low.confidence < mid.confidence < high.confidence
        assert low.stddev > mid.stddev > high.stddev

    def test_confidence_increases_with_quality_and_repetition(self) -> None:
        base = score_reading(10, 0, 0.67, 0)
        better_view = score_reading(10, 0, 1.0, 0)
        repeated = score_reading(10, 0, 0.67, 3)
        assert better_view.confidence > base.confidence
        assert repeated.confidence > base.confidence
        assert repeated.stddev < base.stddev

    def test_fatigue_never_raises_confidence(self) -> None:
        fresh = score_reading(10, 0, 1.0, 0)
        tired = score_reading(10, 80, 1.0, 0)
        assert tired.confidence <= fresh.confidence
        assert tired.stddev > fresh.stddev

    def test_confidence_within_unit_interval(self) -> None:
        for skill in (0, 10, 20):
            for fatigue in (0, 50, 100):
                for prior in (0, 5, 50):
                    score = score_reading(skill, fatigue, 1.43, prior, equipment_bonus=0.12)
                    assert 0.0 <= score.confidence <= 1.0

    def test_noise_scales_with_attribute_range(self) -> None:
        narrow = score_reading(10, 0, 1.0, 0)
        wide = score_reading(10, 0, 1.0, 0, tuning=Tuning(attribute_min=1, attribute_max=100))
        assert wide.stddev > narrow.stddev


class TestObservePlayer:
    def test_reading_stays_in_noise_band(self) -> None:
        player = _make_player()
        for skill in (5, 10, 15):
            scout = _make_scout(technical=skill)
            score = score_reading(skill, 0, 1.0, 0)
            band = noise_band(score.stddev)
            for seed in range(25):
                readings = observe_player(
                    player, scout, ACTIVITIES["attend_match"].domain_slots, 1.0,
                    random.Random(seed),
                )  # fmt: skip
                assert len(readings) == 1
                assert abs(readings[0].perceived_value - 15) <= band

    def test_tired_scout_at_a_match(self) -> None:
        player = _make_player()
        slots = ACTIVITIES["attend_match"].domain_slots
        readings = {
            skill: observe_player(
                player, _make_scout(technical=skill, fatigue=20), slots, 1.0, random.Random(8)
            )[0]
            for skill in (5, 10, 15)
        }
        band = noise_band(score_reading(10, 20, 1.0, 0).stddev)
        assert abs(readings[10].perceived_value - 15) <= band
        assert readings[5].confidence < readings[10].confidence < readings[15].confidence

    def test_higher_skill_gives_higher_confidence(self) -> None:
        player = _make_player()
        slots = ACTIVITIES["attend_match"].domain_slots
        confidences = [
            observe_player(player, _make_scout(technical=s), slots, 1.0, random.Random(1))[
                0
            ].confidence
            for s in (5, 10, 15)
        ]
        assert confidences[0] < confidences[1] < confidences[2]

    def test_domain_without_slots_yields_nothing(self) -> None:
        player = _make_player({"pace": 12, "strength": 14})
        readings = observe_player(
            player, _make_scout(), ACTIVITIES["watch_video"].domain_slots, 0.67, random.Random(3)
        )
        assert readings == ()

    def test_readings_clamped_to_scale(self) -> None:
        player = _make_player({"finishing": 20})
        scout = _make_scout(technical=0, fatigue=100)
        for seed in range(30):
            readings = observe_player(
                player, scout, {"technical": 1}, 0.5, random.Random(seed)
            )
            assert 0 <= readings[0].perceived_value <= 20

    def test_slots_limit_attributes_per_domain(self) -> None:
        attrs = {a: 10 for a in ("first_touch", "passing", "dribbling", "crossing", "finishing")}
        readings = observe_player(
            _make_player(attrs), _make_scout(), {"technical": 3}, 1.0, random.Random(9)
        )
        assert len(readings) == 3
        assert len({r.attribute for r in readings}) == 3


class TestMergeReadings:
    def test_highest_confidence_wins(self) -> None:
        merged = merge_readings(
            [
                _make_obs("o1", _reading("finishing", 12, 0.4)),
                _make_obs("o2", _reading("finishing", 16, 0.7)),
                _make_obs("o3", _reading("finishing", 9, 0.5)),
            ]
        )
        assert merged["finishing"].perceived_value == 16
        assert merged["finishing"].confidence == 0.7

    def test_no_averaging(self) -> None:
        merged = merge_readings(
            [
                _make_obs("o1", _reading("pace", 10, 0.6)),
                _make_obs("o2", _reading("pace", 14, 0.6)),
            ]
        )
        assert merged["pace"].perceived_value == 14

    def test_more_observations_never_lower_confidence(self) -> None:
        rng = random.Random(4)
        observations: list[Observation] = []
        best = 0.0
        for i in range(12):
            confidence = round(rng.random(), 3)
            observations.append(_make_obs(f"o{i}", _reading("finishing", 10, confidence)))
            merged = merge_readings(observations)
            assert merged["finishing"].confidence >= best
            best = merged["finishing"].confidence

    def test_unknown_attributes_absent(self) -> None:
        merged = merge_readings([_make_obs("o1", _reading("finishing", 12, 0.4))])
        assert "pace" not in merged
        assert domain_coverage(merged)["physical"] == 0
        assert domain_coverage(merged)["technical"] == 1

    def test_estimated_quality_empty(self) -> None:
        assert estimated_quality({}) is None
        assert estimated_quality({"pace": _reading("pace", 12, 0.5)}) == 12
