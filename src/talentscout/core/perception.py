"""Attribute observation model — true attributes in, uncertain readings out.

A single parameterized scoring function (``score_reading``) turns scout skill,
fatigue, activity quality, and the number of earlier readings into a noise
standard deviation and a confidence. Everything else in this module is
sampling and bookkeeping around it.

This is a pure computation module: callers pass in the RNG, and nothing here
touches the game state.
"""

from __future__ import annotations

import logging
import math
import random
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from talentscout.models.constants import ATTRIBUTE_DOMAINS, DOMAIN_OF, DOMAIN_SKILL
from talentscout.models.observation import AttributeReading, Observation
from talentscout.models.player import Player
from talentscout.models.scout import Scout
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadingScore:
    """Noise and confidence for one attribute reading."""

    stddev: float
    confidence: float


def score_reading(
    skill: int,
    fatigue: int,
    quality: float,
    prior_count: int,
    tuning: Tuning = DEFAULT_TUNING,
    equipment_bonus: float = 0.0,
) -> ReadingScore:
    """Score a prospective reading.

    Args:
        skill: The scout's level in the discipline matching the attribute's domain.
        fatigue: Current fatigue (0 = fresh).
        quality: Activity quality; 1.0 is a live match, lower is a worse view.
        prior_count: Readings of this attribute already on record for the player.
        tuning: Curve parameters.
        equipment_bonus: Flat confidence bonus from equipment.

    Returns:
        ReadingScore. ``stddev`` shrinks with skill, quality and repetition and
        grows with fatigue. ``confidence`` is strictly increasing in skill,
        quality and prior count, non-increasing in fatigue, and within [0, 1].
    """
    skill = max(0, min(skill, tuning.skill_max))
    fatigue = max(0, fatigue)
    quality = max(quality, 0.05)
    prior_count = max(0, prior_count)

    # Noise is calibrated on a 20-point scale and stretched to the configured one.
    scale_factor = (tuning.attribute_max - tuning.attribute_min) / 20
    base = max(tuning.noise_floor, (tuning.skill_max - skill) / tuning.noise_skill_divisor)
    fatigue_factor = 1.0 + tuning.fatigue_noise_factor * fatigue / tuning.max_fatigue
    stddev = base * scale_factor * fatigue_factor / quality / math.sqrt(prior_count + 1)

    skill_term = tuning.confidence_skill_weight * skill / tuning.skill_max
    repeat_term = tuning.confidence_repeat_cap * (1.0 - 1.0 / math.sqrt(prior_count + 1))
    quality_term = tuning.confidence_quality_weight * quality / (quality + 1.0)
    fatigue_mult = 1.0 - tuning.confidence_fatigue_penalty * min(fatigue, tuning.max_fatigue) / (
        tuning.max_fatigue
    )
    confidence = (skill_term + repeat_term + quality_term) * fatigue_mult + equipment_bonus
    return ReadingScore(stddev=stddev, confidence=max(0.0, min(1.0, confidence)))


def noise_band(stddev: float, tuning: Tuning = DEFAULT_TUNING) -> int:
    """Largest absolute error a single reading can carry."""
    return math.ceil(tuning.noise_band_sigmas * stddev)


def clamp_attribute(value: int, tuning: Tuning = DEFAULT_TUNING) -> int:
    return max(tuning.attribute_min, min(tuning.attribute_max, value))


def equipment_bonus(level: int, tuning: Tuning = DEFAULT_TUNING) -> float:
    table = tuning.equipment_confidence_bonus
    return table[max(0, min(level, len(table) - 1))]


def prior_counts(observations: Iterable[Observation], player_id: str) -> Counter[str]:
    """How many readings each attribute of a player already has."""
    counts: Counter[str] = Counter()
    for obs in observations:
        if obs.player_id != player_id:
            continue
        for reading in obs.readings:
            counts[reading.attribute] += 1
    return counts


def observe_player(
    player: Player,
    scout: Scout,
    domain_slots: dict[str, int],
    quality: float,
    rng: random.Random,
    priors: Counter[str] | None = None,
    tuning: Tuning = DEFAULT_TUNING,
    observed_at: int = 0,
    skill_override: int | None = None,
) -> tuple[AttributeReading, ...]:
    """Produce readings for the attributes an activity exposes.

    Each domain with ``n`` slots yields readings for up to ``n`` of the
    player's attributes in that domain. A domain with no slots yields nothing;
    that is a no-op, not an error.

    ``skill_override`` replaces the scout's discipline skill (used for assistants).
    """
    priors = priors or Counter()
    bonus = equipment_bonus(scout.equipment_level, tuning)
    readings: list[AttributeReading] = []

    for domain, attrs in ATTRIBUTE_DOMAINS.items():
        slots = domain_slots.get(domain, 0)
        if slots <= 0:
            continue
        present = [a for a in attrs if a in player.true_attributes]
        if not present:
            continue
        sampled = rng.sample(present, min(slots, len(present)))
        skill = (
            skill_override if skill_override is not None else scout.skill(DOMAIN_SKILL[domain])
        )
        for attr in sorted(sampled, key=attrs.index):
            score = score_reading(
                skill, scout.fatigue, quality, priors[attr], tuning, equipment_bonus=bonus
            )
            band = noise_band(score.stddev, tuning)
            noise = max(-band, min(band, round(rng.gauss(0.0, score.stddev))))
            readings.append(
                AttributeReading(
                    attribute=attr,
                    perceived_value=clamp_attribute(player.true_attributes[attr] + noise, tuning),
                    confidence=round(score.confidence, 4),
                    observed_at=observed_at,
                )
            )

    logger.debug("observe player=%s readings=%d quality=%.2f", player.id, len(readings), quality)
    return tuple(readings)


def merge_readings(observations: Iterable[Observation]) -> dict[str, AttributeReading]:
    """Keep the highest-confidence reading per attribute; never average.

    Ties go to the later reading. Attributes with no reading are absent, which
    consumers must treat as unknown rather than zero.
    """
    merged: dict[str, AttributeReading] = {}
    for obs in observations:
        for reading in obs.readings:
            current = merged.get(reading.attribute)
            if current is None or reading.confidence >= current.confidence:
                merged[reading.attribute] = reading
    return merged


def merged_for_player(
    observations: Iterable[Observation], player_id: str
) -> dict[str, AttributeReading]:
    return merge_readings(o for o in observations if o.player_id == player_id)


def estimated_quality(readings: dict[str, AttributeReading]) -> float | None:
    """Mean perceived value over known attributes, or None if nothing is known."""
    if not readings:
        return None
    return sum(r.perceived_value for r in readings.values()) / len(readings)


def domain_coverage(readings: dict[str, AttributeReading]) -> dict[str, int]:
    """Number of known attributes per domain."""
    coverage: Counter[str] = Counter(DOMAIN_OF[a] for a in readings if a in DOMAIN_OF)
    return {domain: coverage.get(domain, 0) for domain in ATTRIBUTE_DOMAINS}
