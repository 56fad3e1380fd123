"""Weekly/daily scheduler — resolves a planned week one day at a time.

Seven day-slots per week; each moves idle -> resolving -> resolved in order.
``advance_day`` and ``fast_forward_week`` share ``resolve_day``, so resolving
the rest of a week in one call produces exactly the state that repeated
single-day advances would. Each day draws from its own RNG seeded by
(seed, season, week, day), so a day's randomness never depends on how it
was reached.
"""

from __future__ import annotations

import logging
import random

from talentscout.core.calendar import ACTIVITIES, accrue_xp, apply_fatigue, rest_recovery
from talentscout.core.errors import missing
from talentscout.core.inbox import post_message
from talentscout.core.perception import observe_player, prior_counts
from talentscout.core.week import finalize_week
from talentscout.models.commands import CommandResult
from talentscout.models.constants import DAYS_PER_WEEK
from talentscout.models.observation import Observation
from talentscout.models.schedule import Activity, DayResult
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)

NETWORK_REPUTATION_GAIN = 0.5


def day_rng(seed: int, season: int, week: int, day: int) -> random.Random:
    """Independent, reproducible RNG for one day."""
    return random.Random(f"{seed}-{season}-{week}-day{day}")


def plan_week(state: GameState, plan: list[Activity | None]) -> CommandResult:
    """Set the week's activities. Only allowed before the first day resolves."""
    sim = state.week_simulation
    if sim.started:
        return CommandResult.rejected("week_in_progress", "the week has already started")
    if len(plan) > DAYS_PER_WEEK:
        return CommandResult.rejected(
            "invalid_slot", f"{len(plan)} activities planned for {DAYS_PER_WEEK} days"
        )

    for index, activity in enumerate(plan):
        if activity is None:
            continue
        definition = ACTIVITIES[activity.type]
        if activity.target_player_ids and not definition.observes:
            return CommandResult.rejected(
                "invalid_slot", f"day {index + 1}: {activity.type} cannot focus players"
            )
        if len(activity.target_player_ids) > definition.max_targets:
            return CommandResult.rejected(
                "slot_capacity",
                f"day {index + 1}: {activity.type} can focus at most "
                f"{definition.max_targets} players",
            )
        for player_id in activity.target_player_ids:
            player = state.players.get(player_id)
            if player is None:
                return CommandResult.rejected("not_found", f"unknown player {player_id}")
            if not player.is_available:
                return CommandResult.rejected(
                    "player_unavailable", f"{player.name} has already signed elsewhere"
                )

    sim.plan = [a.model_copy(deep=True) if a is not None else None for a in plan]
    sim.plan += [None] * (DAYS_PER_WEEK - len(plan))
    logger.info(
        "week_planned season=%d week=%d activities=%d",
        state.season,
        state.week,
        sum(1 for a in plan if a is not None),
    )
    return CommandResult.success()


def resolve_day(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> DayResult:
    """Resolve the next unresolved day of the current week.

    A day may depend on fatigue and skill accumulated on earlier days, never on
    later ones. A focused player who is no longer available degrades the day to
    a no-observation day; the slot and fatigue cost still apply.
    """
    sim = state.week_simulation
    scout = state.scout
    index = sim.current_day
    day = index + 1
    sim.day_status[index] = "resolving"
    rng = day_rng(state.seed, state.season, state.week, day)
    activity = sim.plan[index]

    exhausted = scout.fatigue >= tuning.forced_rest_fatigue
    if activity is not None and activity.type != "rest" and (scout.forced_rest or exhausted):
        result = _rest_day(state, tuning, day, "Exhausted: forced rest", degraded=True)
        scout.forced_rest = False
    elif activity is None:
        recovered = apply_fatigue(scout, -tuning.passive_recovery, tuning)
        result = DayResult(day=day, summary="No activity scheduled", fatigue_delta=recovered)
    elif activity.type == "rest":
        result = _rest_day(state, tuning, day, "Rested")
        scout.forced_rest = False
    else:
        result = _activity_day(state, tuning, day, activity, rng)

    sim.day_results.append(result)
    sim.day_status[index] = "resolved"
    sim.current_day = day
    logger.debug(
        "day_resolved season=%d week=%d day=%d activity=%s degraded=%s",
        state.season,
        state.week,
        day,
        result.activity,
        result.degraded,
    )
    return result


def _rest_day(
    state: GameState, tuning: Tuning, day: int, summary: str, degraded: bool = False
) -> DayResult:
    sim = state.week_simulation
    recovered = apply_fatigue(state.scout, -rest_recovery(sim.rest_days, tuning), tuning)
    sim.rest_days += 1
    return DayResult(
        day=day, activity="rest", summary=summary, fatigue_delta=recovered, degraded=degraded
    )


def _activity_day(
    state: GameState,
    tuning: Tuning,
    day: int,
    activity: Activity,
    rng: random.Random,
) -> DayResult:
    scout = state.scout
    definition = ACTIVITIES[activity.type]
    observations: list[Observation] = []
    message_ids: list[str] = []
    skipped: list[str] = []

    if definition.observes:
        observed_at = state.absolute_week * DAYS_PER_WEEK + day
        for player_id in activity.target_player_ids[: definition.max_targets]:
            player = state.players.get(player_id)
            if player is None:
                raise missing("player", player_id)
            if not player.is_available:
                skipped.append(player.name)
                continue
            readings = observe_player(
                player,
                scout,
                definition.domain_slots,
                definition.quality,
                rng,
                priors=prior_counts(state.observations, player_id),
                tuning=tuning,
                observed_at=observed_at,
            )
            obs = Observation(
                id=state.next_id("obs"),
                player_id=player_id,
                season=state.season,
                week=state.week,
                day=day,
                activity=activity.type,
                readings=readings,
            )
            state.observations.append(obs)
            observations.append(obs)

    if activity.type == "network_meeting":
        scout.reputation = min(100.0, scout.reputation + NETWORK_REPUTATION_GAIN)
        if rng.random() < 0.25:
            message_ids.append(
                post_message(
                    state,
                    "network",
                    "A contact has been in touch",
                    "A contact mentioned a few names worth watching.",
                ).id
            )

    fatigue_delta = apply_fatigue(scout, definition.fatigue, tuning)
    xp = dict(definition.xp)
    accrue_xp(scout, xp, tuning)

    degraded = definition.observes and bool(activity.target_player_ids) and not observations
    if degraded:
        summary = f"{definition.label}: no observation, {', '.join(skipped)} unavailable"
    elif skipped:
        summary = f"{definition.label} ({', '.join(skipped)} unavailable)"
    else:
        summary = definition.label
    if skipped:
        message_ids.append(
            post_message(
                state,
                "schedule",
                "Target unavailable",
                f"{', '.join(skipped)} signed before you could watch them.",
            ).id
        )

    return DayResult(
        day=day,
        activity=activity.type,
        summary=summary,
        observations=observations,
        xp_gained=xp,
        fatigue_delta=fatigue_delta,
        inbox_message_ids=message_ids,
        degraded=degraded,
    )


def advance_day(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> DayResult:
    """Resolve one day; finalize the week after the seventh."""
    result = resolve_day(state, tuning)
    if state.week_simulation.complete:
        finalize_week(state, tuning)
    return result


def fast_forward_week(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> list[DayResult]:
    """Resolve every remaining day with the same per-day logic, then finalize."""
    results: list[DayResult] = []
    while not state.week_simulation.complete:
        results.append(resolve_day(state, tuning))
    finalize_week(state, tuning)
    return results
