"""Assistant scouts: hiring and their weekly watchlist observations."""

from __future__ import annotations

import logging
import random

from talentscout.core.calendar import ACTIVITIES
from talentscout.core.perception import observe_player, prior_counts
from talentscout.models.commands import CommandResult
from talentscout.models.constants import DAYS_PER_WEEK
from talentscout.models.observation import Observation
from talentscout.models.scout import Assistant
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)

ASSISTANT_QUALITY = 0.8
ASSISTANT_NAMES = ["Sam Reid", "Priya Shah", "Tomás Ortega", "Ella Brandt", "Kofi Mensah"]


def max_assistants(career_tier: int) -> int:
    return max(0, career_tier - 1)


def hire_assistant(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> CommandResult:
    scout = state.scout
    limit = max_assistants(scout.career_tier)
    if limit == 0:
        return CommandResult.rejected("tier_too_low", "assistants are available from tier 2")
    if len(scout.assistants) >= limit:
        return CommandResult.rejected(
            "slot_capacity", f"tier {scout.career_tier} scouts can employ {limit} assistant(s)"
        )
    if state.finances.balance < tuning.assistant_salary:
        return CommandResult.rejected(
            "insufficient_funds", f"need {tuning.assistant_salary} to cover the first week"
        )
    assistant_id = state.next_id("asst")
    rng = random.Random(f"{state.seed}-{assistant_id}")
    assistant = Assistant(
        id=assistant_id,
        name=rng.choice(ASSISTANT_NAMES),
        skill=rng.randint(4, 10),
        weekly_salary=tuning.assistant_salary,
    )
    scout.assistants.append(assistant)
    logger.info("assistant_hired id=%s skill=%d", assistant.id, assistant.skill)
    return CommandResult.success(assistant_id=assistant.id)


def assistant_observations(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> list[Observation]:
    """Each assistant watches one available watchlisted player, rotating weekly."""
    watchable = [pid for pid in state.watchlist if state.players[pid].is_available]
    if not watchable:
        return []
    slots = ACTIVITIES["attend_match"].domain_slots
    rng = random.Random(f"{state.seed}-{state.season}-{state.week}-assistants")
    created: list[Observation] = []
    for offset, assistant in enumerate(state.scout.assistants):
        player_id = watchable[(state.absolute_week + offset) % len(watchable)]
        readings = observe_player(
            state.players[player_id],
            state.scout,
            slots,
            ASSISTANT_QUALITY,
            rng,
            priors=prior_counts(state.observations, player_id),
            tuning=tuning,
            observed_at=state.absolute_week * DAYS_PER_WEEK + DAYS_PER_WEEK,
            skill_override=assistant.skill,
        )
        obs = Observation(
            id=state.next_id("obs"),
            player_id=player_id,
            season=state.season,
            week=state.week,
            day=DAYS_PER_WEEK,
            activity="assistant_report",
            observer=assistant.id,
            readings=readings,
        )
        state.observations.append(obs)
        created.append(obs)
    if created:
        logger.info("assistant_observations count=%d", len(created))
    return created
