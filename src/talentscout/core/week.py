"""Weekly finalization — everything that happens once the seventh day resolves.

Order matters and is fixed:

1. Course progress
2. Assistant observations
3. Report outcome reveals
4. Rival scouts
5. Finances (income, expenses, contracts, loans, offers) and the distress ladder
6. Narrative (condition streaks, escalation, new events and due chain steps)
7. Travel
8. Week and season rollover, then a fresh WeekSimulation
"""

from __future__ import annotations

import logging
import random

from talentscout.core.assistants import assistant_observations
from talentscout.core.courses import progress_course
from talentscout.core.finance import run_weekly_finances
from talentscout.core.narrative import WeekSignals, run_narrative
from talentscout.core.reports import reveal_outcomes
from talentscout.core.rivals import run_rivals
from talentscout.core.travel import update_travel
from talentscout.models.constants import WEEKS_PER_SEASON
from talentscout.models.schedule import WeekSimulation
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)


def finance_rng(state: GameState) -> random.Random:
    return random.Random(f"{state.seed}-{state.season}-{state.week}-finance")


def finalize_week(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> None:
    """Close out the current week and open the next one."""
    progress_course(state, tuning)
    assistant_observations(state, tuning)
    reveal_outcomes(state, tuning)
    rivals = run_rivals(state, tuning)
    finances = run_weekly_finances(state, finance_rng(state), tuning)
    run_narrative(
        state,
        WeekSignals(
            transition=finances.transition,
            signings=rivals.signings,
            suspended_retainers=finances.suspended_retainers,
        ),
        tuning,
    )
    update_travel(state)
    logger.info(
        "week_finalized season=%d week=%d balance=%d distress=%s signings=%d",
        state.season,
        state.week,
        state.finances.balance,
        state.finances.distress_level,
        len(rivals.signings),
    )
    rollover(state)


def rollover(state: GameState) -> None:
    """Advance the calendar and reset the week simulation."""
    state.week += 1
    if state.week > WEEKS_PER_SEASON:
        state.season += 1
        state.week = 1
        for player in state.players.values():
            player.age = min(40, player.age + 1)
        logger.info("season_started season=%d", state.season)
    state.week_simulation = WeekSimulation(season=state.season, week=state.week)
