"""CareerEngine — the command boundary of the simulation core.

Every command runs against a deep copy of the current state. A successful
command commits the copy and bumps the version; a rejected one discards it,
so the live state is never half-updated. Callers only ever get deep-copied
snapshots back and cannot mutate core state directly.

Expected business-rule failures come back as ``CommandResult(ok=False)``.
``StateInvariantError`` is the only exception that crosses this boundary,
and it means the state itself is broken.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from talentscout.config import Settings
from talentscout.core.achievements import AchievementStore, achievement_name, evaluate_achievements
from talentscout.core.assistants import hire_assistant
from talentscout.core.contracts import (
    accept_consulting,
    accept_retainer,
    cancel_retainer,
    decline_consulting,
    decline_retainer,
)
from talentscout.core.courses import enroll_in_course
from talentscout.core.finance import upgrade_equipment
from talentscout.core.inbox import push_toast
from talentscout.core.loans import repay_loan, take_loan
from talentscout.core.narrative import acknowledge, resolve_choice
from talentscout.core.perception import merged_for_player
from talentscout.core.reports import submit_report
from talentscout.core.rivals import SharedTarget, shared_targets
from talentscout.core.scheduler import advance_day, fast_forward_week, plan_week
from talentscout.core.seeding import generate_career
from talentscout.core.travel import book_international_travel
from talentscout.models.commands import CommandResult
from talentscout.models.observation import AttributeReading, ConvictionLevel
from talentscout.models.schedule import Activity
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)

Command = Callable[[GameState], CommandResult]


class CareerEngine:
    """Owns one career's state and applies named commands to it."""

    def __init__(
        self,
        state: GameState,
        tuning: Tuning = DEFAULT_TUNING,
        achievements: AchievementStore | None = None,
    ) -> None:
        self._state = state
        self.tuning = tuning
        self.achievements = achievements or AchievementStore()
        self.achievements.sync(evaluate_achievements(state))

    @classmethod
    def from_settings(
        cls, settings: Settings, achievements: AchievementStore | None = None
    ) -> CareerEngine:
        tuning = settings.tuning()
        state = generate_career(
            seed=settings.talentscout_seed,
            tuning=tuning,
            scout_name=settings.talentscout_scout_name,
            starting_balance=settings.talentscout_starting_balance,
        )
        return cls(state, tuning, achievements)

    @property
    def version(self) -> int:
        return self._state.version

    def snapshot(self) -> GameState:
        """A deep copy of the current state, safe to hand to any consumer."""
        return self._state.model_copy(deep=True)

    def _execute(self, name: str, command: Command) -> CommandResult:
        working = self._state.model_copy(deep=True)
        result = command(working)
        if not result.ok:
            logger.info(
                "command_rejected name=%s reason=%s detail=%s", name, result.reason, result.detail
            )
            return result
        if not working.week_simulation.started:
            self._sync_achievements(working)
        working.version += 1
        self._state = working
        logger.info("command_committed name=%s version=%d", name, working.version)
        return result

    def _sync_achievements(self, state: GameState) -> None:
        """Toast new unlocks once the week is no longer in progress.

        Toast ids come from the achievement id, not the state's id counter, so a
        fast-forwarded week stays identical to seven single-day advances.
        """
        for achievement_id in self.achievements.sync(evaluate_achievements(state)):
            push_toast(
                state,
                f"Achievement unlocked: {achievement_name(achievement_id)}",
                "success",
                toast_id=f"toast-ach-{achievement_id}",
            )

    # -- Scheduler ------------------------------------------------------------

    def plan_week(self, plan: list[Activity | None]) -> CommandResult:
        return self._execute("plan_week", lambda s: plan_week(s, plan))

    def advance_day(self) -> CommandResult:
        def command(state: GameState) -> CommandResult:
            result = advance_day(state, self.tuning)
            return CommandResult.success(result.summary, day_result=result.model_dump())

        return self._execute("advance_day", command)

    def fast_forward_week(self) -> CommandResult:
        def command(state: GameState) -> CommandResult:
            results = fast_forward_week(state, self.tuning)
            return CommandResult.success(
                f"resolved {len(results)} day(s)",
                day_results=[r.model_dump() for r in results],
            )

        return self._execute("fast_forward_week", command)

    # -- Reports --------------------------------------------------------------

    def submit_report(
        self,
        player_id: str,
        conviction: ConvictionLevel,
        summary: str = "",
        strengths: list[str] | None = None,
        weaknesses: list[str] | None = None,
    ) -> CommandResult:
        return self._execute(
            "submit_report",
            lambda s: submit_report(
                s, player_id, conviction, summary, strengths, weaknesses, self.tuning
            ),
        )

    def add_to_watchlist(self, player_id: str) -> CommandResult:
        def command(state: GameState) -> CommandResult:
            player = state.players.get(player_id)
            if player is None:
                return CommandResult.rejected("not_found", f"unknown player {player_id}")
            if not player.is_available:
                return CommandResult.rejected("player_unavailable", f"{player.name} has signed")
            if player_id not in state.watchlist:
                state.watchlist.append(player_id)
            return CommandResult.success()

        return self._execute("add_to_watchlist", command)

    # -- Contracts ------------------------------------------------------------

    def accept_retainer_contract(self, offer_id: str) -> CommandResult:
        return self._execute("accept_retainer", lambda s: accept_retainer(s, offer_id))

    def decline_retainer_offer(self, offer_id: str) -> CommandResult:
        return self._execute("decline_retainer", lambda s: decline_retainer(s, offer_id))

    def cancel_retainer_contract(self, contract_id: str) -> CommandResult:
        return self._execute("cancel_retainer", lambda s: cancel_retainer(s, contract_id))

    def accept_consulting_contract(self, offer_id: str) -> CommandResult:
        return self._execute("accept_consulting", lambda s: accept_consulting(s, offer_id))

    def decline_consulting_offer(self, offer_id: str) -> CommandResult:
        return self._execute("decline_consulting", lambda s: decline_consulting(s, offer_id))

    # -- Money ----------------------------------------------------------------

    def take_loan(self, loan_type: str, amount: int) -> CommandResult:
        return self._execute("take_loan", lambda s: take_loan(s, loan_type, amount, self.tuning))

    def repay_loan(self) -> CommandResult:
        return self._execute("repay_loan", lambda s: repay_loan(s, self.tuning))

    def enroll_in_course(self, course_id: str) -> CommandResult:
        return self._execute(
            "enroll_in_course", lambda s: enroll_in_course(s, course_id, self.tuning)
        )

    def book_international_travel(self, country_key: str) -> CommandResult:
        return self._execute(
            "book_travel", lambda s: book_international_travel(s, country_key)
        )

    def upgrade_equipment(self) -> CommandResult:
        return self._execute("upgrade_equipment", lambda s: upgrade_equipment(s, self.tuning))

    def hire_assistant(self) -> CommandResult:
        return self._execute("hire_assistant", lambda s: hire_assistant(s, self.tuning))

    # -- Narrative ------------------------------------------------------------

    def acknowledge_narrative_event(self, event_id: str) -> CommandResult:
        return self._execute("acknowledge_event", lambda s: acknowledge(s, event_id))

    def resolve_narrative_event_choice(self, event_id: str, choice_index: int) -> CommandResult:
        return self._execute(
            "resolve_event_choice",
            lambda s: resolve_choice(s, event_id, choice_index, self.tuning),
        )

    def dismiss_toast(self, toast_id: str) -> CommandResult:
        def command(state: GameState) -> CommandResult:
            remaining = [t for t in state.pending_toasts if t.id != toast_id]
            if len(remaining) == len(state.pending_toasts):
                return CommandResult.rejected("not_found", f"no toast {toast_id}")
            state.pending_toasts = remaining
            return CommandResult.success()

        return self._execute("dismiss_toast", command)

    # -- Reads ----------------------------------------------------------------

    def shared_targets(self) -> list[SharedTarget]:
        return shared_targets(self._state)

    def readings_for(self, player_id: str) -> dict[str, AttributeReading]:
        """Merged readings for a player; unknown attributes are simply absent."""
        return merged_for_player(self._state.observations, player_id)
