"""Narrative event engine — trigger, escalate, and resolve story events.

Per event: triggered -> (awaiting choice, if it has choices) -> resolved or
acknowledged. Events are a closed union of variant classes; every place that
needs per-category behavior matches on the variant exhaustively, so adding a
category without handling it is a type error.

Chain bookkeeping (which step is next, when it is due, the history of
choices) lives on the EventChain. The presentation layer never reconstructs
chain membership itself.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import assert_never

from talentscout.core.calendar import apply_fatigue
from talentscout.core.chains import CHAIN_TEMPLATES, render_step
from talentscout.core.distress import DistressTransition
from talentscout.core.inbox import post_message, push_toast
from talentscout.core.ledger import adjust_credit, record
from talentscout.core.rivals import scout_tracked_ids, shared_targets
from talentscout.models.commands import CommandResult
from talentscout.models.finance import RetainerContract
from talentscout.models.narrative import (
    BudgetShortfallEvent,
    BurnoutEvent,
    ChainStepEvent,
    ChoiceEffects,
    ContactTipEvent,
    DistressChangeEvent,
    EscalationLevel,
    EventChain,
    EventChoice,
    NarrativeEvent,
    RetainerSuspendedEvent,
    RivalSigningEvent,
    SharedTargetEvent,
)
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)


@dataclass
class WeekSignals:
    """Facts from earlier in weekly finalization that can trigger events."""

    transition: DistressTransition | None = None
    signings: list[tuple[str, str]] = field(default_factory=list)  # (rival_id, player_id)
    suspended_retainers: list[RetainerContract] = field(default_factory=list)


def narrative_rng(state: GameState) -> random.Random:
    return random.Random(f"{state.seed}-{state.season}-{state.week}-narrative")


# ---------------------------------------------------------------------------
# Escalation
# ---------------------------------------------------------------------------


def compute_escalation(weeks_persisted: int, tuning: Tuning = DEFAULT_TUNING) -> EscalationLevel:
    """0 is informational, 1 warrants a warning, 2 means consequences are imminent."""
    if weeks_persisted < tuning.escalation_warning_weeks:
        return 0
    if weeks_persisted < tuning.escalation_critical_weeks:
        return 1
    return 2


def active_conditions(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> set[str]:
    """Condition keys that hold right now."""
    conditions: set[str] = set()
    if state.finances.balance < 0:
        conditions.add("budget_shortfall")
    if state.scout.fatigue >= tuning.burnout_fatigue:
        conditions.add("burnout")
    for shared in shared_targets(state):
        conditions.add(f"shared:{shared.player_id}")
    for retainer in state.finances.retainers:
        if retainer.status == "suspended":
            conditions.add(f"retainer:{retainer.id}")
    return conditions


def update_condition_streaks(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> None:
    """Count consecutive weeks each condition has held; drop lapsed ones."""
    current = active_conditions(state, tuning)
    state.condition_streaks = {
        key: state.condition_streaks.get(key, 0) + 1 for key in sorted(current)
    }


def refresh_escalation(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> None:
    """Raise escalation on unresolved events whose condition keeps persisting."""
    for event in state.narrative_events:
        if event.resolved or event.condition_key is None:
            continue
        level = compute_escalation(state.condition_streaks.get(event.condition_key, 0), tuning)
        if level > event.escalation_level:
            event.escalation_level = level
            logger.info("event_escalated id=%s level=%d", event.id, level)


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------


def _has_open(state: GameState, kind: str, condition_key: str | None = None) -> bool:
    return any(
        e.kind == kind
        and not e.resolved
        and (condition_key is None or e.condition_key == condition_key)
        for e in state.narrative_events
    )


def _common(state: GameState, title: str, description: str = "", **extra: object) -> dict:
    return {
        "id": state.next_id("evt"),
        "season": state.season,
        "week": state.week,
        "title": title,
        "description": description,
        **extra,
    }


def _add(state: GameState, event: NarrativeEvent) -> NarrativeEvent:
    state.narrative_events.append(event)
    post_message(state, "event", event.title, event.description)
    logger.info("event_triggered id=%s kind=%s", event.id, event.kind)
    return event


def trigger_events(
    state: GameState,
    signals: WeekSignals,
    rng: random.Random,
    tuning: Tuning = DEFAULT_TUNING,
) -> list[NarrativeEvent]:
    """Create this week's new events from the week's signals and standing conditions."""
    created: list[NarrativeEvent] = []
    fin = state.finances
    scout = state.scout
    streaks = state.condition_streaks

    if fin.balance < 0 and not _has_open(state, "budget_shortfall"):
        weeks = streaks.get("budget_shortfall", 1)
        created.append(
            _add(
                state,
                BudgetShortfallEvent(
                    **_common(
                        state,
                        "Budget shortfall",
                        f"Your balance is {fin.balance}. Something has to give.",
                        escalation_level=compute_escalation(weeks, tuning),
                        condition_key="budget_shortfall",
                        choices=[
                            EventChoice(
                                label="Tighten your belt",
                                effects=ChoiceEffects(balance=100, fatigue=5),
                            ),
                            EventChoice(
                                label="Ask a friend for help",
                                effects=ChoiceEffects(balance=300, reputation=-1.0),
                            ),
                        ],
                    ),
                    balance=fin.balance,
                    weeks_negative=fin.weeks_negative,
                ),
            )
        )

    if signals.transition is not None:
        t = signals.transition
        created.append(
            _add(
                state,
                DistressChangeEvent(
                    **_common(
                        state,
                        f"Finances: {t.to_level}",
                        f"Your financial position moved from {t.from_level} to {t.to_level}.",
                        escalation_level=2 if t.to_level in ("critical", "bankruptcy") else 1,
                    ),
                    from_level=t.from_level,
                    to_level=t.to_level,
                ),
            )
        )

    tracked = scout_tracked_ids(state)
    for rival_id, player_id in signals.signings:
        if player_id not in tracked:
            continue
        rival = state.find_rival(rival_id)
        player = state.players[player_id]
        club = rival.club_name if rival else "another club"
        created.append(
            _add(
                state,
                RivalSigningEvent(
                    **_common(state, f"{club} signed {player.name}", "You were too slow."),
                    rival_id=rival_id,
                    player_id=player_id,
                ),
            )
        )

    known = set(state.known_shared_targets)
    for shared in shared_targets(state):
        if shared.player_id in known:
            continue
        state.known_shared_targets.append(shared.player_id)
        rival = state.find_rival(shared.rival_ids[0])
        player = state.players[shared.player_id]
        created.append(
            _add(
                state,
                SharedTargetEvent(
                    **_common(
                        state,
                        f"You are not alone on {player.name}",
                        f"{rival.name if rival else 'A rival'} is tracking {player.name} too.",
                        condition_key=f"shared:{player.id}",
                        choices=[
                            EventChoice(
                                label="Step up your coverage",
                                effects=ChoiceEffects(fatigue=5, rival_aggression=0.1),
                            ),
                            EventChoice(label="Let it go"),
                        ],
                    ),
                    rival_id=shared.rival_ids[0],
                    player_id=player.id,
                ),
            )
        )

    if scout.fatigue >= tuning.burnout_fatigue and not _has_open(state, "burnout"):
        created.append(
            _add(
                state,
                BurnoutEvent(
                    **_common(
                        state,
                        "Running on empty",
                        f"Fatigue is at {scout.fatigue}. Your judgment is slipping.",
                        escalation_level=compute_escalation(streaks.get("burnout", 1), tuning),
                        condition_key="burnout",
                        choices=[
                            EventChoice(
                                label="Take a proper break",
                                effects=ChoiceEffects(fatigue=-20, reputation=-0.5),
                            ),
                            EventChoice(
                                label="Push through",
                                effects=ChoiceEffects(fatigue=5, reputation=1.0),
                            ),
                        ],
                    ),
                    fatigue=scout.fatigue,
                ),
            )
        )

    for retainer in signals.suspended_retainers:
        key = f"retainer:{retainer.id}"
        created.append(
            _add(
                state,
                RetainerSuspendedEvent(
                    **_common(
                        state,
                        f"{retainer.club_name} suspended your retainer",
                        f"Deliver {retainer.reports_per_month} reports in a month to resume it.",
                        escalation_level=1,
                        condition_key=key,
                    ),
                    contract_id=retainer.id,
                    club_name=retainer.club_name,
                ),
            )
        )

    if rng.random() < tuning.narrative_event_chance:
        candidates = sorted(
            p.id for p in state.players.values() if p.is_available and p.id not in tracked
        )
        if candidates:
            player = state.players[rng.choice(candidates)]
            state.watchlist.append(player.id)
            created.append(
                _add(
                    state,
                    ContactTipEvent(
                        **_common(
                            state,
                            f"A tip about {player.name}",
                            f"A contact rates {player.name}. Added to your watchlist.",
                        ),
                        player_id=player.id,
                    ),
                )
            )

    created.extend(emit_due_chain_steps(state))
    started = maybe_start_chain(state, rng, tuning)
    if started is not None:
        created.append(started)
    return created


# ---------------------------------------------------------------------------
# Chains
# ---------------------------------------------------------------------------


def active_chains(state: GameState) -> list[EventChain]:
    return [c for c in state.event_chains if not c.resolved]


def _chain_context(
    state: GameState, template_key: str, rng: random.Random
) -> dict[str, str] | None:
    """Context for a new chain, or None if the template has nothing to attach to."""
    taken = {c.context.get("player_id") for c in active_chains(state)}
    match template_key:
        case "rival_poaching":
            options = [s for s in shared_targets(state) if s.player_id not in taken]
            if not options:
                return None
            shared = rng.choice(options)
            rival = state.find_rival(shared.rival_ids[0])
            return {
                "player_id": shared.player_id,
                "player_name": state.players[shared.player_id].name,
                "rival_id": shared.rival_ids[0],
                "rival_name": rival.name if rival else "a rival",
            }
        case "wonderkid_pressure":
            options = sorted(
                p.id
                for p in state.players.values()
                if p.is_available and p.age <= 19 and p.buzz >= 60 and p.id not in taken
            )
            if not options:
                return None
            player = state.players[rng.choice(options)]
            return {"player_id": player.id, "player_name": player.name}
        case "media_scrutiny":
            return {} if state.scout.reputation >= 20 else None
    return None


def maybe_start_chain(
    state: GameState, rng: random.Random, tuning: Tuning = DEFAULT_TUNING
) -> ChainStepEvent | None:
    """Roll for a new chain and emit its first step."""
    if len(active_chains(state)) >= tuning.max_active_chains:
        return None
    if rng.random() >= tuning.chain_start_chance:
        return None
    running = {c.template_key for c in active_chains(state)}
    keys = [k for k in sorted(CHAIN_TEMPLATES) if k not in running]
    rng.shuffle(keys)
    for key in keys:
        context = _chain_context(state, key, rng)
        if context is None:
            continue
        return start_chain(state, key, context)
    return None


def start_chain(state: GameState, template_key: str, context: dict[str, str]) -> ChainStepEvent:
    template = CHAIN_TEMPLATES[template_key]
    chain = EventChain(
        id=state.next_id("chain"),
        template_key=template_key,
        max_steps=template.max_steps,
        context=context,
        started_week=state.absolute_week,
    )
    state.event_chains.append(chain)
    logger.info("chain_started id=%s template=%s", chain.id, template_key)
    return emit_chain_step(state, chain)


def emit_chain_step(state: GameState, chain: EventChain) -> ChainStepEvent:
    """Create the event for the chain's next step."""
    template = CHAIN_TEMPLATES[chain.template_key]
    step = template.steps[chain.current_step]
    title, description, choices = render_step(template, chain)
    chain.current_step += 1
    chain.next_step_week = None
    event = ChainStepEvent(
        **_common(
            state,
            title,
            description,
            escalation_level=step.escalation_level,
            choices=choices,
            chain_id=chain.id,
            chain_step=chain.current_step,
        ),
        template_key=chain.template_key,
        player_id=chain.context.get("player_id"),
        rival_id=chain.context.get("rival_id"),
    )
    chain.event_ids.append(event.id)
    _add(state, event)
    return event


def emit_due_chain_steps(state: GameState) -> list[ChainStepEvent]:
    due = [
        c
        for c in active_chains(state)
        if c.next_step_week is not None and c.next_step_week <= state.absolute_week
    ]
    return [emit_chain_step(state, chain) for chain in due]


def _advance_chain(state: GameState, chain: EventChain, choice: int | None) -> None:
    """Record a resolved step and schedule the next one, or close the chain."""
    chain.choice_history.append(choice)
    if chain.current_step >= chain.max_steps:
        chain.resolved = True
        chain.next_step_week = None
        logger.info("chain_closed id=%s history=%s", chain.id, chain.choice_history)
        return
    delay = CHAIN_TEMPLATES[chain.template_key].steps[chain.current_step].week_delay
    chain.next_step_week = state.absolute_week + max(1, delay)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _rival_of(event: NarrativeEvent) -> str | None:
    match event:
        case (
            RivalSigningEvent(rival_id=rival_id)
            | SharedTargetEvent(rival_id=rival_id)
            | ChainStepEvent(rival_id=rival_id)
        ):
            return rival_id
        case _:
            return None


def _apply_effects(
    state: GameState, event: NarrativeEvent, effects: ChoiceEffects, tuning: Tuning
) -> None:
    scout = state.scout
    if effects.reputation:
        scout.reputation = max(0.0, min(100.0, scout.reputation + effects.reputation))
    if effects.fatigue:
        apply_fatigue(scout, effects.fatigue, tuning)
    if effects.balance:
        record(state, effects.balance, "event", event.title)
    if effects.credit_score:
        adjust_credit(state.finances, effects.credit_score)
    if effects.rival_aggression:
        rival_id = _rival_of(event)
        rival = state.find_rival(rival_id) if rival_id else None
        if rival is not None:
            rival.aggression = max(0.0, min(1.0, rival.aggression + effects.rival_aggression))


def _apply_variant_outcome(state: GameState, event: NarrativeEvent, index: int) -> None:
    """Category-specific consequences of a choice beyond its generic effects."""
    match event:
        case SharedTargetEvent(player_id=player_id):
            if index == 0 and player_id not in state.watchlist:
                state.watchlist.append(player_id)
        case BurnoutEvent():
            if index == 0:
                state.scout.forced_rest = True
        case ChainStepEvent(player_id=player_id):
            if index == 0 and player_id and player_id not in state.watchlist:
                state.watchlist.append(player_id)
        case BudgetShortfallEvent():
            pass
        case (
            DistressChangeEvent()
            | RivalSigningEvent()
            | ContactTipEvent()
            | RetainerSuspendedEvent()
        ):
            pass
        case _:
            assert_never(event)


def resolve_choice(
    state: GameState, event_id: str, choice_index: int, tuning: Tuning = DEFAULT_TUNING
) -> CommandResult:
    """Apply a choice. Double resolution and bad indices are rejected, not re-applied."""
    event = state.find_event(event_id)
    if event is None:
        return CommandResult.rejected("not_found", f"no event {event_id}")
    if event.resolved:
        return CommandResult.rejected("already_resolved", f"event {event_id} is already resolved")
    if not event.choices:
        return CommandResult.rejected(
            "invalid_choice", f"event {event_id} has no choices; acknowledge it instead"
        )
    if not 0 <= choice_index < len(event.choices):
        return CommandResult.rejected(
            "invalid_choice", f"choice {choice_index} out of range 0..{len(event.choices) - 1}"
        )

    event.selected_choice = choice_index
    _apply_effects(state, event, event.choices[choice_index].effects, tuning)
    _apply_variant_outcome(state, event, choice_index)
    if event.chain_id is not None:
        chain = state.find_chain(event.chain_id)
        if chain is not None:
            _advance_chain(state, chain, choice_index)
    push_toast(state, f"{event.title}: {event.choices[choice_index].label}")
    logger.info("event_resolved id=%s kind=%s choice=%d", event.id, event.kind, choice_index)
    return CommandResult.success(event_id=event.id, choice=choice_index)


def acknowledge(state: GameState, event_id: str) -> CommandResult:
    """Dismiss an event with no pending choices. Nothing beyond the trigger fires."""
    event = state.find_event(event_id)
    if event is None:
        return CommandResult.rejected("not_found", f"no event {event_id}")
    if event.resolved:
        return CommandResult.rejected("already_resolved", f"event {event_id} is already resolved")
    if event.awaiting_choice:
        return CommandResult.rejected(
            "choice_required", f"event {event_id} needs a choice before it can be dismissed"
        )
    event.acknowledged = True
    if event.chain_id is not None:
        chain = state.find_chain(event.chain_id)
        if chain is not None:
            _advance_chain(state, chain, None)
    logger.info("event_acknowledged id=%s kind=%s", event.id, event.kind)
    return CommandResult.success(event_id=event.id)


def run_narrative(
    state: GameState, signals: WeekSignals, tuning: Tuning = DEFAULT_TUNING
) -> list[NarrativeEvent]:
    """The weekly narrative pass: streaks, escalation, then new events."""
    update_condition_streaks(state, tuning)
    refresh_escalation(state, tuning)
    return trigger_events(state, signals, narrative_rng(state), tuning)
