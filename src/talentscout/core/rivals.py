"""Rival scout competition.

Each week every rival does one of three things: advances progress on its
current target, switches to a new target, or signs the target once progress
reaches the completion threshold and its club has intent. Progress on an
abandoned target is frozen, never reset, so a rival can resume where it left
off. Signing is irreversible and takes the player off the market.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Literal

from talentscout.models.player import Player
from talentscout.models.rivals import RivalActivity, RivalActivityType, RivalScout
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)

ThreatLevel = Literal["low", "medium", "high"]

PERSONALITY_AGGRESSION: dict[str, float] = {
    "aggressive": 0.8,
    "methodical": 0.3,
    "connected": 0.5,
    "lucky": 0.6,
}


@dataclass
class RivalWeek:
    """Signings and activity produced by one weekly rival pass."""

    signings: list[tuple[str, str]] = field(default_factory=list)  # (rival_id, player_id)
    activities: list[tuple[str, RivalActivity]] = field(default_factory=list)


@dataclass(frozen=True)
class SharedTarget:
    """A player tracked by both the scout and at least one rival."""

    player_id: str
    rival_ids: tuple[str, ...]


def rivals_rng(state: GameState) -> random.Random:
    return random.Random(f"{state.seed}-{state.season}-{state.week}-rivals")


def budget_cap(rival: RivalScout, tuning: Tuning = DEFAULT_TUNING) -> int:
    caps = tuning.rival_budget_caps
    return caps.get(rival.budget_tier, max(caps.values()))


def club_has_intent(rival: RivalScout, player: Player, tuning: Tuning = DEFAULT_TUNING) -> bool:
    """The rival's club will move for an available player it can afford."""
    return player.is_available and player.market_value <= budget_cap(rival, tuning)


def progress_increment(rival: RivalScout, tuning: Tuning = DEFAULT_TUNING) -> int:
    return 2 if rival.quality >= tuning.rival_high_quality else 1


def target_score(rival: RivalScout, player: Player, rng: random.Random) -> float:
    """How attractive a player is to this rival's personality."""
    prior = rival.scouting_progress.get(player.id, 0)
    match rival.personality:
        case "aggressive":
            score = player.buzz + max(0, 23 - player.age) * 4
        case "methodical":
            score = prior * 10 + player.potential
        case "connected":
            score = player.market_value / 100_000
        case "lucky":
            score = rng.random() * 100
    return score + rival.quality * 2


def select_target(
    rival: RivalScout, state: GameState, rng: random.Random, tuning: Tuning = DEFAULT_TUNING
) -> str | None:
    """Pick the best affordable available player, or None if there is nobody.

    A rival already tracking its maximum number of players only resumes one of
    those instead of opening a new file.
    """
    candidates = [
        p
        for p in sorted(state.players.values(), key=lambda p: p.id)
        if club_has_intent(rival, p, tuning) and p.id not in rival.signed_targets
    ]
    if len(rival.scouting_progress) >= tuning.rival_max_targets:
        candidates = [p for p in candidates if p.id in rival.scouting_progress]
    if not candidates:
        return None
    scored = [(target_score(rival, p, rng), p.id) for p in candidates]
    return max(scored, key=lambda pair: pair[0])[1]


def _log(
    state: GameState,
    rival: RivalScout,
    week: RivalWeek,
    activity_type: RivalActivityType,
    player: Player,
    description: str,
) -> None:
    activity = RivalActivity(
        week=state.week,
        season=state.season,
        activity_type=activity_type,
        player_id=player.id,
        description=description,
    )
    rival.activity_log.append(activity)
    week.activities.append((rival.id, activity))


def sign_player(state: GameState, rival: RivalScout, player: Player, week: RivalWeek) -> None:
    """Irreversibly sign ``player`` for the rival's club."""
    player.status = "signed"
    player.signed_by = rival.id
    player.signed_week = state.absolute_week
    rival.signed_targets.append(player.id)
    rival.current_target = None
    week.signings.append((rival.id, player.id))
    _log(state, rival, week, "player_signed", player, f"{rival.club_name} signed {player.name}")
    logger.info("rival_signed rival=%s player=%s", rival.id, player.id)


def advance_rival(
    state: GameState,
    rival: RivalScout,
    rng: random.Random,
    week: RivalWeek,
    tuning: Tuning = DEFAULT_TUNING,
) -> None:
    """One week of work for one rival."""
    threshold = tuning.rival_completion_threshold
    target = state.players.get(rival.current_target) if rival.current_target else None

    if target is None or not target.is_available:
        # Abandon: whatever progress was made stays frozen in scouting_progress.
        rival.current_target = None
        target_id = select_target(rival, state, rng, tuning)
        if target_id is None:
            return
        rival.current_target = target_id
        rival.scouting_progress.setdefault(target_id, 0)
        target = state.players[target_id]
        _log(
            state, rival, week, "target_acquired", target, f"{rival.name} is tracking {target.name}"
        )
        return

    progress = rival.scouting_progress.get(target.id, 0)
    if progress < threshold:
        progress = min(threshold, progress + progress_increment(rival, tuning))
        rival.scouting_progress[target.id] = progress
        if rng.random() < tuning.rival_discovery_chance * (0.5 + rival.aggression):
            _log(state, rival, week, "spotted", target, f"{rival.name} watched {target.name}")
        if progress >= threshold:
            _log(state, rival, week, "report_submitted", target, f"{rival.name} filed a report")

    if progress >= threshold:
        if club_has_intent(rival, target, tuning):
            sign_player(state, rival, target, week)
        else:
            rival.current_target = None
            logger.info("rival_switched rival=%s from=%s reason=no_intent", rival.id, target.id)


def run_rivals(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> RivalWeek:
    """Advance every rival for the week, in a stable order."""
    rng = rivals_rng(state)
    week = RivalWeek()
    for rival in state.rivals:
        advance_rival(state, rival, rng, week, tuning)
        drift = rng.randint(0, tuning.rival_reputation_drift)
        rival.reputation = min(100, rival.reputation + drift)
    return week


def scout_tracked_ids(state: GameState) -> set[str]:
    """Players the scout has observed, reported on, or watchlisted."""
    ids = {o.player_id for o in state.observations}
    ids.update(r.player_id for r in state.reports)
    ids.update(state.watchlist)
    return ids


def shared_targets(state: GameState) -> list[SharedTarget]:
    """Available players tracked by the scout and at least one rival.

    A pure read: computing it never changes rival behavior.
    """
    tracked = scout_tracked_ids(state)
    shared: list[SharedTarget] = []
    for player_id in sorted(tracked):
        player = state.players.get(player_id)
        if player is None or not player.is_available:
            continue
        rival_ids = tuple(r.id for r in state.rivals if player_id in r.target_ids)
        if rival_ids:
            shared.append(SharedTarget(player_id=player_id, rival_ids=rival_ids))
    return shared


def threat_level(rival: RivalScout) -> ThreatLevel:
    score = rival.quality * 15 + rival.reputation * 0.5
    if score >= 70:
        return "high"
    if score >= 45:
        return "medium"
    return "low"
