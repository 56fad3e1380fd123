"""Report submission, outcome reveal, and report-driven income.

A report locks in the scout's merged readings and a conviction level. Some
weeks later the player's true level becomes known; reputation moves in
proportion to accuracy, scaled by how loudly the scout backed the call.
Correct recommendations that lead to a signing earn a placement fee and a
sell-on clause.
"""

from __future__ import annotations

import logging
import random

from talentscout.core.contracts import credit_delivery, reputation_multiplier
from talentscout.core.errors import missing
from talentscout.core.inbox import post_message, push_toast
from talentscout.core.ledger import record
from talentscout.core.perception import estimated_quality, merged_for_player
from talentscout.models.commands import CommandResult
from talentscout.models.finance import PendingIncome, SellOnClause
from talentscout.models.observation import ConvictionLevel, Report, ReportOutcome
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)

CONVICTION_MULTIPLIER: dict[str, float] = {
    "note": 0.5,
    "recommend": 1.0,
    "strong_recommend": 1.5,
    "table_pound": 2.0,
}

SELL_ON_RATES: dict[str, float] = {
    "note": 0.001,
    "recommend": 0.002,
    "strong_recommend": 0.003,
    "table_pound": 0.005,
}

REPORT_PRICES: dict[str, tuple[int, int]] = {
    "note": (100, 200),
    "recommend": (400, 800),
    "strong_recommend": (1200, 2000),
    "table_pound": (3000, 5000),
}


def report_accuracy(
    estimated: float, true_quality: float, tuning: Tuning = DEFAULT_TUNING
) -> float:
    """1.0 for a perfect call, falling linearly with error across the attribute scale."""
    span = tuning.attribute_max - tuning.attribute_min
    return max(0.0, min(1.0, 1.0 - abs(estimated - true_quality) / span))


def reputation_delta(
    conviction: ConvictionLevel,
    accuracy: float,
    tuning: Tuning = DEFAULT_TUNING,
) -> float:
    """Reputation change for a revealed report.

    Right calls gain in proportion to accuracy; wrong calls lose in proportion
    to the miss. Both scale with conviction, so a wrong ``table_pound`` costs
    four times what a wrong ``note`` does.
    """
    mult = CONVICTION_MULTIPLIER[conviction]
    if accuracy >= tuning.report_accuracy_threshold:
        return round(tuning.report_reputation_gain * mult * accuracy, 2)
    miss = 1.0 - accuracy
    return -round(tuning.report_reputation_loss * mult * (0.5 + miss), 2)


def placement_fee(
    transfer_fee: int,
    conviction: ConvictionLevel,
    reputation: float,
    tuning: Tuning = DEFAULT_TUNING,
) -> int:
    fee = transfer_fee * tuning.placement_fee_rate
    fee *= CONVICTION_MULTIPLIER[conviction] * reputation_multiplier(reputation)
    return max(tuning.placement_fee_minimum, round(fee))


def submit_report(
    state: GameState,
    player_id: str,
    conviction: ConvictionLevel,
    summary: str = "",
    strengths: list[str] | None = None,
    weaknesses: list[str] | None = None,
    tuning: Tuning = DEFAULT_TUNING,
) -> CommandResult:
    """File a report on a player from the merged observation readings."""
    player = state.players.get(player_id)
    if player is None:
        return CommandResult.rejected("not_found", f"unknown player {player_id}")
    if not player.is_available:
        return CommandResult.rejected("player_unavailable", f"{player.name} has already signed")
    readings = merged_for_player(state.observations, player_id)
    quality = estimated_quality(readings)
    if quality is None:
        return CommandResult.rejected(
            "missing_observations", f"no observations recorded for {player.name}"
        )

    report_id = state.next_id("rep")
    consulting_id, retainer_id = credit_delivery(state)
    report = Report(
        id=report_id,
        player_id=player_id,
        conviction=conviction,
        summary=summary,
        strengths=tuple(strengths or ()),
        weaknesses=tuple(weaknesses or ()),
        perceived_attributes={a: r.perceived_value for a, r in readings.items()},
        estimated_quality=round(quality, 2),
        season=state.season,
        week=state.week,
        absolute_week=state.absolute_week,
        consulting_contract_id=consulting_id,
        retainer_contract_id=retainer_id,
    )
    state.reports.append(report)

    rng = random.Random(f"{state.seed}-{report_id}")
    low, high = REPORT_PRICES[conviction]
    sale = PendingIncome(
        id=state.next_id("inc"),
        due_week=state.absolute_week + 1,
        amount=rng.randint(low, high),
        category="report_sale",
        description=f"report on {player.name}",
    )
    state.finances.pending_income.append(sale)
    logger.info(
        "report_submitted id=%s player=%s conviction=%s readings=%d",
        report_id,
        player_id,
        conviction,
        len(readings),
    )
    return CommandResult.success(report_id=report_id, sale=sale.amount)


def reveal_outcomes(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> list[ReportOutcome]:
    """Reveal every report old enough for the player's level to be known."""
    revealed_ids = {o.report_id for o in state.report_outcomes}
    outcomes: list[ReportOutcome] = []
    for report in state.reports:
        if report.id in revealed_ids:
            continue
        if state.absolute_week - report.absolute_week < tuning.report_reveal_weeks:
            continue
        player = state.players.get(report.player_id)
        if player is None:
            raise missing("player", report.player_id)

        accuracy = report_accuracy(report.estimated_quality, player.true_quality(), tuning)
        delta = reputation_delta(report.conviction, accuracy, tuning)
        scout = state.scout
        scout.reputation = max(0.0, min(100.0, scout.reputation + delta))
        outcome = ReportOutcome(
            report_id=report.id,
            player_id=player.id,
            accuracy=round(accuracy, 4),
            proven_right=accuracy >= tuning.report_accuracy_threshold,
            reputation_delta=delta,
            revealed_week=state.absolute_week,
        )
        state.report_outcomes.append(outcome)
        outcomes.append(outcome)
        verdict = "proved right" if outcome.proven_right else "proved wrong"
        post_message(
            state,
            "report",
            f"Report on {player.name} {verdict}",
            f"Accuracy {accuracy:.0%}, reputation {delta:+.1f}.",
        )
        push_toast(
            state, f"{player.name}: {verdict}", "success" if outcome.proven_right else "warning"
        )
        if outcome.proven_right and report.conviction != "note" and player.is_available:
            _place_player(state, report, tuning)
        logger.info(
            "report_revealed id=%s accuracy=%.2f delta=%.2f", report.id, accuracy, delta
        )
    return outcomes


def _place_player(state: GameState, report: Report, tuning: Tuning) -> None:
    """A club acts on a correct recommendation: the player signs, the scout is paid."""
    player = state.players[report.player_id]
    player.status = "signed"
    player.signed_by = "client"
    player.signed_week = state.absolute_week
    fee = placement_fee(player.market_value, report.conviction, state.scout.reputation, tuning)
    state.finances.pending_income.append(
        PendingIncome(
            id=state.next_id("inc"),
            due_week=state.absolute_week + 1,
            amount=fee,
            category="placement_fee",
            description=f"placement of {player.name}",
        )
    )
    state.finances.sell_on_clauses.append(
        SellOnClause(
            id=state.next_id("sell"),
            player_id=player.id,
            rate=SELL_ON_RATES[report.conviction],
            base_value=player.market_value,
            conviction=report.conviction,
            trigger_week=state.absolute_week + tuning.sell_on_weeks,
        )
    )
    logger.info("player_placed player=%s fee=%d", player.id, fee)


def collect_report_income(state: GameState, tuning: Tuning = DEFAULT_TUNING) -> int:
    """Land due report sales, placement fees, and sell-on payments. Returns the total."""
    fin = state.finances
    now = state.absolute_week
    total = 0
    still_pending: list[PendingIncome] = []
    for item in fin.pending_income:
        if item.due_week <= now:
            record(state, item.amount, item.category, item.description)
            total += item.amount
        else:
            still_pending.append(item)
    fin.pending_income = still_pending

    for clause in fin.sell_on_clauses:
        if clause.paid or clause.trigger_week > now:
            continue
        amount = round(clause.base_value * tuning.sell_on_growth * clause.rate)
        clause.paid = True
        if amount > 0:
            record(state, amount, "sell_on", f"sell-on clause {clause.player_id}")
            total += amount
            post_message(state, "finance", "Sell-on clause paid", f"You received {amount}.")
    return total
