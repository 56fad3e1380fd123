"""Retainer and consulting contract lifecycles.

Retainers: pending -> active -> suspended/cancelled/completed. A retainer
that misses its monthly report quota repeatedly is suspended, not cancelled,
and resumes as soon as deliveries catch up with the quota. Cancellation is
only ever player-invoked.

Consulting: pending -> active -> completed/failed, or pending -> declined.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from talentscout.core.inbox import post_message, push_toast
from talentscout.core.ledger import adjust_credit, record
from talentscout.models.commands import CommandResult
from talentscout.models.finance import ConsultingContract, ConsultingType, RetainerContract
from talentscout.models.state import GameState
from talentscout.models.tuning import DEFAULT_TUNING, Tuning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetainerTier:
    tier: int
    fee_min: int
    fee_max: int
    reports_per_month: int


RETAINER_TIERS: dict[int, RetainerTier] = {
    1: RetainerTier(1, 500, 1000, 2),
    2: RetainerTier(2, 1500, 3000, 3),
    3: RetainerTier(3, 4000, 8000, 5),
    4: RetainerTier(4, 10000, 20000, 7),
    5: RetainerTier(5, 25000, 50000, 10),
}

MAX_RETAINERS: dict[int, int] = {1: 1, 2: 2, 3: 3, 4: 4, 5: 5}


@dataclass(frozen=True)
class ConsultingKind:
    contract_type: ConsultingType
    fee_min: int
    fee_max: int
    duration_weeks: int
    reports_required: int


CONSULTING_KINDS: list[ConsultingKind] = [
    ConsultingKind("transfer_advisory", 5000, 25000, 4, 2),
    ConsultingKind("youth_audit", 3000, 10000, 6, 3),
    ConsultingKind("data_package", 2000, 8000, 3, 1),
    ConsultingKind("talent_workshop", 4000, 15000, 2, 1),
]

CLUB_NAMES = [
    "Northgate Athletic",
    "Riverside Rovers",
    "Castleford Town",
    "Harbour City",
    "Eastmoor United",
    "Kingsbridge Albion",
    "Westvale Wanderers",
    "Millbrook FC",
]

CONSULTING_FAILURE_REPUTATION = 2.0


def reputation_multiplier(reputation: float) -> float:
    return 0.5 + reputation / 200


def active_retainers(state: GameState) -> list[RetainerContract]:
    return [r for r in state.finances.retainers if r.status in ("active", "suspended")]


# ---------------------------------------------------------------------------
# Offers
# ---------------------------------------------------------------------------


def generate_offers(
    state: GameState, rng: random.Random, tuning: Tuning = DEFAULT_TUNING
) -> list[str]:
    """Expire stale offers and roll for new ones. Returns new offer ids."""
    fin = state.finances
    now = state.absolute_week
    fin.retainers = [
        r for r in fin.retainers if not (r.status == "pending" and r.expires_week < now)
    ]
    fin.consulting = [
        c for c in fin.consulting if not (c.status == "pending" and c.expires_week < now)
    ]

    scout = state.scout
    new_ids: list[str] = []
    pending = sum(1 for r in fin.retainers if r.status == "pending")
    max_pending = min(3, int(scout.reputation // 25))
    if pending < max_pending and rng.random() < tuning.retainer_offer_chance:
        tier = RETAINER_TIERS[max(1, min(scout.career_tier, 1 + int(scout.reputation // 25)))]
        offer = RetainerContract(
            id=state.next_id("ret"),
            club_name=rng.choice(CLUB_NAMES),
            tier=tier.tier,
            monthly_fee=rng.randint(tier.fee_min, tier.fee_max),
            reports_per_month=tier.reports_per_month,
            offered_week=now,
            expires_week=now + tuning.offer_expiry_weeks,
        )
        fin.retainers.append(offer)
        new_ids.append(offer.id)
        post_message(
            state,
            "contract",
            f"Retainer offer from {offer.club_name}",
            f"{offer.monthly_fee}/month for {offer.reports_per_month} reports a month.",
        )

    if (
        scout.career_tier >= tuning.consulting_min_tier
        and rng.random() < tuning.consulting_offer_chance
    ):
        kind = rng.choice(CONSULTING_KINDS)
        base_fee = rng.randint(kind.fee_min, kind.fee_max)
        fee = round(base_fee * reputation_multiplier(scout.reputation))
        job = ConsultingContract(
            id=state.next_id("con"),
            client_name=rng.choice(CLUB_NAMES),
            contract_type=kind.contract_type,
            fee=fee,
            reports_required=kind.reports_required,
            duration_weeks=kind.duration_weeks,
            offered_week=now,
            expires_week=now + tuning.offer_expiry_weeks,
        )
        fin.consulting.append(job)
        new_ids.append(job.id)
        post_message(
            state,
            "contract",
            f"Consulting request from {job.client_name}",
            f"{kind.contract_type.replace('_', ' ')}: {fee} for {kind.reports_required} "
            f"report(s) within {kind.duration_weeks} weeks.",
        )

    if new_ids:
        logger.info("offers_generated ids=%s", ",".join(new_ids))
    return new_ids


# ---------------------------------------------------------------------------
# Player-invoked transitions
# ---------------------------------------------------------------------------


def _find_retainer(state: GameState, contract_id: str) -> RetainerContract | None:
    return next((r for r in state.finances.retainers if r.id == contract_id), None)


def _find_consulting(state: GameState, contract_id: str) -> ConsultingContract | None:
    return next((c for c in state.finances.consulting if c.id == contract_id), None)


def accept_retainer(state: GameState, offer_id: str) -> CommandResult:
    offer = _find_retainer(state, offer_id)
    if offer is None or offer.status != "pending":
        return CommandResult.rejected("not_found", f"no pending retainer offer {offer_id}")
    limit = MAX_RETAINERS.get(state.scout.career_tier, 1)
    if len(active_retainers(state)) >= limit:
        return CommandResult.rejected(
            "slot_capacity", f"tier {state.scout.career_tier} scouts can hold {limit} retainer(s)"
        )
    offer.status = "active"
    offer.reports_this_month = 0
    logger.info(
        "retainer_accepted id=%s club=%s fee=%d", offer.id, offer.club_name, offer.monthly_fee
    )
    return CommandResult.success(contract_id=offer.id)


def decline_retainer(state: GameState, offer_id: str) -> CommandResult:
    offer = _find_retainer(state, offer_id)
    if offer is None or offer.status != "pending":
        return CommandResult.rejected("not_found", f"no pending retainer offer {offer_id}")
    offer.status = "cancelled"
    logger.info("retainer_declined id=%s", offer.id)
    return CommandResult.success()


def cancel_retainer(state: GameState, contract_id: str) -> CommandResult:
    contract = _find_retainer(state, contract_id)
    if contract is None:
        return CommandResult.rejected("not_found", f"no retainer {contract_id}")
    if contract.status not in ("active", "suspended"):
        return CommandResult.rejected(
            "not_cancellable", f"retainer is {contract.status}, not active or suspended"
        )
    contract.status = "cancelled"
    logger.info("retainer_cancelled id=%s", contract.id)
    return CommandResult.success()


def accept_consulting(state: GameState, offer_id: str) -> CommandResult:
    job = _find_consulting(state, offer_id)
    if job is None or job.status != "pending":
        return CommandResult.rejected("not_found", f"no pending consulting offer {offer_id}")
    job.status = "active"
    job.deadline_week = state.absolute_week + job.duration_weeks
    logger.info("consulting_accepted id=%s deadline=%d", job.id, job.deadline_week)
    return CommandResult.success(contract_id=job.id, deadline_week=job.deadline_week)


def decline_consulting(state: GameState, offer_id: str) -> CommandResult:
    job = _find_consulting(state, offer_id)
    if job is None or job.status != "pending":
        return CommandResult.rejected("not_found", f"no pending consulting offer {offer_id}")
    job.status = "declined"
    logger.info("consulting_declined id=%s", job.id)
    return CommandResult.success()


# ---------------------------------------------------------------------------
# Deliveries and periodic checks
# ---------------------------------------------------------------------------


def credit_delivery(state: GameState) -> tuple[str | None, str | None]:
    """Count a submitted report toward one consulting job or one retainer.

    Consulting jobs are served first. Returns (consulting_id, retainer_id).
    """
    job = next(
        (
            c
            for c in state.finances.consulting
            if c.status == "active" and c.reports_delivered < c.reports_required
        ),
        None,
    )
    if job is not None:
        job.reports_delivered += 1
        if job.reports_delivered >= job.reports_required:
            job.status = "completed"
            record(state, job.fee, "consulting", f"{job.contract_type} for {job.client_name}")
            post_message(
                state, "contract", "Consulting job complete", f"{job.client_name} paid {job.fee}."
            )
            logger.info("consulting_completed id=%s fee=%d", job.id, job.fee)
        return job.id, None

    retainer = next(
        (
            r
            for r in active_retainers(state)
            if r.reports_this_month < r.reports_per_month
        ),
        None,
    )
    if retainer is None:
        return None, None
    retainer.reports_this_month += 1
    if retainer.status == "suspended" and retainer.reports_this_month >= retainer.reports_per_month:
        retainer.status = "active"
        retainer.missed_months = 0
        post_message(
            state,
            "contract",
            f"{retainer.club_name} retainer resumed",
            "You caught up on your report quota.",
        )
        logger.info("retainer_resumed id=%s", retainer.id)
    return None, retainer.id


def process_monthly_retainers(
    state: GameState, tuning: Tuning = DEFAULT_TUNING
) -> list[RetainerContract]:
    """Pay retainers whose quota was met; count misses on the rest.

    Returns retainers newly suspended this month.
    """
    suspended: list[RetainerContract] = []
    for retainer in active_retainers(state):
        met = retainer.reports_this_month >= retainer.reports_per_month
        if retainer.status == "active":
            if met:
                record(state, retainer.monthly_fee, "retainer", retainer.club_name)
                retainer.missed_months = 0
                retainer.months_completed += 1
                adjust_credit(state.finances, tuning.credit_retainer_month)
            else:
                retainer.missed_months += 1
                if retainer.missed_months >= tuning.retainer_suspend_after:
                    retainer.status = "suspended"
                    suspended.append(retainer)
                    push_toast(state, f"{retainer.club_name} suspended your retainer", "warning")
                    logger.info(
                        "retainer_suspended id=%s missed=%d", retainer.id, retainer.missed_months
                    )
        retainer.reports_this_month = 0
    return suspended


def check_consulting_deadlines(state: GameState) -> list[ConsultingContract]:
    """Fail active jobs whose deadline has passed."""
    failed: list[ConsultingContract] = []
    for job in state.finances.consulting:
        if job.status == "active" and state.absolute_week > job.deadline_week:
            job.status = "failed"
            failed.append(job)
            state.scout.reputation = max(
                0.0, state.scout.reputation - CONSULTING_FAILURE_REPUTATION
            )
            post_message(
                state,
                "contract",
                "Consulting deadline missed",
                f"{job.client_name} cancelled the job after the deadline passed.",
            )
            logger.info("consulting_failed id=%s", job.id)
    return failed
