"""Career API — read snapshots and issue commands.

Rejected commands return 409 with the CommandResult as the detail, so the
client can show which constraint failed.
"""

from __future__ import annotations

from collections.abc import Callable

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from talentscout.api.deps import EngineDep, LockDep
from talentscout.core.perception import domain_coverage
from talentscout.core.rivals import threat_level
from talentscout.models.commands import CommandResult
from talentscout.models.observation import ConvictionLevel
from talentscout.models.schedule import Activity

router = APIRouter(prefix="/api/career", tags=["career"])


class PlanRequest(BaseModel):
    days: list[Activity | None] = Field(default_factory=list)


class ReportRequest(BaseModel):
    player_id: str
    conviction: ConvictionLevel
    summary: str = ""
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class LoanRequest(BaseModel):
    loan_type: str
    amount: int


class ChoiceRequest(BaseModel):
    choice_index: int


async def _run(
    engine: EngineDep, lock: LockDep, command: Callable[[], CommandResult]
) -> dict:
    async with lock:
        result = command()
        version = engine.version
    if not result.ok:
        raise HTTPException(status_code=409, detail=result.model_dump())
    return {"data": result.model_dump(), "version": version}


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@router.get("")
async def get_career(engine: EngineDep) -> dict:
    """Full state snapshot."""
    return {"data": engine.snapshot().model_dump(mode="json")}


@router.get("/rivals")
async def get_rivals(engine: EngineDep) -> dict:
    return {
        "data": [
            {
                "id": r.id,
                "name": r.name,
                "club_name": r.club_name,
                "quality": r.quality,
                "threat": threat_level(r),
                "current_target": r.current_target,
            }
            for r in engine.snapshot().rivals
        ]
    }


@router.get("/shared-targets")
async def get_shared_targets(engine: EngineDep) -> dict:
    snapshot = engine.snapshot()
    data = []
    for shared in engine.shared_targets():
        threats = [threat_level(r) for r in snapshot.rivals if r.id in shared.rival_ids]
        data.append(
            {
                "player_id": shared.player_id,
                "rival_ids": list(shared.rival_ids),
                "threats": threats,
            }
        )
    return {"data": data}


@router.get("/players/{player_id}/readings")
async def get_player_readings(player_id: str, engine: EngineDep) -> dict:
    """Merged readings only; true attributes never leave the core."""
    snapshot = engine.snapshot()
    player = snapshot.players.get(player_id)
    if player is None:
        raise HTTPException(status_code=404, detail="Player not found")
    readings = engine.readings_for(player_id)
    return {
        "data": {
            "player_id": player.id,
            "name": player.name,
            "status": player.status,
            "readings": {a: r.model_dump() for a, r in readings.items()},
            "coverage": domain_coverage(readings),
        }
    }


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------


@router.post("/plan")
async def post_plan(body: PlanRequest, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.plan_week(body.days))


@router.post("/advance-day")
async def post_advance_day(engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, engine.advance_day)


@router.post("/fast-forward")
async def post_fast_forward(engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, engine.fast_forward_week)


# ---------------------------------------------------------------------------
# Reports and watchlist
# ---------------------------------------------------------------------------


@router.post("/reports")
async def post_report(body: ReportRequest, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(
        engine,
        lock,
        lambda: engine.submit_report(
            body.player_id, body.conviction, body.summary, body.strengths, body.weaknesses
        ),
    )


@router.post("/watchlist/{player_id}")
async def post_watchlist(player_id: str, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.add_to_watchlist(player_id))


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


@router.post("/retainers/{offer_id}/accept")
async def post_accept_retainer(offer_id: str, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.accept_retainer_contract(offer_id))


@router.post("/retainers/{offer_id}/decline")
async def post_decline_retainer(offer_id: str, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.decline_retainer_offer(offer_id))


@router.post("/retainers/{contract_id}/cancel")
async def post_cancel_retainer(contract_id: str, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.cancel_retainer_contract(contract_id))


@router.post("/consulting/{offer_id}/accept")
async def post_accept_consulting(offer_id: str, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.accept_consulting_contract(offer_id))


@router.post("/consulting/{offer_id}/decline")
async def post_decline_consulting(offer_id: str, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.decline_consulting_offer(offer_id))


# ---------------------------------------------------------------------------
# Money, courses, travel
# ---------------------------------------------------------------------------


@router.post("/loans")
async def post_loan(body: LoanRequest, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.take_loan(body.loan_type, body.amount))


@router.post("/loans/repay")
async def post_repay_loan(engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, engine.repay_loan)


@router.post("/courses/{course_id}/enroll")
async def post_enroll(course_id: str, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.enroll_in_course(course_id))


@router.post("/travel/{country_key}")
async def post_travel(country_key: str, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.book_international_travel(country_key))


@router.post("/equipment/upgrade")
async def post_upgrade_equipment(engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, engine.upgrade_equipment)


@router.post("/assistants")
async def post_hire_assistant(engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, engine.hire_assistant)


# ---------------------------------------------------------------------------
# Narrative
# ---------------------------------------------------------------------------


@router.post("/events/{event_id}/acknowledge")
async def post_acknowledge(event_id: str, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.acknowledge_narrative_event(event_id))


@router.post("/events/{event_id}/choose")
async def post_choose(
    event_id: str, body: ChoiceRequest, engine: EngineDep, lock: LockDep
) -> dict:
    return await _run(
        engine,
        lock,
        lambda: engine.resolve_narrative_event_choice(event_id, body.choice_index),
    )


@router.delete("/toasts/{toast_id}")
async def delete_toast(toast_id: str, engine: EngineDep, lock: LockDep) -> dict:
    return await _run(engine, lock, lambda: engine.dismiss_toast(toast_id))
