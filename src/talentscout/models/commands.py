"""Command results returned across the core's command boundary."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

RejectionReason = Literal[
    "insufficient_funds",
    "not_eligible",
    "slot_capacity",
    "invalid_slot",
    "missing_observations",
    "already_resolved",
    "choice_required",
    "invalid_choice",
    "player_unavailable",
    "not_found",
    "already_enrolled",
    "already_completed",
    "prerequisite_missing",
    "tier_too_low",
    "already_booked",
    "active_loan",
    "amount_exceeds_max",
    "invalid_amount",
    "not_cancellable",
    "week_in_progress",
    "max_level",
]


class CommandResult(BaseModel):
    """Outcome of a command. Rejections carry the failing constraint."""

    ok: bool
    reason: RejectionReason | None = None
    detail: str = ""
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def success(cls, detail: str = "", **data: Any) -> CommandResult:
        return cls(ok=True, detail=detail, data=data)

    @classmethod
    def rejected(cls, reason: RejectionReason, detail: str = "") -> CommandResult:
        return cls(ok=False, reason=reason, detail=detail)
