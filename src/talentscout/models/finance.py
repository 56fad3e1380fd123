"""Finances, contracts, loans, and ledger models.

See core/finance.py for the weekly engine and core/distress.py for the ladder.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from talentscout.models.observation import ConvictionLevel

DistressLevel = Literal["healthy", "warning", "distressed", "critical", "bankruptcy"]
ContractStatus = Literal["pending", "active", "suspended", "cancelled", "completed"]
ConsultingStatus = Literal["pending", "active", "completed", "failed", "declined"]
ConsultingType = Literal["transfer_advisory", "youth_audit", "data_package", "talent_workshop"]
LoanType = Literal["business", "equipment", "emergency"]


class RetainerContract(BaseModel):
    """A club paying a monthly fee for a quota of reports."""

    id: str
    club_name: str
    tier: int = Field(ge=1, le=5)
    monthly_fee: int = Field(ge=0)
    reports_per_month: int = Field(ge=1)
    status: ContractStatus = "pending"
    reports_this_month: int = 0
    missed_months: int = 0
    months_completed: int = 0
    offered_week: int = 0
    expires_week: int = 0


class ConsultingContract(BaseModel):
    """A one-off consulting job paid on delivery before a deadline."""

    id: str
    client_name: str
    contract_type: ConsultingType
    fee: int = Field(ge=0)
    reports_required: int = Field(default=1, ge=1)
    reports_delivered: int = 0
    duration_weeks: int = Field(ge=1)
    deadline_week: int = 0
    status: ConsultingStatus = "pending"
    offered_week: int = 0
    expires_week: int = 0


class Loan(BaseModel):
    """An active loan with a fixed amortized monthly payment."""

    id: str
    loan_type: LoanType
    principal: int = Field(ge=1)
    monthly_rate: float = Field(ge=0.0)
    term_months: int = Field(ge=1)
    monthly_payment: int = Field(ge=0)
    remaining: float = Field(ge=0.0)
    payments_made: int = 0
    missed_payments: int = 0
    taken_week: int = 0


class Transaction(BaseModel):
    """One ledger line. Positive amounts are income."""

    absolute_week: int
    amount: int
    category: str
    description: str = ""


class PendingIncome(BaseModel):
    """Income that lands at a future weekly finalization."""

    id: str
    due_week: int
    amount: int
    category: Literal["report_sale", "placement_fee", "sell_on"]
    description: str = ""


class SellOnClause(BaseModel):
    """A percentage of a future transfer fee owed to the scout."""

    id: str
    player_id: str
    rate: float = Field(ge=0.0, le=1.0)
    base_value: int = Field(ge=0)
    conviction: ConvictionLevel
    trigger_week: int
    paid: bool = False


class Finances(BaseModel):
    """The scout's economic state."""

    balance: int = 0
    credit_score: int = Field(default=50, ge=0, le=100)
    distress_level: DistressLevel = "healthy"
    weeks_negative: int = 0
    bankruptcy_cooldown: int = 0
    subscriptions_cancelled: bool = False
    travel_reduced: bool = False
    retainers: list[RetainerContract] = Field(default_factory=list)
    consulting: list[ConsultingContract] = Field(default_factory=list)
    loan: Loan | None = None
    pending_income: list[PendingIncome] = Field(default_factory=list)
    sell_on_clauses: list[SellOnClause] = Field(default_factory=list)
    ledger: list[Transaction] = Field(default_factory=list)
    last_week_income: int = 0
    last_week_expenses: int = 0
