"""Narrative event and event chain models.

Events are a closed tagged union keyed by ``kind``. Each variant carries only
the payload its category needs; core/narrative.py dispatches on the variant
class with exhaustive pattern matching.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

EscalationLevel = Literal[0, 1, 2]


class ChoiceEffects(BaseModel):
    """State deltas applied when a choice is selected."""

    reputation: float = 0.0
    fatigue: int = 0
    balance: int = 0
    credit_score: int = 0
    rival_aggression: float = 0.0


class EventChoice(BaseModel):
    """A player-facing option on a narrative event."""

    label: str
    effects: ChoiceEffects = Field(default_factory=ChoiceEffects)


class NarrativeEventBase(BaseModel):
    """Fields shared by every narrative event variant."""

    id: str
    season: int
    week: int
    title: str
    description: str = ""
    escalation_level: EscalationLevel = 0
    condition_key: str | None = None
    choices: list[EventChoice] = Field(default_factory=list)
    acknowledged: bool = False
    selected_choice: int | None = None
    chain_id: str | None = None
    chain_step: int | None = None

    @property
    def resolved(self) -> bool:
        return self.acknowledged or self.selected_choice is not None

    @property
    def awaiting_choice(self) -> bool:
        return bool(self.choices) and self.selected_choice is None


class BudgetShortfallEvent(NarrativeEventBase):
    kind: Literal["budget_shortfall"] = "budget_shortfall"
    balance: int
    weeks_negative: int


class DistressChangeEvent(NarrativeEventBase):
    kind: Literal["distress_change"] = "distress_change"
    from_level: str
    to_level: str


class RivalSigningEvent(NarrativeEventBase):
    kind: Literal["rival_signing"] = "rival_signing"
    rival_id: str
    player_id: str


class SharedTargetEvent(NarrativeEventBase):
    kind: Literal["shared_target"] = "shared_target"
    rival_id: str
    player_id: str


class BurnoutEvent(NarrativeEventBase):
    kind: Literal["burnout"] = "burnout"
    fatigue: int


class ContactTipEvent(NarrativeEventBase):
    kind: Literal["contact_tip"] = "contact_tip"
    player_id: str


class RetainerSuspendedEvent(NarrativeEventBase):
    kind: Literal["retainer_suspended"] = "retainer_suspended"
    contract_id: str
    club_name: str


class ChainStepEvent(NarrativeEventBase):
    kind: Literal["chain_step"] = "chain_step"
    template_key: str
    player_id: str | None = None
    rival_id: str | None = None


NarrativeEvent = Annotated[
    BudgetShortfallEvent
    | DistressChangeEvent
    | RivalSigningEvent
    | SharedTargetEvent
    | BurnoutEvent
    | ContactTipEvent
    | RetainerSuspendedEvent
    | ChainStepEvent,
    Field(discriminator="kind"),
]


class EventChain(BaseModel):
    """A sequence of linked narrative events sharing choice history."""

    id: str
    template_key: str
    current_step: int = Field(default=0, ge=0)
    max_steps: int = Field(ge=1)
    resolved: bool = False
    choice_history: list[int | None] = Field(default_factory=list)
    context: dict[str, Any] = Field(default_factory=dict)
    next_step_week: int | None = None
    event_ids: list[str] = Field(default_factory=list)
    started_week: int = 0
