"""Tuning — every numeric law of the career simulation in one place.

Consumed by perception, the scheduler, the financial engine, rivals, and the
narrative engine. Curves that product design has not pinned down (bankruptcy
recovery, credit recovery) live here as parameters rather than fixed laws.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class Tuning(BaseModel):
    """The complete set of tunable simulation parameters.

    Organized by subsystem:
    - Observation: attribute scale, noise and confidence curve
    - Calendar: fatigue, recovery, skill progression
    - Economy: salary, expenses, distress ladder, loans, credit, contracts
    - Competition: rival progress and signing
    - Narrative: triggers, escalation, chains
    """

    # Observation
    attribute_min: int = Field(default=0, ge=-100, le=100)
    attribute_max: int = Field(default=20, ge=1, le=1000)
    skill_max: int = Field(default=20, ge=5, le=100)
    noise_floor: float = Field(default=0.4, ge=0.0, le=5.0)
    noise_skill_divisor: float = Field(default=3.0, gt=0.0, le=10.0)
    fatigue_noise_factor: float = Field(default=1.0, ge=0.0, le=5.0)
    noise_band_sigmas: float = Field(default=2.5, ge=1.0, le=5.0)
    confidence_skill_weight: float = Field(default=0.5, ge=0.0, le=1.0)
    confidence_repeat_cap: float = Field(default=0.35, ge=0.0, le=1.0)
    confidence_quality_weight: float = Field(default=0.2, ge=0.0, le=1.0)
    confidence_fatigue_penalty: float = Field(default=0.3, ge=0.0, le=1.0)
    equipment_confidence_bonus: list[float] = Field(
        default_factory=lambda: [0.0, 0.0, 0.02, 0.05, 0.08, 0.12]
    )

    # Calendar
    max_fatigue: int = Field(default=100, ge=10, le=1000)
    forced_rest_fatigue: int = Field(default=90, ge=10, le=1000)
    burnout_fatigue: int = Field(default=80, ge=10, le=1000)
    passive_recovery: int = Field(default=4, ge=0, le=50)
    rest_recovery: int = Field(default=15, ge=0, le=100)
    rest_diminishing_factor: float = Field(default=0.6, ge=0.0, le=1.0)
    xp_per_level: int = Field(default=30, ge=1, le=1000)

    # Economy: income and expenses (per week, indexed by tier - 1)
    tier_salary: list[int] = Field(default_factory=lambda: [150, 300, 600, 1000, 1600])
    tier_rent: list[int] = Field(default_factory=lambda: [50, 90, 130, 170, 200])
    tier_travel: list[int] = Field(default_factory=lambda: [25, 40, 60, 80, 100])
    subscription_by_equipment: list[int] = Field(default_factory=lambda: [12, 20, 30, 40, 50])
    other_expenses: int = Field(default=12, ge=0, le=10000)
    assistant_salary: int = Field(default=150, ge=0, le=10000)
    equipment_upgrade_costs: dict[int, int] = Field(
        default_factory=lambda: {2: 500, 3: 1500, 4: 4000, 5: 10000}
    )
    equipment_liquidation_rate: float = Field(default=0.4, ge=0.0, le=1.0)

    # Economy: distress ladder. A rung is reached when balance <= its balance
    # threshold and weeks_negative >= its weeks threshold.
    warning_balance: int = 0
    warning_weeks: int = Field(default=2, ge=1, le=52)
    distressed_balance: int = 0
    distressed_weeks: int = Field(default=4, ge=1, le=52)
    critical_balance: int = -2000
    critical_weeks: int = Field(default=8, ge=1, le=52)
    bankruptcy_balance: int = -5000
    bankruptcy_weeks: int = Field(default=12, ge=1, le=104)
    weeks_negative_recovery: int = Field(default=2, ge=1, le=52)
    bankruptcy_cooldown_weeks: int = Field(default=10, ge=0, le=104)
    warning_credit_decay: int = Field(default=1, ge=0, le=20)
    distressed_reputation_decay: float = Field(default=2.0, ge=0.0, le=20.0)
    critical_reputation_decay: float = Field(default=3.0, ge=0.0, le=20.0)

    # Economy: credit score
    credit_default: int = Field(default=50, ge=0, le=100)
    credit_positive_month: int = Field(default=2, ge=0, le=20)
    credit_on_time_payment: int = Field(default=3, ge=0, le=20)
    credit_missed_payment: int = Field(default=-5, ge=-50, le=0)
    credit_loan_default: int = Field(default=-10, ge=-50, le=0)
    credit_negative_month: int = Field(default=-3, ge=-50, le=0)
    credit_retainer_month: int = Field(default=1, ge=0, le=20)
    credit_tier_minimum: dict[int, int] = Field(
        default_factory=lambda: {1: 30, 2: 30, 3: 40, 4: 40, 5: 50}
    )
    loan_base_rate: float = Field(default=0.10, ge=0.0, le=1.0)
    loan_credit_discount: float = Field(default=0.07, ge=0.0, le=1.0)
    loan_default_after_misses: int = Field(default=3, ge=1, le=12)

    # Economy: contracts and report income
    retainer_suspend_after: int = Field(default=2, ge=1, le=12)
    retainer_offer_chance: float = Field(default=0.2, ge=0.0, le=1.0)
    consulting_offer_chance: float = Field(default=0.05, ge=0.0, le=1.0)
    consulting_min_tier: int = Field(default=4, ge=1, le=5)
    offer_expiry_weeks: int = Field(default=4, ge=1, le=52)
    report_reveal_weeks: int = Field(default=6, ge=1, le=52)
    report_accuracy_threshold: float = Field(default=0.85, ge=0.0, le=1.0)
    report_reputation_gain: float = Field(default=3.0, ge=0.0, le=50.0)
    report_reputation_loss: float = Field(default=3.0, ge=0.0, le=50.0)
    placement_fee_rate: float = Field(default=0.02, ge=0.0, le=1.0)
    placement_fee_minimum: int = Field(default=100, ge=0, le=100000)
    sell_on_weeks: int = Field(default=20, ge=1, le=200)
    sell_on_growth: float = Field(default=1.5, ge=0.0, le=10.0)

    # Competition
    rival_completion_threshold: int = Field(default=5, ge=1, le=50)
    rival_high_quality: int = Field(default=4, ge=1, le=5)
    rival_discovery_chance: float = Field(default=0.2, ge=0.0, le=1.0)
    rival_max_targets: int = Field(default=8, ge=1, le=50)
    rival_reputation_drift: int = Field(default=2, ge=0, le=10)
    rival_budget_caps: dict[int, int] = Field(
        default_factory=lambda: {1: 1_000_000, 2: 3_000_000, 3: 8_000_000, 4: 25_000_000}
    )

    # Narrative
    narrative_event_chance: float = Field(default=0.05, ge=0.0, le=1.0)
    chain_start_chance: float = Field(default=0.08, ge=0.0, le=1.0)
    max_active_chains: int = Field(default=3, ge=0, le=10)
    escalation_warning_weeks: int = Field(default=2, ge=1, le=52)
    escalation_critical_weeks: int = Field(default=4, ge=1, le=52)

    @model_validator(mode="after")
    def _check_scale(self) -> Tuning:
        if self.attribute_min >= self.attribute_max:
            raise ValueError("attribute_min must be below attribute_max")
        ladder = [
            self.warning_weeks,
            self.distressed_weeks,
            self.critical_weeks,
            self.bankruptcy_weeks,
        ]
        if ladder != sorted(ladder):
            raise ValueError("distress week thresholds must be non-decreasing up the ladder")
        return self

    def salary_for(self, tier: int) -> int:
        return self.tier_salary[_tier_index(tier, self.tier_salary)]

    def rent_for(self, tier: int) -> int:
        return self.tier_rent[_tier_index(tier, self.tier_rent)]

    def travel_for(self, tier: int) -> int:
        return self.tier_travel[_tier_index(tier, self.tier_travel)]

    def subscription_for(self, equipment_level: int) -> int:
        return self.subscription_by_equipment[
            _tier_index(equipment_level, self.subscription_by_equipment)
        ]


def _tier_index(tier: int, table: list[int]) -> int:
    return max(0, min(len(table) - 1, tier - 1))


DEFAULT_TUNING = Tuning()
