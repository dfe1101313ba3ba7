"""Pydantic v2 configuration models for dwzplan."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dwzplan.core.state import Balances

WithdrawalOrderName = Literal["accessible_first", "pro_rata", "locked_first"]


class AgeBand(BaseModel):
    """An age interval ``[from_age, to_age)`` with a spend multiplier."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    from_age: int = Field(ge=0, le=150, description="First age in the band (inclusive)")
    to_age: int = Field(ge=0, le=150, description="End of the band (exclusive)")
    multiplier: float = Field(ge=0, le=10, description="Multiplier applied to base spend")
    label: str = Field(default="", description="Display label, e.g. 'go-go'")

    @model_validator(mode="after")
    def _validate_interval(self) -> AgeBand:
        if self.to_age <= self.from_age:
            raise ValueError(
                f"to_age ({self.to_age}) must be greater than from_age ({self.from_age})"
            )
        return self


class SpendScheduleConfig(BaseModel):
    """Selects and parameterizes a spend schedule variant."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    kind: Literal["flat", "stepped", "banded"] = "flat"
    step_age: int = Field(
        default=75, ge=0, le=150, description="Age where a stepped schedule switches level"
    )
    early_multiplier: float = Field(
        default=1.0, ge=0, le=10, description="Stepped multiplier before step_age"
    )
    late_multiplier: float = Field(
        default=1.0, ge=0, le=10, description="Stepped multiplier from step_age on"
    )
    bands: list[AgeBand] = Field(
        default_factory=list,
        description="Ordered, non-overlapping bands for the banded schedule",
    )

    @model_validator(mode="after")
    def _validate_bands(self) -> SpendScheduleConfig:
        for prev, cur in zip(self.bands, self.bands[1:]):
            if cur.from_age < prev.to_age:
                raise ValueError(
                    f"bands must be ordered and non-overlapping: "
                    f"[{prev.from_age}, {prev.to_age}) overlaps or follows "
                    f"[{cur.from_age}, {cur.to_age})"
                )
        return self


class PersonConfig(BaseModel):
    """One member of the household."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    name: str = ""
    age: int = Field(ge=0, le=120)
    income: float = Field(default=0.0, ge=0, description="Gross annual income")
    accessible_balance: float = Field(default=0.0, ge=0, description="Freely accessible wealth")
    locked_balance: float = Field(
        default=0.0, ge=0, description="Wealth locked until preservation age"
    )
    preservation_age: int = Field(default=60, ge=0, le=120)
    locked_premium: float = Field(
        default=0.0, ge=0, description="Annual fee or insurance premium charged to the locked pool"
    )
    employer_contribution: float = Field(
        default=0.0,
        ge=0,
        description="Gross compulsory employer contribution to the locked pool per year",
    )


class FutureInflow(BaseModel):
    """A one-off inflow (inheritance, downsizing) during accumulation."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    age: int = Field(ge=0, le=120, description="Primary person's age when the inflow lands")
    amount: float = Field(ge=0, description="Amount in today's dollars")
    destination: Literal["accessible", "locked"] = "accessible"
    description: str = ""


class SavingsSplitPolicy(BaseModel):
    """How the annual savings budget is divided between the two pools."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    locked_fraction: float = Field(
        default=0.0, ge=0, le=1, description="Share of the budget directed to the locked pool"
    )
    cap_per_person: float = Field(
        default=30_000.0, ge=0, description="Annual concessional cap per person (gross)"
    )
    eligible_people: int | None = Field(
        default=None,
        ge=0,
        le=2,
        description="People with cap headroom; defaults to the household size",
    )
    contribution_tax_rate: float = Field(
        default=0.15, ge=0, le=1, description="Tax on contributions into the locked pool"
    )
    accessible_tax_rate: float = Field(
        default=0.0,
        ge=0,
        le=1,
        description="Marginal tax on the accessible portion (gross mode only)",
    )
    mode: Literal["net", "gross"] = Field(
        default="net",
        description="'net': budget is after-tax cash; 'gross': budget is pre-tax capacity",
    )


class HouseholdConfig(BaseModel):
    """One or two people planning together."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    people: list[PersonConfig] = Field(min_length=1, max_length=2)
    annual_savings: float = Field(
        default=0.0, ge=0, description="Combined annual savings budget before retirement"
    )
    target_spend: float = Field(
        default=0.0, ge=0, description="Desired annual spend in retirement (0 = no floor)"
    )
    life_expectancy: int = Field(ge=1, le=120)
    savings_split: SavingsSplitPolicy | None = None
    future_inflows: list[FutureInflow] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_ages(self) -> HouseholdConfig:
        if self.life_expectancy <= self.current_age:
            raise ValueError(
                f"life_expectancy ({self.life_expectancy}) must be greater than "
                f"current age ({self.current_age})"
            )
        return self

    @property
    def primary(self) -> PersonConfig:
        """The person whose age anchors the household timeline."""
        return self.people[0]

    @property
    def current_age(self) -> int:
        return self.people[0].age

    @property
    def preservation_age(self) -> int:
        """Household preservation age: the earliest across people."""
        return min(p.preservation_age for p in self.people)

    @property
    def accessible_balance(self) -> float:
        return sum(p.accessible_balance for p in self.people)

    @property
    def locked_balance(self) -> float:
        return sum(p.locked_balance for p in self.people)

    @property
    def balances(self) -> Balances:
        return Balances(self.accessible_balance, self.locked_balance)

    @property
    def locked_premium(self) -> float:
        return sum(p.locked_premium for p in self.people)

    @property
    def income(self) -> float:
        return sum(p.income for p in self.people)

    @property
    def employer_contribution(self) -> float:
        return sum(p.employer_contribution for p in self.people)

    @property
    def eligible_people(self) -> int:
        if self.savings_split is not None and self.savings_split.eligible_people is not None:
            return self.savings_split.eligible_people
        return len(self.people)


class Assumptions(BaseModel):
    """Return, fee, bequest and spending-shape assumptions (real dollars)."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    real_return: float = Field(
        default=0.05, gt=-1, le=1, description="Annual real (inflation-adjusted) return"
    )
    fees: float = Field(default=0.0, ge=0, le=1, description="Annual fee drag")
    bequest: float = Field(default=0.0, ge=0, description="Terminal wealth target")
    schedule: SpendScheduleConfig = Field(default_factory=SpendScheduleConfig)
    withdrawal_order: WithdrawalOrderName = Field(
        default="accessible_first",
        description="How post-preservation spending is drawn from the two pools",
    )

    @property
    def net_return(self) -> float:
        """Growth and discount rate: real return less fees, floored at -99%."""
        return max(-0.99, self.real_return - self.fees)


class SolverSettings(BaseModel):
    """Numeric limits for the spend solver and bridge test."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    spend_ceiling: float = Field(
        default=100_000_000.0,
        gt=0,
        description="Largest base spend the exponential search may try",
    )
    bisection_iterations: int = Field(default=50, ge=1, le=200)
    bridge_epsilon: float = Field(
        default=1.0, ge=0, description="Tolerance (currency units) for the bridge PV test"
    )


class AgeBounds(BaseModel):
    """Optional limits on the retirement ages searched."""

    model_config = ConfigDict(extra="forbid")

    min_age: int | None = Field(default=None, ge=0, le=120)
    max_age: int | None = Field(default=None, ge=0, le=120)

    @model_validator(mode="after")
    def _validate_order(self) -> AgeBounds:
        if self.min_age is not None and self.max_age is not None:
            if self.max_age < self.min_age:
                raise ValueError("max_age must not be less than min_age")
        return self


class OptimizerOptions(BaseModel):
    """Search budget and preferences for the contribution-split optimizer."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    grid_points: int = Field(default=21, ge=2, le=1001)
    refine_iterations: int = Field(default=2, ge=0, le=20)
    refine_points: int = Field(default=5, ge=3, le=41)
    max_fraction: float = Field(default=1.0, ge=0, le=1)
    age_tolerance: int = Field(
        default=0, ge=0, description="Ages within this many years of the best are ties"
    )
    tie_break: Literal["max_locked", "min_locked", "max_spend"] = Field(
        default="max_locked",
        description="Secondary preference among tied fractions",
    )
    max_workers: int | None = Field(
        default=1,
        ge=1,
        description="Grid workers; None uses all cores, 1 runs sequentially",
    )
