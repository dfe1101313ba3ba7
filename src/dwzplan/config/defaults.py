"""Default configuration values for dwzplan."""

from __future__ import annotations

from dwzplan.config.schema import (
    Assumptions,
    HouseholdConfig,
    PersonConfig,
    SavingsSplitPolicy,
    SolverSettings,
    SpendScheduleConfig,
)
from dwzplan.policies.spending.banded import go_go_bands

DEFAULT_REAL_RETURN = 0.05
DEFAULT_LIFE_EXPECTANCY = 90
DEFAULT_PRESERVATION_AGE = 60


def default_household() -> HouseholdConfig:
    """Single 35-year-old saving $50k a year, planning to 90."""
    return HouseholdConfig(
        people=[
            PersonConfig(
                name="Alex",
                age=35,
                income=120_000,
                accessible_balance=100_000,
                locked_balance=150_000,
                preservation_age=DEFAULT_PRESERVATION_AGE,
                locked_premium=500,
            ),
        ],
        annual_savings=50_000,
        target_spend=60_000,
        life_expectancy=DEFAULT_LIFE_EXPECTANCY,
    )


def default_couple() -> HouseholdConfig:
    """Couple in their late 30s with a 30% locked savings split."""
    return HouseholdConfig(
        people=[
            PersonConfig(
                name="Sam",
                age=38,
                income=150_000,
                accessible_balance=120_000,
                locked_balance=200_000,
                employer_contribution=18_000,
            ),
            PersonConfig(
                name="Jo",
                age=36,
                income=90_000,
                accessible_balance=60_000,
                locked_balance=110_000,
                employer_contribution=10_800,
            ),
        ],
        annual_savings=70_000,
        target_spend=80_000,
        life_expectancy=DEFAULT_LIFE_EXPECTANCY,
        savings_split=SavingsSplitPolicy(locked_fraction=0.3),
    )


def default_assumptions() -> Assumptions:
    """5% real return, no fees, no bequest, flat spending."""
    return Assumptions(real_return=DEFAULT_REAL_RETURN)


def default_solver_settings() -> SolverSettings:
    """Default spend ceiling, 50 bisection rounds, $1 bridge tolerance."""
    return SolverSettings()


def go_go_schedule() -> SpendScheduleConfig:
    """Go-go / slow-go / no-go schedule: 1.10x to 60, 1.00x to 75, 0.85x after."""
    return SpendScheduleConfig(kind="banded", bands=go_go_bands())
