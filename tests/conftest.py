"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from dwzplan.config.schema import Assumptions, HouseholdConfig, PersonConfig, SolverSettings


def _household(
    age: int = 40,
    accessible: float = 300_000,
    locked: float = 200_000,
    savings: float = 50_000,
    life_expectancy: int = 90,
    preservation_age: int = 60,
    target_spend: float = 0.0,
    **person_fields: float,
) -> HouseholdConfig:
    """Single-person household with sensible defaults for solver tests."""
    return HouseholdConfig(
        people=[
            PersonConfig(
                age=age,
                accessible_balance=accessible,
                locked_balance=locked,
                preservation_age=preservation_age,
                **person_fields,
            )
        ],
        annual_savings=savings,
        target_spend=target_spend,
        life_expectancy=life_expectancy,
    )


@pytest.fixture
def household() -> HouseholdConfig:
    return _household()


@pytest.fixture
def zero_return() -> Assumptions:
    """No growth, no fees, no bequest, flat spending."""
    return Assumptions(real_return=0.0)


@pytest.fixture
def assumptions() -> Assumptions:
    return Assumptions(real_return=0.04)


@pytest.fixture
def settings() -> SolverSettings:
    return SolverSettings()


@pytest.fixture
def make_household() -> Callable[..., HouseholdConfig]:
    """Factory for single-person households; keyword overrides as in ``_household``."""
    return _household
