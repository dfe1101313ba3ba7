"""Tests for the contribution-split optimizer."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from dwzplan.analytics.split_optimizer import optimize_split
from dwzplan.config.defaults import default_couple
from dwzplan.config.schema import (
    Assumptions,
    HouseholdConfig,
    OptimizerOptions,
    SavingsSplitPolicy,
)
from dwzplan.rules.au import AustralianRules

HouseholdFactory = Callable[..., HouseholdConfig]

FAST = OptimizerOptions(grid_points=5, refine_iterations=1, refine_points=3)
GROSS = SavingsSplitPolicy(cap_per_person=30_000, mode="gross", accessible_tax_rate=0.325)


class TestOptimizeSplit:
    """Grid-and-refine search over the locked savings fraction."""

    def test_budget_below_cap_goes_fully_locked(
        self, make_household: HouseholdFactory, assumptions: Assumptions
    ) -> None:
        """Past preservation age every fraction ties, and max_locked picks full locking."""
        hh = make_household(age=61, savings=20_000)
        result = optimize_split(hh, assumptions, GROSS, FAST)
        assert result.recommended_fraction == 1.0
        assert result.recommendation.locked_gross == pytest.approx(20_000)
        assert not result.constraints.cap_binding

    def test_split_sums_to_budget(
        self, make_household: HouseholdFactory, assumptions: Assumptions
    ) -> None:
        """The recommended split always adds up to the savings budget."""
        hh = make_household(savings=50_000)
        result = optimize_split(hh, assumptions, GROSS, FAST)
        rec = result.recommendation
        assert rec.locked_gross + rec.accessible_gross == pytest.approx(50_000)

    def test_cap_binding_reported(
        self, make_household: HouseholdFactory, assumptions: Assumptions
    ) -> None:
        """Savings above the concessional cap are routed to the accessible pool."""
        hh = make_household(age=61, savings=50_000)
        result = optimize_split(hh, assumptions, GROSS, FAST)
        assert result.constraints.cap_binding
        assert result.constraints.cap_total == 30_000
        assert result.recommendation.locked_gross == pytest.approx(30_000)
        assert result.recommendation.accessible_gross == pytest.approx(20_000)

    def test_min_locked_tie_break(
        self, make_household: HouseholdFactory, assumptions: Assumptions
    ) -> None:
        """The min_locked tie-break prefers the smallest fraction among equals."""
        hh = make_household(age=61, savings=20_000)
        options = FAST.model_copy(update={"tie_break": "min_locked"})
        result = optimize_split(hh, assumptions, GROSS, options)
        assert result.recommended_fraction == 0.0

    def test_best_age_is_curve_minimum(
        self, household: HouseholdConfig, assumptions: Assumptions
    ) -> None:
        """The recommended age is the lowest age on the sensitivity curve."""
        result = optimize_split(household, assumptions, SavingsSplitPolicy(), FAST)
        ages = [p.earliest_age for p in result.sensitivity_curve if p.earliest_age is not None]
        assert result.earliest_age == min(ages)

    def test_curve_sorted_and_memoized(
        self, make_household: HouseholdFactory, assumptions: Assumptions
    ) -> None:
        """Each rounded fraction is evaluated once and the curve is sorted."""
        hh = make_household(age=61, savings=20_000)
        result = optimize_split(hh, assumptions, GROSS, FAST)
        fractions = [p.fraction for p in result.sensitivity_curve]
        assert fractions == sorted(set(fractions))
        assert {0.0, 0.25, 0.5, 0.75, 1.0} <= set(fractions)
        assert result.evaluation_count == len(fractions)
        assert result.age_evaluations >= result.evaluation_count

    def test_not_achievable(self, make_household: HouseholdFactory, assumptions: Assumptions) -> None:
        """With no achievable fraction the result reports no age and zero spend."""
        hh = make_household(target_spend=10_000_000)
        result = optimize_split(hh, assumptions, GROSS, FAST)
        assert result.earliest_age is None
        assert result.recommended_fraction == 0.0
        assert result.base_spend == 0.0

    def test_allocation_across_couple(self, assumptions: Assumptions) -> None:
        """Locked contributions are allocated across both people up to the recommendation."""
        hh = default_couple()
        result = optimize_split(
            hh,
            assumptions,
            options=OptimizerOptions(grid_points=3, refine_iterations=0),
            rules=AustralianRules(),
        )
        assert len(result.allocation.per_person) == 2
        assert sum(result.allocation.per_person) == pytest.approx(
            result.recommendation.locked_gross, abs=2.0
        )

    def test_parallel_grid_matches_sequential(
        self, make_household: HouseholdFactory, assumptions: Assumptions
    ) -> None:
        """Parallel and sequential grids give identical curves (determinism)."""
        hh = make_household(age=55, savings=30_000)
        options = OptimizerOptions(grid_points=3, refine_iterations=0)
        sequential = optimize_split(hh, assumptions, GROSS, options)
        parallel = optimize_split(
            hh, assumptions, GROSS, options.model_copy(update={"max_workers": 2})
        )
        assert parallel.sensitivity_curve == sequential.sensitivity_curve
        assert parallel.recommended_fraction == sequential.recommended_fraction
