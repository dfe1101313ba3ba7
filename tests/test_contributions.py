"""Tests for the savings split and concessional allocation."""

from __future__ import annotations

import pytest

from dwzplan.config.schema import HouseholdConfig, PersonConfig, SavingsSplitPolicy
from dwzplan.policies.contributions import (
    PersonHeadroom,
    allocate_concessional,
    cap_headroom,
    employer_net,
    gross_mode_policy,
    split_savings,
)
from dwzplan.rules.au import AustralianRules


class TestSplitSavings:
    """Splitting the savings budget between the two pools."""

    def test_no_policy_everything_accessible(self) -> None:
        """Without a policy all savings go to the accessible pool."""
        split = split_savings(40_000, None, eligible_people=1)
        assert split.accessible_gross == 40_000
        assert split.accessible_net == 40_000
        assert split.locked_gross == 0.0
        assert not split.cap_binding

    def test_budget_below_cap_all_locked(self) -> None:
        """Locked contributions are taxed at the contribution rate."""
        policy = SavingsSplitPolicy(locked_fraction=1.0, cap_per_person=30_000)
        split = split_savings(20_000, policy, eligible_people=1)
        assert split.locked_gross == 20_000
        assert split.accessible_gross == 0.0
        assert split.locked_net == pytest.approx(17_000)
        assert not split.cap_binding

    def test_excess_over_cap_stays_accessible(self) -> None:
        """Savings above the cap fall back to the accessible pool."""
        policy = SavingsSplitPolicy(locked_fraction=1.0, cap_per_person=30_000)
        split = split_savings(50_000, policy, eligible_people=1)
        assert split.locked_gross == 30_000
        assert split.accessible_gross == 20_000
        assert split.cap_binding

    def test_gross_amounts_sum_to_budget(self) -> None:
        """Gross amounts always add back up to the budget."""
        policy = SavingsSplitPolicy(locked_fraction=0.37, cap_per_person=10_000)
        split = split_savings(64_321, policy, eligible_people=2, employer_gross=3_000)
        assert split.locked_gross + split.accessible_gross == pytest.approx(64_321)

    def test_employer_contribution_consumes_headroom(self) -> None:
        """Employer contributions use up cap headroom first."""
        policy = SavingsSplitPolicy(locked_fraction=1.0, cap_per_person=30_000)
        split = split_savings(50_000, policy, eligible_people=1, employer_gross=12_000)
        assert split.cap_total == 18_000
        assert split.locked_gross == 18_000

    def test_gross_mode_taxes_accessible_portion(self) -> None:
        """In gross mode the accessible share pays income tax."""
        policy = SavingsSplitPolicy(locked_fraction=0.5, mode="gross", accessible_tax_rate=0.3)
        split = split_savings(20_000, policy, eligible_people=1)
        assert split.accessible_net == pytest.approx(7_000)
        assert split.locked_net == pytest.approx(8_500)

    def test_net_rounded_to_cents(self) -> None:
        """Net amounts are rounded to whole cents."""
        policy = SavingsSplitPolicy(locked_fraction=1.0, contribution_tax_rate=0.15)
        split = split_savings(1_000.01, policy, eligible_people=1)
        assert split.locked_net == 850.01


class TestHeadroom:
    """Concessional cap headroom and employer net amounts."""

    def test_eligible_people_clamped(self) -> None:
        """Eligible people are clamped to between zero and two."""
        policy = SavingsSplitPolicy(cap_per_person=30_000)
        assert cap_headroom(policy, 5, 0.0) == 60_000
        assert cap_headroom(policy, -1, 0.0) == 0.0

    def test_never_negative(self) -> None:
        """Employer money above the cap leaves zero headroom, not negative."""
        policy = SavingsSplitPolicy(cap_per_person=10_000)
        assert cap_headroom(policy, 1, 25_000) == 0.0

    def test_employer_net_default_tax(self) -> None:
        assert employer_net(10_000, None) == pytest.approx(8_500)
        assert employer_net(0.0, None) == 0.0


class TestGrossModePolicy:
    """Deriving a gross-mode policy from household incomes."""

    def test_uses_top_earner_marginal_rate(self) -> None:
        """The accessible tax rate is the top earner's marginal rate."""
        household = HouseholdConfig(
            people=[PersonConfig(age=40, income=150_000), PersonConfig(age=38, income=90_000)],
            life_expectancy=90,
        )
        policy = gross_mode_policy(SavingsSplitPolicy(locked_fraction=0.4), household, AustralianRules())
        assert policy.mode == "gross"
        assert policy.accessible_tax_rate == pytest.approx(0.39)
        assert policy.cap_per_person == 30_000
        assert policy.locked_fraction == 0.4


class TestAllocateConcessional:
    """Per-person allocation of concessional contributions."""

    def test_highest_rate_filled_first(self) -> None:
        """The person with the higher marginal rate is filled first."""
        people = [
            PersonHeadroom(index=0, headroom=20_000, marginal_rate=0.32),
            PersonHeadroom(index=1, headroom=20_000, marginal_rate=0.39),
        ]
        allocation = allocate_concessional(30_000, people)
        assert allocation.per_person == (10_000.0, 20_000.0)
        assert allocation.total_allocated == 30_000

    def test_equal_rates_split_pro_rata(self) -> None:
        """People on the same rate share in proportion to headroom."""
        people = [
            PersonHeadroom(index=0, headroom=30_000, marginal_rate=0.30),
            PersonHeadroom(index=1, headroom=10_000, marginal_rate=0.30),
        ]
        allocation = allocate_concessional(20_000, people)
        assert allocation.per_person == (15_000.0, 5_000.0)

    def test_total_limited_by_headroom(self) -> None:
        """Nothing is allocated past the available headroom."""
        people = [PersonHeadroom(index=0, headroom=5_000, marginal_rate=0.3)]
        allocation = allocate_concessional(12_000, people)
        assert allocation.total_allocated == 5_000

    def test_nothing_to_allocate(self) -> None:
        people = [PersonHeadroom(index=0, headroom=5_000, marginal_rate=0.3)]
        allocation = allocate_concessional(0.0, people)
        assert allocation.per_person == (0.0,)
        assert allocation.total_allocated == 0.0
