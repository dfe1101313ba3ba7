"""Tests for the bridge assessor."""

from __future__ import annotations

import pytest

from dwzplan.analytics.bridge import assess_bridge, bridge_pv, bridge_years
from dwzplan.config.schema import Assumptions
from dwzplan.core.state import Balances
from dwzplan.policies.spending.banded import BandedSchedule, go_go_bands
from dwzplan.policies.spending.flat import FlatSchedule


class TestAssessBridge:
    """Present-value test of the accessible pool against bridge spending."""

    def test_no_bridge_after_preservation(self, assumptions: Assumptions) -> None:
        """Retiring after preservation age has no bridge to fund."""
        bridge = assess_bridge(Balances(0.0, 1e6), 50_000, 62, 60, FlatSchedule(), assumptions)
        assert bridge.status == "covered"
        assert bridge.years == 0
        assert bridge.need_pv == 0.0

    def test_pv_matches_independent_sum(self) -> None:
        """Need equals the discounted sum of each bridge year's spend."""
        assumptions = Assumptions(real_return=0.05)
        bridge = assess_bridge(Balances(1e6, 0.0), 40_000, 50, 60, FlatSchedule(), assumptions)
        expected = sum(40_000 / 1.05**k for k in range(1, 11))
        assert bridge.years == 10
        assert bridge.need_pv == pytest.approx(expected)
        assert bridge.covered

    def test_multiplier_taken_at_end_age(self) -> None:
        assumptions = Assumptions(real_return=0.0)
        bridge = assess_bridge(
            Balances(1e6, 0.0), 10_000, 57, 60, BandedSchedule(go_go_bands()), assumptions
        )
        # years ending 58, 59 are go-go (1.10), the year ending 60 is slow-go (1.00)
        assert bridge.need_pv == pytest.approx(11_000 + 11_000 + 10_000)

    def test_fees_raise_need(self) -> None:
        """Fees lower the discount rate, so the same spending needs more today."""
        plain = assess_bridge(
            Balances(0.0, 0.0), 40_000, 50, 60, FlatSchedule(), Assumptions(real_return=0.05)
        )
        with_fees = assess_bridge(
            Balances(0.0, 0.0),
            40_000,
            50,
            60,
            FlatSchedule(),
            Assumptions(real_return=0.05, fees=0.01),
        )
        assert with_fees.need_pv > plain.need_pv

    def test_short_bridge(self) -> None:
        """Locked wealth does not count towards the bridge."""
        bridge = assess_bridge(
            Balances(100_000, 2e6), 50_000, 55, 60, FlatSchedule(), Assumptions(real_return=0.05)
        )
        assert bridge.status == "short"
        assert not bridge.covered
        assert bridge.shortfall == pytest.approx(bridge.need_pv - 100_000)
        assert bridge.covered_years == 2

    def test_epsilon_tolerance(self, zero_return: Assumptions) -> None:
        """A shortfall under the tolerance still counts as covered."""
        bridge = assess_bridge(Balances(29_999.5, 0.0), 10_000, 57, 60, FlatSchedule(), zero_return)
        assert bridge.covered
        strict = assess_bridge(
            Balances(29_999.5, 0.0), 10_000, 57, 60, FlatSchedule(), zero_return, epsilon=0.0
        )
        assert not strict.covered

    def test_horizon_before_preservation(self, zero_return: Assumptions) -> None:
        """Years past life expectancy are not charged to the bridge."""
        bridge = assess_bridge(
            Balances(500_000, 0.0),
            100_000,
            50,
            60,
            FlatSchedule(),
            zero_return,
            life_expectancy=55,
        )
        assert bridge.years == 5
        assert bridge.need_pv == pytest.approx(500_000)
        assert bridge.covered
        assert bridge.covered_years == 5


class TestBridgePV:
    """Present value of bridge-year spending."""

    def test_zero_years(self) -> None:
        assert bridge_pv(10_000, 60, 60, FlatSchedule(), 0.05) == 0.0

    def test_linear_in_spend(self) -> None:
        unit = bridge_pv(1.0, 50, 60, FlatSchedule(), 0.03)
        assert bridge_pv(25_000, 50, 60, FlatSchedule(), 0.03) == pytest.approx(25_000 * unit)

    def test_stops_at_life_expectancy(self) -> None:
        """Only years up to the horizon are discounted."""
        capped = bridge_pv(1.0, 50, 60, FlatSchedule(), 0.03, life_expectancy=53)
        assert capped == pytest.approx(sum(1 / 1.03**k for k in range(1, 4)))


class TestBridgeYears:
    """Bridge length between retirement and preservation age."""

    def test_preservation_first(self) -> None:
        assert bridge_years(50, 60, 90) == 10

    def test_horizon_first(self) -> None:
        assert bridge_years(50, 60, 55) == 5

    def test_without_horizon(self) -> None:
        assert bridge_years(50, 60) == 10

    def test_never_negative(self) -> None:
        assert bridge_years(65, 60, 90) == 0
