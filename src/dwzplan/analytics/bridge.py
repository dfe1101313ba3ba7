"""Bridge-feasibility test: can the accessible pool fund the pre-preservation years?"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from dwzplan.config.schema import Assumptions
from dwzplan.core.state import Balances
from dwzplan.policies.spending.base import SpendSchedule
from dwzplan.utils.validation import ensure_finite, ensure_non_negative

BRIDGE_EPSILON = 1.0

BridgeStatus = Literal["covered", "short"]


@dataclass(frozen=True)
class BridgeAssessment:
    """Whether the accessible pool covers the bridge years.

    Attributes:
        status: ``"covered"`` or ``"short"``.
        years: Number of bridge years inside the horizon (0 when retiring
            at or after preservation age).
        need_pv: Present value at retirement of bridge-year spending.
        have: Accessible balance at retirement.
        covered_years: Years the accessible pool lasts when drawn down year
            by year. Informational; ``status`` is decided by the PV test.
        shortfall: ``max(0, need_pv - have)``.
    """

    status: BridgeStatus
    years: int
    need_pv: float
    have: float
    covered_years: int
    shortfall: float

    @property
    def covered(self) -> bool:
        return self.status == "covered"


def bridge_years(
    retirement_age: int, preservation_age: int, life_expectancy: int | None = None
) -> int:
    """Years from retirement to preservation age, cut off at life expectancy."""
    end = preservation_age if life_expectancy is None else min(preservation_age, life_expectancy)
    return max(0, end - retirement_age)


def bridge_pv(
    base_spend: float,
    retirement_age: int,
    preservation_age: int,
    schedule: SpendSchedule,
    rate: float,
    life_expectancy: int | None = None,
) -> float:
    """Present value at retirement of spending over the bridge years.

    The k-th bridge year (ending at ``retirement_age + k``) is discounted by
    ``(1 + rate) ** k``. Years after ``life_expectancy`` are not counted.
    """
    years = bridge_years(retirement_age, preservation_age, life_expectancy)
    return sum(
        base_spend * schedule.multiplier_at(retirement_age + k) / (1.0 + rate) ** k
        for k in range(1, years + 1)
    )


def assess_bridge(
    balances: Balances,
    base_spend: float,
    retirement_age: int,
    preservation_age: int,
    schedule: SpendSchedule,
    assumptions: Assumptions,
    epsilon: float = BRIDGE_EPSILON,
    life_expectancy: int | None = None,
) -> BridgeAssessment:
    """Test whether accessible wealth at retirement funds the bridge.

    Args:
        balances: Pool balances at retirement; only the accessible pool counts.
        base_spend: Base annual spend (before schedule multipliers).
        retirement_age: Age when drawdown starts.
        preservation_age: Age when the locked pool unlocks.
        schedule: Spend schedule.
        assumptions: Supplies the net return used for discounting.
        epsilon: Tolerance in currency units for the PV comparison.
        life_expectancy: Horizon; bridge years past it are not charged.

    Returns:
        BridgeAssessment; covered iff ``have + epsilon >= need_pv``.
    """
    ensure_non_negative("base_spend", base_spend)
    ensure_finite("accessible balance", balances.accessible)

    years = bridge_years(retirement_age, preservation_age, life_expectancy)
    have = max(0.0, balances.accessible)
    if years == 0:
        return BridgeAssessment("covered", 0, 0.0, have, 0, 0.0)

    rate = assumptions.net_return
    need = bridge_pv(
        base_spend, retirement_age, preservation_age, schedule, rate, life_expectancy
    )

    remaining = have
    covered_years = 0
    for k in range(1, years + 1):
        spend = base_spend * schedule.multiplier_at(retirement_age + k)
        if remaining + epsilon < spend:
            break
        remaining = max(0.0, remaining - spend) * (1.0 + rate)
        covered_years += 1

    status: BridgeStatus = "covered" if have + epsilon >= need else "short"
    return BridgeAssessment(
        status=status,
        years=years,
        need_pv=need,
        have=have,
        covered_years=covered_years,
        shortfall=max(0.0, need - have),
    )
