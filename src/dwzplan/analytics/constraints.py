"""Explain which constraint caps the sustainable spend at a retirement age."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from dwzplan.analytics.age_search import SolverResult
from dwzplan.analytics.bridge import bridge_pv, bridge_years
from dwzplan.config.schema import Assumptions, HouseholdConfig
from dwzplan.policies.spending.factory import build_schedule

BINDING_RELATIVE_TOLERANCE = 0.002
BINDING_ABSOLUTE_TOLERANCE = 1.0


@dataclass(frozen=True)
class BindingConstraint:
    """Which limit determines the sustainable spend.

    Attributes:
        binding: ``"bridge"`` when accessible wealth before preservation age
            is what limits spending, else ``"horizon"``.
        bridge_limit: Highest base spend the accessible pool could fund over
            the bridge, or None when there are no bridge years.
        horizon_spend: Spend that exhausts wealth to the bequest at life
            expectancy (the solved spend).
        bridge_years: Years between retirement and preservation age, cut
            off at life expectancy.
    """

    binding: Literal["bridge", "horizon"]
    bridge_limit: float | None
    horizon_spend: float
    bridge_years: int


def explain_binding_constraint(
    result: SolverResult,
    household: HouseholdConfig,
    assumptions: Assumptions,
) -> BindingConstraint:
    """Report whether the bridge or the life-expectancy horizon binds.

    The bridge limit is the accessible balance at retirement divided by the
    present value of one unit of base spend over the bridge years. The
    bridge binds when that limit is within ``max($1, 0.2%)`` of the solved
    spend.
    """
    years = bridge_years(
        result.retirement_age, household.preservation_age, household.life_expectancy
    )
    spend = result.base_spend
    if years == 0:
        return BindingConstraint("horizon", None, spend, 0)

    unit_pv = bridge_pv(
        1.0,
        result.retirement_age,
        household.preservation_age,
        build_schedule(assumptions.schedule),
        assumptions.net_return,
        household.life_expectancy,
    )
    if unit_pv <= 0:
        return BindingConstraint("horizon", None, spend, years)

    limit = result.bridge.have / unit_pv
    tolerance = max(BINDING_ABSOLUTE_TOLERANCE, BINDING_RELATIVE_TOLERANCE * spend)
    binding: Literal["bridge", "horizon"] = (
        "bridge" if abs(limit - spend) <= tolerance or limit < spend else "horizon"
    )
    return BindingConstraint(binding, limit, spend, years)
