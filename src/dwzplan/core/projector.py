"""Accumulation-phase wealth projection."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dwzplan.config.schema import Assumptions, HouseholdConfig
from dwzplan.core.state import Balances, PathPoint
from dwzplan.policies.contributions import employer_net, split_savings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Projection:
    """Pool balances at the end of accumulation, with the yearly path."""

    accessible: float
    locked: float
    path: tuple[PathPoint, ...]

    @property
    def balances(self) -> Balances:
        return Balances(self.accessible, self.locked)


def project(
    balances: Balances,
    household: HouseholdConfig,
    assumptions: Assumptions,
    from_age: int,
    to_age: int,
) -> Projection:
    """Project both pools forward from ``from_age`` to ``to_age``.

    Each year, in order: the employer contribution (net of contribution tax)
    lands in the locked pool; the savings budget is split between the pools;
    any future inflow whose age equals the year's starting age is added; the
    locked premium is deducted (floored at zero); both pools grow at the net
    return.

    Args:
        balances: Starting balances at ``from_age``.
        household: Household supplying savings, split policy and premiums.
        assumptions: Return and fee assumptions.
        from_age: Age at the start of projection.
        to_age: Age at the end of projection (typically the retirement age).

    Returns:
        Projection with end balances and one path point per year. When
        ``to_age <= from_age`` the inputs come back unchanged with no path.
    """
    if to_age <= from_age:
        return Projection(balances.accessible, balances.locked, ())

    policy = household.savings_split
    employer_gross = household.employer_contribution
    split = split_savings(
        household.annual_savings,
        policy,
        household.eligible_people,
        employer_gross=employer_gross,
    )
    employer_locked = employer_net(employer_gross, policy)
    inflows = household.future_inflows
    rate = assumptions.net_return
    premium = household.locked_premium

    current = balances
    path: list[PathPoint] = []
    for age in range(from_age, to_age):
        current = current.add(
            accessible=split.accessible_net,
            locked=employer_locked + split.locked_net,
        )
        for inflow in inflows:
            if inflow.age == age:
                if inflow.destination == "locked":
                    current = current.add(locked=inflow.amount)
                else:
                    current = current.add(accessible=inflow.amount)
        current = Balances(current.accessible, max(0.0, current.locked - premium))
        current = current.grow(rate)
        path.append(PathPoint.from_balances(age + 1, current, "accumulation"))

    logger.debug(
        "Projected %d years from age %d: accessible=%.2f locked=%.2f",
        to_age - from_age,
        from_age,
        current.accessible,
        current.locked,
    )
    return Projection(current.accessible, current.locked, tuple(path))
