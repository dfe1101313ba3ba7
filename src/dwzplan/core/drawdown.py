"""Phase-aware deterministic drawdown simulation."""

from __future__ import annotations

from dataclasses import dataclass

from dwzplan.config.schema import Assumptions
from dwzplan.core.state import Balances, PathPoint
from dwzplan.core.timeline import Timeline
from dwzplan.policies.spending.base import SpendSchedule
from dwzplan.policies.withdrawals import withdraw, withdraw_accessible_only
from dwzplan.utils.validation import ensure_finite, ensure_non_negative

_SHORTFALL_TOLERANCE = 1e-9


@dataclass(frozen=True)
class DrawdownResult:
    """Outcome of simulating retirement from one starting position.

    Attributes:
        terminal_wealth: Total of both pools at life expectancy.
        path: One point per drawdown year, labelled by end age.
        bridge_violation: True if the accessible pool ran dry before
            preservation age.
        shortfall_years: End ages of years where spending was not fully met.
        unfunded_spend: Total spending that could not be paid.
    """

    terminal_wealth: float
    path: tuple[PathPoint, ...]
    bridge_violation: bool
    shortfall_years: tuple[int, ...]
    unfunded_spend: float

    @property
    def final_balances(self) -> Balances:
        if not self.path:
            return Balances(0.0, 0.0)
        last = self.path[-1]
        return Balances(last.accessible, last.locked)


def simulate_drawdown(
    balances: Balances,
    base_spend: float,
    retirement_age: int,
    life_expectancy: int,
    preservation_age: int,
    schedule: SpendSchedule,
    assumptions: Assumptions,
    locked_premium: float = 0.0,
) -> DrawdownResult:
    """Simulate drawdown from ``retirement_age`` to ``life_expectancy``.

    For the year ending at age ``a``, spending is ``base_spend`` times the
    schedule multiplier at ``a``. Years ending at or before preservation age
    draw only on the accessible pool; later years use the configured
    withdrawal order. The locked premium is then deducted and both pools
    grow at the net return.

    Args:
        balances: Pool balances at retirement.
        base_spend: Annual spend before the schedule multiplier.
        retirement_age: Age when drawdown starts.
        life_expectancy: Age at which terminal wealth is measured.
        preservation_age: Age when the locked pool unlocks.
        schedule: Spend schedule supplying per-age multipliers.
        assumptions: Return, fee and withdrawal-order assumptions.
        locked_premium: Annual premium charged to the locked pool.

    Returns:
        DrawdownResult. If ``retirement_age >= life_expectancy`` there are
        no drawdown years and the starting total is returned as terminal
        wealth.

    Raises:
        InvalidInputError: If ``base_spend`` or ``locked_premium`` is
            negative or non-finite, or a balance is non-finite.
    """
    ensure_non_negative("base_spend", base_spend)
    ensure_non_negative("locked premium", locked_premium)
    ensure_finite("accessible balance", balances.accessible)
    ensure_finite("locked balance", balances.locked)

    timeline = Timeline.from_ages(retirement_age, retirement_age, preservation_age, life_expectancy)
    rate = assumptions.net_return
    order = assumptions.withdrawal_order

    current = balances.clamped()
    path: list[PathPoint] = []
    shortfall_years: list[int] = []
    unfunded = 0.0
    bridge_violation = False

    for age in timeline.drawdown_ages():
        spend = base_spend * schedule.multiplier_at(age)
        phase = timeline.phase_at(age)
        if phase == "bridge":
            step = withdraw_accessible_only(current, spend)
        else:
            step = withdraw(current, spend, order)

        if step.shortfall > _SHORTFALL_TOLERANCE:
            shortfall_years.append(age)
            unfunded += step.shortfall
            if phase == "bridge":
                bridge_violation = True

        after = step.balances
        current = Balances(after.accessible, max(0.0, after.locked - locked_premium)).grow(rate)
        path.append(
            PathPoint.from_balances(
                age, current, phase, spend=step.withdrawn, band=schedule.label_at(age)
            )
        )

    return DrawdownResult(
        terminal_wealth=current.total,
        path=tuple(path),
        bridge_violation=bridge_violation,
        shortfall_years=tuple(shortfall_years),
        unfunded_spend=unfunded,
    )
