"""Sustainable-spend root finder: exponential bracketing then bisection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from dwzplan.config.schema import Assumptions, SolverSettings
from dwzplan.core.drawdown import DrawdownResult, simulate_drawdown
from dwzplan.core.state import Balances, PathPoint
from dwzplan.policies.spending.base import SpendSchedule
from dwzplan.utils.validation import ensure_age_order, ensure_non_negative

logger = logging.getLogger(__name__)


class SolveOutcome(str, Enum):
    """How the spend search terminated."""

    SOLVED = "solved"
    SAFETY_LIMIT = "safety_limit"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class SpendSolution:
    """Result of a sustainable-spend search."""

    base_spend: float
    terminal_wealth: float
    outcome: SolveOutcome
    iterations: int
    path: tuple[PathPoint, ...]


def solve_sustainable_spend(
    balances: Balances,
    retirement_age: int,
    life_expectancy: int,
    preservation_age: int,
    schedule: SpendSchedule,
    assumptions: Assumptions,
    locked_premium: float = 0.0,
    settings: SolverSettings | None = None,
) -> SpendSolution:
    """Find the largest base spend that still ends at the bequest target.

    Terminal wealth is non-increasing in base spend, so an upper bound is
    found by doubling from 1.0 until terminal wealth drops to the bequest,
    then bisection narrows ``[0, hi]`` for a fixed number of rounds. The
    upper bound is returned, so simulating it never leaves more than the
    bequest behind.

    Args:
        balances: Pool balances at retirement.
        retirement_age: Age when drawdown starts.
        life_expectancy: Age at which the bequest is measured.
        preservation_age: Age when the locked pool unlocks.
        schedule: Spend schedule applied to the base spend.
        assumptions: Return, fee, bequest and withdrawal assumptions.
        locked_premium: Annual premium charged to the locked pool.
        settings: Search limits; defaults to ``SolverSettings()``.

    Returns:
        SpendSolution. ``outcome`` is ``SAFETY_LIMIT`` when the bracket hit
        ``settings.spend_ceiling`` without reaching the bequest, and
        ``UNREACHABLE`` (with zero spend) when even spending nothing leaves
        less than the bequest.

    Raises:
        InvalidInputError: If balances are negative or non-finite, or
            retirement is not before life expectancy.
    """
    if settings is None:
        settings = SolverSettings()
    ensure_non_negative("accessible balance", balances.accessible)
    ensure_non_negative("locked balance", balances.locked)
    ensure_non_negative("locked premium", locked_premium)
    ensure_age_order("retirement_age", retirement_age, "life_expectancy", life_expectancy)

    bequest = assumptions.bequest
    evaluations = 0

    def run(spend: float) -> DrawdownResult:
        nonlocal evaluations
        evaluations += 1
        return simulate_drawdown(
            balances,
            spend,
            retirement_age,
            life_expectancy,
            preservation_age,
            schedule,
            assumptions,
            locked_premium,
        )

    floor = run(0.0)
    if floor.terminal_wealth < bequest:
        logger.debug(
            "Bequest %.2f unreachable from age %d: zero spend leaves %.2f",
            bequest,
            retirement_age,
            floor.terminal_wealth,
        )
        return SpendSolution(
            base_spend=0.0,
            terminal_wealth=floor.terminal_wealth,
            outcome=SolveOutcome.UNREACHABLE,
            iterations=evaluations,
            path=floor.path,
        )

    ceiling = settings.spend_ceiling
    hi = min(1.0, ceiling)
    trial = run(hi)
    while trial.terminal_wealth > bequest:
        if hi >= ceiling:
            logger.warning(
                "Spend search hit the ceiling of %.0f at retirement age %d",
                ceiling,
                retirement_age,
            )
            return SpendSolution(
                base_spend=ceiling,
                terminal_wealth=trial.terminal_wealth,
                outcome=SolveOutcome.SAFETY_LIMIT,
                iterations=evaluations,
                path=trial.path,
            )
        hi = min(hi * 2.0, ceiling)
        trial = run(hi)
    logger.debug("Bracketed base spend in [0, %.2f] after %d evaluations", hi, evaluations)

    lo = 0.0
    best = trial
    for _ in range(settings.bisection_iterations):
        mid = 0.5 * (lo + hi)
        trial = run(mid)
        if trial.terminal_wealth > bequest:
            lo = mid
        else:
            hi = mid
            best = trial

    logger.debug(
        "Solved base spend %.2f at retirement age %d (terminal %.2f, %d evaluations)",
        hi,
        retirement_age,
        best.terminal_wealth,
        evaluations,
    )
    return SpendSolution(
        base_spend=hi,
        terminal_wealth=best.terminal_wealth,
        outcome=SolveOutcome.SOLVED,
        iterations=evaluations,
        path=best.path,
    )
