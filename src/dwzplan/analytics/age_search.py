"""Earliest viable retirement age via binary search."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dwzplan import __version__
from dwzplan.analytics.bridge import BridgeAssessment, assess_bridge
from dwzplan.analytics.spend_solver import SolveOutcome, solve_sustainable_spend
from dwzplan.config.schema import AgeBounds, Assumptions, HouseholdConfig, SolverSettings
from dwzplan.core.projector import project
from dwzplan.core.state import PathPoint
from dwzplan.core.timeline import Timeline
from dwzplan.io.serialize import compute_input_fingerprint
from dwzplan.policies.spending.base import SpendSchedule
from dwzplan.policies.spending.factory import build_schedule
from dwzplan.utils.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

_SPEND_TOLERANCE = 1e-6


@dataclass(frozen=True)
class SolverResult:
    """Evaluation of one retirement age.

    Attributes:
        retirement_age: Age evaluated.
        base_spend: Solved sustainable base spend.
        bridge: Bridge assessment at the solved spend.
        path: Full lifecycle path: starting point, accumulation, drawdown.
        outcome: How the spend search terminated.
        viable: Solved, bridge covered and spend at least the required floor.
        input_hash: Fingerprint of the inputs that produced this result.
        engine_version: dwzplan version that produced this result.
    """

    retirement_age: int
    base_spend: float
    bridge: BridgeAssessment
    path: tuple[PathPoint, ...]
    outcome: SolveOutcome
    viable: bool
    input_hash: str
    engine_version: str


def _evaluate(
    household: HouseholdConfig,
    assumptions: Assumptions,
    schedule: SpendSchedule,
    retirement_age: int,
    settings: SolverSettings,
    required_spend: float,
    input_hash: str,
) -> SolverResult:
    timeline = Timeline.from_ages(
        household.current_age,
        retirement_age,
        household.preservation_age,
        household.life_expectancy,
    )
    start = household.balances
    projection = project(
        start, household, assumptions, timeline.current_age, timeline.retirement_age
    )
    at_retirement = projection.balances
    solution = solve_sustainable_spend(
        at_retirement,
        timeline.retirement_age,
        timeline.life_expectancy,
        timeline.preservation_age,
        schedule,
        assumptions,
        household.locked_premium,
        settings,
    )
    bridge = assess_bridge(
        at_retirement,
        solution.base_spend,
        timeline.retirement_age,
        timeline.preservation_age,
        schedule,
        assumptions,
        settings.bridge_epsilon,
        timeline.life_expectancy,
    )
    viable = (
        solution.outcome is SolveOutcome.SOLVED
        and bridge.covered
        and solution.base_spend + _SPEND_TOLERANCE >= required_spend
    )
    origin = PathPoint.from_balances(
        timeline.current_age, start, timeline.phase_at(timeline.current_age)
    )
    logger.debug(
        "Age %d: spend=%.2f outcome=%s bridge=%s viable=%s",
        retirement_age,
        solution.base_spend,
        solution.outcome.value,
        bridge.status,
        viable,
    )
    return SolverResult(
        retirement_age=retirement_age,
        base_spend=solution.base_spend,
        bridge=bridge,
        path=(origin, *projection.path, *solution.path),
        outcome=solution.outcome,
        viable=viable,
        input_hash=input_hash,
        engine_version=__version__,
    )


def evaluate_retirement_age(
    household: HouseholdConfig,
    assumptions: Assumptions,
    retirement_age: int,
    settings: SolverSettings | None = None,
    required_spend: float | None = None,
) -> SolverResult:
    """Evaluate a caller-chosen retirement age.

    Args:
        household: Household configuration.
        assumptions: Return, fee, bequest and schedule assumptions.
        retirement_age: Age to evaluate.
        settings: Solver limits; defaults to ``SolverSettings()``.
        required_spend: Spend floor for viability; defaults to the
            household's ``target_spend`` (0 means no floor).

    Returns:
        SolverResult for ``retirement_age``, viable or not.

    Raises:
        InvalidInputError: If ``retirement_age`` is before the current age or
            not before life expectancy.
    """
    if settings is None:
        settings = SolverSettings()
    if retirement_age < household.current_age:
        raise InvalidInputError(
            f"retirement_age ({retirement_age}) must not be before current age "
            f"({household.current_age})"
        )
    if required_spend is None:
        required_spend = household.target_spend
    return _evaluate(
        household,
        assumptions,
        build_schedule(assumptions.schedule),
        retirement_age,
        settings,
        required_spend,
        compute_input_fingerprint(household, assumptions, settings),
    )


def search_earliest_age(
    household: HouseholdConfig,
    assumptions: Assumptions,
    bounds: AgeBounds | None = None,
    settings: SolverSettings | None = None,
    required_spend: float | None = None,
) -> tuple[SolverResult | None, int]:
    """Binary-search the earliest viable age, also reporting ages evaluated.

    See :func:`find_earliest_viable_age`. The second element of the
    returned tuple counts distinct retirement ages evaluated.
    """
    if settings is None:
        settings = SolverSettings()
    if bounds is None:
        bounds = AgeBounds()
    if required_spend is None:
        required_spend = household.target_spend

    lo = household.current_age if bounds.min_age is None else bounds.min_age
    hi = household.life_expectancy - 1 if bounds.max_age is None else bounds.max_age
    lo = max(lo, household.current_age)
    hi = min(hi, household.life_expectancy - 1)
    if lo > hi:
        return None, 0

    schedule = build_schedule(assumptions.schedule)
    input_hash = compute_input_fingerprint(household, assumptions, settings)
    cache: dict[int, SolverResult] = {}

    def evaluate_at(age: int) -> SolverResult:
        if age not in cache:
            cache[age] = _evaluate(
                household, assumptions, schedule, age, settings, required_spend, input_hash
            )
        return cache[age]

    if not evaluate_at(hi).viable:
        logger.debug("No viable age: oldest candidate %d fails", hi)
        return None, len(cache)

    best = hi
    while lo <= hi:
        mid = (lo + hi) // 2
        if evaluate_at(mid).viable:
            best = mid
            hi = mid - 1
        else:
            lo = mid + 1

    logger.debug("Earliest viable age %d after %d evaluations", best, len(cache))
    return cache[best], len(cache)


def find_earliest_viable_age(
    household: HouseholdConfig,
    assumptions: Assumptions,
    bounds: AgeBounds | None = None,
    settings: SolverSettings | None = None,
    required_spend: float | None = None,
) -> SolverResult | None:
    """Find the earliest retirement age that is viable.

    An age is viable when its spend search solves (not unreachable and
    not stopped at the ceiling), the bridge years are covered at the solved
    spend, and that spend meets ``required_spend``. Viability is assumed
    monotone in age, so a binary search over ``[min_age, max_age]`` finds
    the boundary.

    Args:
        household: Household configuration.
        assumptions: Return, fee, bequest and schedule assumptions.
        bounds: Optional age limits; defaults to
            ``[current_age, life_expectancy - 1]``.
        settings: Solver limits.
        required_spend: Spend floor; defaults to ``household.target_spend``.

    Returns:
        SolverResult for the earliest viable age, or None if even the oldest
        candidate is not viable.
    """
    result, _ = search_earliest_age(household, assumptions, bounds, settings, required_spend)
    return result
