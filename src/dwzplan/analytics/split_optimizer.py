"""Contribution-split optimizer: which locked fraction retires you earliest?"""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass

import numpy as np

from dwzplan.analytics.age_search import search_earliest_age
from dwzplan.config.schema import (
    Assumptions,
    HouseholdConfig,
    OptimizerOptions,
    SavingsSplitPolicy,
    SolverSettings,
)
from dwzplan.policies.contributions import (
    ConcessionalAllocation,
    ContributionSplit,
    PersonHeadroom,
    allocate_concessional,
    cap_headroom,
    split_savings,
)
from dwzplan.rules.base import RulesLookup

logger = logging.getLogger(__name__)

_EPS = 1e-9
_DECIMALS = 4


@dataclass(frozen=True)
class SensitivityPoint:
    """Earliest viable age for one locked fraction."""

    fraction: float
    earliest_age: int | None
    base_spend: float
    locked_gross: float
    cap_binding: bool


@dataclass(frozen=True)
class SplitConstraints:
    """Cap parameters in force, and whether the cap binds at the optimum."""

    cap_per_person: float
    eligible_people: int
    cap_total: float
    contribution_tax_rate: float
    cap_binding: bool


@dataclass(frozen=True)
class SplitOptimization:
    """Result of optimizing the savings split.

    Attributes:
        recommended_fraction: Locked fraction chosen after tie-breaking.
        earliest_age: Earliest viable age at that fraction, or None if no
            fraction makes retirement achievable.
        base_spend: Sustainable base spend at that age.
        recommendation: Savings budget split at the recommended fraction.
        sensitivity_curve: Every evaluated fraction, sorted ascending.
        constraints: Cap parameters and binding status.
        allocation: Recommended locked gross spread across people.
        evaluation_count: Distinct fractions evaluated.
        age_evaluations: Retirement ages evaluated across all fractions.
    """

    recommended_fraction: float
    earliest_age: int | None
    base_spend: float
    recommendation: ContributionSplit
    sensitivity_curve: tuple[SensitivityPoint, ...]
    constraints: SplitConstraints
    allocation: ConcessionalAllocation
    evaluation_count: int
    age_evaluations: int


def _with_fraction(
    household: HouseholdConfig, policy: SavingsSplitPolicy, fraction: float
) -> HouseholdConfig:
    return household.model_copy(
        update={"savings_split": policy.model_copy(update={"locked_fraction": fraction})}
    )


def _evaluate_fraction(
    household: HouseholdConfig,
    assumptions: Assumptions,
    policy: SavingsSplitPolicy,
    settings: SolverSettings,
    required_spend: float | None,
    fraction: float,
) -> tuple[SensitivityPoint, int]:
    """Evaluate one locked fraction.

    Top-level function so it is picklable for ProcessPoolExecutor.
    """
    trial = _with_fraction(household, policy, fraction)
    result, ages = search_earliest_age(
        trial, assumptions, settings=settings, required_spend=required_spend
    )
    split = split_savings(
        trial.annual_savings,
        trial.savings_split,
        trial.eligible_people,
        employer_gross=trial.employer_contribution,
    )
    point = SensitivityPoint(
        fraction=fraction,
        earliest_age=None if result is None else result.retirement_age,
        base_spend=0.0 if result is None else result.base_spend,
        locked_gross=split.locked_gross,
        cap_binding=split.cap_binding,
    )
    return point, ages


def _round_fraction(value: float, max_fraction: float) -> float:
    return round(min(max_fraction, max(0.0, float(value))), _DECIMALS)


def _pick_best(
    points: list[SensitivityPoint], options: OptimizerOptions
) -> SensitivityPoint | None:
    achievable = [p for p in points if p.earliest_age is not None]
    if not achievable:
        return None
    best_age = min(p.earliest_age for p in achievable if p.earliest_age is not None)
    tied = [
        p
        for p in achievable
        if p.earliest_age is not None and p.earliest_age <= best_age + options.age_tolerance
    ]
    if options.tie_break == "max_locked":
        top = max(p.locked_gross for p in tied)
        tied = [p for p in tied if p.locked_gross >= top - 1e-6]
    elif options.tie_break == "min_locked":
        bottom = min(p.locked_gross for p in tied)
        tied = [p for p in tied if p.locked_gross <= bottom + 1e-6]
    else:
        top = max(p.base_spend for p in tied)
        tied = [p for p in tied if p.base_spend >= top - 1e-6]
    return min(tied, key=lambda p: (p.earliest_age, p.fraction))


def _allocate(
    household: HouseholdConfig,
    policy: SavingsSplitPolicy,
    locked_gross: float,
    rules: RulesLookup | None,
) -> ConcessionalAllocation:
    people = [
        PersonHeadroom(
            index=i,
            headroom=max(0.0, policy.cap_per_person - person.employer_contribution),
            marginal_rate=0.0 if rules is None else rules.marginal_rate(person.income),
        )
        for i, person in enumerate(household.people[: household.eligible_people])
    ]
    return allocate_concessional(locked_gross, people)


def optimize_split(
    household: HouseholdConfig,
    assumptions: Assumptions,
    policy: SavingsSplitPolicy | None = None,
    options: OptimizerOptions | None = None,
    settings: SolverSettings | None = None,
    required_spend: float | None = None,
    rules: RulesLookup | None = None,
) -> SplitOptimization:
    """Search for the locked-pool fraction that minimizes the earliest viable age.

    A coarse grid over ``[0, max_fraction]`` is evaluated first (in a
    process pool when ``options.max_workers`` is not 1). Each refinement
    pass then evaluates ``refine_points`` fractions within one step of the
    current best and halves the step. Fractions are rounded to 4 decimals
    and each is evaluated at most once.

    Among fractions whose earliest age is within ``age_tolerance`` of the
    best, ``tie_break`` decides: ``max_locked`` prefers the largest capped
    locked contribution, ``min_locked`` the smallest, ``max_spend`` the
    highest sustainable spend. Remaining ties go to the smallest fraction.

    Args:
        household: Household configuration; its ``savings_split`` is
            replaced per trial.
        assumptions: Return, fee, bequest and schedule assumptions.
        policy: Split policy template; defaults to the household's own
            policy or ``SavingsSplitPolicy()``.
        options: Search budget and preferences.
        settings: Spend solver limits.
        required_spend: Spend floor for viability; defaults to the
            household's ``target_spend``.
        rules: Optional rules used to rank people by marginal rate when
            allocating the locked contribution.

    Returns:
        SplitOptimization. ``earliest_age`` is None when no evaluated
        fraction is achievable.
    """
    if options is None:
        options = OptimizerOptions()
    if settings is None:
        settings = SolverSettings()
    if policy is None:
        policy = household.savings_split or SavingsSplitPolicy()

    max_fraction = options.max_fraction
    evaluated: dict[float, SensitivityPoint] = {}
    age_evaluations = 0

    def record(point: SensitivityPoint, ages: int) -> None:
        nonlocal age_evaluations
        evaluated[point.fraction] = point
        age_evaluations += ages
        logger.debug(
            "Fraction %.4f: earliest age %s, spend %.2f",
            point.fraction,
            point.earliest_age,
            point.base_spend,
        )

    grid = sorted(
        {
            _round_fraction(f, max_fraction)
            for f in np.linspace(0.0, max_fraction, options.grid_points)
        }
    )

    if options.max_workers == 1:
        for fraction in grid:
            record(
                *_evaluate_fraction(
                    household, assumptions, policy, settings, required_spend, fraction
                )
            )
    else:
        with concurrent.futures.ProcessPoolExecutor(max_workers=options.max_workers) as executor:
            futures = [
                executor.submit(
                    _evaluate_fraction,
                    household,
                    assumptions,
                    policy,
                    settings,
                    required_spend,
                    fraction,
                )
                for fraction in grid
            ]
            for future in concurrent.futures.as_completed(futures):
                record(*future.result())

    step = max_fraction / (options.grid_points - 1)
    best = _pick_best(list(evaluated.values()), options)
    for _ in range(options.refine_iterations):
        if best is None or step <= _EPS:
            break
        lo = max(0.0, best.fraction - step)
        hi = min(max_fraction, best.fraction + step)
        for f in np.linspace(lo, hi, options.refine_points):
            fraction = _round_fraction(f, max_fraction)
            if fraction not in evaluated:
                record(
                    *_evaluate_fraction(
                        household, assumptions, policy, settings, required_spend, fraction
                    )
                )
        best = _pick_best(list(evaluated.values()), options)
        step /= 2.0

    recommended = 0.0 if best is None else best.fraction
    chosen = _with_fraction(household, policy, recommended)
    split = split_savings(
        chosen.annual_savings,
        chosen.savings_split,
        chosen.eligible_people,
        employer_gross=chosen.employer_contribution,
    )
    headroom = cap_headroom(policy, chosen.eligible_people, chosen.employer_contribution)
    constraints = SplitConstraints(
        cap_per_person=policy.cap_per_person,
        eligible_people=chosen.eligible_people,
        cap_total=headroom,
        contribution_tax_rate=policy.contribution_tax_rate,
        cap_binding=chosen.annual_savings * recommended > headroom + _EPS,
    )

    logger.debug(
        "Optimized split: fraction %.4f, earliest age %s after %d fractions",
        recommended,
        None if best is None else best.earliest_age,
        len(evaluated),
    )
    return SplitOptimization(
        recommended_fraction=recommended,
        earliest_age=None if best is None else best.earliest_age,
        base_spend=0.0 if best is None else best.base_spend,
        recommendation=split,
        sensitivity_curve=tuple(evaluated[f] for f in sorted(evaluated)),
        constraints=constraints,
        allocation=_allocate(chosen, policy, split.locked_gross, rules),
        evaluation_count=len(evaluated),
        age_evaluations=age_evaluations,
    )
