"""Contribution policy: split the savings budget between the two pools."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from dwzplan.config.schema import HouseholdConfig, SavingsSplitPolicy
from dwzplan.rules.base import RulesLookup

DEFAULT_CONTRIBUTION_TAX_RATE = 0.15
_EPS = 1e-9
_RATE_TOLERANCE = 1e-4  # rates within 1bp are treated as equal


@dataclass(frozen=True)
class ContributionSplit:
    """One year's savings, divided between the pools.

    Gross amounts always sum to the savings budget. Net amounts are what
    actually lands in each pool after contribution tax (locked) and, in
    gross mode, marginal income tax (accessible).
    """

    accessible_gross: float
    locked_gross: float
    accessible_net: float
    locked_net: float
    cap_total: float
    cap_binding: bool


def _round_cents(x: float) -> float:
    return round(x * 100.0) / 100.0


def _clamp(x: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, x))


def cap_headroom(policy: SavingsSplitPolicy, eligible_people: int, employer_gross: float) -> float:
    """Concessional headroom left after compulsory employer contributions."""
    eligible = min(2, max(0, eligible_people))
    return max(0.0, policy.cap_per_person * eligible - employer_gross)


def employer_net(employer_gross: float, policy: SavingsSplitPolicy | None) -> float:
    """Employer contribution landing in the locked pool after contribution tax."""
    if employer_gross <= 0:
        return 0.0
    rate = policy.contribution_tax_rate if policy is not None else DEFAULT_CONTRIBUTION_TAX_RATE
    return _round_cents(employer_gross * (1.0 - _clamp(rate, 0.0, 1.0)))


def split_savings(
    savings: float,
    policy: SavingsSplitPolicy | None,
    eligible_people: int,
    employer_gross: float = 0.0,
) -> ContributionSplit:
    """Divide ``savings`` between the pools according to ``policy``.

    Without a policy the whole budget goes to the accessible pool. With a
    policy, ``locked_fraction`` of the budget is directed to the locked pool,
    capped at the household's remaining concessional headroom; anything over
    the cap stays in the accessible portion.

    Args:
        savings: Annual savings budget (net cash or gross capacity per mode).
        policy: Split policy, or None for "everything accessible".
        eligible_people: People with concessional cap room (clamped to 0..2).
        employer_gross: Compulsory employer contributions already using cap.

    Returns:
        ContributionSplit for one year.
    """
    savings = max(0.0, savings)
    if policy is None:
        return ContributionSplit(
            accessible_gross=savings,
            locked_gross=0.0,
            accessible_net=savings,
            locked_net=0.0,
            cap_total=0.0,
            cap_binding=False,
        )

    fraction = _clamp(policy.locked_fraction, 0.0, 1.0)
    headroom = cap_headroom(policy, eligible_people, employer_gross)
    desired = savings * fraction
    locked_gross = min(desired, headroom)
    accessible_gross = savings - locked_gross

    contribution_tax = _clamp(policy.contribution_tax_rate, 0.0, 1.0)
    locked_net = _round_cents(locked_gross * (1.0 - contribution_tax))
    if policy.mode == "gross":
        accessible_tax = _clamp(policy.accessible_tax_rate, 0.0, 1.0)
        accessible_net = _round_cents(accessible_gross * (1.0 - accessible_tax))
    else:
        accessible_net = accessible_gross

    return ContributionSplit(
        accessible_gross=accessible_gross,
        locked_gross=locked_gross,
        accessible_net=accessible_net,
        locked_net=locked_net,
        cap_total=headroom,
        cap_binding=desired > headroom + _EPS,
    )


def gross_mode_policy(
    policy: SavingsSplitPolicy,
    household: HouseholdConfig,
    rules: RulesLookup,
) -> SavingsSplitPolicy:
    """Switch ``policy`` to gross mode using the household's top marginal rate.

    The highest earner is the one whose income would be sacrificed first,
    so their marginal rate prices the accessible portion.
    """
    top_income = max(p.income for p in household.people)
    return policy.model_copy(
        update={
            "mode": "gross",
            "accessible_tax_rate": rules.marginal_rate(top_income),
            "cap_per_person": rules.concessional_cap(),
        }
    )


@dataclass(frozen=True)
class PersonHeadroom:
    """Remaining concessional room and marginal tax rate for one person."""

    index: int
    headroom: float
    marginal_rate: float


@dataclass(frozen=True)
class ConcessionalAllocation:
    """Per-person share of a household locked-pool contribution."""

    per_person: tuple[float, ...]
    total_allocated: float


def _group_by_rate(people: Sequence[PersonHeadroom]) -> list[list[PersonHeadroom]]:
    groups: list[list[PersonHeadroom]] = []
    for person in sorted(people, key=lambda p: p.marginal_rate, reverse=True):
        for group in groups:
            if abs(group[0].marginal_rate - person.marginal_rate) <= _RATE_TOLERANCE:
                group.append(person)
                break
        else:
            groups.append([person])
    return groups


def allocate_concessional(
    total_gross: float,
    people: Sequence[PersonHeadroom],
) -> ConcessionalAllocation:
    """Distribute a household locked-pool contribution across people.

    Headroom with the highest marginal tax rate is filled first, since that
    is where the contribution saves the most tax. People sharing a rate
    (within 1bp) split their group's allocation pro-rata by headroom.
    Per-person amounts are rounded to whole dollars.
    """
    shares = [0.0] * (max((p.index for p in people), default=-1) + 1)
    remaining = max(0.0, total_gross)
    allocated = 0.0
    if remaining <= _EPS or not people:
        return ConcessionalAllocation(per_person=tuple(shares), total_allocated=0.0)

    clamped = [
        PersonHeadroom(p.index, max(0.0, p.headroom), p.marginal_rate) for p in people
    ]
    for group in _group_by_rate(clamped):
        if remaining <= _EPS:
            break
        group_room = sum(p.headroom for p in group)
        if group_room <= _EPS:
            continue
        group_amount = min(remaining, group_room)
        for person in group:
            amount = min(person.headroom, person.headroom / group_room * group_amount)
            if amount > _EPS:
                rounded = float(round(amount))
                shares[person.index] += rounded
                allocated += rounded
        remaining -= group_amount

    return ConcessionalAllocation(per_person=tuple(shares), total_allocated=allocated)
