"""Withdrawal ordering policy for post-preservation drawdown.

Before preservation age only the accessible pool can be touched
(:func:`withdraw_accessible_only`). After it, spending is drawn from both
pools under one of the named strategies in :data:`WITHDRAWAL_STRATEGIES`:

- ``accessible_first``: drain the accessible pool, then the locked pool.
- ``pro_rata``: draw from each pool in proportion to its balance.
- ``locked_first``: drain the locked pool, then the accessible pool.

No strategy ever leaves a pool negative; any unmet amount is reported as
``shortfall``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from dwzplan.config.schema import WithdrawalOrderName
from dwzplan.core.state import Balances


@dataclass(frozen=True)
class Withdrawal:
    """Result of one year's withdrawal.

    Attributes:
        balances: Pool balances after the withdrawal (never negative).
        withdrawn: Amount actually paid out.
        shortfall: Amount requested but not available.
    """

    balances: Balances
    withdrawn: float
    shortfall: float


def withdraw_accessible_only(balances: Balances, amount: float) -> Withdrawal:
    """Withdraw from the accessible pool only (bridge years)."""
    start = balances.clamped()
    amount = max(0.0, amount)
    taken = min(start.accessible, amount)
    return Withdrawal(
        balances=Balances(start.accessible - taken, start.locked),
        withdrawn=taken,
        shortfall=amount - taken,
    )


def _accessible_first(balances: Balances, amount: float) -> Withdrawal:
    from_accessible = min(balances.accessible, amount)
    from_locked = min(balances.locked, amount - from_accessible)
    withdrawn = from_accessible + from_locked
    return Withdrawal(
        balances=Balances(balances.accessible - from_accessible, balances.locked - from_locked),
        withdrawn=withdrawn,
        shortfall=amount - withdrawn,
    )


def _locked_first(balances: Balances, amount: float) -> Withdrawal:
    from_locked = min(balances.locked, amount)
    from_accessible = min(balances.accessible, amount - from_locked)
    withdrawn = from_accessible + from_locked
    return Withdrawal(
        balances=Balances(balances.accessible - from_accessible, balances.locked - from_locked),
        withdrawn=withdrawn,
        shortfall=amount - withdrawn,
    )


def _pro_rata(balances: Balances, amount: float) -> Withdrawal:
    total = balances.total
    if total <= 0:
        return Withdrawal(balances=balances, withdrawn=0.0, shortfall=amount)
    withdrawn = min(amount, total)
    from_accessible = withdrawn * (balances.accessible / total)
    from_locked = withdrawn - from_accessible
    return Withdrawal(
        balances=Balances(
            max(0.0, balances.accessible - from_accessible),
            max(0.0, balances.locked - from_locked),
        ),
        withdrawn=withdrawn,
        shortfall=amount - withdrawn,
    )


WITHDRAWAL_STRATEGIES: dict[str, Callable[[Balances, float], Withdrawal]] = {
    "accessible_first": _accessible_first,
    "pro_rata": _pro_rata,
    "locked_first": _locked_first,
}


def withdraw(balances: Balances, amount: float, order: WithdrawalOrderName) -> Withdrawal:
    """Withdraw ``amount`` from both pools using the named ordering strategy.

    Args:
        balances: Pool balances before the withdrawal.
        amount: Spending needed this year.
        order: Key into :data:`WITHDRAWAL_STRATEGIES`.

    Returns:
        Withdrawal with the new balances and any shortfall.
    """
    try:
        strategy = WITHDRAWAL_STRATEGIES[order]
    except KeyError:
        raise ValueError(
            f"Unknown withdrawal order {order!r}; expected one of {sorted(WITHDRAWAL_STRATEGIES)}"
        ) from None
    return strategy(balances.clamped(), max(0.0, amount))
