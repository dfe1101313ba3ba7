"""Immutable balance and path values passed between the solvers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Phase = Literal["accumulation", "bridge", "retirement"]


@dataclass(frozen=True, slots=True)
class Balances:
    """Wealth held in the two pools, in real dollars.

    Attributes:
        accessible: Freely accessible pool (cash, brokerage).
        locked: Pool locked until preservation age.
    """

    accessible: float
    locked: float

    @property
    def total(self) -> float:
        return self.accessible + self.locked

    def grow(self, rate: float) -> Balances:
        """Return both pools grown by one year at ``rate``."""
        factor = 1.0 + rate
        return Balances(self.accessible * factor, self.locked * factor)

    def add(self, accessible: float = 0.0, locked: float = 0.0) -> Balances:
        """Return balances with the given amounts added to each pool."""
        return Balances(self.accessible + accessible, self.locked + locked)

    def clamped(self) -> Balances:
        """Return balances with negative pools floored at zero."""
        return Balances(max(0.0, self.accessible), max(0.0, self.locked))


@dataclass(frozen=True, slots=True)
class PathPoint:
    """End-of-year snapshot on the lifecycle path.

    Attributes:
        age: Age at the end of the year.
        accessible: Accessible pool balance.
        locked: Locked pool balance.
        phase: Lifecycle phase the year belongs to.
        spend: Amount withdrawn during the year (0 during accumulation).
        band: Spend band label in force for the year, if any.
    """

    age: int
    accessible: float
    locked: float
    phase: Phase
    spend: float = 0.0
    band: str = ""

    @property
    def total(self) -> float:
        return self.accessible + self.locked

    @classmethod
    def from_balances(
        cls,
        age: int,
        balances: Balances,
        phase: Phase,
        spend: float = 0.0,
        band: str = "",
    ) -> PathPoint:
        return cls(
            age=age,
            accessible=balances.accessible,
            locked=balances.locked,
            phase=phase,
            spend=spend,
            band=band,
        )
