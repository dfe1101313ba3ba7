"""Base protocol for tax and contribution rule lookups."""

from __future__ import annotations

from datetime import date
from typing import Protocol


class RulesLookup(Protocol):
    """Jurisdiction rules consumed by the planner as opaque functions."""

    def preservation_age(self, birth_date: date | None) -> int:
        """Age at which the locked pool unlocks for someone born on ``birth_date``."""
        ...

    def concessional_cap(self) -> float:
        """Annual per-person cap on concessional (locked-pool) contributions."""
        ...

    def employer_contribution(self, income: float) -> float:
        """Compulsory employer contribution on ``income``."""
        ...

    def income_tax(self, income: float) -> float:
        """Annual income tax on ``income``."""
        ...

    def marginal_rate(self, income: float) -> float:
        """Marginal tax rate at ``income``."""
        ...
