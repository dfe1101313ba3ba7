"""Flat spend schedule."""

from __future__ import annotations

from dwzplan.config.schema import AgeBand


class FlatSchedule:
    """Spend the base amount every year (multiplier 1.0)."""

    @property
    def bands(self) -> tuple[AgeBand, ...]:
        return ()

    def multiplier_at(self, age: int) -> float:
        return 1.0

    def label_at(self, age: int) -> str:
        return "flat"
