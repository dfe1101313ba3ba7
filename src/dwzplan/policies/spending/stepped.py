"""Two-level spend schedule."""

from __future__ import annotations

from dwzplan.config.schema import AgeBand
from dwzplan.policies.spending.base import label_at, multiplier_at


class SteppedSchedule:
    """Spend ``early_multiplier`` x base before ``step_age``, then ``late_multiplier``."""

    def __init__(self, step_age: int, early_multiplier: float, late_multiplier: float) -> None:
        step = min(149, max(1, step_age))
        self._bands = (
            AgeBand(from_age=0, to_age=step, multiplier=early_multiplier, label="early"),
            AgeBand(from_age=step, to_age=150, multiplier=late_multiplier, label="late"),
        )

    @property
    def bands(self) -> tuple[AgeBand, ...]:
        return self._bands

    def multiplier_at(self, age: int) -> float:
        return multiplier_at(age, self._bands)

    def label_at(self, age: int) -> str:
        return label_at(age, self._bands)
