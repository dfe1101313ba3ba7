"""N-band spend schedule."""

from __future__ import annotations

from collections.abc import Sequence

from dwzplan.config.schema import AgeBand, SpendScheduleConfig
from dwzplan.policies.spending.base import label_at, multiplier_at

# Classic retirement spending phases
GO_GO_MULTIPLIER = 1.10
SLOW_GO_MULTIPLIER = 1.00
NO_GO_MULTIPLIER = 0.85
SLOW_GO_START = 60
NO_GO_START = 75


class BandedSchedule:
    """Spend multiplier taken from an ordered list of age bands.

    The band list is validated by :class:`SpendScheduleConfig`, so it is
    ordered and non-overlapping by the time it reaches here.
    """

    def __init__(self, bands: Sequence[AgeBand]) -> None:
        self._bands = tuple(SpendScheduleConfig(kind="banded", bands=list(bands)).bands)

    @property
    def bands(self) -> tuple[AgeBand, ...]:
        return self._bands

    def multiplier_at(self, age: int) -> float:
        return multiplier_at(age, self._bands)

    def label_at(self, age: int) -> str:
        return label_at(age, self._bands)


def go_go_bands(
    slow_go_start: int = SLOW_GO_START,
    no_go_start: int = NO_GO_START,
    go_go: float = GO_GO_MULTIPLIER,
    slow_go: float = SLOW_GO_MULTIPLIER,
    no_go: float = NO_GO_MULTIPLIER,
) -> list[AgeBand]:
    """Go-go / slow-go / no-go bands: 1.10x until 60, 1.00x until 75, 0.85x after."""
    return [
        AgeBand(from_age=0, to_age=slow_go_start, multiplier=go_go, label="go-go"),
        AgeBand(from_age=slow_go_start, to_age=no_go_start, multiplier=slow_go, label="slow-go"),
        AgeBand(from_age=no_go_start, to_age=150, multiplier=no_go, label="no-go"),
    ]
