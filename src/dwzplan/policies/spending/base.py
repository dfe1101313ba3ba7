"""Base protocol and band lookup for spend schedules."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from dwzplan.config.schema import AgeBand


def multiplier_at(age: int, bands: Sequence[AgeBand]) -> float:
    """Spend multiplier in force at ``age``.

    Bands are scanned in ascending order and the first one whose exclusive
    upper boundary lies above ``age`` wins. Ages past every boundary fall
    back to the last band; an empty schedule is flat at 1.0.
    """
    for band in bands:
        if age < band.to_age:
            return band.multiplier
    if bands:
        return bands[-1].multiplier
    return 1.0


def label_at(age: int, bands: Sequence[AgeBand]) -> str:
    """Label of the band in force at ``age`` (same lookup as multiplier_at)."""
    for band in bands:
        if age < band.to_age:
            return band.label
    if bands:
        return bands[-1].label
    return "flat"


class SpendSchedule(Protocol):
    """Protocol shared by every schedule variant."""

    @property
    def bands(self) -> tuple[AgeBand, ...]:
        """Ordered bands backing the schedule."""
        ...

    def multiplier_at(self, age: int) -> float:
        """Spend multiplier for the year ending at ``age``."""
        ...

    def label_at(self, age: int) -> str:
        """Band label for the year ending at ``age``."""
        ...
