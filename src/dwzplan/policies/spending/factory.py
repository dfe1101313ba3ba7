"""Build a spend schedule from configuration."""

from __future__ import annotations

from dwzplan.config.schema import SpendScheduleConfig
from dwzplan.policies.spending.banded import BandedSchedule
from dwzplan.policies.spending.base import SpendSchedule
from dwzplan.policies.spending.flat import FlatSchedule
from dwzplan.policies.spending.stepped import SteppedSchedule


def build_schedule(config: SpendScheduleConfig) -> SpendSchedule:
    """Return the schedule variant selected by ``config.kind``."""
    if config.kind == "stepped":
        return SteppedSchedule(config.step_age, config.early_multiplier, config.late_multiplier)
    if config.kind == "banded":
        return BandedSchedule(config.bands)
    return FlatSchedule()
