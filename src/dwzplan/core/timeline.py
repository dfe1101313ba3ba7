"""Yearly lifecycle timeline."""

from __future__ import annotations

from dataclasses import dataclass

from dwzplan.core.state import Phase


@dataclass(frozen=True, slots=True)
class Timeline:
    """Yearly age grid for one retirement scenario.

    Every year is labelled by the age at its end: the year ending at
    ``retirement_age + 1`` is the first year of drawdown.

    Attributes:
        current_age: Age today.
        retirement_age: Age when saving stops and drawdown starts.
        preservation_age: Age when the locked pool becomes accessible.
        life_expectancy: Planning horizon; wealth targets the bequest here.
    """

    current_age: int
    retirement_age: int
    preservation_age: int
    life_expectancy: int

    @classmethod
    def from_ages(
        cls,
        current_age: int,
        retirement_age: int,
        preservation_age: int,
        life_expectancy: int,
    ) -> Timeline:
        """Create a Timeline from age parameters."""
        return cls(
            current_age=current_age,
            retirement_age=retirement_age,
            preservation_age=preservation_age,
            life_expectancy=life_expectancy,
        )

    @property
    def accumulation_years(self) -> int:
        return max(0, self.retirement_age - self.current_age)

    @property
    def bridge_years(self) -> int:
        """Years before preservation age that fall inside the horizon (never negative)."""
        return max(0, min(self.preservation_age, self.life_expectancy) - self.retirement_age)

    @property
    def retirement_years(self) -> int:
        return max(0, self.life_expectancy - self.retirement_age)

    def phase_at(self, end_age: int) -> Phase:
        """Phase of the year ending at ``end_age``."""
        if end_age <= self.retirement_age:
            return "accumulation"
        if end_age <= self.preservation_age:
            return "bridge"
        return "retirement"

    def drawdown_ages(self) -> range:
        """End-of-year ages of every drawdown year."""
        return range(self.retirement_age + 1, self.life_expectancy + 1)
