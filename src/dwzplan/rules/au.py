"""Australian bracket-based tax and superannuation rules."""

from __future__ import annotations

import math
from datetime import date
from typing import Any

from dwzplan.io.yaml_loader import load_package_table
from dwzplan.utils.exceptions import ConfigError

DEFAULT_FINANCIAL_YEAR = "2025-26"
RULES_TABLE = "rules/tables/au_rules.yaml"


class AustralianRules:
    """Australian income tax, Medicare levy, concessional cap and preservation age.

    Loads tables from ``rules/tables/au_rules.yaml``. Implements
    :class:`~dwzplan.rules.base.RulesLookup`.
    """

    def __init__(self, financial_year: str = DEFAULT_FINANCIAL_YEAR) -> None:
        data = load_package_table(RULES_TABLE)
        years: dict[str, Any] = data.get("financial_years") or {}
        if financial_year not in years:
            raise ConfigError(
                f"Unknown financial year {financial_year!r}; available: {sorted(years)}"
            )
        year = years[financial_year]
        self.financial_year = financial_year
        self._cap = float(year["concessional_cap"])
        self._employer_rate = float(year["employer_rate"])
        self._employer_max_base = float(year["employer_max_base"])
        self._brackets: list[list[Any]] = year["brackets"]
        self._medicare_rate = float(data["medicare_levy"]["rate"])
        self._medicare_threshold = float(data["medicare_levy"]["threshold"])
        self._max_marginal = float(data["max_marginal_rate"])
        self._preservation_table = [
            (date.fromisoformat(str(row["born_before"])), int(row["age"]))
            for row in data["preservation_age_table"]
        ]
        self._default_preservation_age = int(data["default_preservation_age"])

    def preservation_age(self, birth_date: date | None) -> int:
        """Preservation age by date of birth; unknown dates get the default (60)."""
        if birth_date is None:
            return self._default_preservation_age
        for born_before, age in self._preservation_table:
            if birth_date < born_before:
                return age
        return self._default_preservation_age

    def concessional_cap(self) -> float:
        return self._cap

    def employer_contribution(self, income: float) -> float:
        """Superannuation guarantee on income up to the maximum contribution base."""
        return min(max(0.0, income), self._employer_max_base) * self._employer_rate

    def income_tax(self, income: float) -> float:
        """Progressive bracket tax plus the Medicare levy."""
        if income <= 0:
            return 0.0
        tax = 0.0
        prev_bound = 0.0
        for upper_bound, rate in self._brackets:
            if upper_bound is None:
                upper_bound = math.inf
            taxable_in_bracket = min(income, upper_bound) - prev_bound
            if taxable_in_bracket <= 0:
                break
            tax += taxable_in_bracket * rate
            prev_bound = upper_bound
        if income > self._medicare_threshold:
            tax += income * self._medicare_rate
        return tax

    def marginal_rate(self, income: float) -> float:
        """Bracket rate at ``income`` plus the Medicare levy, capped."""
        if income <= 0:
            return 0.0
        rate = 0.0
        for upper_bound, bracket_rate in self._brackets:
            if upper_bound is None or income <= upper_bound:
                rate = bracket_rate
                break
        if income >= self._medicare_threshold:
            rate += self._medicare_rate
        return min(self._max_marginal, rate)
