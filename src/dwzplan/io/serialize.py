"""Serialization for inputs, results, and path export."""

from __future__ import annotations

import csv
import hashlib
import io
import json
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from dwzplan.config.schema import Assumptions, HouseholdConfig, SolverSettings
from dwzplan.core.state import PathPoint
from dwzplan.utils.exceptions import ConfigError

if TYPE_CHECKING:
    from dwzplan.analytics.age_search import SolverResult
    from dwzplan.analytics.split_optimizer import SensitivityPoint, SplitOptimization


def _inputs_dict(
    household: HouseholdConfig,
    assumptions: Assumptions,
    settings: SolverSettings | None,
) -> dict[str, Any]:
    return {
        "household": household.model_dump(mode="json"),
        "assumptions": assumptions.model_dump(mode="json"),
        "solver": (settings or SolverSettings()).model_dump(mode="json"),
    }


def compute_input_fingerprint(
    household: HouseholdConfig,
    assumptions: Assumptions,
    settings: SolverSettings | None = None,
) -> str:
    """Compute a deterministic SHA-256 hash of all inputs.

    Uses canonical JSON (sorted keys, no whitespace) so the same
    logical inputs always produce the same hash.
    """
    canonical = json.dumps(
        _inputs_dict(household, assumptions, settings), sort_keys=True, separators=(",", ":")
    )
    return hashlib.sha256(canonical.encode()).hexdigest()


def dump_inputs(
    household: HouseholdConfig,
    assumptions: Assumptions,
    settings: SolverSettings | None = None,
) -> str:
    """Serialize all inputs to a JSON string."""
    return json.dumps(_inputs_dict(household, assumptions, settings), indent=2)


def load_inputs(json_str: str) -> tuple[HouseholdConfig, Assumptions, SolverSettings]:
    """Deserialize inputs from a JSON string.

    ``assumptions`` and ``solver`` sections are optional and fall back to
    their defaults.

    Raises:
        ConfigError: If the document is not valid JSON or lacks a
            ``household`` section.
        pydantic.ValidationError: If a section fails validation.
    """
    try:
        data: dict[str, Any] = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Input is not valid JSON: {exc}") from exc
    if not isinstance(data, dict) or "household" not in data:
        raise ConfigError("Input must be a JSON object with a 'household' section")
    household = HouseholdConfig.model_validate(data["household"])
    assumptions = Assumptions.model_validate(data.get("assumptions", {}))
    settings = SolverSettings.model_validate(data.get("solver", {}))
    return household, assumptions, settings


def validation_summary(exc: ValidationError) -> str:
    """One line per validation error, ``location: message``."""
    lines = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        lines.append(f"{loc}: {err['msg']}")
    return "\n".join(lines)


def dump_path_csv(path: Sequence[PathPoint]) -> str:
    """Export a lifecycle path as CSV.

    Returns:
        CSV string with Age, Phase, Band, Spend, Accessible, Locked, Total
        columns, or an empty string for an empty path.
    """
    if not path:
        return ""

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["Age", "Phase", "Band", "Spend", "Accessible", "Locked", "Total"])
    for point in path:
        writer.writerow(
            [
                point.age,
                point.phase,
                point.band,
                f"{point.spend:.2f}",
                f"{point.accessible:.2f}",
                f"{point.locked:.2f}",
                f"{point.total:.2f}",
            ]
        )
    return output.getvalue()


def dump_sensitivity_csv(curve: Sequence[SensitivityPoint]) -> str:
    """Export the optimizer's fraction -> earliest age curve as CSV."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["LockedFraction", "EarliestAge", "BaseSpend", "LockedGross", "CapBinding"])
    for point in curve:
        writer.writerow(
            [
                f"{point.fraction:.4f}",
                "" if point.earliest_age is None else point.earliest_age,
                f"{point.base_spend:.2f}",
                f"{point.locked_gross:.2f}",
                point.cap_binding,
            ]
        )
    return output.getvalue()


def result_summary(result: SolverResult | None) -> dict[str, Any]:
    """Plain-dict summary of an age evaluation (no path)."""
    if result is None:
        return {"achievable": False}
    return {
        "achievable": result.viable,
        "retirement_age": result.retirement_age,
        "base_spend": result.base_spend,
        "outcome": result.outcome.value,
        "bridge": {
            "status": result.bridge.status,
            "years": result.bridge.years,
            "need_pv": result.bridge.need_pv,
            "have": result.bridge.have,
            "covered_years": result.bridge.covered_years,
            "shortfall": result.bridge.shortfall,
        },
        "input_hash": result.input_hash,
        "engine_version": result.engine_version,
    }


def dump_result_summary(result: SolverResult | None) -> str:
    """Serialize an age evaluation summary to JSON."""
    return json.dumps(result_summary(result), indent=2)


def dump_optimization_summary(optimization: SplitOptimization) -> str:
    """Serialize a split optimization (without the full path) to JSON."""
    rec = optimization.recommendation
    data = {
        "recommended_fraction": optimization.recommended_fraction,
        "earliest_age": optimization.earliest_age,
        "base_spend": optimization.base_spend,
        "recommendation": {
            "locked_gross": rec.locked_gross,
            "accessible_gross": rec.accessible_gross,
            "locked_net": rec.locked_net,
            "accessible_net": rec.accessible_net,
            "cap_total": rec.cap_total,
            "cap_binding": rec.cap_binding,
        },
        "constraints": {
            "cap_per_person": optimization.constraints.cap_per_person,
            "eligible_people": optimization.constraints.eligible_people,
            "cap_total": optimization.constraints.cap_total,
            "contribution_tax_rate": optimization.constraints.contribution_tax_rate,
            "cap_binding": optimization.constraints.cap_binding,
        },
        "allocation": list(optimization.allocation.per_person),
        "sensitivity_curve": [
            {
                "fraction": p.fraction,
                "earliest_age": p.earliest_age,
                "base_spend": p.base_spend,
            }
            for p in optimization.sensitivity_curve
        ],
        "evaluation_count": optimization.evaluation_count,
        "age_evaluations": optimization.age_evaluations,
    }
    return json.dumps(data, indent=2)
