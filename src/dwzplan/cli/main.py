"""CLI entry point for dwzplan."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from pydantic import ValidationError

from dwzplan.analytics.age_search import (
    SolverResult,
    evaluate_retirement_age,
    find_earliest_viable_age,
)
from dwzplan.analytics.constraints import explain_binding_constraint
from dwzplan.analytics.split_optimizer import optimize_split
from dwzplan.config.defaults import (
    default_assumptions,
    default_household,
    default_solver_settings,
)
from dwzplan.config.schema import (
    AgeBounds,
    Assumptions,
    HouseholdConfig,
    OptimizerOptions,
    SavingsSplitPolicy,
    SolverSettings,
)
from dwzplan.io.serialize import (
    dump_optimization_summary,
    dump_path_csv,
    dump_result_summary,
    load_inputs,
    validation_summary,
)
from dwzplan.policies.contributions import gross_mode_policy
from dwzplan.rules.au import AustralianRules
from dwzplan.utils.exceptions import DwzplanError

_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to JSON input file. Uses defaults if not provided.",
)
_output_option = click.option(
    "--output",
    "output_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to write results JSON.",
)
_csv_option = click.option(
    "--csv",
    "csv_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to write the lifecycle path as CSV.",
)


def _load(config_path: Path | None) -> tuple[HouseholdConfig, Assumptions, SolverSettings]:
    if config_path is None:
        return default_household(), default_assumptions(), default_solver_settings()
    try:
        return load_inputs(config_path.read_text())
    except ValidationError as exc:
        raise click.ClickException(f"Invalid input:\n{validation_summary(exc)}") from exc
    except DwzplanError as exc:
        raise click.ClickException(str(exc)) from exc


def _report(
    result: SolverResult,
    household: HouseholdConfig,
    assumptions: Assumptions,
    output_path: Path | None,
    csv_path: Path | None,
) -> None:
    bridge = result.bridge
    click.echo(f"Retirement age: {result.retirement_age}")
    click.echo(f"Sustainable base spend: ${result.base_spend:,.0f}/yr ({result.outcome.value})")
    if bridge.years:
        click.echo(
            f"Bridge: {bridge.status}, {bridge.years} years, "
            f"need ${bridge.need_pv:,.0f} vs have ${bridge.have:,.0f}"
        )
    else:
        click.echo("Bridge: none (retiring at or after preservation age)")
    constraint = explain_binding_constraint(result, household, assumptions)
    click.echo(f"Binding constraint: {constraint.binding}")
    click.echo(f"Viable: {'yes' if result.viable else 'no'}")

    if output_path is not None:
        output_path.write_text(dump_result_summary(result))
        click.echo(f"\nResults written to {output_path}")
    if csv_path is not None:
        csv_path.write_text(dump_path_csv(result.path))
        click.echo(f"Path written to {csv_path}")


@click.group()
@click.version_option(package_name="dwzplan")
@click.option("--verbose", "-v", is_flag=True, help="Log solver progress to stderr.")
def cli(verbose: bool) -> None:
    """dwzplan: Die-With-Zero retirement feasibility engine."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@_config_option
@_output_option
@_csv_option
@click.option("--age", "retirement_age", required=True, type=int, help="Retirement age to test.")
def solve(
    config_path: Path | None,
    output_path: Path | None,
    csv_path: Path | None,
    retirement_age: int,
) -> None:
    """Solve the sustainable spend for a chosen retirement age."""
    household, assumptions, settings = _load(config_path)
    try:
        result = evaluate_retirement_age(household, assumptions, retirement_age, settings)
    except DwzplanError as exc:
        raise click.ClickException(str(exc)) from exc
    _report(result, household, assumptions, output_path, csv_path)


@cli.command()
@_config_option
@_output_option
@_csv_option
@click.option("--min-age", default=None, type=int, help="Youngest retirement age to consider.")
@click.option("--max-age", default=None, type=int, help="Oldest retirement age to consider.")
def earliest(
    config_path: Path | None,
    output_path: Path | None,
    csv_path: Path | None,
    min_age: int | None,
    max_age: int | None,
) -> None:
    """Find the earliest viable retirement age."""
    household, assumptions, settings = _load(config_path)
    bounds = AgeBounds(min_age=min_age, max_age=max_age)
    click.echo(
        f"Household: age {household.current_age}, preservation {household.preservation_age}, "
        f"life expectancy {household.life_expectancy}"
    )
    result = find_earliest_viable_age(household, assumptions, bounds, settings)
    if result is None:
        click.echo("No viable retirement age found.")
        if output_path is not None:
            output_path.write_text(dump_result_summary(None))
        return
    _report(result, household, assumptions, output_path, csv_path)


@cli.command()
@_config_option
@_output_option
@click.option("--grid-points", default=None, type=int, help="Coarse grid resolution.")
@click.option("--workers", default=1, type=int, help="Parallel workers for the coarse grid.")
@click.option(
    "--gross",
    is_flag=True,
    help="Treat savings as pre-tax capacity priced at the top earner's marginal rate.",
)
@click.option(
    "--financial-year",
    default="2025-26",
    show_default=True,
    help="Tax tables used for marginal rates and the concessional cap.",
)
def optimize(
    config_path: Path | None,
    output_path: Path | None,
    grid_points: int | None,
    workers: int,
    gross: bool,
    financial_year: str,
) -> None:
    """Find the locked-pool savings fraction that retires you earliest."""
    household, assumptions, settings = _load(config_path)
    try:
        rules = AustralianRules(financial_year)
    except DwzplanError as exc:
        raise click.ClickException(str(exc)) from exc

    policy = household.savings_split or SavingsSplitPolicy()
    if gross:
        policy = gross_mode_policy(policy, household, rules)
    options = OptimizerOptions(max_workers=workers)
    if grid_points is not None:
        options = options.model_copy(update={"grid_points": grid_points})

    result = optimize_split(household, assumptions, policy, options, settings, rules=rules)

    if result.earliest_age is None:
        click.echo("No locked fraction makes retirement achievable.")
    else:
        rec = result.recommendation
        click.echo(f"Recommended locked fraction: {result.recommended_fraction:.1%}")
        click.echo(f"Earliest viable age: {result.earliest_age}")
        click.echo(f"Sustainable base spend: ${result.base_spend:,.0f}/yr")
        click.echo(
            f"Split: ${rec.locked_gross:,.0f} locked / ${rec.accessible_gross:,.0f} accessible"
            f" (cap {'binding' if result.constraints.cap_binding else 'not binding'})"
        )
    click.echo(f"Fractions evaluated: {result.evaluation_count}")

    if output_path is not None:
        output_path.write_text(dump_optimization_summary(result))
        click.echo(f"\nResults written to {output_path}")


if __name__ == "__main__":
    cli()
