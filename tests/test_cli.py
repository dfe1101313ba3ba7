"""Tests for CLI."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from dwzplan.cli.main import cli

GOLDEN = Path(__file__).parent / "golden" / "couple_bridge.json"


class TestCLI:
    """Command-line interface via click's CliRunner."""

    def test_version(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_solve_defaults(self) -> None:
        """Solving with built-in defaults prints spend and bridge."""
        runner = CliRunner()
        result = runner.invoke(cli, ["solve", "--age", "55"])
        assert result.exit_code == 0
        assert "Sustainable base spend" in result.output
        assert "Bridge: " in result.output

    def test_solve_writes_outputs(self, tmp_path: Path) -> None:
        """The --output and --csv options write JSON and CSV files."""
        output_file = tmp_path / "result.json"
        csv_file = tmp_path / "path.csv"
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "solve",
                "--config",
                str(GOLDEN),
                "--age",
                "58",
                "--output",
                str(output_file),
                "--csv",
                str(csv_file),
            ],
        )
        assert result.exit_code == 0
        data = json.loads(output_file.read_text())
        assert data["retirement_age"] == 58
        assert csv_file.read_text().startswith("Age,Phase")

    def test_solve_rejects_bad_age(self) -> None:
        """A retirement age before the current age is a clean error."""
        runner = CliRunner()
        result = runner.invoke(cli, ["solve", "--age", "20"])
        assert result.exit_code != 0
        assert "retirement_age" in result.output

    def test_earliest_with_config(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["earliest", "--config", str(GOLDEN)])
        assert result.exit_code == 0
        assert "Household: age 45" in result.output
        assert "Retirement age" in result.output or "No viable" in result.output

    def test_earliest_verbose(self) -> None:
        """Verbose logging does not disturb normal output."""
        runner = CliRunner()
        result = runner.invoke(cli, ["--verbose", "earliest", "--min-age", "60"])
        assert result.exit_code == 0
        assert "Retirement age: 60" in result.output

    def test_optimize(self, tmp_path: Path) -> None:
        """The optimize command reports evaluations and writes JSON."""
        output_file = tmp_path / "split.json"
        runner = CliRunner()
        result = runner.invoke(
            cli, ["optimize", "--grid-points", "3", "--gross", "--output", str(output_file)]
        )
        assert result.exit_code == 0
        assert "Fractions evaluated" in result.output
        data = json.loads(output_file.read_text())
        assert data["evaluation_count"] >= 3

    def test_invalid_config(self, tmp_path: Path) -> None:
        """Validation errors are summarised rather than raised."""
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"household": {"people": [], "life_expectancy": 90}}))
        runner = CliRunner()
        result = runner.invoke(cli, ["earliest", "--config", str(bad)])
        assert result.exit_code != 0
        assert "Invalid input" in result.output
