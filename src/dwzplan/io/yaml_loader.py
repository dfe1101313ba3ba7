"""Loader for the packaged YAML rule tables."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from dwzplan.utils.exceptions import ConfigError

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


def load_table(path: Path) -> dict[str, Any]:
    """Parse a YAML rule table whose top level is a mapping.

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or does not
            hold a mapping at the top level.
    """
    try:
        text = path.read_text()
    except FileNotFoundError as exc:
        raise ConfigError(f"Rule table not found: {path}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Rule table {path.name} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(
            f"Rule table {path.name} must be a mapping, got {type(data).__name__}"
        )
    return data


def load_package_table(relative_path: str) -> dict[str, Any]:
    """Load a rule table shipped inside the package, e.g. ``"rules/tables/au_rules.yaml"``."""
    return load_table(PACKAGE_ROOT / relative_path)
