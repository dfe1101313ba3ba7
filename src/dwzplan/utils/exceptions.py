"""Custom exceptions for dwzplan."""

from __future__ import annotations


class DwzplanError(Exception):
    """Base exception for dwzplan."""


class InvalidInputError(DwzplanError, ValueError):
    """Non-finite or out-of-domain input reached a solver boundary."""


class ConfigError(DwzplanError):
    """Invalid configuration file or section."""
