"""Exception types raised by sheets.

Formula evaluation never raises; these cover the few places where a failure
has to reach the caller.
"""

from __future__ import annotations


class SheetsError(Exception):
    """Base for all sheets errors."""


class ConfigError(SheetsError):
    """Grid configuration could not be read or failed validation."""

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        msg = super().__str__()
        if self.source:
            return f"{self.source}: {msg}"
        return msg
