"""Grid configuration.

Dimensions and the per-cell text limit are fixed when a Grid is built.
Values can come from code, a mapping, or a YAML file::

    rows: 200
    columns: 52
    max_text_length: 255
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sheets._errors import ConfigError

DEFAULT_ROWS = 100
DEFAULT_COLUMNS = 26
DEFAULT_MAX_TEXT_LENGTH = 255


class SheetConfig(BaseModel):
    """Fixed-at-startup grid settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    rows: int = Field(DEFAULT_ROWS, ge=1, description="Number of grid rows")
    columns: int = Field(DEFAULT_COLUMNS, ge=1, description="Number of grid columns")
    max_text_length: int = Field(
        DEFAULT_MAX_TEXT_LENGTH,
        ge=1,
        description="Longest raw text a cell keeps; longer input is truncated",
    )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None, source: str | None = None) -> SheetConfig:
        """Validate a plain mapping, raising ConfigError on bad input."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigError(
                f"expected a mapping of settings, got {type(data).__name__}",
                source=source,
            )
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigError(str(e), source=source) from e

    @classmethod
    def from_yaml(cls, path: str | Path) -> SheetConfig:
        """Read settings from a YAML file. An empty file yields the defaults."""
        path = Path(path)
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"cannot read config: {e.strerror}", source=str(path)) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML: {e}", source=str(path)) from e
        return cls.from_mapping(data, source=str(path))
