"""Pydantic schemas for runtime validation of bridge inputs."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

_FALSE_VALUES = frozenset({"no", "false", "off", "0"})


def parse_bool_option(value: object) -> bool:
    """Interpret a configuration value as a boolean.

    Only ``NO``, ``FALSE``, ``OFF`` and ``0`` (any case) are false; any
    other string is true.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() not in _FALSE_VALUES


class BridgeSettingsConfig(BaseModel):
    """Validated bridge configuration."""

    model_config = ConfigDict(extra="forbid")

    use_tempfile: bool = False
    program: str = "gpsbabel"
    timeout_seconds: float | None = Field(default=None, gt=0)
    temp_dir: Path | None = None

    @field_validator("use_tempfile", mode="before")
    @classmethod
    def _coerce_use_tempfile(cls, value: object) -> bool:
        return parse_bool_option(value)

    @field_validator("program")
    @classmethod
    def _validate_program(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("program cannot be empty.")
        return value


class OpenOptionsConfig(BaseModel):
    """Out-of-band open options (``FILENAME``, ``GPSBABEL_DRIVER``)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    filename: str | None = Field(default=None, alias="FILENAME")
    gpsbabel_driver: str | None = Field(default=None, alias="GPSBABEL_DRIVER")

    @classmethod
    def from_mapping(cls, options: Mapping[str, str] | None) -> OpenOptionsConfig:
        """Build from an option mapping with case-insensitive keys."""
        normalized = {str(key).upper(): value for key, value in (options or {}).items()}
        return cls.model_validate(normalized)
