"""Typed option objects shared across bridge use-cases."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class TempArtifactOptions:
    """Where the converted artifact is written."""

    use_tempfile: bool = False
    temp_dir: Path | None = None


@dataclass(frozen=True)
class ProcessOptions:
    """Converter process configuration."""

    program: str = "gpsbabel"
    timeout_seconds: float | None = None


@dataclass(frozen=True)
class BridgeOptions:
    """Shared bridge options passed through use-cases."""

    temp: TempArtifactOptions = TempArtifactOptions()
    process: ProcessOptions = ProcessOptions()
