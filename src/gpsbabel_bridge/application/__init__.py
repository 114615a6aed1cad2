"""Application-layer use-cases and option objects."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from gpsbabel_bridge.application.options import (
    BridgeOptions,
    ProcessOptions,
    TempArtifactOptions,
)
from gpsbabel_bridge.application.ports import (
    ArtifactReader,
    FileSystem,
    ProcessRunner,
)
from gpsbabel_bridge.application.results import (
    ConversionOutcome,
    FailureKind,
    LayerSummary,
)
from gpsbabel_bridge.types import OpenOptionMap

if TYPE_CHECKING:
    from gpsbabel_bridge.bridge.datasource import GPSBabelDataSource


def build_bridge_options(
    *,
    use_tempfile: bool | str = False,
    program: str = "gpsbabel",
    timeout_seconds: float | None = None,
    temp_dir: Path | None = None,
) -> BridgeOptions:
    """Build typed bridge options via lazy use-case import."""
    from gpsbabel_bridge.application.use_cases import build_bridge_options as _impl

    return _impl(
        use_tempfile=use_tempfile,
        program=program,
        timeout_seconds=timeout_seconds,
        temp_dir=temp_dir,
    )


def bridge_options_from_env(
    environ: Mapping[str, str] | None = None,
    **overrides: object,
) -> BridgeOptions:
    """Read bridge options from the environment via lazy use-case import."""
    from gpsbabel_bridge.application.use_cases import bridge_options_from_env as _impl

    return _impl(environ, **overrides)


def open_datasource(
    name: str,
    *,
    options: BridgeOptions,
    driver_name: str | None = None,
    open_options: OpenOptionMap | None = None,
    runner: ProcessRunner | None = None,
    reader: ArtifactReader | None = None,
    file_system: FileSystem | None = None,
) -> GPSBabelDataSource:
    """Open a converter-backed data source via lazy use-case import."""
    from gpsbabel_bridge.application.use_cases import open_datasource as _impl

    return _impl(
        name,
        options=options,
        driver_name=driver_name,
        open_options=open_options,
        runner=runner,
        reader=reader,
        file_system=file_system,
    )


__all__ = [
    "BridgeOptions",
    "ProcessOptions",
    "TempArtifactOptions",
    "ConversionOutcome",
    "FailureKind",
    "LayerSummary",
    "build_bridge_options",
    "bridge_options_from_env",
    "open_datasource",
]
