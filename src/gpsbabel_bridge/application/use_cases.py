"""Application use-cases orchestrating the conversion bridge."""

from __future__ import annotations

import io
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import ValidationError

from gpsbabel_bridge.adapters.subprocess_runner import SubprocessRunner
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
from gpsbabel_bridge.application.results import LayerSummary
from gpsbabel_bridge.bridge.datasource import GPSBabelDataSource
from gpsbabel_bridge.errors import ConfigurationError
from gpsbabel_bridge.schemas import BridgeSettingsConfig
from gpsbabel_bridge.types import OpenOptionMap

logger = logging.getLogger(__name__)

ENV_USE_TEMPFILE = "USE_TEMPFILE"
ENV_PROGRAM = "GPSBABEL_PROGRAM"
ENV_TIMEOUT = "GPSBABEL_TIMEOUT"
ENV_TEMP_DIR = "GPSBABEL_TEMP_DIR"

_ENV_FIELDS = {
    ENV_USE_TEMPFILE: "use_tempfile",
    ENV_PROGRAM: "program",
    ENV_TIMEOUT: "timeout_seconds",
    ENV_TEMP_DIR: "temp_dir",
}


def _options_from_config(config: BridgeSettingsConfig) -> BridgeOptions:
    return BridgeOptions(
        temp=TempArtifactOptions(
            use_tempfile=config.use_tempfile,
            temp_dir=config.temp_dir,
        ),
        process=ProcessOptions(
            program=config.program,
            timeout_seconds=config.timeout_seconds,
        ),
    )


def build_bridge_options(
    *,
    use_tempfile: bool | str = False,
    program: str = "gpsbabel",
    timeout_seconds: float | None = None,
    temp_dir: Path | None = None,
) -> BridgeOptions:
    """Build typed option object from command/API params.

    Raises
    ------
    ConfigurationError
        If a value fails validation.
    """
    try:
        config = BridgeSettingsConfig(
            use_tempfile=use_tempfile,
            program=program,
            timeout_seconds=timeout_seconds,
            temp_dir=temp_dir,
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid bridge settings: {exc}") from exc
    return _options_from_config(config)


def bridge_options_from_env(
    environ: Mapping[str, str] | None = None,
    **overrides: object,
) -> BridgeOptions:
    """Read bridge options from the environment once.

    ``USE_TEMPFILE`` selects a durable temporary file, ``GPSBABEL_PROGRAM``
    the converter executable, ``GPSBABEL_TIMEOUT`` a timeout in seconds and
    ``GPSBABEL_TEMP_DIR`` the durable temp directory. Keyword overrides
    that are not ``None`` take precedence.
    """
    env = os.environ if environ is None else environ
    values: dict[str, object] = {
        field: env[key] for key, field in _ENV_FIELDS.items() if env.get(key)
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    try:
        config = BridgeSettingsConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid bridge settings: {exc}") from exc
    return _options_from_config(config)


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
    """Use-case: convert a source and return the opened data source."""
    datasource = GPSBabelDataSource(
        options,
        runner=runner,
        reader=reader,
        file_system=file_system,
    )
    datasource.open(name, driver_name=driver_name, open_options=open_options)
    return datasource


def summarize_layers(datasource: GPSBabelDataSource) -> list[LayerSummary]:
    """Use-case: describe the layers of an opened data source."""
    return [
        LayerSummary(name=layer.name, feature_count=layer.feature_count())
        for layer in datasource.layers
    ]


def converter_version(
    options: BridgeOptions,
    runner: ProcessRunner | None = None,
) -> str | None:
    """Return the converter's ``-V`` banner, or ``None`` if unavailable."""
    runner = runner or SubprocessRunner()
    buffer = io.BytesIO()
    result = runner.run(
        (options.process.program, "-V"),
        stdin=None,
        stdout=buffer,
        timeout=options.process.timeout_seconds or 10.0,
    )
    if result.exit_status != 0:
        logger.debug("converter probe failed: %s", result.diagnostic)
        return None
    return buffer.getvalue().decode("utf-8", errors="replace").strip() or None
