"""Public API (delegates to application use-cases)."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping
from typing import Optional

from gpsbabel_bridge.application.use_cases import bridge_options_from_env
from gpsbabel_bridge.application.use_cases import open_datasource
from gpsbabel_bridge.bridge.datasource import GPSBabelDataSource


def open_gpsbabel(
    name: str,
    driver_name: Optional[str] = None,
    open_options: Optional[Mapping[str, str]] = None,
    use_tempfile: Optional[bool] = None,
    program: Optional[str] = None,
    timeout_seconds: Optional[float] = None,
    temp_dir: Optional[Path] = None,
) -> GPSBabelDataSource:
    """Convert a GPS file or device through GPSBabel and open its layers.

    Unset keyword arguments fall back to ``USE_TEMPFILE``,
    ``GPSBABEL_PROGRAM``, ``GPSBABEL_TIMEOUT`` and ``GPSBABEL_TEMP_DIR``.
    """
    options = bridge_options_from_env(
        use_tempfile=use_tempfile,
        program=program,
        timeout_seconds=timeout_seconds,
        temp_dir=temp_dir,
    )
    return open_datasource(
        name,
        options=options,
        driver_name=driver_name,
        open_options=open_options,
    )
