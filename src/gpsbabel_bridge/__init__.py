"""Top-level API for GPSBabel-backed GPS data sources."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gpsbabel_bridge.bridge.datasource import GPSBabelDataSource

__version__ = "0.1.0"


def open_gpsbabel(
    name: str,
    driver_name: str | None = None,
    open_options: Mapping[str, str] | None = None,
    *,
    use_tempfile: bool | None = None,
    program: str | None = None,
    timeout_seconds: float | None = None,
    temp_dir: Path | None = None,
) -> GPSBabelDataSource:
    """Convert a GPS file or device and open its feature layers.

    Parameters
    ----------
    name : str
        ``GPSBABEL:driver[,options]:[features=waypoints,routes,tracks:]path``
        or a bare file path.
    driver_name : str, optional
        Converter driver for a bare path. Detected from the file header
        when omitted.
    open_options : Mapping[str, str], optional
        Out-of-band ``FILENAME`` and ``GPSBABEL_DRIVER``.
    use_tempfile : bool, optional
        Write converter output to a durable temp file instead of memory.
    program : str, optional
        Converter executable, ``gpsbabel`` by default.
    timeout_seconds : float, optional
        Kill the converter after this many seconds.
    temp_dir : Path, optional
        Directory for durable temp files.

    Returns
    -------
    GPSBabelDataSource
        Opened data source; close it (or use it as a context manager) to
        release its layers.
    """
    from .api import open_gpsbabel as _impl

    return _impl(
        name,
        driver_name=driver_name,
        open_options=open_options,
        use_tempfile=use_tempfile,
        program=program,
        timeout_seconds=timeout_seconds,
        temp_dir=temp_dir,
    )


__all__ = [
    "open_gpsbabel",
]
