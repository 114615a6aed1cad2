"""Source path classification."""

from __future__ import annotations

import re

from gpsbabel_bridge.application.results import SourceKind

_DEVICE_PREFIXES = ("/dev/", "usb:")
_SERIAL_PORT_PREFIX = "COM"
_LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)")


def _leading_int(text: str) -> int:
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else 0


def is_special_source(path: str) -> bool:
    """Return whether ``path`` names a device, bus or serial port.

    ``COM`` paths only count when followed by a positive port number, so
    ``COM3`` is special while ``COM0`` and ``COMx`` are regular files.
    """
    if path.startswith(_DEVICE_PREFIXES):
        return True
    return (
        path.startswith(_SERIAL_PORT_PREFIX)
        and _leading_int(path[len(_SERIAL_PORT_PREFIX) :]) > 0
    )


def classify_source(path: str) -> SourceKind:
    """Classify ``path`` as a regular file or a special source."""
    return SourceKind.SPECIAL if is_special_source(path) else SourceKind.REGULAR
