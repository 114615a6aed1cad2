"""Guess the converter input driver from a file header."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from gpsbabel_bridge.application.ports import FileSystem

HEADER_SIZE = 1024


@dataclass(frozen=True)
class DriverSignature:
    """Header test for one converter driver."""

    driver_name: str
    can_handle: Callable[[bytes], bool]


def _starts_with(prefix: bytes) -> Callable[[bytes], bool]:
    return lambda header: header.startswith(prefix)


def _contains_any(*needles: bytes) -> Callable[[bytes], bool]:
    return lambda header: any(needle in header for needle in needles)


def _contains_all(*needles: bytes) -> Callable[[bytes], bool]:
    return lambda header: all(needle in header for needle in needles)


BUILTIN_SIGNATURES: tuple[DriverSignature, ...] = (
    DriverSignature("mapsource", _starts_with(b"MsRcd")),
    DriverSignature("gdb", _starts_with(b"MsRcf")),
    DriverSignature("osm", _contains_any(b"<osm")),
    DriverSignature("gtrnctr", _contains_any(b"<TrainingCenterDatabase")),
    DriverSignature("nmea", _contains_any(b"$GPGSA", b"$GPGGA")),
    DriverSignature("ozi", lambda header: header[:11].lower() == b"oziexplorer"),
    DriverSignature("garmin_txt", _contains_all(b"Grid", b"Datum", b"Header")),
    DriverSignature("magellan", _contains_any(b"$PMGNWPL", b"$PMGNRTE")),
)


def detect_driver_name(
    header: bytes,
    signatures: tuple[DriverSignature, ...] = BUILTIN_SIGNATURES,
) -> str | None:
    """Return the first driver whose signature matches ``header``."""
    for signature in signatures:
        if signature.can_handle(header):
            return signature.driver_name
    return None


def sniff_driver_name(path: str, file_system: FileSystem) -> str | None:
    """Read the header of ``path`` and detect its driver.

    Returns ``None`` when the file cannot be read or nothing matches.
    """
    try:
        with file_system.open(path, "rb") as handle:
            header = handle.read(HEADER_SIZE)
    except OSError:
        return None
    return detect_driver_name(header)
