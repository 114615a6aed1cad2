"""Driver identifier validation."""

from __future__ import annotations

import logging
import re

from gpsbabel_bridge.errors import InvalidDriverNameError

logger = logging.getLogger(__name__)

_DRIVER_NAME_RE = re.compile(r"[A-Za-z0-9_=.,]+")


def is_valid_driver_name(driver_name: str) -> bool:
    """Check a converter driver identifier against the allowed charset.

    Parameters
    ----------
    driver_name : str
        Driver identifier, optionally followed by comma-separated driver
        options (``garmin,snlen=10``).

    Returns
    -------
    bool
        ``True`` if every character is an ASCII letter, digit, ``_``,
        ``=``, ``.`` or ``,``.
    """
    return _DRIVER_NAME_RE.fullmatch(driver_name) is not None


def validate_driver_name(driver_name: str) -> str:
    """Return ``driver_name`` unchanged or raise.

    The identifier ends up in the converter argument vector, so a charset
    violation is always reported, whatever diagnostics scope is active.

    Raises
    ------
    InvalidDriverNameError
        If the identifier contains a character outside the allowed set.
    """
    if not is_valid_driver_name(driver_name):
        logger.error("Invalid GPSBabel driver name: %r", driver_name)
        raise InvalidDriverNameError("Invalid GPSBabel driver name")
    return driver_name
