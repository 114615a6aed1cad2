"""Conversion request parsing.

A request is addressed either inline::

    GPSBABEL:<driver>[,options]*:[features=<cat>[,<cat>]*:]<source-path>

or with the driver and path supplied out-of-band, as ``GPSBABEL_DRIVER`` /
``FILENAME`` open options or as an explicit driver name next to a bare path.
Every form yields the same :class:`ConversionRequest`.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError

from gpsbabel_bridge.errors import InvalidRequestSyntaxError
from gpsbabel_bridge.schemas import OpenOptionsConfig
from gpsbabel_bridge.types import FeatureCategory, OpenOptionMap
from gpsbabel_bridge.validate import validate_driver_name

GPSBABEL_PREFIX = "GPSBABEL:"
FEATURES_PREFIX = "features="
FEATURE_CATEGORIES: tuple[FeatureCategory, ...] = ("waypoints", "routes", "tracks")

SHORT_SYNTAX_MESSAGE = "Wrong syntax. Expected GPSBABEL:driver_name:file_name"
LONG_SYNTAX_MESSAGE = (
    "Wrong syntax. Expected "
    "GPSBABEL:driver_name[,options]*:[features=waypoints,tracks,routes:]file_name"
)


@dataclass(frozen=True)
class ConversionRequest:
    """Normalized conversion request.

    Parameters
    ----------
    source_path : str
        File or device path handed to the converter.
    driver_name : str
        Converter input driver, with optional comma-separated options.
    explicit_features : bool, default=False
        Whether a ``features=`` filter was given. Only then are category
        flags passed to the converter.
    waypoints, routes, tracks : bool, default=True
        Requested feature categories.
    """

    source_path: str
    driver_name: str
    explicit_features: bool = False
    waypoints: bool = True
    routes: bool = True
    tracks: bool = True

    def __post_init__(self) -> None:
        validate_driver_name(self.driver_name)
        if not self.source_path:
            raise InvalidRequestSyntaxError("Missing source path")

    def includes(self, category: FeatureCategory) -> bool:
        """Return whether ``category`` was requested."""
        return bool(getattr(self, category))

    @property
    def categories(self) -> tuple[FeatureCategory, ...]:
        """Requested categories in canonical order."""
        return tuple(c for c in FEATURE_CATEGORIES if self.includes(c))


def is_gpsbabel_name(name: str) -> bool:
    """Return whether ``name`` uses the inline ``GPSBABEL:`` syntax."""
    return name[: len(GPSBABEL_PREFIX)].upper() == GPSBABEL_PREFIX


def parse_features(value: str) -> dict[FeatureCategory, bool]:
    """Parse a comma-separated ``features=`` value.

    Raises
    ------
    InvalidRequestSyntaxError
        If a category is not one of waypoints, routes, tracks.
    """
    selected: dict[FeatureCategory, bool] = {c: False for c in FEATURE_CATEGORIES}
    for token in value.split(","):
        token = token.strip().lower()
        if not token:
            continue
        if token not in selected:
            raise InvalidRequestSyntaxError("Wrong value for 'features' options")
        selected[token] = True  # type: ignore[index]
    return selected


def _parse_open_options(open_options: OpenOptionMap | None) -> OpenOptionsConfig:
    try:
        return OpenOptionsConfig.from_mapping(open_options)
    except ValidationError as exc:
        raise InvalidRequestSyntaxError(f"Invalid open options: {exc}") from exc


def parse_request(
    name: str,
    driver_name: str | None = None,
    open_options: OpenOptionMap | None = None,
) -> ConversionRequest:
    """Parse a data source name into a :class:`ConversionRequest`.

    Parameters
    ----------
    name : str
        ``GPSBABEL:`` name, or a bare source path.
    driver_name : str | None, default=None
        Driver for a bare source path. Ignored for ``GPSBABEL:`` names.
    open_options : Mapping[str, str] | None, default=None
        Out-of-band ``FILENAME`` and ``GPSBABEL_DRIVER`` options.

    Raises
    ------
    InvalidRequestSyntaxError
        If the name is malformed or a required parameter is missing.
    InvalidDriverNameError
        If the driver identifier fails charset validation.
    """
    if not is_gpsbabel_name(name):
        if driver_name is None:
            raise InvalidRequestSyntaxError("Missing GPSBabel driver name")
        return ConversionRequest(
            source_path=name, driver_name=validate_driver_name(driver_name)
        )

    options = _parse_open_options(open_options)
    filename = options.filename
    if options.gpsbabel_driver is not None:
        if filename is None:
            raise InvalidRequestSyntaxError("Missing FILENAME")
        return ConversionRequest(
            source_path=filename,
            driver_name=validate_driver_name(options.gpsbabel_driver),
        )

    driver, sep, remainder = name[len(GPSBABEL_PREFIX) :].partition(":")
    if not sep:
        raise InvalidRequestSyntaxError(SHORT_SYNTAX_MESSAGE)
    validate_driver_name(driver)

    explicit_features = False
    selected = {c: True for c in FEATURE_CATEGORIES}
    if remainder[: len(FEATURES_PREFIX)].lower() == FEATURES_PREFIX:
        features, sep, remainder = remainder[len(FEATURES_PREFIX) :].partition(":")
        if not sep:
            raise InvalidRequestSyntaxError(LONG_SYNTAX_MESSAGE)
        selected = parse_features(features)
        explicit_features = True

    return ConversionRequest(
        source_path=filename if filename is not None else remainder,
        driver_name=driver,
        explicit_features=explicit_features,
        **selected,
    )
