"""Shared type aliases for bridge modules."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

type FeatureCategory = Literal["waypoints", "routes", "tracks"]
type LayerName = Literal[
    "waypoints",
    "routes",
    "route_points",
    "tracks",
    "track_points",
]
type GeometryType = Literal["Point", "LineString", "MultiLineString"]

type Argv = tuple[str, ...]
type OpenOptionMap = Mapping[str, str]

type Coordinate = tuple[float, float]
type PropertyValue = str | int | float | None
type PropertyMap = dict[str, PropertyValue]
