"""GPX 1.0/1.1 artifact reader exposing the five converter output layers.

Layers follow the converter's interchange layout:

- ``waypoints``: one Point per ``wpt``
- ``routes``: one LineString per ``rte``
- ``route_points``: one Point per ``rte/rtept``
- ``tracks``: one MultiLineString per ``trk`` (a line per ``trkseg``)
- ``track_points``: one Point per ``trk/trkseg/trkpt``

Coordinates are stored as ``(lon, lat)``; elevation is a property.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator
from dataclasses import dataclass, field

from gpsbabel_bridge.application.ports import FileSystem
from gpsbabel_bridge.errors import ArtifactUnreadableError
from gpsbabel_bridge.types import Coordinate, GeometryType, PropertyMap

LAYER_NAMES = ("waypoints", "routes", "route_points", "tracks", "track_points")

_POINT_FIELDS = ("name", "cmt", "desc", "sym", "type", "time")


@dataclass(frozen=True)
class GpxFeature:
    """Single feature read from the artifact."""

    fid: int
    geometry_type: GeometryType
    coordinates: object
    properties: PropertyMap = field(default_factory=dict)


@dataclass
class GpxLayer:
    """Named, in-memory feature layer."""

    name: str
    features: list[GpxFeature] = field(default_factory=list)

    def feature_count(self) -> int:
        return len(self.features)

    def add(
        self, geometry_type: GeometryType, coordinates: object, properties: PropertyMap
    ) -> int:
        fid = len(self.features) + 1
        self.features.append(GpxFeature(fid, geometry_type, coordinates, properties))
        return fid

    def __iter__(self) -> Iterator[GpxFeature]:
        return iter(self.features)

    def __len__(self) -> int:
        return len(self.features)


class GpxDataset:
    """Opened GPX artifact."""

    def __init__(self, layers: dict[str, GpxLayer]) -> None:
        self._layers = layers
        self.closed = False

    def layer_names(self) -> list[str]:
        return list(self._layers)

    def get_layer_by_name(self, name: str) -> GpxLayer | None:
        return self._layers.get(name)

    def close(self) -> None:
        self._layers = {}
        self.closed = True


def _namespace(root: ET.Element) -> str:
    if root.tag.startswith("{"):
        return root.tag.split("}")[0] + "}"
    return ""


def _children(parent: ET.Element, tag: str, ns: str) -> list[ET.Element]:
    return parent.findall(f"{ns}{tag}")


def _child_text(parent: ET.Element, tag: str, ns: str) -> str | None:
    elem = parent.find(f"{ns}{tag}")
    if elem is not None and elem.text and elem.text.strip():
        return elem.text.strip()
    return None


def _coordinate(elem: ET.Element) -> Coordinate | None:
    try:
        return (float(elem.get("lon", "")), float(elem.get("lat", "")))
    except ValueError:
        return None


def _point_properties(elem: ET.Element, ns: str) -> PropertyMap:
    properties: PropertyMap = {
        name: _child_text(elem, name, ns) for name in _POINT_FIELDS
    }
    ele = _child_text(elem, "ele", ns)
    try:
        properties["ele"] = float(ele) if ele is not None else None
    except ValueError:
        properties["ele"] = None
    return properties


def _collection_properties(elem: ET.Element, ns: str) -> PropertyMap:
    number = _child_text(elem, "number", ns)
    return {
        "name": _child_text(elem, "name", ns),
        "desc": _child_text(elem, "desc", ns),
        "number": int(number) if number is not None and number.isdigit() else None,
    }


def parse_gpx(data: bytes) -> GpxDataset:
    """Parse GPX bytes into a :class:`GpxDataset`.

    Raises
    ------
    ArtifactUnreadableError
        If the payload is not well-formed GPX.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as exc:
        raise ArtifactUnreadableError(f"Converted output is not valid GPX: {exc}") from exc

    ns = _namespace(root)
    if root.tag != f"{ns}gpx":
        raise ArtifactUnreadableError(
            f"Converted output is not GPX (root element {root.tag!r})"
        )

    layers = {name: GpxLayer(name) for name in LAYER_NAMES}

    for wpt in _children(root, "wpt", ns):
        coord = _coordinate(wpt)
        if coord is not None:
            layers["waypoints"].add("Point", coord, _point_properties(wpt, ns))

    for rte in _children(root, "rte", ns):
        points = [
            (pt, coord)
            for pt in _children(rte, "rtept", ns)
            if (coord := _coordinate(pt)) is not None
        ]
        route_fid = layers["routes"].add(
            "LineString",
            [coord for _, coord in points],
            _collection_properties(rte, ns),
        )
        for index, (pt, coord) in enumerate(points):
            properties = _point_properties(pt, ns)
            properties["route_fid"] = route_fid
            properties["route_point_id"] = index
            layers["route_points"].add("Point", coord, properties)

    for trk in _children(root, "trk", ns):
        segments: list[list[tuple[ET.Element, Coordinate]]] = [
            [
                (pt, coord)
                for pt in _children(seg, "trkpt", ns)
                if (coord := _coordinate(pt)) is not None
            ]
            for seg in _children(trk, "trkseg", ns)
        ]
        track_fid = layers["tracks"].add(
            "MultiLineString",
            [[coord for _, coord in segment] for segment in segments],
            _collection_properties(trk, ns),
        )
        for seg_id, segment in enumerate(segments):
            for point_id, (pt, coord) in enumerate(segment):
                properties = _point_properties(pt, ns)
                properties["track_fid"] = track_fid
                properties["track_seg_id"] = seg_id
                properties["track_seg_point_id"] = point_id
                layers["track_points"].add("Point", coord, properties)

    return GpxDataset(layers)


class GpxArtifactReader:
    """Open converted GPX artifacts through a :class:`FileSystem`."""

    def open(self, path: str, file_system: FileSystem) -> GpxDataset:
        """Read and parse the artifact at ``path``.

        Raises
        ------
        ArtifactUnreadableError
            If the artifact is missing, empty or not GPX.
        """
        try:
            with file_system.open(path, "rb") as handle:
                data = handle.read()
        except OSError as exc:
            raise ArtifactUnreadableError(f"Cannot open converted output: {exc}") from exc
        if not data.strip():
            raise ArtifactUnreadableError("Converter produced no output")
        return parse_gpx(data)
