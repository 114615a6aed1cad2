"""Unit tests for layer selection."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from gpsbabel_bridge.adapters.gpx_reader import GpxArtifactReader, parse_gpx
from gpsbabel_bridge.bridge.extract import LayerExtractor, LayerSet, extract_layers
from gpsbabel_bridge.bridge.request import parse_request
from gpsbabel_bridge.errors import ArtifactUnreadableError, EmptyResultError
from gpsbabel_bridge.infrastructure.vfs import VirtualFileSystem

ARTIFACT = "/vsimem/extract/out.gpx"


def test_all_categories_in_canonical_order(gpx: Callable[..., bytes]) -> None:
    dataset = parse_gpx(gpx(waypoints=1, routes=1, tracks=1))
    layers = extract_layers(dataset, parse_request("GPSBABEL:gdb:a.gdb"))
    assert layers.names() == [
        "waypoints",
        "routes",
        "route_points",
        "tracks",
        "track_points",
    ]


def test_tracks_only_filter_ignores_waypoints(gpx: Callable[..., bytes]) -> None:
    """Requesting tracks yields at most tracks and track_points."""
    dataset = parse_gpx(gpx(waypoints=3, routes=1, tracks=2))
    layers = extract_layers(dataset, parse_request("GPSBABEL:gdb:features=tracks:a.gdb"))
    assert layers.names() == ["tracks", "track_points"]
    assert [layer.feature_count() for layer in layers] == [2, 4]


def test_empty_layers_are_dropped(gpx: Callable[..., bytes]) -> None:
    dataset = parse_gpx(gpx(waypoints=2))
    layers = extract_layers(dataset, parse_request("GPSBABEL:gdb:a.gdb"))
    assert layers.names() == ["waypoints"]


def test_layer_set_access() -> None:
    dataset = parse_gpx(
        b'<gpx xmlns="http://www.topografix.com/GPX/1/1"><wpt lat="1" lon="2"/></gpx>'
    )
    layers = extract_layers(dataset, parse_request("GPSBABEL:gdb:a.gdb"))
    assert len(layers) == 1
    assert layers[0].name == "waypoints"
    assert layers.get(0) is layers[0]
    assert layers.get(1) is None
    assert layers.get(-1) is None
    assert layers.by_name("waypoints") is layers[0]
    assert layers.by_name("tracks") is None
    assert not LayerSet()


def test_extractor_returns_dataset_and_layers(
    vfs: VirtualFileSystem, gpx: Callable[..., bytes]
) -> None:
    vfs.write_bytes(ARTIFACT, gpx(routes=1))
    extractor = LayerExtractor(GpxArtifactReader(), vfs)
    dataset, layers = extractor.extract(ARTIFACT, parse_request("GPSBABEL:gdb:a.gdb"))
    assert layers.names() == ["routes", "route_points"]
    assert dataset.get_layer_by_name("routes") is layers[0]


def test_extractor_rejects_empty_result(
    vfs: VirtualFileSystem, gpx: Callable[..., bytes]
) -> None:
    vfs.write_bytes(ARTIFACT, gpx(waypoints=4))
    extractor = LayerExtractor(GpxArtifactReader(), vfs)
    with pytest.raises(EmptyResultError, match="No routes features"):
        extractor.extract(ARTIFACT, parse_request("GPSBABEL:gdb:features=routes:a.gdb"))


def test_extractor_reports_unreadable_artifact(vfs: VirtualFileSystem) -> None:
    vfs.write_bytes(ARTIFACT, b"not xml")
    extractor = LayerExtractor(GpxArtifactReader(), vfs)
    with pytest.raises(ArtifactUnreadableError):
        extractor.extract(ARTIFACT, parse_request("GPSBABEL:gdb:a.gdb"))
