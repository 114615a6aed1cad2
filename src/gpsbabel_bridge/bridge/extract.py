"""Layer selection from a converted artifact."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import overload

from gpsbabel_bridge.application.ports import (
    ArtifactDataset,
    ArtifactReader,
    FeatureLayer,
    FileSystem,
)
from gpsbabel_bridge.bridge.request import ConversionRequest
from gpsbabel_bridge.errors import EmptyResultError
from gpsbabel_bridge.types import FeatureCategory, LayerName

CATEGORY_LAYERS: dict[FeatureCategory, tuple[LayerName, ...]] = {
    "waypoints": ("waypoints",),
    "routes": ("routes", "route_points"),
    "tracks": ("tracks", "track_points"),
}


@dataclass(frozen=True)
class LayerSet(Sequence[FeatureLayer]):
    """Ordered layers exposed to the caller.

    Layers are borrowed from the artifact dataset and stay valid until the
    owning data source is closed.
    """

    layers: tuple[FeatureLayer, ...] = ()

    @overload
    def __getitem__(self, index: int) -> FeatureLayer: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[FeatureLayer]: ...

    def __getitem__(self, index: int | slice) -> FeatureLayer | Sequence[FeatureLayer]:
        return self.layers[index]

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[FeatureLayer]:
        return iter(self.layers)

    def names(self) -> list[str]:
        return [layer.name for layer in self.layers]

    def get(self, index: int) -> FeatureLayer | None:
        """Return the layer at ``index`` or ``None`` when out of range."""
        if index < 0 or index >= len(self.layers):
            return None
        return self.layers[index]

    def by_name(self, name: str) -> FeatureLayer | None:
        return next((layer for layer in self.layers if layer.name == name), None)


def extract_layers(dataset: ArtifactDataset, request: ConversionRequest) -> LayerSet:
    """Select the requested, non-empty layers of ``dataset``.

    Order is waypoints, routes, route_points, tracks, track_points.
    """
    selected: list[FeatureLayer] = []
    for category, layer_names in CATEGORY_LAYERS.items():
        if not request.includes(category):
            continue
        for name in layer_names:
            layer = dataset.get_layer_by_name(name)
            if layer is not None and layer.feature_count() != 0:
                selected.append(layer)
    return LayerSet(tuple(selected))


class LayerExtractor:
    """Open a converted artifact and select its caller-visible layers."""

    def __init__(self, reader: ArtifactReader, file_system: FileSystem) -> None:
        self._reader = reader
        self._fs = file_system

    def extract(
        self, artifact_path: str, request: ConversionRequest
    ) -> tuple[ArtifactDataset, LayerSet]:
        """Return the opened dataset and its selected layers.

        Raises
        ------
        ArtifactUnreadableError
            If the reader cannot open the artifact.
        EmptyResultError
            If no requested layer has features. The dataset is closed.
        """
        dataset = self._reader.open(artifact_path, self._fs)
        try:
            layers = extract_layers(dataset, request)
        except BaseException:
            dataset.close()
            raise
        if not layers:
            dataset.close()
            raise EmptyResultError(
                f"No {', '.join(request.categories) or 'requested'} features "
                f"found in {request.source_path}"
            )
        return dataset, layers
