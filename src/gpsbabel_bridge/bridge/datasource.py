"""Data source that exposes converter output as feature layers."""

from __future__ import annotations

import logging
from types import TracebackType

from gpsbabel_bridge.adapters.gpx_reader import GpxArtifactReader
from gpsbabel_bridge.adapters.subprocess_runner import SubprocessRunner
from gpsbabel_bridge.application.options import BridgeOptions
from gpsbabel_bridge.application.ports import (
    ArtifactDataset,
    ArtifactReader,
    FeatureLayer,
    FileSystem,
    ProcessRunner,
)
from gpsbabel_bridge.application.results import InvocationMode, SourceKind
from gpsbabel_bridge.bridge.classify import classify_source
from gpsbabel_bridge.bridge.extract import LayerExtractor, LayerSet
from gpsbabel_bridge.bridge.identify import sniff_driver_name
from gpsbabel_bridge.bridge.process import ProcessBridge
from gpsbabel_bridge.bridge.request import (
    ConversionRequest,
    is_gpsbabel_name,
    parse_request,
)
from gpsbabel_bridge.bridge.retry import RetryPolicy
from gpsbabel_bridge.bridge.temp import TempArtifactManager
from gpsbabel_bridge.errors import error_for
from gpsbabel_bridge.infrastructure.vfs import default_file_system
from gpsbabel_bridge.types import OpenOptionMap

logger = logging.getLogger(__name__)


class GPSBabelDataSource:
    """Open any converter-readable source as GPX feature layers.

    Parameters
    ----------
    options : BridgeOptions | None, default=None
        Converter and temporary artifact configuration.
    runner : ProcessRunner | None, default=None
        Converter process runner; :class:`SubprocessRunner` by default.
    reader : ArtifactReader | None, default=None
        Reader for the converted output; :class:`GpxArtifactReader` by
        default.
    file_system : FileSystem | None, default=None
        Storage for sources and artifacts; the shared
        :class:`~gpsbabel_bridge.infrastructure.vfs.VirtualFileSystem` by
        default.

    Notes
    -----
    Instances are not thread-safe. Each instance owns its temporary
    artifact and the opened dataset; layers returned by :meth:`open` are
    valid until :meth:`close` or the next :meth:`open`.
    """

    def __init__(
        self,
        options: BridgeOptions | None = None,
        *,
        runner: ProcessRunner | None = None,
        reader: ArtifactReader | None = None,
        file_system: FileSystem | None = None,
    ) -> None:
        self._options = options or BridgeOptions()
        self._runner = runner or SubprocessRunner()
        self._reader = reader or GpxArtifactReader()
        self._fs = file_system or default_file_system()
        self._request: ConversionRequest | None = None
        self._dataset: ArtifactDataset | None = None
        self._layers = LayerSet()
        self._temp: TempArtifactManager | None = None

    @property
    def request(self) -> ConversionRequest | None:
        return self._request

    @property
    def layers(self) -> LayerSet:
        return self._layers

    @property
    def layer_count(self) -> int:
        return len(self._layers)

    @property
    def artifact_path(self) -> str | None:
        """Path of the temporary artifact of the last :meth:`open`."""
        return self._temp.path if self._temp is not None else None

    def get_layer(self, index: int) -> FeatureLayer | None:
        return self._layers.get(index)

    def get_layer_by_name(self, name: str) -> FeatureLayer | None:
        return self._layers.by_name(name)

    def open(
        self,
        name: str,
        driver_name: str | None = None,
        open_options: OpenOptionMap | None = None,
    ) -> LayerSet:
        """Convert ``name`` and expose the requested non-empty layers.

        Parameters
        ----------
        name : str
            ``GPSBABEL:driver[,opts]:[features=...:]path`` or a bare path.
        driver_name : str | None, default=None
            Driver for a bare path. Detected from the file header when
            omitted.
        open_options : Mapping[str, str] | None, default=None
            Out-of-band ``FILENAME`` / ``GPSBABEL_DRIVER``.

        Returns
        -------
        LayerSet
            At least one layer.

        Raises
        ------
        BridgeError
            On any failure; every acquired resource is released first.
        """
        self.close()

        if (
            driver_name is None
            and not is_gpsbabel_name(name)
            and classify_source(name) is SourceKind.REGULAR
        ):
            driver_name = sniff_driver_name(name, self._fs)
            if driver_name is not None:
                logger.debug("detected driver %s for %s", driver_name, name)

        request = parse_request(name, driver_name, open_options)
        source_kind = classify_source(request.source_path)

        temp = TempArtifactManager(
            self._fs,
            use_tempfile=self._options.temp.use_tempfile,
            temp_dir=self._options.temp.temp_dir,
        )
        self._temp = temp
        try:
            self._convert(request, source_kind, temp.path)
            dataset, layers = LayerExtractor(self._reader, self._fs).extract(
                temp.path, request
            )
        finally:
            temp.cleanup()

        self._request = request
        self._dataset = dataset
        self._layers = layers
        logger.info(
            "opened %s with driver %s: %s",
            request.source_path,
            request.driver_name,
            ", ".join(layers.names()),
        )
        return layers

    def _convert(
        self,
        request: ConversionRequest,
        source_kind: SourceKind,
        artifact_path: str,
    ) -> None:
        process = ProcessBridge(
            self._runner,
            self._fs,
            program=self._options.process.program,
            timeout_seconds=self._options.process.timeout_seconds,
        )
        policy = RetryPolicy(self._fs.is_real_file)
        mode = (
            InvocationMode.PIPED
            if source_kind is SourceKind.REGULAR
            else InvocationMode.DIRECT
        )
        while True:
            outcome = process.execute(request, artifact_path, mode)
            decision = policy.advance(
                outcome,
                source_kind=source_kind,
                source_path=request.source_path,
                driver_name=request.driver_name,
            )
            if not decision.retry:
                break
            mode = InvocationMode.DIRECT

        if decision.failure is not None:
            raise error_for(
                decision.failure,
                decision.diagnostic
                or f"{self._options.process.program} exited with status "
                f"{outcome.exit_status}",
            )

    def close(self) -> None:
        """Release the dataset and remove the temporary artifact."""
        if self._dataset is not None:
            self._dataset.close()
            self._dataset = None
        if self._temp is not None:
            self._temp.cleanup()
            self._temp = None
        self._layers = LayerSet()
        self._request = None

    def __enter__(self) -> GPSBabelDataSource:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
