"""Application ports for the collaborators the bridge drives."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import BinaryIO, Protocol

from gpsbabel_bridge.application.results import ProcessResult


class ProcessRunner(Protocol):
    """Run the external converter and wait for it to exit."""

    def run(
        self,
        argv: Sequence[str],
        *,
        stdin: BinaryIO | None,
        stdout: BinaryIO,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run ``argv`` with the given stream redirections."""


class FileSystem(Protocol):
    """Path and storage primitives, real or virtual."""

    def open(self, path: str, mode: str) -> BinaryIO:
        """Open ``path`` in binary ``mode`` (``"rb"`` or ``"wb"``)."""

    def unlink(self, path: str) -> None:
        """Remove ``path``; raise ``FileNotFoundError`` if absent."""

    def exists(self, path: str) -> bool:
        """Return whether ``path`` exists in any backend."""

    def is_real_file(self, path: str) -> bool:
        """Return whether ``path`` can be stat-ed on real storage."""


class FeatureLayer(Protocol):
    """Named collection of features inside a converted artifact."""

    name: str

    def feature_count(self) -> int:
        """Return the number of features in the layer."""

    def __iter__(self) -> Iterator[object]:
        """Iterate over layer features."""


class ArtifactDataset(Protocol):
    """Opened converted artifact."""

    def layer_names(self) -> list[str]:
        """Return the names of every layer, empty or not."""

    def get_layer_by_name(self, name: str) -> FeatureLayer | None:
        """Return the named layer or ``None``."""

    def close(self) -> None:
        """Release the dataset."""


class ArtifactReader(Protocol):
    """Open converted artifacts."""

    def open(self, path: str, file_system: FileSystem) -> ArtifactDataset:
        """Open ``path`` read-only through ``file_system``."""
