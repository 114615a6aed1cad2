"""Temporary converted-artifact lifecycle."""

from __future__ import annotations

import logging
import tempfile
import uuid
from pathlib import Path
from types import TracebackType

from gpsbabel_bridge.application.ports import FileSystem
from gpsbabel_bridge.infrastructure.vfs import MEMORY_PREFIX

logger = logging.getLogger(__name__)


class TempArtifactManager:
    """Own one uniquely named converter output location.

    Parameters
    ----------
    file_system : FileSystem
        Storage the artifact lives on.
    use_tempfile : bool, default=False
        Write to a durable file in ``temp_dir`` instead of a hidden
        in-memory path.
    temp_dir : Path | None, default=None
        Directory for durable files; the system temp dir when omitted.
    """

    def __init__(
        self,
        file_system: FileSystem,
        *,
        use_tempfile: bool = False,
        temp_dir: Path | None = None,
    ) -> None:
        self._fs = file_system
        self._use_tempfile = use_tempfile
        self._temp_dir = temp_dir
        self._path: str | None = None
        self._removed = False

    @property
    def path(self) -> str:
        """Artifact path, generated on first access."""
        if self._path is None:
            self._path = self._generate()
        return self._path

    @property
    def removed(self) -> bool:
        return self._removed

    def _generate(self) -> str:
        token = uuid.uuid4().hex
        if self._use_tempfile:
            directory = self._temp_dir or Path(tempfile.gettempdir())
            return str(directory / f"gpsbabel_{token}.gpx")
        return f"{MEMORY_PREFIX}.hidden/{token}/gpsbabel.gpx"

    def cleanup(self) -> None:
        """Remove the artifact once; a never-created artifact is fine."""
        if self._removed or self._path is None:
            return
        self._removed = True
        try:
            self._fs.unlink(self._path)
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("could not remove temporary artifact %s: %s", self._path, exc)
            return
        logger.debug("removed temporary artifact %s", self._path)

    def __enter__(self) -> TempArtifactManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cleanup()
