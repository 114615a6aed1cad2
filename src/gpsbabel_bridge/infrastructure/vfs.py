"""File system adapter with an in-memory ``/vsimem/`` namespace."""

from __future__ import annotations

import errno
import io
import os
from pathlib import Path
from typing import BinaryIO

MEMORY_PREFIX = "/vsimem/"


def _not_found(path: str) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)


class _MemoryWriter(io.BytesIO):
    """Write stream that publishes its content to the memory store."""

    def __init__(self, store: dict[str, bytes], path: str) -> None:
        super().__init__()
        self._store = store
        self._path = path
        store[path] = b""

    def flush(self) -> None:
        super().flush()
        if not self.closed:
            self._store[self._path] = self.getvalue()

    def close(self) -> None:
        if not self.closed:
            self._store[self._path] = self.getvalue()
        super().close()


class VirtualFileSystem:
    """Real-disk file system plus process-local in-memory files.

    Paths under ``/vsimem/`` live in memory only: the converter process
    cannot open them, and :meth:`is_real_file` reports them as virtual.
    """

    def __init__(self) -> None:
        self._memory: dict[str, bytes] = {}

    @staticmethod
    def is_virtual(path: str) -> bool:
        return path.startswith(MEMORY_PREFIX)

    def open(self, path: str, mode: str) -> BinaryIO:
        if mode not in ("rb", "wb"):
            raise ValueError(f"unsupported mode: {mode!r}")
        if not self.is_virtual(path):
            return Path(path).open(mode)  # noqa: SIM115
        if mode == "wb":
            return _MemoryWriter(self._memory, path)
        try:
            return io.BytesIO(self._memory[path])
        except KeyError:
            raise _not_found(path) from None

    def unlink(self, path: str) -> None:
        if not self.is_virtual(path):
            os.unlink(path)
            return
        try:
            del self._memory[path]
        except KeyError:
            raise _not_found(path) from None

    def exists(self, path: str) -> bool:
        if self.is_virtual(path):
            return path in self._memory
        return os.path.exists(path)

    def is_real_file(self, path: str) -> bool:
        """Return whether ``path`` can be stat-ed on real storage."""
        if self.is_virtual(path):
            return False
        try:
            os.stat(path)
        except OSError:
            return False
        return True

    def read_bytes(self, path: str) -> bytes:
        with self.open(path, "rb") as handle:
            return handle.read()

    def write_bytes(self, path: str, data: bytes) -> None:
        with self.open(path, "wb") as handle:
            handle.write(data)


_default_file_system = VirtualFileSystem()


def default_file_system() -> VirtualFileSystem:
    """Return the process-wide file system shared by default bridges."""
    return _default_file_system
