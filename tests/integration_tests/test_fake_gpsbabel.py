"""Integration tests running a stand-in converter executable."""

from __future__ import annotations

import io
import os
import shutil
import stat
import sys
import time
from collections.abc import Callable
from pathlib import Path

import pytest

from gpsbabel_bridge.adapters.subprocess_runner import (
    LAUNCH_FAILURE_STATUS,
    SubprocessRunner,
)
from gpsbabel_bridge.application.options import (
    BridgeOptions,
    ProcessOptions,
    TempArtifactOptions,
)
from gpsbabel_bridge.bridge.datasource import GPSBabelDataSource
from gpsbabel_bridge.errors import ConversionFailedError, ConverterTimeoutError
from gpsbabel_bridge.infrastructure.vfs import VirtualFileSystem

FAKE_CONVERTER = '''#!{python}
import sys
import time

MODE = {mode!r}
args = sys.argv[1:]
if args == ["-V"]:
    print("GPSBabel Version 1.9.0")
    sys.exit(0)
if MODE == "sleep":
    time.sleep(30)
if MODE == "fail":
    sys.stderr.write("gpsbabel: Invalid or unsupported file\\n")
    sys.exit(1)
source = args[args.index("-f") + 1]
if source == "-":
    if MODE == "no-pipe":
        sys.stderr.write("gpsbabel: This format cannot be used in piped commands!\\n")
        sys.exit(1)
    data = sys.stdin.buffer.read()
else:
    with open(source, "rb") as handle:
        data = handle.read()
name = data.decode("ascii").strip()
sys.stdout.write(
    '<?xml version="1.0"?>'
    '<gpx version="1.1" xmlns="http://www.topografix.com/GPX/1/1">'
    '<wpt lat="1.5" lon="2.5"><name>' + name + '</name></wpt>'
    '</gpx>'
)
'''


@pytest.fixture
def fake_converter(tmp_path: Path) -> Callable[[str], str]:
    """Write an executable converter stand-in for the given mode."""

    def _make(mode: str) -> str:
        path = tmp_path / f"gpsbabel-{mode}"
        path.write_text(FAKE_CONVERTER.format(python=sys.executable, mode=mode))
        path.chmod(path.stat().st_mode | stat.S_IXUSR)
        return str(path)

    return _make


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "track.gdb"
    path.write_bytes(b"ALPHA")
    return path


def _open(
    program: str,
    name: str,
    *,
    use_tempfile: bool = False,
    temp_dir: Path | None = None,
    timeout: float | None = None,
) -> GPSBabelDataSource:
    options = BridgeOptions(
        temp=TempArtifactOptions(use_tempfile=use_tempfile, temp_dir=temp_dir),
        process=ProcessOptions(program=program, timeout_seconds=timeout),
    )
    datasource = GPSBabelDataSource(options, file_system=VirtualFileSystem())
    datasource.open(name)
    return datasource


def _waypoint_name(datasource: GPSBabelDataSource) -> str:
    (feature,) = datasource.get_layer_by_name("waypoints")
    return feature.properties["name"]


@pytest.mark.skipif(sys.platform == "win32", reason="requires POSIX executables")
@pytest.mark.parametrize("use_tempfile", [False, True])
def test_piped_conversion(
    use_tempfile: bool,
    tmp_path: Path,
    fake_converter: Callable[[str], str],
    source: Path,
) -> None:
    temp_dir = tmp_path / "artifacts"
    temp_dir.mkdir()
    with _open(
        fake_converter("ok"),
        f"GPSBABEL:gdb:{source}",
        use_tempfile=use_tempfile,
        temp_dir=temp_dir,
    ) as datasource:
        assert datasource.layers.names() == ["waypoints"]
        assert _waypoint_name(datasource) == "ALPHA"
    assert list(temp_dir.iterdir()) == []


@pytest.mark.skipif(sys.platform == "win32", reason="requires POSIX executables")
def test_direct_retry_reads_source_itself(
    fake_converter: Callable[[str], str], source: Path
) -> None:
    with _open(fake_converter("no-pipe"), f"GPSBABEL:gdb:{source}") as datasource:
        assert _waypoint_name(datasource) == "ALPHA"


@pytest.mark.skipif(sys.platform == "win32", reason="requires POSIX executables")
def test_converter_diagnostic_is_reported(
    fake_converter: Callable[[str], str], source: Path
) -> None:
    with pytest.raises(ConversionFailedError, match="Invalid or unsupported file"):
        _open(fake_converter("fail"), f"GPSBABEL:gdb:{source}")


@pytest.mark.skipif(sys.platform == "win32", reason="requires POSIX executables")
def test_hung_converter_is_killed(
    fake_converter: Callable[[str], str], source: Path
) -> None:
    with pytest.raises(ConverterTimeoutError, match="did not exit within"):
        _open(fake_converter("sleep"), f"GPSBABEL:gdb:{source}", timeout=0.5)


def test_missing_program_reports_launch_failure(tmp_path: Path) -> None:
    with (tmp_path / "out").open("wb") as sink:
        result = SubprocessRunner().run(
            [str(tmp_path / "no-such-gpsbabel"), "-V"],
            stdin=None,
            stdout=sink,
        )
    assert result.exit_status == LAUNCH_FAILURE_STATUS
    assert "Could not launch" in result.diagnostic


def test_missing_program_fails_open(tmp_path: Path, source: Path) -> None:
    with pytest.raises(ConversionFailedError, match="Could not launch"):
        _open(str(tmp_path / "no-such-gpsbabel"), f"GPSBABEL:gdb:{source}")


class _FailingSource(io.RawIOBase):
    """Source stream that fails once the child has recorded its pid."""

    def __init__(self, pid_file: Path) -> None:
        self._pid_file = pid_file

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        deadline = time.monotonic() + 5
        while not self._pid_file.exists() or not self._pid_file.read_text().strip():
            if time.monotonic() > deadline:
                break
            time.sleep(0.02)
        raise OSError("device read failed")


@pytest.mark.skipif(shutil.which("sh") is None, reason="requires a POSIX shell")
def test_child_is_reaped_when_reading_source_fails(tmp_path: Path) -> None:
    pid_file = tmp_path / "child.pid"
    with (tmp_path / "out").open("wb") as sink, pytest.raises(OSError, match="device"):
        SubprocessRunner().run(
            ["sh", "-c", f"echo $$ > {pid_file}; exec sleep 30"],
            stdin=_FailingSource(pid_file),
            stdout=sink,
        )

    pid = int(pid_file.read_text())
    with pytest.raises(ProcessLookupError):
        os.kill(pid, 0)
