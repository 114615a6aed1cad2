"""Shared fakes for bridge unit tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import BinaryIO

import pytest

from gpsbabel_bridge.application.results import ProcessResult
from gpsbabel_bridge.infrastructure.vfs import VirtualFileSystem


@dataclass(frozen=True)
class RunnerCall:
    """One recorded converter invocation."""

    argv: tuple[str, ...]
    stdin_data: bytes | None
    timeout: float | None


@dataclass
class Reply:
    """Scripted converter reply."""

    exit_status: int = 0
    output: bytes = b""
    diagnostic: str = ""
    timed_out: bool = False


@dataclass
class ScriptedRunner:
    """Process runner spy replaying scripted replies in order."""

    replies: list[Reply] = field(default_factory=list)
    calls: list[RunnerCall] = field(default_factory=list)

    def script(
        self,
        exit_status: int = 0,
        output: bytes = b"",
        diagnostic: str = "",
        timed_out: bool = False,
    ) -> ScriptedRunner:
        """Queue one reply; chainable."""
        self.replies.append(Reply(exit_status, output, diagnostic, timed_out))
        return self

    def run(
        self,
        argv: Sequence[str],
        *,
        stdin: BinaryIO | None,
        stdout: BinaryIO,
        timeout: float | None = None,
    ) -> ProcessResult:
        stdin_data = stdin.read() if stdin is not None else None
        self.calls.append(RunnerCall(tuple(argv), stdin_data, timeout))
        if not self.replies:
            raise AssertionError(f"unexpected converter call: {list(argv)}")
        reply = self.replies.pop(0)
        stdout.write(reply.output)
        return ProcessResult(
            exit_status=reply.exit_status,
            diagnostic=reply.diagnostic,
            timed_out=reply.timed_out,
        )


def build_gpx(
    *,
    waypoints: int = 0,
    routes: int = 0,
    tracks: int = 0,
    points_per_line: int = 2,
) -> bytes:
    """Build a GPX 1.1 document with the requested feature counts."""
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">',
    ]
    for index in range(waypoints):
        parts.append(
            f'<wpt lat="{45 + index}" lon="{5 + index}">'
            f"<ele>{100 + index}</ele><name>WPT{index}</name></wpt>"
        )
    for index in range(routes):
        parts.append(f"<rte><name>RTE{index}</name>")
        parts.extend(
            f'<rtept lat="{46 + i}" lon="{6 + i}"><name>RP{i}</name></rtept>'
            for i in range(points_per_line)
        )
        parts.append("</rte>")
    for index in range(tracks):
        parts.append(f"<trk><name>TRK{index}</name><trkseg>")
        parts.extend(
            f'<trkpt lat="{47 + i}" lon="{7 + i}"><ele>{i}</ele></trkpt>'
            for i in range(points_per_line)
        )
        parts.append("</trkseg></trk>")
    parts.append("</gpx>")
    return "\n".join(parts).encode("utf-8")


@pytest.fixture
def vfs() -> VirtualFileSystem:
    """Isolated file system with its own memory namespace."""
    return VirtualFileSystem()


@pytest.fixture
def runner() -> ScriptedRunner:
    return ScriptedRunner()


@pytest.fixture
def gpx() -> Callable[..., bytes]:
    return build_gpx
