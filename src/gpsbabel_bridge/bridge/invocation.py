"""Converter command line construction."""

from __future__ import annotations

from dataclasses import dataclass

from gpsbabel_bridge.application.results import InvocationMode
from gpsbabel_bridge.bridge.request import ConversionRequest
from gpsbabel_bridge.types import Argv

DEFAULT_PROGRAM = "gpsbabel"
STDIN_TOKEN = "-"
STDOUT_TOKEN = "-"
OUTPUT_FORMAT = "gpx,gpxver=1.1"

_CATEGORY_FLAGS = (("waypoints", "-w"), ("routes", "-r"), ("tracks", "-t"))


@dataclass(frozen=True)
class ProcessInvocation:
    """Argument vector for one converter run."""

    argv: Argv
    mode: InvocationMode

    @property
    def program(self) -> str:
        return self.argv[0]


def build_argv(
    request: ConversionRequest,
    input_token: str,
    *,
    program: str = DEFAULT_PROGRAM,
) -> Argv:
    """Build the converter argument vector.

    Parameters
    ----------
    request : ConversionRequest
        Parsed request providing the driver and category filter.
    input_token : str
        Value of ``-f``: :data:`STDIN_TOKEN` in piped mode, the source path
        otherwise.
    program : str, default="gpsbabel"
        Converter executable.

    Returns
    -------
    tuple[str, ...]
        ``program [-w] [-r] [-t] -i driver -f token -o gpx,gpxver=1.1 -F -``
    """
    argv = [program]
    if request.explicit_features:
        argv.extend(flag for category, flag in _CATEGORY_FLAGS if request.includes(category))
    argv.extend(
        [
            "-i",
            request.driver_name,
            "-f",
            input_token,
            "-o",
            OUTPUT_FORMAT,
            "-F",
            STDOUT_TOKEN,
        ]
    )
    return tuple(argv)


def build_invocation(
    request: ConversionRequest,
    mode: InvocationMode,
    *,
    program: str = DEFAULT_PROGRAM,
) -> ProcessInvocation:
    """Build the invocation for ``mode``.

    Piped invocations read the source from standard input; direct ones pass
    the literal source path.
    """
    input_token = STDIN_TOKEN if mode is InvocationMode.PIPED else request.source_path
    return ProcessInvocation(
        argv=build_argv(request, input_token, program=program),
        mode=mode,
    )
