"""Unit tests for converter command line construction."""

from __future__ import annotations

from gpsbabel_bridge.application.results import InvocationMode
from gpsbabel_bridge.bridge.invocation import (
    STDIN_TOKEN,
    build_argv,
    build_invocation,
)
from gpsbabel_bridge.bridge.request import parse_request


def test_default_filter_has_no_category_flags() -> None:
    request = parse_request("GPSBABEL:garmin:/tmp/track.gdb")
    assert build_argv(request, STDIN_TOKEN) == (
        "gpsbabel",
        "-i",
        "garmin",
        "-f",
        "-",
        "-o",
        "gpx,gpxver=1.1",
        "-F",
        "-",
    )


def test_explicit_filter_adds_flags_in_fixed_order() -> None:
    """Flags follow -w -r -t order whatever the features= order."""
    request = parse_request("GPSBABEL:garmin:features=tracks,waypoints:/dev/ttyUSB0")
    argv = build_argv(request, request.source_path, program="/opt/gpsbabel")
    assert argv == (
        "/opt/gpsbabel",
        "-w",
        "-t",
        "-i",
        "garmin",
        "-f",
        "/dev/ttyUSB0",
        "-o",
        "gpx,gpxver=1.1",
        "-F",
        "-",
    )


def test_explicit_filter_with_all_categories_lists_every_flag() -> None:
    request = parse_request("GPSBABEL:gdb:features=routes,tracks,waypoints:a.gdb")
    assert build_argv(request, "a.gdb")[1:4] == ("-w", "-r", "-t")


def test_build_argv_is_pure() -> None:
    """Identical inputs give identical argument vectors."""
    request = parse_request("GPSBABEL:gdb,ver=3:features=routes:a.gdb")
    first = build_argv(request, "a.gdb")
    assert all(build_argv(request, "a.gdb") == first for _ in range(5))
    assert request == parse_request("GPSBABEL:gdb,ver=3:features=routes:a.gdb")


def test_build_invocation_chooses_input_token_by_mode() -> None:
    request = parse_request("GPSBABEL:gdb:/data/a.gdb")
    piped = build_invocation(request, InvocationMode.PIPED)
    direct = build_invocation(request, InvocationMode.DIRECT)
    assert piped.argv[piped.argv.index("-f") + 1] == "-"
    assert direct.argv[direct.argv.index("-f") + 1] == "/data/a.gdb"
    assert piped.mode is InvocationMode.PIPED
    assert direct.program == "gpsbabel"
