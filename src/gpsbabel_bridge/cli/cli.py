#!/usr/bin/env python3
"""
gpsbabel_bridge.cli.app

Typer-based CLI for inspecting GPS files and devices through GPSBabel.

Examples
--------
List the layers of a Garmin MapSource file:

    gpsbabel-bridge info GPSBABEL:gdb:track.gdb

Only read tracks from a serial GPS receiver:

    gpsbabel-bridge info GPSBABEL:garmin:features=tracks:/dev/ttyUSB0
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from dataclasses import asdict
from pathlib import Path

import typer

from gpsbabel_bridge.errors import BridgeError

app = typer.Typer(
    name="gpsbabel-bridge",
    help="Open GPS files and devices as feature layers through GPSBabel.",
    no_args_is_help=True,
)

USE_TEMPFILE_HELP = "Write converter output to a temp file instead of memory."


def _print_bridge_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly open error.

    Parameters
    ----------
    exc : Exception
        Exception raised while opening the source.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"[red]✗ {type(exc).__name__}:[/red] {exc}", err=True)
    if debug:
        typer.echo("\n[dim]Traceback:[/dim]", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _parse_open_options(option_items: list[str] | None) -> dict[str, str]:
    """Parse repeated KEY=VALUE open options."""
    parsed: dict[str, str] = {}
    for item in option_items or []:
        if "=" not in item:
            raise typer.BadParameter(
                f"Invalid option entry '{item}'. Use KEY=VALUE format."
            )
        key, value = item.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter("Option key cannot be empty.")
        parsed[key] = value
    return parsed


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show debug logs and full tracebacks."),
) -> None:
    """Initialize shared CLI state and logging."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("info")
def info_cmd(
    ctx: typer.Context,
    datasource: str = typer.Argument(
        ...,
        help="GPSBABEL:driver[,opts]:[features=...:]path, or a bare file path.",
    ),
    driver: str | None = typer.Option(
        None, "--driver", help="GPSBabel input driver for a bare path."
    ),
    option: list[str] | None = typer.Option(
        None,
        "--option",
        help="Open option KEY=VALUE, e.g. FILENAME or GPSBABEL_DRIVER (repeatable).",
    ),
    use_tempfile: bool | None = typer.Option(
        None, "--use-tempfile/--no-use-tempfile", help=USE_TEMPFILE_HELP
    ),
    program: str | None = typer.Option(
        None, "--program", help="GPSBabel executable (default: gpsbabel)."
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", help="Kill GPSBabel after this many seconds."
    ),
    temp_dir: Path | None = typer.Option(
        None,
        "--temp-dir",
        file_okay=False,
        help="Directory for durable temp files.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print layers as JSON."),
) -> None:
    """List the non-empty layers of a converted source.

    Parameters
    ----------
    ctx : typer.Context
        Typer context containing global options.
    datasource : str
        Data source name.
    driver : str | None
        Driver for a bare path; detected from the header when omitted.
    """
    debug: bool = bool(ctx.obj.get("debug", False))
    open_options = _parse_open_options(option)

    try:
        from gpsbabel_bridge.application.use_cases import (
            bridge_options_from_env,
            open_datasource,
            summarize_layers,
        )

        options = bridge_options_from_env(
            use_tempfile=use_tempfile,
            program=program,
            timeout_seconds=timeout,
            temp_dir=temp_dir,
        )
        with open_datasource(
            datasource,
            options=options,
            driver_name=driver,
            open_options=open_options,
        ) as opened:
            summaries = summarize_layers(opened)
            request = opened.request
    except BridgeError as exc:
        raise typer.Exit(code=_print_bridge_error(exc, debug))
    except Exception as exc:
        raise typer.Exit(code=_print_bridge_error(exc, debug))

    if as_json:
        payload = {
            "source": request.source_path if request else datasource,
            "driver": request.driver_name if request else driver,
            "layers": [asdict(summary) for summary in summaries],
        }
        typer.echo(json.dumps(payload, indent=2))
        return
    for index, summary in enumerate(summaries, start=1):
        typer.echo(f"{index}: {summary.name} ({summary.feature_count} features)")


@app.command("doctor")
def doctor_cmd(
    program: str | None = typer.Option(
        None, "--program", help="GPSBabel executable (default: gpsbabel)."
    ),
) -> None:
    """Print installed toolchain versions."""
    import importlib.metadata as metadata

    from gpsbabel_bridge.application.use_cases import (
        bridge_options_from_env,
        converter_version,
    )

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in ("pydantic", "typer"):
        try:
            typer.echo(f"{module}: {metadata.version(module)}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    try:
        options = bridge_options_from_env(program=program)
    except BridgeError as exc:
        raise typer.Exit(code=_print_bridge_error(exc, debug=False))
    version = converter_version(options)
    typer.echo(f"{options.process.program}: {version or '<not found>'}")


if __name__ == "__main__":
    app()
