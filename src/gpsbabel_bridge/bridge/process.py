"""Run one converter invocation with stream redirection."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

from gpsbabel_bridge.application.ports import FileSystem, ProcessRunner
from gpsbabel_bridge.application.results import (
    ConversionOutcome,
    FailureKind,
    InvocationMode,
)
from gpsbabel_bridge.bridge.invocation import (
    DEFAULT_PROGRAM,
    ProcessInvocation,
    build_invocation,
)
from gpsbabel_bridge.bridge.request import ConversionRequest

logger = logging.getLogger(__name__)
diagnostics_logger = logging.getLogger(f"{__name__}.diagnostics")


class _DropAll(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return False


@contextmanager
def quiet_diagnostics() -> Iterator[None]:
    """Suppress converter diagnostic log records inside the block."""
    quiet = _DropAll()
    diagnostics_logger.addFilter(quiet)
    try:
        yield
    finally:
        diagnostics_logger.removeFilter(quiet)


class ProcessBridge:
    """Execute converter invocations against a temporary artifact.

    Parameters
    ----------
    runner : ProcessRunner
        Spawns the converter and waits for it.
    file_system : FileSystem
        Storage for the source file and the artifact.
    program : str, default="gpsbabel"
        Converter executable.
    timeout_seconds : float | None, default=None
        Kill the converter after this many seconds. ``None`` blocks until
        the process exits.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        file_system: FileSystem,
        *,
        program: str = DEFAULT_PROGRAM,
        timeout_seconds: float | None = None,
    ) -> None:
        self._runner = runner
        self._fs = file_system
        self._program = program
        self._timeout = timeout_seconds

    def execute(
        self,
        request: ConversionRequest,
        artifact_path: str,
        mode: InvocationMode,
    ) -> ConversionOutcome:
        """Run one attempt and return its outcome.

        Piped attempts stream the source file through standard input under
        :func:`quiet_diagnostics`; the diagnostic text is still captured in
        the outcome so the retry policy can classify it.
        """
        invocation = build_invocation(request, mode, program=self._program)
        if mode is InvocationMode.DIRECT:
            return self._spawn(invocation, None, artifact_path)

        try:
            source = self._fs.open(request.source_path, "rb")
        except OSError as exc:
            logger.debug("cannot open %s: %s", request.source_path, exc)
            return ConversionOutcome.not_spawned(
                FailureKind.SOURCE_UNREADABLE,
                f"Cannot open file {request.source_path}",
                mode,
            )
        with source, quiet_diagnostics():
            return self._spawn(invocation, source, artifact_path)

    def _spawn(
        self,
        invocation: ProcessInvocation,
        stdin: BinaryIO | None,
        artifact_path: str,
    ) -> ConversionOutcome:
        logger.debug("running %s", " ".join(invocation.argv))
        with self._fs.open(artifact_path, "wb") as sink:
            result = self._runner.run(
                invocation.argv,
                stdin=stdin,
                stdout=sink,
                timeout=self._timeout,
            )
        outcome = ConversionOutcome.from_process(result, invocation.mode)
        if not outcome.success:
            diagnostics_logger.error("%s", outcome.diagnostic)
        return outcome
