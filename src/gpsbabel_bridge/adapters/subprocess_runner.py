"""Converter process runner built on :mod:`subprocess`."""

from __future__ import annotations

import io
import logging
import subprocess
from collections.abc import Sequence
from typing import BinaryIO

from gpsbabel_bridge.application.results import ProcessResult

logger = logging.getLogger(__name__)

LAUNCH_FAILURE_STATUS = -1


def _has_fileno(stream: BinaryIO) -> bool:
    try:
        stream.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return False
    return True


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace").strip()


class SubprocessRunner:
    """Spawn the converter with file descriptors or pipes as needed.

    Streams backed by a real file descriptor are handed to the child
    directly; in-memory streams are fed and drained through pipes.
    """

    def run(
        self,
        argv: Sequence[str],
        *,
        stdin: BinaryIO | None,
        stdout: BinaryIO,
        timeout: float | None = None,
    ) -> ProcessResult:
        """Run ``argv`` to completion.

        Parameters
        ----------
        argv : Sequence[str]
            Argument vector; never passed through a shell.
        stdin : BinaryIO | None
            Source stream, or ``None`` to give the child no input.
        stdout : BinaryIO
            Destination for the child's standard output.
        timeout : float | None, default=None
            Seconds before the child is killed.

        Returns
        -------
        ProcessResult
            Exit status and standard error text. A child that cannot be
            launched yields :data:`LAUNCH_FAILURE_STATUS`.
        """
        stdin_direct = stdin is not None and _has_fileno(stdin)
        stdout_direct = _has_fileno(stdout)
        if stdin is None:
            stdin_arg: BinaryIO | int = subprocess.DEVNULL
        else:
            stdin_arg = stdin if stdin_direct else subprocess.PIPE
        if stdout_direct:
            stdout.flush()

        try:
            proc = subprocess.Popen(
                list(argv),
                stdin=stdin_arg,
                stdout=stdout if stdout_direct else subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            logger.debug("failed to launch %s: %s", argv[0], exc)
            return ProcessResult(
                exit_status=LAUNCH_FAILURE_STATUS,
                diagnostic=f"Could not launch {argv[0]}: {exc}",
            )

        timed_out = False
        with proc:
            try:
                payload = (
                    stdin.read() if stdin is not None and not stdin_direct else None
                )
                out, err = proc.communicate(input=payload, timeout=timeout)
            except subprocess.TimeoutExpired:
                proc.kill()
                out, err = proc.communicate()
                timed_out = True
            except BaseException:
                proc.kill()
                proc.wait()
                raise

        if not stdout_direct and out:
            stdout.write(out)

        diagnostic = _decode(err)
        if timed_out:
            diagnostic = f"{argv[0]} did not exit within {timeout} seconds"
        return ProcessResult(
            exit_status=proc.returncode,
            diagnostic=diagnostic,
            timed_out=timed_out,
        )
