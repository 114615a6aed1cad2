"""Failure classification and the single direct-mode retry."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from gpsbabel_bridge.application.results import (
    ConversionOutcome,
    FailureKind,
    InvocationMode,
    SourceKind,
)

logger = logging.getLogger(__name__)

PIPING_UNSUPPORTED_MARKER = "This format cannot be used in piped commands"


class RetryState(str, Enum):
    INITIAL = "initial"
    RETRYING_DIRECT = "retrying_direct"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class RetryDecision:
    """Policy verdict after one attempt.

    ``failure`` is ``None`` on success. A ``RETRYING_DIRECT`` decision
    carries :attr:`FailureKind.PIPING_UNSUPPORTED_RETRYABLE`.
    """

    state: RetryState
    failure: FailureKind | None = None
    diagnostic: str = ""

    @property
    def retry(self) -> bool:
        return self.state is RetryState.RETRYING_DIRECT

    @property
    def succeeded(self) -> bool:
        return self.state is RetryState.TERMINAL and self.failure is None


def classify_failure(
    outcome: ConversionOutcome, source_kind: SourceKind
) -> FailureKind | None:
    """Map an attempt outcome to a failure kind; ``None`` means success.

    The real-file check is left to :class:`RetryPolicy`, so a piping
    limitation is always reported as retryable here.
    """
    if outcome.success:
        return None
    if outcome.failure is not None:
        return outcome.failure
    if outcome.timed_out:
        return FailureKind.TIMED_OUT
    if (
        source_kind is SourceKind.REGULAR
        and outcome.mode is InvocationMode.PIPED
        and PIPING_UNSUPPORTED_MARKER in outcome.diagnostic
    ):
        return FailureKind.PIPING_UNSUPPORTED_RETRYABLE
    return FailureKind.CONVERSION_FAILED


class RetryPolicy:
    """Bounded retry state machine: at most one direct-mode retry.

    Parameters
    ----------
    is_real_file : Callable[[str], bool]
        Tells whether a path exists on real (non virtual) storage, which
        the converter process needs to open it itself.
    """

    def __init__(self, is_real_file: Callable[[str], bool]) -> None:
        self._is_real_file = is_real_file
        self._state = RetryState.INITIAL

    @property
    def state(self) -> RetryState:
        return self._state

    def advance(
        self,
        outcome: ConversionOutcome,
        *,
        source_kind: SourceKind,
        source_path: str,
        driver_name: str,
    ) -> RetryDecision:
        """Consume one attempt outcome and decide what happens next.

        Raises
        ------
        RuntimeError
            If the policy already reached its terminal state.
        """
        if self._state is RetryState.TERMINAL:
            raise RuntimeError("retry policy already reached a terminal state")

        failure = classify_failure(outcome, source_kind)
        if failure is FailureKind.PIPING_UNSUPPORTED_RETRYABLE and (
            self._state is RetryState.INITIAL
        ):
            if not self._is_real_file(source_path):
                return self._finish(
                    FailureKind.PIPING_UNSUPPORTED_NON_RETRYABLE,
                    f"Driver {driver_name} only supports real (non virtual) files",
                )
            logger.info(
                "driver %s cannot read piped input; retrying with %s",
                driver_name,
                source_path,
            )
            self._state = RetryState.RETRYING_DIRECT
            return RetryDecision(self._state, failure, outcome.diagnostic)

        if failure is FailureKind.PIPING_UNSUPPORTED_RETRYABLE:
            failure = FailureKind.CONVERSION_FAILED
        return self._finish(failure, outcome.diagnostic if failure else "")

    def _finish(self, failure: FailureKind | None, diagnostic: str) -> RetryDecision:
        self._state = RetryState.TERMINAL
        return RetryDecision(self._state, failure, diagnostic)
