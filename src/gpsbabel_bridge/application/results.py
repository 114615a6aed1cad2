"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    """Tagged failure classification shared by every bridge step."""

    INVALID_REQUEST_SYNTAX = "invalid_request_syntax"
    INVALID_DRIVER_NAME = "invalid_driver_name"
    SOURCE_UNREADABLE = "source_unreadable"
    CONVERSION_FAILED = "conversion_failed"
    PIPING_UNSUPPORTED_RETRYABLE = "piping_unsupported_retryable"
    PIPING_UNSUPPORTED_NON_RETRYABLE = "piping_unsupported_non_retryable"
    TIMED_OUT = "timed_out"
    ARTIFACT_UNREADABLE = "artifact_unreadable"
    EMPTY_RESULT = "empty_result"


class SourceKind(str, Enum):
    """Whether the bridge may open a source path itself."""

    REGULAR = "regular"
    SPECIAL = "special"


class InvocationMode(str, Enum):
    """How the converter receives its input."""

    PIPED = "piped"
    DIRECT = "direct"


@dataclass(frozen=True)
class ProcessResult:
    """Raw result of one converter process run."""

    exit_status: int
    diagnostic: str = ""
    timed_out: bool = False


@dataclass(frozen=True)
class ConversionOutcome:
    """Structured outcome of one converter attempt.

    ``failure`` is only set when the attempt failed before a process was
    spawned; converter failures are classified later by the retry policy.
    """

    success: bool
    mode: InvocationMode
    exit_status: int | None = None
    diagnostic: str = ""
    failure: FailureKind | None = None
    timed_out: bool = False

    @property
    def spawned(self) -> bool:
        """Whether a converter process was actually started."""
        return self.exit_status is not None

    @classmethod
    def from_process(
        cls, result: ProcessResult, mode: InvocationMode
    ) -> ConversionOutcome:
        """Wrap a runner result; exit status zero is success."""
        return cls(
            success=result.exit_status == 0 and not result.timed_out,
            mode=mode,
            exit_status=result.exit_status,
            diagnostic=result.diagnostic,
            timed_out=result.timed_out,
        )

    @classmethod
    def not_spawned(
        cls, failure: FailureKind, diagnostic: str, mode: InvocationMode
    ) -> ConversionOutcome:
        """Outcome for an attempt that failed before spawning."""
        return cls(success=False, mode=mode, diagnostic=diagnostic, failure=failure)


@dataclass(frozen=True)
class LayerSummary:
    """Name and feature count of one opened layer."""

    name: str
    feature_count: int
