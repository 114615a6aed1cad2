"""Exception types raised at the data source boundary."""

from __future__ import annotations

from gpsbabel_bridge.application.results import FailureKind


class BridgeError(Exception):
    """Base class for every failed Open."""

    kind: FailureKind = FailureKind.CONVERSION_FAILED
    exit_code: int = 1


class ConfigurationError(BridgeError):
    """Bridge settings failed validation."""

    kind = FailureKind.INVALID_REQUEST_SYNTAX
    exit_code = 2


class InvalidRequestSyntaxError(BridgeError):
    """Malformed data source name or missing out-of-band parameter."""

    kind = FailureKind.INVALID_REQUEST_SYNTAX
    exit_code = 2


class InvalidDriverNameError(BridgeError):
    """Driver identifier contains characters outside the allowed set."""

    kind = FailureKind.INVALID_DRIVER_NAME
    exit_code = 2


class SourceUnreadableError(BridgeError):
    """Regular source file could not be opened for piping."""

    kind = FailureKind.SOURCE_UNREADABLE
    exit_code = 3


class ConversionFailedError(BridgeError):
    """Converter exited non-zero; message is the converter diagnostic."""

    kind = FailureKind.CONVERSION_FAILED
    exit_code = 4


class RealFileRequiredError(BridgeError):
    """Driver refuses piped input and the source is not on real storage."""

    kind = FailureKind.PIPING_UNSUPPORTED_NON_RETRYABLE
    exit_code = 4


class ConverterTimeoutError(BridgeError):
    """Converter did not exit within the configured timeout."""

    kind = FailureKind.TIMED_OUT
    exit_code = 5


class ArtifactUnreadableError(BridgeError):
    """Converted output could not be opened by the artifact reader."""

    kind = FailureKind.ARTIFACT_UNREADABLE
    exit_code = 6


class EmptyResultError(BridgeError):
    """Conversion succeeded but produced no non-empty requested layer."""

    kind = FailureKind.EMPTY_RESULT
    exit_code = 6


_ERRORS_BY_KIND: dict[FailureKind, type[BridgeError]] = {
    FailureKind.INVALID_REQUEST_SYNTAX: InvalidRequestSyntaxError,
    FailureKind.INVALID_DRIVER_NAME: InvalidDriverNameError,
    FailureKind.SOURCE_UNREADABLE: SourceUnreadableError,
    FailureKind.CONVERSION_FAILED: ConversionFailedError,
    FailureKind.PIPING_UNSUPPORTED_RETRYABLE: ConversionFailedError,
    FailureKind.PIPING_UNSUPPORTED_NON_RETRYABLE: RealFileRequiredError,
    FailureKind.TIMED_OUT: ConverterTimeoutError,
    FailureKind.ARTIFACT_UNREADABLE: ArtifactUnreadableError,
    FailureKind.EMPTY_RESULT: EmptyResultError,
}


def error_for(kind: FailureKind, message: str) -> BridgeError:
    """Build the exception matching a tagged failure kind."""
    return _ERRORS_BY_KIND[kind](message)
