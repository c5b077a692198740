"""
Unified error handling for vrakit.

Every component raises one of the errors below and never swallows it. The
CLI is the only layer that turns them into user-facing messages and exit
codes.

Exit Codes:
- 0: Success
- 1: Request reached the FAILED state
- 10: Configuration error
- 11: Transport error (network or non-success HTTP status)
- 12: Serialization error (payload could not be encoded/decoded)
- 13: Named lookup found no match
- 14: Polling deadline exceeded
- 15: Action submission contract violated
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    REQUEST_FAILED = 1
    CONFIG_ERROR = 10
    TRANSPORT_ERROR = 11
    SERIALIZATION_ERROR = 12
    NOT_FOUND = 13
    TIMEOUT = 14
    ACTION_SUBMISSION_ERROR = 15
    UNKNOWN_ERROR = 127


class VrakitError(Exception):
    """Base exception for vrakit errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(VrakitError):
    """Raised when required settings are missing or invalid."""

    exit_code = ExitCode.CONFIG_ERROR


class TransportError(VrakitError):
    """Raised for network failures and non-success HTTP responses."""

    exit_code = ExitCode.TRANSPORT_ERROR

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        *,
        status_code: int | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code


class SerializationError(VrakitError):
    """Raised when a template or response cannot be encoded or decoded."""

    exit_code = ExitCode.SERIALIZATION_ERROR


class NotFoundError(VrakitError):
    """Raised when a lookup by name found no match after an exhaustive search."""

    exit_code = ExitCode.NOT_FOUND


class PollTimeoutError(VrakitError):
    """Raised when a request stays non-terminal past the polling deadline."""

    exit_code = ExitCode.TIMEOUT


class ActionSubmissionError(VrakitError):
    """Raised when an action post violates the "201 Created + Location" contract."""

    exit_code = ExitCode.ACTION_SUBMISSION_ERROR


class RequestFailedError(VrakitError):
    """Raised by workflows when a tracked request ends in the FAILED state."""

    exit_code = ExitCode.REQUEST_FAILED


# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - VrakitError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130 (standard for SIGINT)
        - Other exceptions: Returns 127 (unknown error)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            from vrakit.cli.ux import error as print_error

            try:
                return func(*args, **kwargs)
            except VrakitError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=int(e.exit_code),
                        **e.details,
                    )
                print_error(format_error_message(e))
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=int(ExitCode.UNKNOWN_ERROR),
                    )
                print_error(f"Unexpected error: {e}")
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: VrakitError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
