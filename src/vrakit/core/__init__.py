"""Core modules for vrakit - centralized error definitions."""

from vrakit.core.errors import (
    ActionSubmissionError,
    ConfigurationError,
    ExitCode,
    NotFoundError,
    PollTimeoutError,
    RequestFailedError,
    SerializationError,
    TransportError,
    VrakitError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ExitCode",
    "VrakitError",
    "ConfigurationError",
    "TransportError",
    "SerializationError",
    "NotFoundError",
    "PollTimeoutError",
    "ActionSubmissionError",
    "RequestFailedError",
    "main_with_error_handling",
    "format_error_message",
]
