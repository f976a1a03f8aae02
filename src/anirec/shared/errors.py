"""AniRec Error Handling Module

This module defines the error taxonomy for AniRec, providing structured
error classes with context information for logging and CLI reporting.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext carries primitive-only debugging data
- Proper Exception Chaining: Original exceptions are preserved

Two upstreams produce most of these errors. The metadata path propagates
them to the caller, while the recommendation path absorbs every one of them
into a fallback result.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for AniRec.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # Network and upstream errors
    NETWORK_ERROR = "NETWORK_ERROR"
    API_TIMEOUT = "API_TIMEOUT"
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    API_SERVER_ERROR = "API_SERVER_ERROR"
    API_RATE_LIMIT = "API_RATE_LIMIT"
    GRAPHQL_ERROR = "GRAPHQL_ERROR"
    MEDIA_NOT_FOUND = "MEDIA_NOT_FOUND"

    # Parsing errors
    INVALID_RESPONSE = "INVALID_RESPONSE"
    RESPONSE_TEXT_MISSING = "RESPONSE_TEXT_MISSING"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    INVALID_CONFIG = "INVALID_CONFIG"

    # CLI errors
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"
    CLI_COMMAND_INTERRUPTED = "CLI_COMMAND_INTERRUPTED"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum and Decimal to primitive types and drops keys whose
    value is None.

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if val is None:
            continue
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information attached to an error.

    Only primitive values are allowed in additional_data so the context can
    always be serialized into a structured log line.

    Attributes:
        operation: Operation name that produced the error
        file_path: Optional file path (configuration files)
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    file_path: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is not None:
            object.__setattr__(
                self, "additional_data", _coerce_primitives(self.additional_data)
            )

    def safe_dict(self) -> dict[str, Any]:
        """Export context as a dict that always carries additional_data."""
        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.file_path is not None:
            data["file_path"] = self.file_path
        data["additional_data"] = dict(self.additional_data or {})
        return data


class AniRecError(Exception):
    """Base exception class for all AniRec errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize AniRecError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a dictionary for logging and JSON output."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(AniRecError):
    """Errors raised when data violates AniRec's own rules.

    Examples:
    - A recommendation response with no extractable text
    - A GraphQL payload missing the expected fields
    """


class InfrastructureError(AniRecError):
    """Errors raised while talking to external systems."""


class ApplicationError(AniRecError):
    """Application-level errors (configuration, invalid arguments)."""


class NetworkError(InfrastructureError):
    """Transport failure or timeout before a usable response arrived."""


class UpstreamError(InfrastructureError):
    """The upstream answered, but with a failure.

    Covers non-2xx HTTP statuses and GraphQL ``errors`` arrays. The HTTP
    status is kept on the instance so retry predicates can inspect it.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        *,
        status_code: int | None = None,
        upstream_messages: list[str] | None = None,
    ) -> None:
        super().__init__(code, message, context, original_error)
        self.status_code = status_code
        self.upstream_messages = upstream_messages or []

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        data["upstream_messages"] = list(self.upstream_messages)
        return data


class NotFoundError(InfrastructureError):
    """No media exists upstream for the requested identifier."""


class ParseError(DomainError):
    """Unexpected response shape or unextractable response text."""


class CliError(ApplicationError):
    """CLI-specific error carrying the command name and exit code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 1,
    ):
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


# Convenience functions for common error scenarios
def create_network_error(
    message: str,
    operation: str | None = None,
    endpoint: str | None = None,
    original_error: Exception | None = None,
    *,
    timeout: bool = False,
) -> NetworkError:
    """Create a network error with context."""
    context = ErrorContext(
        operation=operation,
        additional_data={"endpoint": endpoint},
    )
    return NetworkError(
        ErrorCode.API_TIMEOUT if timeout else ErrorCode.NETWORK_ERROR,
        message,
        context,
        original_error,
    )


def create_parse_error(
    message: str,
    operation: str | None = None,
    original_error: Exception | None = None,
    code: ErrorCode = ErrorCode.INVALID_RESPONSE,
) -> ParseError:
    """Create a parse error with context."""
    return ParseError(
        code,
        message,
        ErrorContext(operation=operation),
        original_error,
    )


def create_config_error(
    message: str,
    config_path: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
    code: ErrorCode = ErrorCode.CONFIG_ERROR,
) -> ApplicationError:
    """Create a configuration error with context."""
    context = ErrorContext(
        operation=operation,
        file_path=config_path,
    )
    return ApplicationError(code, message, context, original_error)


def create_cli_error(
    message: str,
    command: str | None = None,
    original_error: Exception | None = None,
    exit_code: int = 1,
    code: ErrorCode = ErrorCode.CLI_UNEXPECTED_ERROR,
) -> CliError:
    """Create a CLI error with context."""
    context = ErrorContext(
        operation="cli_command",
        additional_data={"command": command},
    )
    return CliError(
        code,
        message,
        context,
        original_error,
        command,
        exit_code,
    )
