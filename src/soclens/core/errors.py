"""Structured error handling for SOC Lens.

Only caller mistakes (unknown framework, bad time range, bad config or
unreadable input) raise. Malformed log records are dropped by the
normalizer and never surface here.
"""

import sys
from typing import Any, NoReturn

from soclens.models.error import ErrorCode, StructuredError


class SocLensError(Exception):
    """Base exception for SOC Lens errors.

    Wraps a StructuredError for consistent error handling.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        remediation: str,
        retryable: bool = False,
        context: dict[str, Any] | None = None,
        supported: list[str] | None = None,
    ):
        self.error = StructuredError(
            code=code,
            message=message,
            remediation=remediation,
            retryable=retryable,
            supported=supported,
            context=context,
        )
        super().__init__(message)

    def to_structured(self) -> StructuredError:
        """Convert to StructuredError."""
        return self.error

    def to_structured_error(self) -> dict:
        """Convert to JSON-serializable dict for output."""
        return self.error.model_dump(mode="json", exclude_none=True)


class UnknownFrameworkError(SocLensError):
    """Framework identifier not in the registry."""

    def __init__(self, framework: str, supported: list[str]):
        super().__init__(
            code=ErrorCode.UNKNOWN_FRAMEWORK,
            message=f"Framework '{framework}' is not supported",
            remediation=f"Supported frameworks: {', '.join(supported)}",
            retryable=False,
            supported=supported,
            context={"framework": framework},
        )


class InvalidTimeRangeError(SocLensError):
    """Time-range selector not in the fixed set."""

    def __init__(self, selector: str, supported: list[str]):
        super().__init__(
            code=ErrorCode.INVALID_TIME_RANGE,
            message=f"Time range '{selector}' is not supported",
            remediation=f"Use one of: {', '.join(supported)}",
            retryable=False,
            supported=supported,
            context={"time_range": selector},
        )


class ConfigError(SocLensError):
    """Configuration file could not be loaded or validated."""

    def __init__(self, message: str, path: str | None = None, errors: list[str] | None = None):
        context: dict[str, Any] = {}
        if path:
            context["path"] = path
        if errors:
            context["errors"] = errors
        super().__init__(
            code=ErrorCode.CONFIG_ERROR,
            message=message,
            remediation="Fix the configuration file and try again",
            retryable=False,
            context=context or None,
        )


class InputError(SocLensError):
    """Raw log input could not be read or decoded."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(
            code=ErrorCode.INPUT_ERROR,
            message=message,
            remediation="Provide a JSON array, a JSON object with a 'logs' list, or JSONL",
            retryable=True,
            context={"path": path} if path else None,
        )


def handle_error(error: SocLensError | Exception, exit_code: int = 1) -> NoReturn:
    """Handle an error by outputting it and exiting.

    Args:
        error: The error to handle
        exit_code: Exit code to use
    """
    from soclens.cli.output import output_error

    if isinstance(error, SocLensError):
        output_error(error.to_structured())
    else:
        structured = StructuredError(
            code=ErrorCode.INTERNAL_ERROR,
            message=str(error),
            remediation="This is an unexpected error. Please report it.",
            retryable=False,
            context={"type": type(error).__name__},
        )
        output_error(structured)

    sys.exit(exit_code)
