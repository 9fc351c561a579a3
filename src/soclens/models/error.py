"""Structured error model for SOC Lens."""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Error codes surfaced to callers.

    Only caller mistakes have a code; malformed log documents are dropped
    by the normalizer instead.
    """

    UNKNOWN_FRAMEWORK = "UNKNOWN_FRAMEWORK"
    INVALID_TIME_RANGE = "INVALID_TIME_RANGE"
    CONFIG_ERROR = "CONFIG_ERROR"
    INPUT_ERROR = "INPUT_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class StructuredError(BaseModel):
    """Error payload written to stdout by every failing command."""

    code: ErrorCode = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="What went wrong")
    remediation: str = Field(..., description="How to fix the invocation")
    retryable: bool = Field(
        default=False,
        description="True when the same call may succeed later (e.g. input not yet written)",
    )
    supported: list[str] | None = Field(
        default=None,
        description="Accepted values when a selector (framework, time range) was rejected",
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Offending value, file path or validation errors",
    )

    model_config = {"extra": "forbid", "frozen": True}
