"""Pipeline metrics models for SOC Lens."""

from uuid import UUID

from pydantic import BaseModel, Field


class StepMetrics(BaseModel):
    """Observability metrics for one pipeline step or run.

    Emitted to stderr at debug level so the dropped-record count stays
    visible without polluting stdout.
    """

    run_id: UUID = Field(
        ...,
        description="Correlation ID for this run",
    )

    step_name: str = Field(
        ...,
        description="Step identifier (e.g., 'normalize', 'pipeline')",
    )

    duration_ms: int = Field(
        ...,
        ge=0,
        description="Execution time in milliseconds",
    )

    records_processed: int = Field(
        default=0,
        ge=0,
        description="Number of raw documents examined",
    )

    records_output: int = Field(
        default=0,
        ge=0,
        description="Number of records emitted",
    )

    skipped: int = Field(
        default=0,
        ge=0,
        description="Documents dropped as unparseable",
    )

    model_config = {"extra": "forbid"}
