"""
API request and response type definitions.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from print_queue.constants import JobStatus


class CreateJobRequest(BaseModel):
    """Request body for enqueuing a print job."""

    unit_id: int = Field(..., ge=1, description="Owning unit (tenant)")
    job_data: dict[str, Any] = Field(..., description="Print document")


class JobCreatedResponse(BaseModel):
    """Response body after enqueuing or reprinting a job."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    job_id: int = Field(serialization_alias="jobId", validation_alias="jobId")


class JobCompletedResponse(BaseModel):
    """Response body after completing a job."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    job_id: int = Field(serialization_alias="jobId", validation_alias="jobId")


class JobResponse(BaseModel):
    """Full job details response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    payload: dict[str, Any]
    status: JobStatus
    created_at: datetime
    completed_at: datetime | None


class JobStatsResponse(BaseModel):
    """Per-status job counts for a tenant."""

    stats: dict[str, int]
    queue_depth: int


class LoginRequest(BaseModel):
    """Login request from a print agent."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """JWT token response."""

    message: str = "Login successful"
    token: str
    token_type: str = "bearer"
    expires_in: int


class StatusResponse(BaseModel):
    """Root status response."""

    status: str
    message: str
    timestamp: datetime


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    message: str
