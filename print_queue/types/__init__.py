"""
Type definitions for the print queue.
Contains input/output type definitions grouped by module.
"""

from print_queue.types.api import (
    CreateJobRequest,
    ErrorResponse,
    HealthResponse,
    JobCompletedResponse,
    JobCreatedResponse,
    JobResponse,
    JobStatsResponse,
    LoginRequest,
    StatusResponse,
    TokenResponse,
)
from print_queue.types.job import QueueResult

__all__ = [
    # API types
    "CreateJobRequest",
    "JobCreatedResponse",
    "JobCompletedResponse",
    "JobResponse",
    "JobStatsResponse",
    "LoginRequest",
    "TokenResponse",
    "StatusResponse",
    "HealthResponse",
    "ErrorResponse",
    # Job types
    "QueueResult",
]
