"""
Application constants.
Centralized location for all constant values used across the application.
"""

from enum import StrEnum


class JobStatus(StrEnum):
    """
    Print job lifecycle states.

    State transitions:
    - PENDING -> PROCESSING (claimed by a consumer)
    - PROCESSING -> COMPLETED (consumer reported completion)

    There is no way back to PENDING and no failure state.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"


class Outcome(StrEnum):
    """Result tag shared by every queue operation."""

    SUCCESS = "success"
    EMPTY = "empty"
    NOT_FOUND = "not_found"


# Payload key stamped on reprinted jobs
REPRINT_OF_KEY = "reprintOf"

# Default values
DEFAULT_HISTORY_LIMIT = 100
MAX_HISTORY_LIMIT = 100

# API constants
API_KEY_HEADER = "X-API-Key"

# Metrics names
METRIC_QUEUE_DEPTH = "job_queue_depth"
METRIC_JOBS_ENQUEUED = "jobs_enqueued_total"
METRIC_JOBS_CLAIMED = "jobs_claimed_total"
METRIC_CLAIM_EMPTY = "claim_empty_total"
METRIC_JOBS_COMPLETED = "jobs_completed_total"
METRIC_JOBS_REPRINTED = "jobs_reprinted_total"
METRIC_STORE_ERRORS = "store_errors_total"

# Trace span names
SPAN_ENQUEUE_JOB = "enqueue_job"
SPAN_CLAIM_JOB = "claim_job"
SPAN_COMPLETE_JOB = "complete_job"
SPAN_REPRINT_JOB = "reprint_job"
SPAN_PRINT_JOB = "print_job"
