"""
Error taxonomy for the print queue.

Each error carries the HTTP status the transport layer answers with.
"""

from fastapi import status


class PrintQueueError(Exception):
    """Base class for all print queue errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind: str = "internal_error"

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(detail)
        self.detail = detail


class ValidationError(PrintQueueError):
    """Malformed input, rejected before touching the store."""

    status_code = status.HTTP_400_BAD_REQUEST
    kind = "validation_error"

    def __init__(self, detail: str = "Invalid input"):
        super().__init__(detail)


class NotFoundOrInvalidStateError(PrintQueueError):
    """Target job does not exist in the required state for this tenant."""

    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"

    def __init__(self, detail: str = "Job not found"):
        super().__init__(detail)


class StoreError(PrintQueueError):
    """
    Failure of the durable store.

    transient is True for connectivity faults and timeouts; constraint
    violations and the like are permanent. unsent is True when the
    failure happened before any statement reached the database, so
    nothing can have been applied.
    """

    kind = "store_error"

    def __init__(
        self,
        detail: str = "Store failure",
        transient: bool = False,
        unsent: bool = False,
    ):
        super().__init__(detail)
        self.transient = transient
        self.unsent = unsent
        if transient:
            self.status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class AuthorizationError(PrintQueueError):
    """Missing or invalid credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "unauthorized"

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(detail)
