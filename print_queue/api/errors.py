"""
Exception handlers mapping queue errors to HTTP responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from print_queue.exceptions import AuthorizationError, PrintQueueError, StoreError
from print_queue.types.api import ErrorResponse

logger = logging.getLogger(__name__)


async def handle_print_queue_error(request: Request, exc: PrintQueueError) -> JSONResponse:
    """
    Render a PrintQueueError as {"error", "message"} with its status.

    Store errors were logged with their traceback where they were raised.
    """
    if not isinstance(exc, StoreError):
        logger.info(
            "Request rejected",
            extra={"path": request.url.path, "error": exc.kind, "detail": exc.detail},
        )

    headers = None
    if isinstance(exc, AuthorizationError):
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.kind, message=exc.detail).model_dump(),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the print queue exception handlers on an application."""
    app.add_exception_handler(PrintQueueError, handle_print_queue_error)
