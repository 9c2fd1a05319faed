"""
API routes module.
"""

from print_queue.api.routes.auth import router as auth_router
from print_queue.api.routes.health import router as health_router
from print_queue.api.routes.jobs import router as jobs_router

__all__ = ["jobs_router", "auth_router", "health_router"]
