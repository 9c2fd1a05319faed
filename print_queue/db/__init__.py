"""
Database module.
Contains database connection, models, and store implementations.
"""

from print_queue.db.connection import (
    create_engine,
    create_schema,
    create_session_factory,
    dispose_engine,
)
from print_queue.db.models import Base, Job, User
from print_queue.db.store import JobStore
from print_queue.db.users import UserRepository

__all__ = [
    "create_engine",
    "create_schema",
    "create_session_factory",
    "dispose_engine",
    "JobStore",
    "UserRepository",
    "Job",
    "User",
    "Base",
]
