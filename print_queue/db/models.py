"""
SQLAlchemy database models.
Defines the print job table and the consumer user table.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from print_queue.constants import JobStatus

# BIGINT identity on PostgreSQL; SQLite only autoincrements INTEGER primary keys
JobId = BigInteger().with_variant(Integer, "sqlite")
JsonDocument = JSON().with_variant(JSONB, "postgresql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Job(Base):
    """
    A print job in the queue.

    This is the authoritative source of truth for job state. Rows are
    never deleted; a reprint is a new row whose payload points back at
    the original through the ``reprintOf`` key.

    Key constraints:
    - status moves pending -> processing -> completed only
    - completed_at is set if and only if status is completed
    - every read and write is scoped by tenant_id
    """

    __tablename__ = "print_jobs"

    id: Mapped[int] = mapped_column(
        JobId,
        primary_key=True,
        autoincrement=True,
    )

    # Owning unit
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Opaque print document
    payload: Mapped[dict[str, Any]] = mapped_column(
        JsonDocument,
        nullable=False,
    )

    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, name="print_job_status", create_constraint=True, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=JobStatus.PENDING,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    __table_args__ = (
        # Oldest pending row for a tenant
        Index("ix_print_jobs_claim", "tenant_id", "status", "created_at", "id"),
        CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL)",
            name="ck_print_jobs_completed_at",
        ),
    )

    def __repr__(self) -> str:
        return f"Job(id={self.id}, tenant={self.tenant_id}, status={self.status})"


class User(Base):
    """A print agent account. Each account belongs to exactly one unit."""

    __tablename__ = "print_users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    tenant_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, tenant={self.tenant_id})"
