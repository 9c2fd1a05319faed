"""Initial schema with print_jobs and print_users tables

Revision ID: 001
Revises: 
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE print_job_status AS ENUM ('pending', 'processing', 'completed');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.create_table(
        "print_jobs",
        sa.Column("id", sa.BigInteger, sa.Identity(always=False), nullable=False),
        sa.Column("tenant_id", sa.Integer, nullable=False),
        sa.Column("payload", postgresql.JSONB, nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM("pending", "processing", "completed", name="print_job_status", create_type=False),
            nullable=False,
            server_default="pending",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL)",
            name="ck_print_jobs_completed_at",
        ),
    )

    # Oldest pending row for a tenant
    op.create_index(
        "ix_print_jobs_claim",
        "print_jobs",
        ["tenant_id", "status", "created_at", "id"],
    )

    op.create_table(
        "print_users",
        sa.Column("id", sa.Integer, sa.Identity(always=False), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("tenant_id", sa.Integer, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_print_users_username"),
    )
    op.create_index("ix_print_users_tenant_id", "print_users", ["tenant_id"])


def downgrade() -> None:
    op.drop_index("ix_print_users_tenant_id")
    op.drop_table("print_users")

    op.drop_index("ix_print_jobs_claim")
    op.drop_table("print_jobs")

    op.execute("DROP TYPE IF EXISTS print_job_status")
