"""Certificate registry schema: certificates table and status enum

Revision ID: 001
Revises:
Create Date: 2026-10-19

Tables created:
  - certificates          One row per issued certificate, unique by number

PostgreSQL-native ENUM types created:
  - certificate_status    active / revoked / expired

Downgrade: drops the table, then the ENUM type.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # PostgreSQL has no CREATE TYPE IF NOT EXISTS, so we use a DO/EXCEPTION block.
    op.execute(
        """
        DO $$ BEGIN
            CREATE TYPE certificate_status AS ENUM ('active', 'revoked', 'expired');
        EXCEPTION WHEN duplicate_object THEN NULL;
        END $$;
        """
    )

    op.create_table(
        "certificates",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("certificate_number", sa.Text(), nullable=False),
        sa.Column("recipient_name", sa.Text(), nullable=False),
        sa.Column("course_name", sa.Text(), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("completion_date", sa.Date(), nullable=False),
        sa.Column("grade", sa.Text(), nullable=True),
        sa.Column("instructor_name", sa.Text(), nullable=True),
        sa.Column(
            "status",
            postgresql.ENUM(
                "active", "revoked", "expired",
                name="certificate_status",
                create_type=False,
            ),
            server_default="active",
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("certificate_number", name="uq_certificates_certificate_number"),
    )


def downgrade() -> None:
    op.drop_table("certificates")
    op.execute("DROP TYPE IF EXISTS certificate_status")
