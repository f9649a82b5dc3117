"""create resumes (analysis cache) table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "resumes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), nullable=False, index=True),
        sa.Column("hash", sa.String(64), nullable=False),
        sa.Column("target_role", sa.String(255), nullable=False, server_default=""),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("analysis", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    # Lookup index only; duplicates are allowed (latest wins on read)
    op.create_index(
        "ix_resumes_user_hash_role",
        "resumes",
        ["user_id", "hash", "target_role", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_resumes_user_hash_role", table_name="resumes")
    op.drop_table("resumes")
