"""Decision audit trail.

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "decision_records",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("request_id", sa.String(128), nullable=True),
        sa.Column("subject_id", sa.String(256), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("company_id", sa.String(256), nullable=False),
        sa.Column("authenticated", sa.Boolean, nullable=False),
        sa.Column("operation", sa.String(16), nullable=False),
        sa.Column("collection", sa.String(256), nullable=False),
        sa.Column("document_id", sa.String(1500), nullable=False),
        sa.Column("allowed", sa.Boolean, nullable=False),
        sa.Column("reason", sa.String(128), nullable=False),
        sa.Column("details", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_decision_records"),
    )
    op.create_index("ix_decision_records_request_id", "decision_records", ["request_id"])
    op.create_index("ix_decision_records_subject_id", "decision_records", ["subject_id"])
    op.create_index("ix_decision_records_allowed", "decision_records", ["allowed"])
    op.create_index("ix_decision_records_created_at", "decision_records", ["created_at"])
    op.create_index(
        "ix_decision_records_collection_created", "decision_records", ["collection", "created_at"]
    )


def downgrade() -> None:
    op.drop_table("decision_records")
