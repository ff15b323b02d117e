"""create week_documents table

Revision ID: 20251019000100
Revises:
Create Date: 2025-10-19 00:01:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20251019000100"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "week_documents",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("season", sa.Integer(), nullable=False),
        sa.Column("contest_count", sa.Integer(), nullable=False),
        sa.Column("participant_count", sa.Integer(), nullable=False),
        sa.Column("last_update_utc", sa.DateTime(timezone=True), nullable=True),
        sa.Column("document_json", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_week_documents_id"), "week_documents", ["id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_week_documents_id"), table_name="week_documents")
    op.drop_table("week_documents")
