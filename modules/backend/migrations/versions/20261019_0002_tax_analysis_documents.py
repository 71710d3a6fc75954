"""tax dispute analysis and documents

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 09:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("tax_disputes") as batch:
        batch.add_column(sa.Column("success_rate", sa.Integer()))
        batch.add_column(sa.Column("ai_analysis", sa.JSON()))

    op.create_table(
        "tax_dispute_documents",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "tax_dispute_id",
            sa.String(36),
            sa.ForeignKey("tax_disputes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("document_type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("variables", sa.JSON(), nullable=False),
        sa.Column("legal_basis", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    for column in ("user_id", "tax_dispute_id", "created_at"):
        op.create_index(
            op.f(f"ix_tax_dispute_documents_{column}"), "tax_dispute_documents", [column]
        )


def downgrade() -> None:
    op.drop_table("tax_dispute_documents")
    with op.batch_alter_table("tax_disputes") as batch:
        batch.drop_column("ai_analysis")
        batch.drop_column("success_rate")
