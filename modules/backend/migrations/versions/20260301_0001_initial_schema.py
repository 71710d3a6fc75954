"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-03-01 10:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_OWNED = (
    "consultations",
    "disputes",
    "dispute_timeline_events",
    "documents",
    "tax_disputes",
    "tax_calculations",
    "notifications",
    "rag_consultations",
    "processed_documents",
    "payments",
)


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _owner() -> sa.Column:
    return sa.Column(
        "user_id",
        sa.String(36),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


def _money(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.Numeric(14, 2), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "users",
        _id(),
        sa.Column("telegram_id", sa.BigInteger(), nullable=False),
        sa.Column("username", sa.String(64)),
        sa.Column("first_name", sa.String(128)),
        sa.Column("last_name", sa.String(128)),
        sa.Column("language_code", sa.String(8)),
        sa.Column("phone", sa.String(32)),
        sa.Column("email", sa.String(255)),
        sa.Column("is_premium", sa.Boolean(), nullable=False),
        sa.Column("subscription_plan", sa.String(20), nullable=False),
        sa.Column("subscription_expires_at", sa.DateTime()),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login_at", sa.DateTime()),
        *_timestamps(),
    )
    op.create_index(op.f("ix_users_telegram_id"), "users", ["telegram_id"], unique=True)

    op.create_table(
        "consultations",
        _id(),
        _owner(),
        sa.Column("category", sa.String(32), nullable=False),
        sa.Column("query", sa.Text(), nullable=False),
        sa.Column("response", sa.Text()),
        sa.Column("confidence", sa.Integer()),
        sa.Column("sources", sa.JSON(), nullable=False),
        sa.Column("suggestions", sa.JSON(), nullable=False),
        sa.Column("follow_up_questions", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("rating", sa.Integer()),
        sa.Column("model", sa.String(64)),
        sa.Column("tokens_used", sa.Integer()),
        *_timestamps(),
    )
    op.create_index(op.f("ix_consultations_category"), "consultations", ["category"])

    op.create_table(
        "disputes",
        _id(),
        _owner(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("dispute_type", sa.String(32), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("priority", sa.String(10), nullable=False),
        sa.Column("counterparty", sa.String(255)),
        _money("amount", nullable=True),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("deadline", sa.DateTime()),
        sa.Column("resolved_at", sa.DateTime()),
        sa.Column("tags", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f("ix_disputes_dispute_type"), "disputes", ["dispute_type"])
    op.create_index(op.f("ix_disputes_status"), "disputes", ["status"])
    op.create_index(op.f("ix_disputes_deadline"), "disputes", ["deadline"])

    op.create_table(
        "dispute_timeline_events",
        _id(),
        _owner(),
        sa.Column(
            "dispute_id",
            sa.String(36),
            sa.ForeignKey("disputes.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("event_type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("event_data", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        op.f("ix_dispute_timeline_events_dispute_id"), "dispute_timeline_events", ["dispute_id"]
    )

    op.create_table(
        "documents",
        _id(),
        _owner(),
        sa.Column(
            "dispute_id",
            sa.String(36),
            sa.ForeignKey("disputes.id", ondelete="SET NULL"),
        ),
        sa.Column("document_type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f("ix_documents_dispute_id"), "documents", ["dispute_id"])
    op.create_index(op.f("ix_documents_document_type"), "documents", ["document_type"])

    op.create_table(
        "tax_disputes",
        _id(),
        _owner(),
        sa.Column("tax_type", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        _money("amount"),
        _money("penalty"),
        _money("fine"),
        _money("total_amount"),
        sa.Column("period", sa.String(32), nullable=False),
        sa.Column("grounds", sa.JSON(), nullable=False),
        sa.Column("requirement_date", sa.Date(), nullable=False),
        sa.Column("deadline_days", sa.Integer(), nullable=False),
        sa.Column("deadline", sa.Date(), nullable=False),
        sa.Column("taxpayer_inn", sa.String(12)),
        sa.Column("taxpayer_address", sa.String(500)),
        sa.Column("taxpayer_phone", sa.String(32)),
        sa.Column("inspection_number", sa.String(16)),
        sa.Column("inspection_name", sa.String(255)),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index(op.f("ix_tax_disputes_tax_type"), "tax_disputes", ["tax_type"])
    op.create_index(op.f("ix_tax_disputes_status"), "tax_disputes", ["status"])
    op.create_index(op.f("ix_tax_disputes_deadline"), "tax_disputes", ["deadline"])

    op.create_table(
        "tax_calculations",
        _id(),
        _owner(),
        sa.Column("tax_type", sa.String(20), nullable=False),
        sa.Column(
            "tax_dispute_id",
            sa.String(36),
            sa.ForeignKey("tax_disputes.id", ondelete="SET NULL"),
        ),
        sa.Column("period", sa.Integer(), nullable=False),
        sa.Column("input_data", sa.JSON(), nullable=False),
        sa.Column("result_data", sa.JSON(), nullable=False),
        _money("calculated_amount"),
        _money("claimed_amount", nullable=True),
        _money("difference", nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f("ix_tax_calculations_tax_type"), "tax_calculations", ["tax_type"])

    op.create_table(
        "transport_tax_rates",
        _id(),
        sa.Column("region", sa.String(100), nullable=False),
        sa.Column("region_code", sa.String(4)),
        sa.Column("vehicle_type", sa.String(20), nullable=False),
        sa.Column("power_from", sa.Integer(), nullable=False),
        sa.Column("power_to", sa.Integer(), nullable=False),
        sa.Column("rate", sa.Numeric(8, 2), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("source", sa.String(255)),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index(op.f("ix_transport_tax_rates_region"), "transport_tax_rates", ["region"])
    op.create_index(op.f("ix_transport_tax_rates_year"), "transport_tax_rates", ["year"])
    op.create_index(op.f("ix_transport_tax_rates_created_at"), "transport_tax_rates", ["created_at"])

    op.create_table(
        "notifications",
        _id(),
        _owner(),
        sa.Column("notification_type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("channel", sa.String(20), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("read_at", sa.DateTime()),
        *_timestamps(),
    )
    op.create_index(op.f("ix_notifications_notification_type"), "notifications", ["notification_type"])
    op.create_index(op.f("ix_notifications_is_read"), "notifications", ["is_read"])

    op.create_table(
        "rag_consultations",
        _id(),
        _owner(),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("legal_area", sa.String(50)),
        sa.Column("answer", sa.Text()),
        sa.Column("sources", sa.JSON(), nullable=False),
        sa.Column("confidence", sa.Float()),
        sa.Column("max_results", sa.Integer(), nullable=False),
        sa.Column("threshold", sa.Float(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "processed_documents",
        _id(),
        _owner(),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_type", sa.String(50), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("extracted_text", sa.Text()),
        sa.Column("chunk_count", sa.Integer(), nullable=False),
        sa.Column("error_message", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "payments",
        _id(),
        _owner(),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("provider", sa.String(32)),
        sa.Column("provider_payment_id", sa.String(128), unique=True),
        sa.Column("plan", sa.String(20)),
        sa.Column("description", sa.String(255)),
        sa.Column("paid_at", sa.DateTime()),
        *_timestamps(),
    )
    op.create_index(op.f("ix_payments_status"), "payments", ["status"])

    for table in USER_OWNED:
        op.create_index(op.f(f"ix_{table}_user_id"), table, ["user_id"])
        op.create_index(op.f(f"ix_{table}_created_at"), table, ["created_at"])
    op.create_index(op.f("ix_users_created_at"), "users", ["created_at"])


def downgrade() -> None:
    for table in (
        "payments",
        "processed_documents",
        "rag_consultations",
        "notifications",
        "transport_tax_rates",
        "tax_calculations",
        "tax_disputes",
        "documents",
        "dispute_timeline_events",
        "disputes",
        "consultations",
        "users",
    ):
        op.drop_table(table)
