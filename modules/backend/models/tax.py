"""
Tax Models.

Tax authority disputes with the documents generated for them, saved
calculator runs and the regional transport tax rate table the
calculator reads from.
"""

import enum
from datetime import date

from sqlalchemy import JSON, Boolean, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UserOwnedMixin, UUIDMixin


class TaxType(str, enum.Enum):
    NDFL = "NDFL"
    TRANSPORT = "transport"
    PROPERTY = "property"
    LAND = "land"
    NPD = "NPD"


TAX_TYPE_LABELS: dict[TaxType, str] = {
    TaxType.NDFL: "НДФЛ (налог на доходы физических лиц)",
    TaxType.TRANSPORT: "Транспортный налог",
    TaxType.PROPERTY: "Налог на имущество физических лиц",
    TaxType.LAND: "Земельный налог",
    TaxType.NPD: "Налог на профессиональный доход (НПД)",
}


class TaxDisputeStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING_RESPONSE = "pending_response"
    RESOLVED = "resolved"
    REJECTED = "rejected"
    CLOSED = "closed"


class TaxDocumentType(str, enum.Enum):
    OBJECTION = "objection"
    COMPLAINT = "complaint"
    NOTICE = "notice"
    RECALCULATION_REQUEST = "recalculation_request"


class VehicleType(str, enum.Enum):
    CAR = "car"
    MOTORCYCLE = "motorcycle"
    TRUCK = "truck"
    BUS = "bus"


_money = Numeric(14, 2, asdecimal=False)


class TaxDispute(UUIDMixin, TimestampMixin, UserOwnedMixin, Base):
    __tablename__ = "tax_disputes"

    tax_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), default=TaxDisputeStatus.ACTIVE.value, nullable=False, index=True
    )
    amount: Mapped[float] = mapped_column(_money, nullable=False)
    penalty: Mapped[float] = mapped_column(_money, default=0, nullable=False)
    fine: Mapped[float] = mapped_column(_money, default=0, nullable=False)
    total_amount: Mapped[float] = mapped_column(_money, nullable=False)
    period: Mapped[str] = mapped_column(String(32), nullable=False)
    grounds: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    requirement_date: Mapped[date] = mapped_column(Date, nullable=False)
    deadline_days: Mapped[int] = mapped_column(Integer, default=7, nullable=False)
    deadline: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    taxpayer_inn: Mapped[str | None] = mapped_column(String(12))
    taxpayer_address: Mapped[str | None] = mapped_column(String(500))
    taxpayer_phone: Mapped[str | None] = mapped_column(String(32))
    inspection_number: Mapped[str | None] = mapped_column(String(16))
    inspection_name: Mapped[str | None] = mapped_column(String(255))
    notes: Mapped[str | None] = mapped_column(Text)
    success_rate: Mapped[int | None] = mapped_column(Integer)
    ai_analysis: Mapped[dict | None] = mapped_column(JSON)


class TaxCalculation(UUIDMixin, TimestampMixin, UserOwnedMixin, Base):
    __tablename__ = "tax_calculations"

    tax_type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    tax_dispute_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("tax_disputes.id", ondelete="SET NULL")
    )
    period: Mapped[int] = mapped_column(Integer, nullable=False)
    input_data: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    result_data: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    calculated_amount: Mapped[float] = mapped_column(_money, nullable=False)
    claimed_amount: Mapped[float | None] = mapped_column(_money)
    difference: Mapped[float | None] = mapped_column(_money)


class TaxDisputeDocument(UUIDMixin, TimestampMixin, UserOwnedMixin, Base):
    __tablename__ = "tax_dispute_documents"

    tax_dispute_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("tax_disputes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    document_type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    variables: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    legal_basis: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="generated", nullable=False)


class TransportTaxRate(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "transport_tax_rates"

    region: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    region_code: Mapped[str | None] = mapped_column(String(4))
    vehicle_type: Mapped[str] = mapped_column(String(20), nullable=False)
    power_from: Mapped[int] = mapped_column(Integer, nullable=False)
    power_to: Mapped[int] = mapped_column(Integer, nullable=False)
    rate: Mapped[float] = mapped_column(Numeric(8, 2, asdecimal=False), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    source: Mapped[str | None] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
