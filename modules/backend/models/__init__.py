"""
Database models.

Importing this package registers every table on Base.metadata
(used by create_all, Alembic autogenerate and tests).
"""

from modules.backend.models.base import Base
from modules.backend.models.consultation import Consultation
from modules.backend.models.dispute import Dispute, TimelineEvent
from modules.backend.models.document import Document
from modules.backend.models.notification import Notification
from modules.backend.models.payment import Payment
from modules.backend.models.rag import ProcessedDocument, RAGConsultation
from modules.backend.models.tax import (
    TaxCalculation,
    TaxDispute,
    TaxDisputeDocument,
    TransportTaxRate,
)
from modules.backend.models.user import User

__all__ = [
    "Base",
    "Consultation",
    "Dispute",
    "Document",
    "Notification",
    "Payment",
    "ProcessedDocument",
    "RAGConsultation",
    "TaxCalculation",
    "TaxDispute",
    "TaxDisputeDocument",
    "TimelineEvent",
    "TransportTaxRate",
    "User",
]
