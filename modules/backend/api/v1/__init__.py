"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from modules.backend.api.v1.endpoints import (
    alerts,
    auth,
    consultations,
    dashboard,
    disputes,
    documents,
    notifications,
    records,
    tax,
    users,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(consultations.router, prefix="/consultations", tags=["consultations"])
router.include_router(documents.router, prefix="/documents", tags=["documents"])
router.include_router(disputes.router, prefix="/disputes", tags=["disputes"])
router.include_router(tax.router, prefix="/tax", tags=["tax"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
router.include_router(alerts.router, prefix="/alerts", tags=["alerts"])
router.include_router(records.rag_router, prefix="/rag", tags=["rag"])
router.include_router(records.payments_router, prefix="/payments", tags=["payments"])
