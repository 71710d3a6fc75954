"""
Tests for monthly plan quotas.
"""

from datetime import timedelta

import pytest

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import UsageLimitError
from modules.backend.core.utils import month_start
from modules.backend.models.document import Document
from modules.backend.services.usage_limits import UsageLimitService, get_plan


async def add_documents(db_session, user, count: int, created_at=None) -> None:
    for i in range(count):
        document = Document(
            user_id=user.id,
            document_type="pretenziya",
            title=f"Претензия {i}",
            content="Текст",
        )
        if created_at is not None:
            document.created_at = created_at
        db_session.add(document)
    await db_session.flush()


def test_unknown_plan_falls_back_to_default():
    assert get_plan("platinum") == get_plan(get_app_config().plans.default_plan)


async def test_free_plan_document_limit(db_session, user):
    await add_documents(db_session, user, 3)

    with pytest.raises(UsageLimitError) as exc_info:
        await UsageLimitService(db_session).check(user, "documents")

    assert exc_info.value.details == {
        "resource": "documents",
        "limit": 3,
        "used": 3,
        "plan": "free",
    }


async def test_previous_month_not_counted(db_session, user):
    await add_documents(db_session, user, 3, created_at=month_start() - timedelta(days=1))

    await UsageLimitService(db_session).check(user, "documents")


async def test_enterprise_is_unlimited(db_session, user):
    user.subscription_plan = "enterprise"
    await add_documents(db_session, user, 5)

    await UsageLimitService(db_session).check(user, "documents")

    usage = await UsageLimitService(db_session).get_usage(user)
    assert usage.documents.limit == -1
    assert usage.documents.remaining is None


async def test_enforcement_switch(db_session, user, monkeypatch):
    config = get_app_config()
    monkeypatch.setattr(
        config, "_features", config.features.model_copy(update={"usage_limits_enforced": False})
    )
    await add_documents(db_session, user, 4)

    await UsageLimitService(db_session).check(user, "documents")


async def test_usage_summary(db_session, user):
    await add_documents(db_session, user, 2)

    usage = await UsageLimitService(db_session).get_usage(user)

    assert usage.plan == "free"
    assert usage.documents.used == 2
    assert usage.documents.remaining == 1
    assert usage.consultations.remaining == 5
    assert usage.period_start == month_start()
