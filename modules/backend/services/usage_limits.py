"""
Usage Limit Service.

Monthly quotas per subscription plan (config/settings/plans.yaml).
A limit of -1 means unlimited.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.config_schema import PlanSchema
from modules.backend.core.exceptions import UsageLimitError
from modules.backend.core.utils import month_start
from modules.backend.models.user import User
from modules.backend.repositories.consultation import ConsultationRepository
from modules.backend.repositories.dispute import DisputeRepository
from modules.backend.repositories.document import DocumentRepository
from modules.backend.schemas.user import UsageItem, UsageLimitsResponse
from modules.backend.services.base import BaseService

RESOURCES = ("consultations", "documents", "disputes")

LIMIT_MESSAGES = {
    "consultations": "Достигнут месячный лимит консультаций для вашего тарифа",
    "documents": "Достигнут месячный лимит документов для вашего тарифа",
    "disputes": "Достигнут месячный лимит споров для вашего тарифа",
}


def get_plan(plan_id: str) -> PlanSchema:
    """Plan settings; unknown plan ids fall back to the default plan."""
    plans = get_app_config().plans
    return plans.plans.get(plan_id) or plans.plans[plans.default_plan]


class UsageLimitService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self._repos = {
            "consultations": ConsultationRepository(session),
            "documents": DocumentRepository(session),
            "disputes": DisputeRepository(session),
        }

    async def get_used(self, user: User, resource: str) -> int:
        return await self._repos[resource].count_for_user(user.id, since=month_start())

    async def check(self, user: User, resource: str) -> None:
        """
        Ensure the user may create one more ``resource`` this month.

        Raises:
            UsageLimitError: If the plan quota is exhausted
        """
        if not get_app_config().features.usage_limits_enforced:
            return

        limit = getattr(get_plan(user.subscription_plan).limits, resource)
        if limit < 0:
            return

        used = await self.get_used(user, resource)
        if used >= limit:
            self._log_operation(
                "Usage limit reached",
                user_id=user.id,
                resource=resource,
                used=used,
                limit=limit,
            )
            raise UsageLimitError(
                LIMIT_MESSAGES[resource],
                details={
                    "resource": resource,
                    "limit": limit,
                    "used": used,
                    "plan": user.subscription_plan,
                },
            )

    async def get_usage(self, user: User) -> UsageLimitsResponse:
        plan = get_plan(user.subscription_plan)
        items = {}
        for resource in RESOURCES:
            limit = getattr(plan.limits, resource)
            used = await self.get_used(user, resource)
            items[resource] = UsageItem(
                used=used,
                limit=limit,
                remaining=None if limit < 0 else max(limit - used, 0),
            )
        return UsageLimitsResponse(
            plan=user.subscription_plan,
            plan_name=plan.name,
            period_start=month_start(),
            **items,
        )
