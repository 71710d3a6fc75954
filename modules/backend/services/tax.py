"""
Tax Service.

Transport tax calculations against the regional rate table, the
user's disputes with the tax authority, their AI analysis and the
objections, complaints and requests generated for them.
"""

from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import find_project_root, get_app_config
from modules.backend.core.exceptions import AIServiceError, NotFoundError
from modules.backend.core.utils import utc_now
from modules.backend.models.tax import (
    TaxCalculation,
    TaxDispute,
    TaxDisputeDocument,
    TaxDisputeStatus,
    TaxType,
    TransportTaxRate,
)
from modules.backend.models.user import User
from modules.backend.repositories.tax import (
    TaxCalculationRepository,
    TaxDisputeDocumentRepository,
    TaxDisputeRepository,
    TransportTaxRateRepository,
)
from modules.backend.schemas.tax import (
    TaxDisputeCreate,
    TaxDisputeStatusUpdate,
    TaxDocumentGenerateRequest,
    TransportTaxRequest,
    TransportTaxResult,
)
from modules.backend.services.ai_client import LegalAIClient, get_ai_client
from modules.backend.services.base import BaseService
from modules.backend.services.tax_analysis import build_analysis_prompt, fallback_analysis
from modules.backend.services.tax_calculator import build_recommendations, calculate_transport_tax
from modules.backend.services.tax_documents import document_variables, render_tax_document

RATES_FILE = Path("config") / "data" / "transport_tax_rates.yaml"


def load_rate_rows(path: Path | None = None) -> tuple[int, list[dict[str, Any]]]:
    """Read the rates data file into ``(year, rows)`` ready for insertion."""
    path = path or find_project_root() / RATES_FILE
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    rows = []
    for region in data["regions"]:
        for vehicle_type, brackets in region["rates"].items():
            for power_from, power_to, rate in brackets:
                rows.append({
                    "region": region["region"],
                    "region_code": str(region.get("region_code") or "") or None,
                    "vehicle_type": vehicle_type,
                    "power_from": power_from,
                    "power_to": power_to,
                    "rate": rate,
                    "source": data.get("source"),
                })
    return int(data["year"]), rows


class TaxService(BaseService):
    def __init__(self, session: AsyncSession, ai_client: LegalAIClient | None = None) -> None:
        super().__init__(session)
        self.rates = TransportTaxRateRepository(session)
        self.calculations = TaxCalculationRepository(session)
        self.disputes = TaxDisputeRepository(session)
        self.documents = TaxDisputeDocumentRepository(session)
        self._ai_client = ai_client

    @property
    def ai(self) -> LegalAIClient:
        if self._ai_client is None:
            self._ai_client = get_ai_client()
        return self._ai_client

    # -------------------------------------------------------------------------
    # Transport tax
    # -------------------------------------------------------------------------

    async def calculate_transport_tax(
        self,
        user: User,
        data: TransportTaxRequest,
    ) -> TransportTaxResult:
        """
        Calculate the transport tax and save the run for the user.

        Raises:
            NotFoundError: No rate for the region, vehicle type and power,
                or ``tax_dispute_id`` is not one of the user's disputes
        """
        if data.tax_dispute_id:
            await self.disputes.get_owned(data.tax_dispute_id, user.id)

        rate = await self.rates.find_rate(
            data.region, data.vehicle_type.value, data.engine_power, data.period
        )
        if rate is None:
            raise NotFoundError(
                "Tax rate not found for this region and vehicle type"
            )

        breakdown = calculate_transport_tax(
            rate=rate.rate,
            vehicle_type=data.vehicle_type.value,
            engine_power=data.engine_power,
            year_of_manufacture=data.year_of_manufacture,
            current_year=utc_now().year,
            ownership_months=data.ownership_months,
            has_privilege=data.has_privilege,
            privilege_percent=data.privilege_percent,
            claimed_amount=data.claimed_amount,
        )
        result = TransportTaxResult(
            region=data.region,
            vehicle_type=data.vehicle_type.value,
            engine_power=data.engine_power,
            tax_rate=breakdown.tax_rate,
            ownership_coefficient=breakdown.ownership_coefficient,
            luxury_coefficient=breakdown.luxury_coefficient,
            base_amount=breakdown.base_amount,
            privilege_discount=breakdown.privilege_discount,
            calculated_amount=breakdown.calculated_amount,
            claimed_amount=data.claimed_amount,
            difference=breakdown.difference,
            period=data.period,
            recommendations=build_recommendations(breakdown.difference),
        )

        calculation = await self._execute_db_operation(
            "save_tax_calculation",
            self.calculations.create(
                user_id=user.id,
                tax_type=TaxType.TRANSPORT.value,
                tax_dispute_id=data.tax_dispute_id,
                period=data.period,
                input_data={**data.model_dump(mode="json"), "rate_id": rate.id, "rate_year": rate.year},
                result_data=result.model_dump(mode="json"),
                calculated_amount=breakdown.calculated_amount,
                claimed_amount=data.claimed_amount,
                difference=breakdown.difference,
            ),
        )
        self._log_operation(
            "Transport tax calculated",
            user_id=user.id,
            region=data.region,
            amount=breakdown.calculated_amount,
        )
        result.calculation_id = calculation.id
        return result

    async def list_regions(self) -> list[str]:
        return await self.rates.list_regions()

    async def list_rates(self, region: str) -> list[TransportTaxRate]:
        rates = await self.rates.list_for_region(region)
        if not rates:
            raise NotFoundError(f"No tax rates for region '{region}'")
        return rates

    async def seed_transport_rates(self, path: Path | None = None) -> int:
        year, rows = load_rate_rows(path)
        written = await self._execute_db_operation(
            "seed_transport_rates", self.rates.replace_year(year, rows)
        )
        self._log_operation("Transport tax rates seeded", year=year, rows=written)
        return written

    async def list_calculations(
        self,
        user: User,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[TaxCalculation], int]:
        items = await self.calculations.list_for_user(user.id, limit=limit, offset=offset)
        total = await self.calculations.count_for_user(user.id)
        return items, total

    # -------------------------------------------------------------------------
    # Tax disputes
    # -------------------------------------------------------------------------

    async def create_dispute(self, user: User, data: TaxDisputeCreate) -> TaxDispute:
        total = round(data.amount + data.penalty + data.fine, 2)
        deadline = data.requirement_date + timedelta(days=data.deadline_days)
        dispute = await self._execute_db_operation(
            "create_tax_dispute",
            self.disputes.create(
                user_id=user.id,
                **data.model_dump(mode="json", exclude={"requirement_date"}),
                requirement_date=data.requirement_date,
                total_amount=total,
                deadline=deadline,
            ),
        )
        self._log_operation(
            "Tax dispute created",
            user_id=user.id,
            tax_dispute_id=dispute.id,
            tax_type=data.tax_type.value,
        )
        return dispute

    async def list_disputes(
        self,
        user: User,
        status: TaxDisputeStatus | None = None,
        tax_type: TaxType | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[TaxDispute], int]:
        filters = {
            "status": status.value if status else None,
            "tax_type": tax_type.value if tax_type else None,
        }
        items = await self.disputes.list_for_user(user.id, limit=limit, offset=offset, filters=filters)
        total = await self.disputes.count_for_user(user.id, filters=filters)
        return items, total

    async def get_dispute(self, user: User, dispute_id: str) -> TaxDispute:
        return await self.disputes.get_owned(dispute_id, user.id)

    async def update_dispute_status(
        self,
        user: User,
        dispute_id: str,
        data: TaxDisputeStatusUpdate,
    ) -> TaxDispute:
        dispute = await self.disputes.get_owned(dispute_id, user.id)
        changes: dict[str, Any] = {"status": data.status.value}
        if data.notes is not None:
            changes["notes"] = data.notes
        return await self._execute_db_operation(
            "update_tax_dispute_status",
            self.disputes.update_instance(dispute, **changes),
        )

    async def delete_dispute(self, user: User, dispute_id: str) -> None:
        dispute = await self.disputes.get_owned(dispute_id, user.id)
        await self.session.delete(dispute)
        await self._execute_db_operation("delete_tax_dispute", self.session.flush())

    # -------------------------------------------------------------------------
    # AI analysis
    # -------------------------------------------------------------------------

    async def analyze_dispute(self, user: User, dispute_id: str) -> TaxDispute:
        """
        Run the AI analysis and store it on the dispute.

        The dispute's latest linked calculation is included in the prompt.
        When the AI is disabled or the provider fails, a rule-based
        assessment is stored instead, marked ``"source": "fallback"``.

        Raises:
            NotFoundError: Not one of the user's disputes
        """
        dispute = await self.disputes.get_owned(dispute_id, user.id)
        calculation = await self.calculations.latest_for_dispute(dispute.id)

        source = "ai"
        if get_app_config().features.ai_consultation_enabled:
            try:
                analysis = await self.ai.analyze_tax_dispute(
                    build_analysis_prompt(dispute, calculation)
                )
            except AIServiceError as e:
                self._logger.warning(
                    "Tax analysis fell back to rules",
                    extra={"tax_dispute_id": dispute.id, "error": e.message},
                )
                analysis, source = fallback_analysis(dispute, calculation), "fallback"
        else:
            analysis, source = fallback_analysis(dispute, calculation), "fallback"

        dispute = await self._execute_db_operation(
            "save_tax_analysis",
            self.disputes.update_instance(
                dispute,
                success_rate=analysis.success_probability,
                ai_analysis={
                    "analyzed_at": utc_now().isoformat(),
                    "source": source,
                    **analysis.model_dump(mode="json"),
                },
            ),
        )
        self._log_operation(
            "Tax dispute analyzed",
            user_id=user.id,
            tax_dispute_id=dispute.id,
            source=source,
            success_rate=analysis.success_probability,
        )
        return dispute

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    async def generate_document(
        self,
        user: User,
        data: TaxDocumentGenerateRequest,
    ) -> TaxDisputeDocument:
        """
        Render a tax document from the dispute and save it.

        Raises:
            NotFoundError: Not one of the user's disputes
        """
        dispute = await self.disputes.get_owned(data.tax_dispute_id, user.id)
        calculation = await self.calculations.latest_for_dispute(dispute.id)

        variables = document_variables(user, dispute, calculation, utc_now().date())
        variables.update(data.custom_data)
        title, content, legal_basis = render_tax_document(data.document_type, variables)

        document = await self._execute_db_operation(
            "create_tax_document",
            self.documents.create(
                user_id=user.id,
                tax_dispute_id=dispute.id,
                document_type=data.document_type.value,
                title=title,
                content=content,
                variables=variables,
                legal_basis=legal_basis,
            ),
        )
        self._log_operation(
            "Tax document generated",
            user_id=user.id,
            tax_dispute_id=dispute.id,
            document_id=document.id,
            document_type=data.document_type.value,
        )
        return document

    async def list_documents(self, user: User, dispute_id: str) -> list[TaxDisputeDocument]:
        dispute = await self.disputes.get_owned(dispute_id, user.id)
        return await self.documents.list_for_dispute(dispute.id)
