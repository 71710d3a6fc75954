"""
Tax Repositories.

Tax disputes and their documents, saved calculations and the transport
tax rate table.
"""

from sqlalchemy import delete, func, select

from modules.backend.models.tax import (
    TaxCalculation,
    TaxDispute,
    TaxDisputeDocument,
    TransportTaxRate,
)
from modules.backend.repositories.base import BaseRepository, UserOwnedRepository


class TaxDisputeRepository(UserOwnedRepository[TaxDispute]):
    model = TaxDispute


class TaxDisputeDocumentRepository(UserOwnedRepository[TaxDisputeDocument]):
    model = TaxDisputeDocument

    async def list_for_dispute(self, tax_dispute_id: str) -> list[TaxDisputeDocument]:
        result = await self.session.execute(
            select(TaxDisputeDocument)
            .where(TaxDisputeDocument.tax_dispute_id == tax_dispute_id)
            .order_by(TaxDisputeDocument.created_at.desc())
        )
        return list(result.scalars().all())


class TaxCalculationRepository(UserOwnedRepository[TaxCalculation]):
    model = TaxCalculation

    async def latest_for_dispute(self, tax_dispute_id: str) -> TaxCalculation | None:
        result = await self.session.execute(
            select(TaxCalculation)
            .where(TaxCalculation.tax_dispute_id == tax_dispute_id)
            .order_by(TaxCalculation.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()


class TransportTaxRateRepository(BaseRepository[TransportTaxRate]):
    model = TransportTaxRate

    async def find_rate(
        self,
        region: str,
        vehicle_type: str,
        engine_power: float,
        year: int,
    ) -> TransportTaxRate | None:
        """
        Rate for the power bracket in the given year.

        Falls back to the latest year on record for the region and
        vehicle type when the requested year has no rates.
        """
        base = select(TransportTaxRate).where(
            TransportTaxRate.region == region,
            TransportTaxRate.vehicle_type == vehicle_type,
            TransportTaxRate.power_from <= engine_power,
            TransportTaxRate.power_to >= engine_power,
            TransportTaxRate.is_active == True,  # noqa: E712
        )
        result = await self.session.execute(base.where(TransportTaxRate.year == year).limit(1))
        rate = result.scalar_one_or_none()
        if rate is not None:
            return rate

        result = await self.session.execute(
            base.order_by(TransportTaxRate.year.desc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def list_regions(self) -> list[str]:
        result = await self.session.execute(
            select(TransportTaxRate.region)
            .where(TransportTaxRate.is_active == True)  # noqa: E712
            .distinct()
            .order_by(TransportTaxRate.region)
        )
        return list(result.scalars().all())

    async def list_for_region(self, region: str) -> list[TransportTaxRate]:
        result = await self.session.execute(
            select(TransportTaxRate)
            .where(TransportTaxRate.region == region, TransportTaxRate.is_active == True)  # noqa: E712
            .order_by(TransportTaxRate.vehicle_type, TransportTaxRate.power_from)
        )
        return list(result.scalars().all())

    async def replace_year(self, year: int, rows: list[dict]) -> int:
        """Replace every rate for ``year`` with ``rows``. Returns rows written."""
        await self.session.execute(delete(TransportTaxRate).where(TransportTaxRate.year == year))
        self.session.add_all(TransportTaxRate(year=year, **row) for row in rows)
        await self.session.flush()
        result = await self.session.execute(
            select(func.count()).select_from(TransportTaxRate).where(TransportTaxRate.year == year)
        )
        return result.scalar_one()
