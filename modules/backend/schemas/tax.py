"""
Tax Schemas.

Transport tax calculator, tax authority disputes, their AI analysis and
the documents generated for them.
"""

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from modules.backend.core.utils import utc_now
from modules.backend.models.tax import TaxDisputeStatus, TaxDocumentType, TaxType, VehicleType


def _current_year() -> int:
    return utc_now().year


class TransportTaxRequest(BaseModel):
    """Input for the transport tax calculator."""

    region: str = Field(..., min_length=2, max_length=100, examples=["Москва"])
    vehicle_type: VehicleType = VehicleType.CAR
    engine_power: float = Field(..., gt=0, le=5000, description="Horsepower")
    year_of_manufacture: int = Field(..., ge=1900)
    ownership_months: int = Field(default=12, ge=1, le=12)
    has_privilege: bool = False
    privilege_percent: float = Field(default=50, ge=0, le=100)
    claimed_amount: float | None = Field(
        default=None, ge=0, description="Amount in the tax notice"
    )
    period: int = Field(default_factory=_current_year, ge=2000, description="Tax year")
    tax_dispute_id: str | None = None

    @model_validator(mode="after")
    def check_year(self) -> "TransportTaxRequest":
        if self.year_of_manufacture > utc_now().year:
            raise ValueError("year_of_manufacture cannot be in the future")
        return self


class TransportTaxResult(BaseModel):
    region: str
    vehicle_type: str
    engine_power: float
    tax_rate: float
    ownership_coefficient: float
    luxury_coefficient: float
    base_amount: float
    privilege_discount: float
    calculated_amount: float
    claimed_amount: float | None
    difference: float | None
    period: int
    recommendations: list[str]
    calculation_id: str | None = None


class TaxRateResponse(BaseModel):
    region: str
    vehicle_type: str
    power_from: int
    power_to: int
    rate: float
    year: int

    model_config = ConfigDict(from_attributes=True)


class TaxCalculationResponse(BaseModel):
    id: str
    tax_type: str
    period: int
    input_data: dict[str, Any]
    result_data: dict[str, Any]
    calculated_amount: float
    claimed_amount: float | None
    difference: float | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaxDisputeCreate(BaseModel):
    """A tax authority requirement the user wants to contest."""

    tax_type: TaxType
    amount: float = Field(..., gt=0)
    penalty: float = Field(default=0, ge=0)
    fine: float = Field(default=0, ge=0)
    period: str = Field(..., min_length=1, max_length=32, examples=["2023"])
    grounds: list[str] = Field(default_factory=list, max_length=20)
    requirement_date: date
    deadline_days: int = Field(default=7, ge=1, le=365)
    taxpayer_inn: str | None = Field(default=None, pattern=r"^\d{10}(\d{2})?$")
    taxpayer_address: str | None = Field(default=None, max_length=500)
    taxpayer_phone: str | None = Field(default=None, max_length=32)
    inspection_number: str | None = Field(default=None, max_length=16)
    inspection_name: str | None = Field(default=None, max_length=255)
    notes: str | None = Field(default=None, max_length=5000)


class TaxDisputeStatusUpdate(BaseModel):
    status: TaxDisputeStatus
    notes: str | None = Field(default=None, max_length=5000)


class TaxDisputeResponse(BaseModel):
    id: str
    tax_type: str
    status: str
    amount: float
    penalty: float
    fine: float
    total_amount: float
    period: str
    grounds: list[str]
    requirement_date: date
    deadline_days: int
    deadline: date
    taxpayer_inn: str | None
    inspection_number: str | None
    inspection_name: str | None
    notes: str | None
    success_rate: int | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# AI analysis
# =============================================================================


class DetectedError(BaseModel):
    description: str
    legal_basis: str = ""
    impact: Literal["low", "medium", "high"] = "medium"


class EstimatedCosts(BaseModel):
    court_fees: float = 0
    expertise_costs: float = 0
    total_estimated: float = 0


class DisputeStrategy(BaseModel):
    preferred_approach: Literal["administrative", "judicial", "combined"] = "administrative"
    step_by_step_plan: list[str] = Field(default_factory=list)
    alternative_options: list[str] = Field(default_factory=list)


class TaxAnalysis(BaseModel):
    """
    Assessment of a tax requirement produced by the analysis agent.

    ``success_probability`` is a percentage; anything the model returns
    outside 0..100 is clamped and unreadable values become 50.
    """

    overall_assessment: str
    success_probability: int = 50
    detected_errors: list[DetectedError] = Field(default_factory=list)
    procedural_violations: list[str] = Field(default_factory=list)
    legal_arguments: list[str] = Field(default_factory=list)
    recommended_actions: list[str] = Field(default_factory=list)
    estimated_timeline: str = "1-3 месяца"
    estimated_costs: EstimatedCosts = Field(default_factory=EstimatedCosts)
    risks: list[str] = Field(default_factory=list)
    strategy: DisputeStrategy = Field(default_factory=DisputeStrategy)

    @field_validator("success_probability", mode="before")
    @classmethod
    def clamp_probability(cls, value: Any) -> int:
        try:
            number = round(float(value))
        except (TypeError, ValueError, OverflowError):
            return 50
        return max(0, min(100, number))


class TaxDisputeAnalysisResponse(BaseModel):
    id: str
    tax_type: str
    period: str
    amount: float
    status: str
    success_rate: int | None
    ai_analysis: dict[str, Any] | None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def has_analysis(self) -> bool:
        return self.ai_analysis is not None


# =============================================================================
# Documents
# =============================================================================


class TaxDocumentGenerateRequest(BaseModel):
    """Render one of the tax document templates from a dispute."""

    tax_dispute_id: str
    document_type: TaxDocumentType
    custom_data: dict[str, str | float] = Field(
        default_factory=dict,
        max_length=30,
        description="Overrides for template variables, e.g. inspection_city",
    )


class TaxDocumentResponse(BaseModel):
    id: str
    tax_dispute_id: str
    document_type: str
    title: str
    content: str
    variables: dict[str, Any]
    legal_basis: list[str]
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
