"""
Transport Tax Calculator.

Pure arithmetic over a rate looked up elsewhere, so it can be unit
tested without a database.
"""

from dataclasses import dataclass

from modules.backend.models.tax import VehicleType

LUXURY_POWER_HP = 250
LUXURY_MAX_AGE_YEARS = 3
LUXURY_COEFFICIENT = 1.1
NEGLIGIBLE_DIFFERENCE = 100
SIGNIFICANT_OVERPAYMENT = 1000


@dataclass(frozen=True)
class TransportTaxBreakdown:
    tax_rate: float
    ownership_coefficient: float
    luxury_coefficient: float
    base_amount: float
    privilege_discount: float
    calculated_amount: float
    difference: float | None


def luxury_coefficient(
    vehicle_type: str,
    engine_power: float,
    year_of_manufacture: int,
    current_year: int,
) -> float:
    """Raised coefficient for powerful passenger cars no older than three years."""
    if vehicle_type != VehicleType.CAR.value:
        return 1.0
    age = current_year - year_of_manufacture
    if engine_power > LUXURY_POWER_HP and age <= LUXURY_MAX_AGE_YEARS:
        return LUXURY_COEFFICIENT
    return 1.0


def calculate_transport_tax(
    *,
    rate: float,
    vehicle_type: str,
    engine_power: float,
    year_of_manufacture: int,
    current_year: int,
    ownership_months: int = 12,
    has_privilege: bool = False,
    privilege_percent: float = 50,
    claimed_amount: float | None = None,
) -> TransportTaxBreakdown:
    ownership = ownership_months / 12
    luxury = luxury_coefficient(vehicle_type, engine_power, year_of_manufacture, current_year)
    base = engine_power * rate * ownership * luxury
    discount = privilege_percent / 100 if has_privilege else 0.0
    calculated = base * (1 - discount)
    difference = None if claimed_amount is None else claimed_amount - calculated

    return TransportTaxBreakdown(
        tax_rate=rate,
        ownership_coefficient=round(ownership, 4),
        luxury_coefficient=luxury,
        base_amount=round(base, 2),
        privilege_discount=round(base * discount, 2),
        calculated_amount=round(calculated, 2),
        difference=None if difference is None else round(difference, 2),
    )


def build_recommendations(difference: float | None) -> list[str]:
    """Advice on the gap between the tax notice and the calculated amount."""
    if difference is None:
        return ["Сравните рассчитанную сумму с налоговым уведомлением"]

    if abs(difference) < NEGLIGIBLE_DIFFERENCE:
        return [
            "Расчет налоговой корректен, расхождение минимальное",
            "Оспаривание может быть нецелесообразным из-за малой суммы",
        ]

    if difference > 0:
        recommendations = [
            f"Переплата: {round(difference)} рублей",
            "Рекомендуется подать заявление о перерасчете налога",
            "Приложите расчет и документы, подтверждающие параметры ТС",
        ]
        if difference > SIGNIFICANT_OVERPAYMENT:
            recommendations.append("Значительная переплата! Обязательно оспорьте начисление")
        return recommendations

    return [
        f"Недоплата: {round(abs(difference))} рублей",
        "Начисленная сумма ниже расчетной, возможно доначисление налога",
        "Проверьте ставки для вашего региона и параметры ТС в базе ФНС",
    ]
