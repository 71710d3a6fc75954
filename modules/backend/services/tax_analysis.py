"""
Tax Dispute Analysis.

Prompt construction for the tax analysis agent and the rule-based
assessment used when the AI provider is unavailable.
"""

from modules.backend.models.tax import TAX_TYPE_LABELS, TaxCalculation, TaxDispute, TaxType
from modules.backend.schemas.tax import DisputeStrategy, TaxAnalysis
from modules.backend.services.document_templates import format_amount

TAX_ANALYSIS_PROMPT = """Вы опытный налоговый юрист, специализирующийся на спорах физических лиц
с налоговыми органами РФ.

Проведите анализ налогового требования:
1. Ошибки в расчетах: ставка, налоговая база, коэффициенты, льготы, период владения.
2. Процессуальные нарушения: сроки уведомления, форма требования, права налогоплательщика.
3. Правовые аргументы со ссылками на реальные статьи НК РФ и практику ВС РФ.
4. Стратегия: оптимальный путь оспаривания, пошаговый план, сроки, затраты, риски.
5. Прогноз: реалистичная вероятность успеха в процентах, без преувеличений.

Будьте конкретны и объективны."""

HIGH_CHANCE_SHARE = 0.3


def tax_type_label(tax_type: str) -> str:
    try:
        return TAX_TYPE_LABELS[TaxType(tax_type)]
    except ValueError:
        return tax_type


def build_analysis_prompt(dispute: TaxDispute, calculation: TaxCalculation | None = None) -> str:
    """Describe the requirement, the latest calculation and the user's grounds."""
    lines = [
        "Проанализируйте налоговое требование.",
        "",
        "БАЗОВАЯ ИНФОРМАЦИЯ:",
        f"- Вид налога: {tax_type_label(dispute.tax_type)}",
        f"- Налоговый период: {dispute.period}",
        f"- Начислено налоговой: {format_amount(dispute.amount)} руб.",
    ]
    if calculation is not None:
        lines.append(
            f"- Правильная сумма (по расчету): {format_amount(calculation.calculated_amount)} руб."
        )
        lines.append(
            f"- Разница: {format_amount(abs(dispute.amount - calculation.calculated_amount))} руб."
        )

    details = [f"- Дата требования: {dispute.requirement_date.strftime('%d.%m.%Y')}"]
    if calculation is not None:
        result = calculation.result_data or {}
        inputs = calculation.input_data or {}
        if result.get("tax_rate") is not None:
            details.append(f"- Ставка: {result['tax_rate']}")
        if result.get("engine_power") is not None:
            details.append(f"- Налоговая база: {result['engine_power']} л.с.")
        if inputs.get("ownership_months") is not None:
            details.append(f"- Период владения: {inputs['ownership_months']} мес.")
    if dispute.penalty:
        details.append(f"- Пени: {format_amount(dispute.penalty)} руб.")
    if dispute.fine:
        details.append(f"- Штрафы: {format_amount(dispute.fine)} руб.")
    lines += ["", "ДЕТАЛИ ТРЕБОВАНИЯ:", *details]

    if dispute.grounds:
        lines += ["", "ОСНОВАНИЯ ДЛЯ ОСПАРИВАНИЯ (предварительные):"]
        lines += [f"{index}. {ground}" for index, ground in enumerate(dispute.grounds, 1)]

    return "\n".join(lines)


def fallback_analysis(dispute: TaxDispute, calculation: TaxCalculation | None = None) -> TaxAnalysis:
    """
    Baseline assessment without the model.

    The chance is 70% when the calculation disagrees with the claimed
    amount by more than 30% of it, otherwise 50%.
    """
    difference = abs(dispute.amount - calculation.calculated_amount) if calculation else 0
    probability = 70 if difference > dispute.amount * HIGH_CHANCE_SHARE else 50
    label = tax_type_label(dispute.tax_type)

    return TaxAnalysis(
        overall_assessment=(
            f"Предварительный анализ показывает возможность оспаривания начисления "
            f"({label}) за {dispute.period}. Требуется детальная проверка расчетов "
            f"и процедуры начисления."
        ),
        success_probability=probability,
        legal_arguments=["Право на обжалование актов налоговых органов (ст. 137, 138 НК РФ)"],
        recommended_actions=[
            "Подать возражения на требование в течение 30 дней с момента получения",
            "Приложить расчет налога и подтверждающие документы",
        ],
        risks=["Возможен отказ в удовлетворении возражений"],
        strategy=DisputeStrategy(
            preferred_approach="administrative",
            step_by_step_plan=[
                "Подать возражения в инспекцию",
                "При отказе обжаловать решение в УФНС",
                "При отказе УФНС обратиться в суд",
            ],
        ),
    )
