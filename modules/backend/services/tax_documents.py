"""
Tax Document Templates.

Objections, complaints, disagreement notices and recalculation requests
addressed to the tax authority. Variables are collected from the tax
dispute, its latest calculation and the user; the caller may override
any of them before rendering.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any

from modules.backend.models.tax import TaxCalculation, TaxDispute, TaxDocumentType
from modules.backend.models.user import User
from modules.backend.services.document_templates import SIGNATURE_LINE, format_amount
from modules.backend.services.tax_analysis import tax_type_label

_PLACEHOLDER_RE = re.compile(r"\[([А-ЯЁ_]+)\]")


@dataclass(frozen=True)
class TaxDocumentTemplate:
    type: TaxDocumentType
    title: str
    legal_basis: tuple[str, ...]
    body: str

    def render_title(self, variables: dict[str, Any]) -> str:
        return self.title.format(label=variables["tax_type"], period=variables["tax_period"])

    def render(self, variables: dict[str, Any]) -> str:
        mapping = _placeholders(variables, self.legal_basis)
        text = _PLACEHOLDER_RE.sub(lambda m: mapping.get(m.group(1), ""), self.body)
        return re.sub(r"\n\n\n+", "\n\n", text).strip() + "\n"


# =============================================================================
# Variables
# =============================================================================


def _money(value: Any) -> str:
    try:
        return format_amount(float(value))
    except (TypeError, ValueError):
        return str(value)


def taxpayer_name(user: User) -> str:
    name = f"{user.last_name or ''} {user.first_name or ''}".strip()
    return name or user.username or "Налогоплательщик"


def document_variables(
    user: User,
    dispute: TaxDispute,
    calculation: TaxCalculation | None,
    today: date,
) -> dict[str, Any]:
    """Template variables for a dispute; JSON-safe so they can be stored."""
    inspection_name = dispute.inspection_name
    if not inspection_name:
        inspection_name = (
            f"ИФНС № {dispute.inspection_number}" if dispute.inspection_number else "Налоговая инспекция"
        )
    return {
        "taxpayer_name": taxpayer_name(user),
        "taxpayer_inn": dispute.taxpayer_inn or "",
        "taxpayer_address": dispute.taxpayer_address or "",
        "taxpayer_phone": dispute.taxpayer_phone or "",
        "inspection_number": dispute.inspection_number or "",
        "inspection_name": inspection_name,
        "inspection_city": "",
        "tax_type": tax_type_label(dispute.tax_type),
        "tax_period": dispute.period,
        "tax_amount": dispute.amount,
        "penalty_amount": dispute.penalty,
        "fine_amount": dispute.fine,
        "total_amount": dispute.total_amount,
        "grounds": list(dispute.grounds or []),
        "correct_amount": calculation.calculated_amount if calculation else 0,
        "overpaid_amount": abs(calculation.difference) if calculation and calculation.difference else 0,
        "current_date": today.strftime("%d.%m.%Y"),
        "requirement_date": dispute.requirement_date.strftime("%d.%m.%Y"),
    }


def _inspection(variables: dict[str, Any]) -> str:
    if variables.get("inspection_city"):
        return f"{variables['inspection_name']}\nг. {variables['inspection_city']}"
    return str(variables["inspection_name"])


def _applicant(variables: dict[str, Any]) -> str:
    lines = [f"от {variables['taxpayer_name']}"]
    for label, key in (("ИНН", "taxpayer_inn"), ("Адрес", "taxpayer_address"), ("Телефон", "taxpayer_phone")):
        if variables.get(key):
            lines.append(f"{label}: {variables[key]}")
    return "\n".join(lines)


def _grounds(variables: dict[str, Any]) -> str:
    grounds = variables.get("grounds") or []
    if isinstance(grounds, str):
        grounds = [line.strip() for line in grounds.splitlines() if line.strip()]
    if not grounds:
        return "1. Сумма начисления не соответствует фактическим обстоятельствам и нормам НК РФ."
    return "\n".join(f"{index}. {ground}" for index, ground in enumerate(grounds, 1))


def _calculation(variables: dict[str, Any]) -> str:
    try:
        correct = float(variables.get("correct_amount") or 0)
    except (TypeError, ValueError):
        correct = 0
    if correct <= 0:
        return ""
    text = f"По расчету налогоплательщика правильная сумма налога составляет {_money(correct)} руб."
    if variables.get("overpaid_amount"):
        text += f" Сумма излишнего начисления: {_money(variables['overpaid_amount'])} руб."
    return text


def _placeholders(variables: dict[str, Any], legal_basis: tuple[str, ...]) -> dict[str, str]:
    return {
        "ИНСПЕКЦИЯ": _inspection(variables),
        "ЗАЯВИТЕЛЬ": _applicant(variables),
        "НАЛОГОПЛАТЕЛЬЩИК": str(variables["taxpayer_name"]),
        "ВИД_НАЛОГА": str(variables["tax_type"]),
        "ПЕРИОД": str(variables["tax_period"]),
        "СУММА_НАЛОГА": _money(variables["tax_amount"]),
        "ПЕНИ": _money(variables["penalty_amount"]),
        "ШТРАФ": _money(variables["fine_amount"]),
        "ИТОГО": _money(variables["total_amount"]),
        "ДАТА_ТРЕБОВАНИЯ": str(variables["requirement_date"]),
        "ОСНОВАНИЯ": _grounds(variables),
        "РАСЧЕТ": _calculation(variables),
        "ПРАВОВОЕ_ОСНОВАНИЕ": "\n".join(f"- {item}" for item in legal_basis),
        "ДАТА": str(variables["current_date"]),
        "ПОДПИСЬ": SIGNATURE_LINE,
    }


# =============================================================================
# Templates
# =============================================================================

_CLAIM = (
    "Налоговым органом начислен налог ([ВИД_НАЛОГА]) за [ПЕРИОД] в сумме "
    "[СУММА_НАЛОГА] руб., пени [ПЕНИ] руб., штраф [ШТРАФ] руб., всего "
    "[ИТОГО] руб. (требование от [ДАТА_ТРЕБОВАНИЯ])."
)

_SIGNATURE = """[ДАТА] г.                    [ПОДПИСЬ]

[НАЛОГОПЛАТЕЛЬЩИК]"""

OBJECTION = TaxDocumentTemplate(
    type=TaxDocumentType.OBJECTION,
    title="Возражения на акт проверки по {label} за {period}",
    legal_basis=(
        'Статья 88 НК РФ "Камеральная налоговая проверка"',
        'Статья 100 НК РФ "Оформление результатов налоговой проверки"',
    ),
    body=f"""В [ИНСПЕКЦИЯ]

[ЗАЯВИТЕЛЬ]

ВОЗРАЖЕНИЯ
на акт налоговой проверки

{_CLAIM}

С выводами проверки не согласен по следующим основаниям:
[ОСНОВАНИЯ]

[РАСЧЕТ]

Правовое основание:
[ПРАВОВОЕ_ОСНОВАНИЕ]

На основании изложенного, руководствуясь п. 6 ст. 100 НК РФ,

ПРОШУ:
1. Учесть настоящие возражения при рассмотрении материалов проверки.
2. Отменить доначисление налога, пени и штрафа в части, не соответствующей закону.

Приложения:
- Копия акта (требования);
- Расчет налога;
- Документы, подтверждающие доводы возражений.

{_SIGNATURE}
""",
)

COMPLAINT = TaxDocumentTemplate(
    type=TaxDocumentType.COMPLAINT,
    title="Жалоба на решение по {label} за {period}",
    legal_basis=(
        'Статья 137 НК РФ "Право на обжалование"',
        'Статья 138 НК РФ "Порядок обжалования"',
        'Статья 140 НК РФ "Рассмотрение жалобы"',
    ),
    body=f"""В вышестоящий налоговый орган (УФНС России)
через [ИНСПЕКЦИЯ]

[ЗАЯВИТЕЛЬ]

ЖАЛОБА
на решение налогового органа

{_CLAIM}

Считаю решение незаконным по следующим основаниям:
[ОСНОВАНИЯ]

[РАСЧЕТ]

Правовое основание:
[ПРАВОВОЕ_ОСНОВАНИЕ]

На основании изложенного, руководствуясь ст. 137, 138, 139 НК РФ,

ПРОШУ:
1. Отменить решение налогового органа полностью или в обжалуемой части.
2. Обязать налоговый орган произвести перерасчет налога, пени и штрафа.

Приложения:
- Копия обжалуемого решения;
- Расчет налога;
- Документы, подтверждающие доводы жалобы.

{_SIGNATURE}
""",
)

NOTICE = TaxDocumentTemplate(
    type=TaxDocumentType.NOTICE,
    title="Уведомление о несогласии с решением по {label} за {period}",
    legal_basis=(
        'Статья 138 НК РФ "Порядок обжалования"',
        'Статья 142 НК РФ "Обжалование в судебном порядке"',
    ),
    body=f"""В [ИНСПЕКЦИЯ]

[ЗАЯВИТЕЛЬ]

УВЕДОМЛЕНИЕ
о несогласии с решением налогового органа

{_CLAIM}

Настоящим уведомляю о несогласии с начислением по следующим основаниям:
[ОСНОВАНИЯ]

Правовое основание:
[ПРАВОВОЕ_ОСНОВАНИЕ]

Оставляю за собой право обжаловать решение в вышестоящий налоговый орган
и в суд в порядке, предусмотренном ст. 142 НК РФ.

{_SIGNATURE}
""",
)

RECALCULATION_REQUEST = TaxDocumentTemplate(
    type=TaxDocumentType.RECALCULATION_REQUEST,
    title="Заявление о перерасчете {label} за {period}",
    legal_basis=(
        'Статья 52 НК РФ "Порядок исчисления налога"',
        'Статья 78 НК РФ "Зачет или возврат сумм излишне уплаченного налога"',
        'Статья 81 НК РФ "Внесение изменений в налоговую декларацию"',
    ),
    body=f"""В [ИНСПЕКЦИЯ]

[ЗАЯВИТЕЛЬ]

ЗАЯВЛЕНИЕ
о перерасчете налога

{_CLAIM}

Считаю начисление неверным по следующим основаниям:
[ОСНОВАНИЯ]

[РАСЧЕТ]

Правовое основание:
[ПРАВОВОЕ_ОСНОВАНИЕ]

На основании изложенного, руководствуясь ст. 52 и 78 НК РФ,

ПРОШУ:
1. Произвести перерасчет налога за [ПЕРИОД].
2. Направить уточненное налоговое уведомление.
3. Излишне начисленные и уплаченные суммы вернуть в порядке ст. 78 НК РФ.

Приложения:
- Копия налогового уведомления;
- Расчет налога;
- Подтверждающие документы.

{_SIGNATURE}
""",
)

TAX_TEMPLATES: dict[TaxDocumentType, TaxDocumentTemplate] = {
    template.type: template
    for template in (OBJECTION, COMPLAINT, NOTICE, RECALCULATION_REQUEST)
}


def render_tax_document(
    document_type: TaxDocumentType,
    variables: dict[str, Any],
) -> tuple[str, str, list[str]]:
    """Return ``(title, content, legal_basis)`` for the document type."""
    template = TAX_TEMPLATES[document_type]
    return template.render_title(variables), template.render(variables), list(template.legal_basis)
