"""
Document Templates.

Built-in Russian legal document templates. Each template declares the
fields the Mini App form collects, validates submitted values and renders
plain text by substituting ``[PLACEHOLDER]`` markers.
"""

import math
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from modules.backend.models.document import DocumentType

SIGNATURE_LINE = "_________________"
DEFAULT_CITY = "Москва"

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^[\+]?[0-9\s\-\(\)]{10,}$")
_PLACEHOLDER_RE = re.compile(r"\[([A-ZА-ЯЁ0-9_]+)\]")

CURRENCY_TEXT = {"RUB": "рублей", "USD": "долларов США", "EUR": "евро"}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    type: str = "text"
    required: bool = True
    options: tuple[str, ...] = ()
    min_value: float | None = None
    message: str | None = None


@dataclass(frozen=True)
class DocumentTemplate:
    id: DocumentType
    name: str
    description: str
    fields: tuple[FieldSpec, ...]
    body: str
    placeholders: Callable[[dict[str, Any]], dict[str, str]]
    title: Callable[[dict[str, Any]], str]
    extra: Callable[[dict[str, Any]], dict[str, Any]] = field(default=lambda values: {})

    def render(self, values: dict[str, Any]) -> str:
        mapping = self.placeholders(values)
        text = _PLACEHOLDER_RE.sub(lambda m: mapping.get(m.group(1), ""), self.body)
        return re.sub(r"\n\n\n+", "\n\n", text).strip() + "\n"


# =============================================================================
# Helpers
# =============================================================================


def _str(values: dict[str, Any], name: str) -> str:
    value = values.get(name)
    return "" if value is None else str(value).strip()


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [line.strip() for line in value.splitlines() if line.strip()]
    return [str(item).strip() for item in value if str(item).strip()]


def _optional(values: dict[str, Any], name: str, template: str) -> str:
    value = _str(values, name)
    return template.format(value) if value else ""


def format_amount(value: float) -> str:
    """Format money the Russian way: ``1234567.5`` -> ``1 234 567,50``."""
    if float(value).is_integer():
        return f"{int(value):,}".replace(",", " ")
    return f"{value:,.2f}".replace(",", " ").replace(".", ",")


def calculate_state_duty(amount: float) -> float:
    """State duty (госпошлина) for a property claim of ``amount`` roubles."""
    if amount <= 100_000:
        duty = max(amount * 0.04, 400)
    elif amount <= 200_000:
        duty = 4_000 + (amount - 100_000) * 0.03
    elif amount <= 1_000_000:
        duty = 7_000 + (amount - 200_000) * 0.02
    elif amount <= 2_000_000:
        duty = 23_000 + (amount - 1_000_000) * 0.01
    else:
        duty = 33_000 + (amount - 2_000_000) * 0.005
    return round(duty, 2)


# =============================================================================
# Претензия
# =============================================================================

PRETENZIYA_REQUIREMENTS = {
    "возврат": "• потребовать замены на товар этой же марки (этих же модели и (или) артикула);",
    "замена": (
        "• потребовать замены на такой же товар другой марки (модели, артикула) "
        "с соответствующим перерасчетом покупной цены;"
    ),
    "устранение": (
        "• потребовать незамедлительного безвозмездного устранения недостатков товара "
        "или возмещения расходов на их исправление потребителем или третьим лицом;"
    ),
    "снижение_цены": "• потребовать соразмерного уменьшения покупной цены;",
    "возмещение_ущерба": (
        "• потребовать возмещения убытков, причиненных потребителю вследствие продажи "
        "товара ненадлежащего качества;"
    ),
}

PRETENZIYA_BODY = """
ПРЕТЕНЗИЯ

[ПОТРЕБИТЕЛЬ]
[АДРЕС_ПОТРЕБИТЕЛЯ]
[ТЕЛЕФОН_ПОТРЕБИТЕЛЯ]
[EMAIL_ПОТРЕБИТЕЛЯ]

[ПРОДАВЕЦ]
[АДРЕС_ПРОДАВЦА]
[ТЕЛЕФОН_ПРОДАВЦА]

ПРЕТЕНЗИЯ

Я, [ПОТРЕБИТЕЛЬ], [ДАТА_ПОКУПКИ] года приобрел(а) у Вас товар: [НАЗВАНИЕ_ТОВАРА].

Описание товара: [ОПИСАНИЕ_ТОВАРА]
Дата покупки: [ДАТА_ПОКУПКИ]
Цена: [ЦЕНА] рублей
[ГАРАНТИЙНЫЙ_ПЕРИОД]

В процессе использования товара мной был обнаружен следующий недостаток: [ОПИСАНИЕ_НЕДОСТАТКА].

Тип недостатка: [ТИП_НЕДОСТАТКА]

Согласно статье 18 Закона РФ "О защите прав потребителей", при обнаружении недостатков товара потребитель вправе:

[ТРЕБОВАНИЯ]

На основании изложенного, в соответствии со статьями 18, 22, 23 Закона РФ "О защите прав потребителей", требую:

[ДОПОЛНИТЕЛЬНЫЕ_ТРЕБОВАНИЯ]

В случае неудовлетворения моих требований в добровольном порядке в течение [СРОК_ОТВЕТА] дней, я буду вынужден обратиться в суд с исковым заявлением о защите прав потребителей, где буду требовать:

1. Удовлетворения заявленных требований;
2. Возмещения морального вреда;
3. Взыскания неустойки в размере 1% от стоимости товара за каждый день просрочки;
4. Возмещения судебных расходов.

Приложение:
- Копия товарного чека (кассового чека);
- Копия гарантийного талона;
- Фотографии недостатков товара.

[ДАТА] г.                    [ПОДПИСЬ]

[ПОТРЕБИТЕЛЬ]
"""


def _pretenziya(values: dict[str, Any]) -> dict[str, str]:
    requirements = [
        PRETENZIYA_REQUIREMENTS[item]
        for item in _as_list(values.get("requirements"))
        if item in PRETENZIYA_REQUIREMENTS
    ]
    return {
        "ПОТРЕБИТЕЛЬ": _str(values, "consumer_name"),
        "АДРЕС_ПОТРЕБИТЕЛЯ": _str(values, "consumer_address"),
        "ТЕЛЕФОН_ПОТРЕБИТЕЛЯ": _str(values, "consumer_phone"),
        "EMAIL_ПОТРЕБИТЕЛЯ": _str(values, "consumer_email"),
        "ПРОДАВЕЦ": _str(values, "seller_name"),
        "АДРЕС_ПРОДАВЦА": _str(values, "seller_address"),
        "ТЕЛЕФОН_ПРОДАВЦА": _str(values, "seller_phone"),
        "НАЗВАНИЕ_ТОВАРА": _str(values, "product_name"),
        "ОПИСАНИЕ_ТОВАРА": _str(values, "product_description"),
        "ДАТА_ПОКУПКИ": _str(values, "purchase_date"),
        "ЦЕНА": format_amount(float(values.get("purchase_price") or 0)),
        "ГАРАНТИЙНЫЙ_ПЕРИОД": _optional(values, "warranty_period", "Гарантийный период: {}"),
        "ОПИСАНИЕ_НЕДОСТАТКА": _str(values, "defect_description"),
        "ТИП_НЕДОСТАТКА": _str(values, "defect_type"),
        "ТРЕБОВАНИЯ": "\n".join(requirements),
        "ДОПОЛНИТЕЛЬНЫЕ_ТРЕБОВАНИЯ": _str(values, "additional_requirements"),
        "СРОК_ОТВЕТА": _str(values, "response_deadline") or "10",
        "ДАТА": _str(values, "date"),
        "ПОДПИСЬ": SIGNATURE_LINE,
    }


PRETENZIYA = DocumentTemplate(
    id=DocumentType.PRETENZIYA,
    name="Претензия",
    description="Претензия по защите прав потребителей",
    fields=(
        FieldSpec("consumer_name", "Ваше ФИО"),
        FieldSpec("consumer_address", "Ваш адрес", "textarea"),
        FieldSpec("consumer_phone", "Ваш телефон", "phone"),
        FieldSpec("consumer_email", "Ваш email", "email", required=False),
        FieldSpec("seller_name", "Наименование продавца"),
        FieldSpec("seller_address", "Адрес продавца", "textarea"),
        FieldSpec("seller_phone", "Телефон продавца", "phone", required=False),
        FieldSpec("product_name", "Наименование товара"),
        FieldSpec("product_description", "Описание товара", "textarea"),
        FieldSpec("purchase_date", "Дата покупки", "date"),
        FieldSpec(
            "purchase_price", "Цена товара", "number",
            min_value=1, message="Цена должна быть больше 0",
        ),
        FieldSpec("warranty_period", "Гарантийный срок", required=False),
        FieldSpec(
            "defect_type", "Тип недостатка", "select",
            options=("качество", "комплектность", "безопасность", "другое"),
        ),
        FieldSpec("defect_description", "Описание недостатка", "textarea"),
        FieldSpec(
            "requirements", "Ваши требования", "list",
            options=tuple(PRETENZIYA_REQUIREMENTS),
        ),
        FieldSpec("additional_requirements", "Дополнительные требования", "textarea", required=False),
        FieldSpec("response_deadline", "Срок для ответа (дней)", "select", options=("10", "14", "30")),
        FieldSpec("date", "Дата составления", "date"),
    ),
    body=PRETENZIYA_BODY,
    placeholders=_pretenziya,
    title=lambda values: f"Претензия: {_str(values, 'product_name')}",
)


# =============================================================================
# Исковое заявление
# =============================================================================

DISPUTE_TYPE_TEXT = {
    "потребительский": "защите прав потребителей",
    "трудовой": "трудовом споре",
    "жилищный": "жилищном споре",
    "семейный": "семейном споре",
    "гражданский": "гражданском споре",
}

LEGAL_ARTICLES = {
    "потребительский": (
        'статьями 15, 17, 18, 22, 23 Закона РФ "О защите прав потребителей", '
        "статьями 12, 15, 1064 ГК РФ"
    ),
    "трудовой": "статьями 21, 22, 80, 81, 84.1 ТК РФ, статьями 12, 15 ГК РФ",
    "жилищный": "статьями 15, 16, 17, 30, 35 ЖК РФ, статьями 12, 15 ГК РФ",
    "семейный": "статьями 1, 2, 21, 22, 25 СК РФ, статьями 12, 15 ГК РФ",
    "гражданский": "статьями 1, 2, 8, 9, 10 ГК РФ",
}

ISK_BODY = """
ИСКОВОЕ ЗАЯВЛЕНИЕ

В [СУД]

Истец: [ИСТЕЦ]
Адрес: [АДРЕС_ИСТЦА]
Телефон: [ТЕЛЕФОН_ИСТЦА]
[EMAIL_ИСТЦА]

Ответчик: [ОТВЕТЧИК]
Адрес: [АДРЕС_ОТВЕТЧИКА]
[ТЕЛЕФОН_ОТВЕТЧИКА]

Цена иска: [СУММА_СПОРА] рублей
Госпошлина: [ГОСПОШЛИНА] рублей

ИСКОВОЕ ЗАЯВЛЕНИЕ
о [ТИП_СПОРА]

[ОПИСАНИЕ_СПОРА]

ПРАВОВЫЕ ОСНОВАНИЯ:

[ПРАВОВЫЕ_ОСНОВАНИЯ]

НА ОСНОВАНИИ ИЗЛОЖЕННОГО, руководствуясь [СТАТЬИ_ЗАКОНОВ], прошу суд:

[ТРЕБОВАНИЯ]

ПРИЛОЖЕНИЯ:
1. Копия искового заявления для ответчика;
2. Документы, подтверждающие обстоятельства, на которых истец основывает свои требования;
3. [ДОКАЗАТЕЛЬСТВА]
4. Документ, подтверждающий уплату государственной пошлины;
5. Доверенность или иной документ, удостоверяющий полномочия представителя истца.

[ДАТА] г.                    [ПОДПИСЬ]

[ИСТЕЦ]
"""


def _isk(values: dict[str, Any]) -> dict[str, str]:
    amount = float(values.get("dispute_amount") or 0)
    dispute_type = _str(values, "dispute_type")
    claims = _as_list(values.get("claims"))
    return {
        "СУД": _str(values, "court_name"),
        "ИСТЕЦ": _str(values, "plaintiff_name"),
        "АДРЕС_ИСТЦА": _str(values, "plaintiff_address"),
        "ТЕЛЕФОН_ИСТЦА": _str(values, "plaintiff_phone"),
        "EMAIL_ИСТЦА": _optional(values, "plaintiff_email", "Email: {}"),
        "ОТВЕТЧИК": _str(values, "defendant_name"),
        "АДРЕС_ОТВЕТЧИКА": _str(values, "defendant_address"),
        "ТЕЛЕФОН_ОТВЕТЧИКА": _optional(values, "defendant_phone", "Телефон: {}"),
        "СУММА_СПОРА": format_amount(amount),
        "ГОСПОШЛИНА": format_amount(calculate_state_duty(amount)),
        "ТИП_СПОРА": DISPUTE_TYPE_TEXT.get(dispute_type, "гражданском споре"),
        "ОПИСАНИЕ_СПОРА": _str(values, "dispute_description"),
        "ПРАВОВЫЕ_ОСНОВАНИЯ": "\n".join(f"• {item}" for item in _as_list(values.get("legal_basis"))),
        "СТАТЬИ_ЗАКОНОВ": LEGAL_ARTICLES.get(dispute_type, "статьями 12, 15 ГК РФ"),
        "ТРЕБОВАНИЯ": "\n".join(f"{i}. {claim};" for i, claim in enumerate(claims, start=1)),
        "ДОКАЗАТЕЛЬСТВА": "\n".join(f"• {item}" for item in _as_list(values.get("evidence"))),
        "ДАТА": _str(values, "date"),
        "ПОДПИСЬ": SIGNATURE_LINE,
    }


ISK = DocumentTemplate(
    id=DocumentType.ISK,
    name="Исковое заявление",
    description="Исковое заявление в суд общей юрисдикции",
    fields=(
        FieldSpec("court_name", "Наименование суда"),
        FieldSpec("plaintiff_name", "ФИО истца"),
        FieldSpec("plaintiff_address", "Адрес истца", "textarea"),
        FieldSpec("plaintiff_phone", "Телефон истца", "phone"),
        FieldSpec("plaintiff_email", "Email истца", "email", required=False),
        FieldSpec("defendant_name", "Ответчик"),
        FieldSpec("defendant_address", "Адрес ответчика", "textarea"),
        FieldSpec("defendant_phone", "Телефон ответчика", "phone", required=False),
        FieldSpec("dispute_type", "Тип спора", "select", options=tuple(DISPUTE_TYPE_TEXT)),
        FieldSpec("dispute_description", "Обстоятельства дела", "textarea"),
        FieldSpec(
            "dispute_amount", "Цена иска", "number",
            min_value=1, message="Сумма должна быть больше 0",
        ),
        FieldSpec("legal_basis", "Правовые основания", "list"),
        FieldSpec("claims", "Исковые требования", "list"),
        FieldSpec("evidence", "Доказательства", "list", required=False),
        FieldSpec("date", "Дата составления", "date"),
    ),
    body=ISK_BODY,
    placeholders=_isk,
    title=lambda values: f"Исковое заявление: {_str(values, 'defendant_name')}",
    extra=lambda values: {
        "state_duty": calculate_state_duty(float(values.get("dispute_amount") or 0)),
    },
)


# =============================================================================
# Договор
# =============================================================================

CONTRACT_TYPE_TEXT = {
    "купли_продажи": "КУПЛИ-ПРОДАЖИ",
    "оказания_услуг": "ОКАЗАНИЯ УСЛУГ",
    "аренды": "АРЕНДЫ",
    "подряда": "ПОДРЯДА",
    "займа": "ЗАЙМА",
}

CONTRACT_SUBJECT = {
    "купли_продажи": (
        "1.1. Продавец обязуется передать в собственность Покупателя товар: {}, "
        "а Покупатель обязуется принять товар и уплатить за него определенную договором цену."
    ),
    "оказания_услуг": (
        "1.1. Исполнитель обязуется оказать услуги: {}, "
        "а Заказчик обязуется принять и оплатить оказанные услуги."
    ),
    "аренды": (
        "1.1. Арендодатель обязуется предоставить Арендатору во временное владение и пользование: {}, "
        "а Арендатор обязуется своевременно вносить арендную плату."
    ),
    "подряда": (
        "1.1. Подрядчик обязуется выполнить работы: {}, "
        "а Заказчик обязуется принять и оплатить выполненные работы."
    ),
    "займа": (
        "1.1. Займодавец передает в собственность Заемщику денежные средства в размере {}, "
        "а Заемщик обязуется возвратить полученную сумму и уплатить проценты."
    ),
}

_SIGNATURES = """ПОДПИСИ СТОРОН:

Сторона 1:                    Сторона 2:

_________________                              _________________
([ПОДПИСЬ_1])                              ([ПОДПИСЬ_2])

М.П.                                          М.П.
"""

DOGOVOR_BODY = """
ДОГОВОР [ТИП_ДОГОВОРА]

г. [ГОРОД]                                    [ДАТА_ПОДПИСАНИЯ] г.

[СТОРОНА_1], именуемый(ая) в дальнейшем "Сторона 1", с одной стороны, и [СТОРОНА_2], именуемый(ая) в дальнейшем "Сторона 2", с другой стороны, заключили настоящий договор о нижеследующем:

1. ПРЕДМЕТ ДОГОВОРА

[ПРЕДМЕТ_ДОГОВОРА]

[ОПИСАНИЕ]

2. ЦЕНА И ПОРЯДОК РАСЧЕТОВ

2.1. Стоимость [ПРЕДМЕТ] составляет [ЦЕНА].

2.2. [УСЛОВИЯ_ОПЛАТЫ]

[УСЛОВИЯ_ПОСТАВКИ]

3. СРОКИ ВЫПОЛНЕНИЯ

3.1. Договор вступает в силу с [ДАТА_НАЧАЛА].

[ДАТА_ОКОНЧАНИЯ]

4. ОТВЕТСТВЕННОСТЬ СТОРОН

4.1. За неисполнение или ненадлежащее исполнение обязательств по настоящему договору стороны несут ответственность в соответствии с действующим законодательством РФ.

[ШТРАФНЫЕ_САНКЦИИ]

5. ЗАКЛЮЧИТЕЛЬНЫЕ ПОЛОЖЕНИЯ

5.1. Все споры и разногласия решаются путем переговоров, а при недостижении согласия - в судебном порядке.

5.2. Настоящий договор составлен в двух экземплярах, имеющих одинаковую юридическую силу, по одному для каждой стороны.

[ДОПОЛНИТЕЛЬНЫЕ_УСЛОВИЯ]

[УСЛОВИЯ_РАСТОРЖЕНИЯ]

""" + _SIGNATURES


def _parties(values: dict[str, Any]) -> dict[str, str]:
    return {
        "ГОРОД": _str(values, "city") or DEFAULT_CITY,
        "ДАТА_ПОДПИСАНИЯ": _str(values, "signing_date"),
        "СТОРОНА_1": _str(values, "party1_name"),
        "СТОРОНА_2": _str(values, "party2_name"),
        "ОПИСАНИЕ": _str(values, "description"),
        "ШТРАФНЫЕ_САНКЦИИ": _optional(values, "penalties", "4.2. {}"),
        "ДОПОЛНИТЕЛЬНЫЕ_УСЛОВИЯ": _optional(values, "additional_terms", "5.3. {}"),
        "УСЛОВИЯ_РАСТОРЖЕНИЯ": _optional(values, "termination_conditions", "5.4. {}"),
        "ПОДПИСЬ_1": _str(values, "party1_name"),
        "ПОДПИСЬ_2": _str(values, "party2_name"),
    }


def _dogovor(values: dict[str, Any]) -> dict[str, str]:
    contract_type = _str(values, "contract_type")
    subject = _str(values, "subject")
    currency = CURRENCY_TEXT.get(_str(values, "currency") or "RUB", "рублей")
    return {
        **_parties(values),
        "ТИП_ДОГОВОРА": CONTRACT_TYPE_TEXT.get(contract_type, "ОКАЗАНИЯ УСЛУГ"),
        "ПРЕДМЕТ_ДОГОВОРА": CONTRACT_SUBJECT.get(
            contract_type, "1.1. Предметом договора является: {}."
        ).format(subject),
        "ПРЕДМЕТ": subject.lower(),
        "ЦЕНА": f"{format_amount(float(values.get('price') or 0))} {currency}",
        "УСЛОВИЯ_ОПЛАТЫ": _str(values, "payment_terms"),
        "УСЛОВИЯ_ПОСТАВКИ": _optional(values, "delivery_terms", "2.3. {}"),
        "ДАТА_НАЧАЛА": _str(values, "start_date"),
        "ДАТА_ОКОНЧАНИЯ": _optional(values, "end_date", "3.2. Договор действует до {}."),
    }


_PARTY_FIELDS = (
    FieldSpec("party1_name", "Сторона 1 (ФИО или наименование)"),
    FieldSpec("party1_address", "Адрес стороны 1", "textarea"),
    FieldSpec("party1_phone", "Телефон стороны 1", "phone"),
    FieldSpec("party2_name", "Сторона 2 (ФИО или наименование)"),
    FieldSpec("party2_address", "Адрес стороны 2", "textarea"),
    FieldSpec("party2_phone", "Телефон стороны 2", "phone"),
)

_CLOSING_FIELDS = (
    FieldSpec("penalties", "Штрафные санкции", "textarea", required=False),
    FieldSpec("additional_terms", "Дополнительные условия", "textarea", required=False),
    FieldSpec("termination_conditions", "Условия расторжения", "textarea", required=False),
    FieldSpec("city", "Город", required=False),
    FieldSpec("signing_date", "Дата подписания", "date"),
)

DOGOVOR = DocumentTemplate(
    id=DocumentType.DOGOVOR,
    name="Договор",
    description="Договор купли-продажи, оказания услуг, аренды, подряда или займа",
    fields=(
        FieldSpec("contract_type", "Тип договора", "select", options=tuple(CONTRACT_TYPE_TEXT)),
        *_PARTY_FIELDS,
        FieldSpec("subject", "Предмет договора"),
        FieldSpec("description", "Описание", "textarea"),
        FieldSpec(
            "price", "Стоимость", "number",
            min_value=0, message="Стоимость не может быть отрицательной",
        ),
        FieldSpec("currency", "Валюта", "select", required=False, options=tuple(CURRENCY_TEXT)),
        FieldSpec("payment_terms", "Порядок оплаты", "textarea"),
        FieldSpec("delivery_terms", "Условия поставки", "textarea", required=False),
        FieldSpec("start_date", "Дата начала", "date"),
        FieldSpec("end_date", "Дата окончания", "date", required=False),
        *_CLOSING_FIELDS,
    ),
    body=DOGOVOR_BODY,
    placeholders=_dogovor,
    title=lambda values: (
        f"Договор {CONTRACT_TYPE_TEXT.get(_str(values, 'contract_type'), 'ОКАЗАНИЯ УСЛУГ').lower()}"
    ),
)


# =============================================================================
# Соглашение
# =============================================================================

AGREEMENT_TYPE_TEXT = {
    "мировое": "МИРОВОЕ",
    "о_разделе_имущества": "О РАЗДЕЛЕ ИМУЩЕСТВА",
    "об_алиментах": "ОБ АЛИМЕНТАХ",
    "о_расторжении_договора": "О РАСТОРЖЕНИИ ДОГОВОРА",
    "о_возмещении_ущерба": "О ВОЗМЕЩЕНИИ УЩЕРБА",
}

AGREEMENT_SUBJECT = {
    "мировое": "1.1. Стороны пришли к соглашению об урегулировании спора по вопросу: {}.",
    "о_разделе_имущества": "1.1. Стороны пришли к соглашению о разделе совместно нажитого имущества: {}.",
    "об_алиментах": "1.1. Стороны пришли к соглашению об уплате алиментов на содержание: {}.",
    "о_расторжении_договора": "1.1. Стороны пришли к соглашению о расторжении договора: {}.",
    "о_возмещении_ущерба": "1.1. Стороны пришли к соглашению о возмещении ущерба: {}.",
}

SOGLASHENIE_BODY = """
СОГЛАШЕНИЕ [ТИП_СОГЛАШЕНИЯ]

г. [ГОРОД]                                    [ДАТА_ПОДПИСАНИЯ] г.

[СТОРОНА_1], именуемый(ая) в дальнейшем "Сторона 1", с одной стороны, и [СТОРОНА_2], именуемый(ая) в дальнейшем "Сторона 2", с другой стороны, заключили настоящее соглашение о нижеследующем:

1. ПРЕДМЕТ СОГЛАШЕНИЯ

[ПРЕДМЕТ_СОГЛАШЕНИЯ]

[ОПИСАНИЕ]

2. УСЛОВИЯ СОГЛАШЕНИЯ

[УСЛОВИЯ]

[СУММА_И_ПЛАТЕЖИ]

3. СРОКИ ДЕЙСТВИЯ

3.1. Соглашение вступает в силу с [ДАТА_НАЧАЛА].

[ДАТА_ОКОНЧАНИЯ]

4. ОТВЕТСТВЕННОСТЬ СТОРОН

4.1. Стороны несут ответственность за неисполнение или ненадлежащее исполнение обязательств по настоящему соглашению в соответствии с действующим законодательством РФ.

[ШТРАФНЫЕ_САНКЦИИ]

5. ЗАКЛЮЧИТЕЛЬНЫЕ ПОЛОЖЕНИЯ

5.1. Все споры и разногласия решаются путем переговоров, а при недостижении согласия - в судебном порядке.

5.2. Настоящее соглашение составлено в двух экземплярах, имеющих одинаковую юридическую силу, по одному для каждой стороны.

[ДОПОЛНИТЕЛЬНЫЕ_УСЛОВИЯ]

[УСЛОВИЯ_РАСТОРЖЕНИЯ]

""" + _SIGNATURES


def _soglashenie(values: dict[str, Any]) -> dict[str, str]:
    agreement_type = _str(values, "agreement_type")
    terms = _as_list(values.get("terms"))

    amount_text = ""
    if values.get("amount"):
        currency = CURRENCY_TEXT.get(_str(values, "currency") or "RUB", "рублей")
        amount_text = (
            f"2.1. Сумма соглашения составляет {format_amount(float(values['amount']))} {currency}."
        )
        if _str(values, "payment_schedule"):
            amount_text += f"\n2.2. {_str(values, 'payment_schedule')}"

    return {
        **_parties(values),
        "ТИП_СОГЛАШЕНИЯ": AGREEMENT_TYPE_TEXT.get(agreement_type, "МИРОВОЕ"),
        "ПРЕДМЕТ_СОГЛАШЕНИЯ": AGREEMENT_SUBJECT.get(
            agreement_type, "1.1. Предметом соглашения является: {}."
        ).format(_str(values, "subject")),
        "УСЛОВИЯ": "\n".join(f"{i}. {term};" for i, term in enumerate(terms, start=1)),
        "СУММА_И_ПЛАТЕЖИ": amount_text,
        "ДАТА_НАЧАЛА": _str(values, "start_date"),
        "ДАТА_ОКОНЧАНИЯ": _optional(values, "end_date", "3.2. Соглашение действует до {}."),
    }


SOGLASHENIE = DocumentTemplate(
    id=DocumentType.SOGLASHENIE,
    name="Соглашение",
    description="Мировое соглашение, соглашение о разделе имущества, алиментах и др.",
    fields=(
        FieldSpec("agreement_type", "Тип соглашения", "select", options=tuple(AGREEMENT_TYPE_TEXT)),
        *_PARTY_FIELDS,
        FieldSpec("subject", "Предмет соглашения"),
        FieldSpec("description", "Описание", "textarea"),
        FieldSpec("terms", "Условия соглашения", "list"),
        FieldSpec("amount", "Сумма", "number", required=False, min_value=0),
        FieldSpec("currency", "Валюта", "select", required=False, options=tuple(CURRENCY_TEXT)),
        FieldSpec("payment_schedule", "График платежей", "textarea", required=False),
        FieldSpec("start_date", "Дата начала", "date"),
        FieldSpec("end_date", "Дата окончания", "date", required=False),
        *_CLOSING_FIELDS,
    ),
    body=SOGLASHENIE_BODY,
    placeholders=_soglashenie,
    title=lambda values: (
        f"Соглашение {AGREEMENT_TYPE_TEXT.get(_str(values, 'agreement_type'), 'МИРОВОЕ').lower()}"
    ),
)


TEMPLATES: dict[DocumentType, DocumentTemplate] = {
    template.id: template for template in (PRETENZIYA, ISK, DOGOVOR, SOGLASHENIE)
}


# =============================================================================
# Validation
# =============================================================================


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple)):
        return not _as_list(value)
    return str(value).strip() == ""


def validate_fields(template: DocumentTemplate, values: dict[str, Any]) -> list[str]:
    """Return human-readable errors for the submitted values (empty when valid)."""
    errors: list[str] = []
    for spec in template.fields:
        value = values.get(spec.name)
        if _is_blank(value):
            if spec.required:
                errors.append(f'Поле "{spec.label}" обязательно для заполнения')
            continue

        if spec.type == "number":
            try:
                number = float(value)
            except (TypeError, ValueError):
                number = math.nan
            if not math.isfinite(number):
                errors.append(f'Поле "{spec.label}" должно содержать число')
                continue
            if spec.min_value is not None and number < spec.min_value:
                errors.append(
                    spec.message or f'Поле "{spec.label}" должно быть не менее {spec.min_value:g}'
                )
        elif spec.type == "email" and not _EMAIL_RE.match(str(value)):
            errors.append(f'Поле "{spec.label}" должно содержать корректный email')
        elif spec.type == "phone" and not _PHONE_RE.match(str(value)):
            errors.append(f'Поле "{spec.label}" должно содержать корректный номер телефона')
        elif spec.type == "select" and spec.options and str(value) not in spec.options:
            errors.append(f'Поле "{spec.label}" содержит недопустимое значение')
        elif spec.type == "list" and spec.options:
            unknown = [item for item in _as_list(value) if item not in spec.options]
            if unknown:
                errors.append(f'Поле "{spec.label}" содержит недопустимые значения: {", ".join(unknown)}')
    return errors
