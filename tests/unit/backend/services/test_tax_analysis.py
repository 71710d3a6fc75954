"""
Unit Tests for the tax dispute analysis prompt and fallback assessment.
"""

from datetime import date

import pytest

from modules.backend.models.tax import TaxCalculation, TaxDispute
from modules.backend.schemas.tax import TaxAnalysis
from modules.backend.services.tax_analysis import (
    build_analysis_prompt,
    fallback_analysis,
    tax_type_label,
)


def make_dispute(**overrides) -> TaxDispute:
    values = dict(
        tax_type="transport",
        amount=12000.0,
        penalty=350.5,
        fine=0.0,
        total_amount=12350.5,
        period="2023",
        grounds=["Неверная мощность двигателя", "Автомобиль продан в мае"],
        requirement_date=date(2024, 3, 1),
    )
    values.update(overrides)
    return TaxDispute(**values)


def make_calculation(calculated: float = 5250.0) -> TaxCalculation:
    return TaxCalculation(
        calculated_amount=calculated,
        difference=calculated - 12000.0,
        result_data={"tax_rate": 35, "engine_power": 150},
        input_data={"ownership_months": 5},
    )


class TestPrompt:
    def test_includes_requirement_and_grounds(self):
        prompt = build_analysis_prompt(make_dispute())

        assert "Вид налога: Транспортный налог" in prompt
        assert "Начислено налоговой: 12 000 руб." in prompt
        assert "Пени: 350,50 руб." in prompt
        assert "Штрафы" not in prompt
        assert "Дата требования: 01.03.2024" in prompt
        assert "1. Неверная мощность двигателя" in prompt
        assert "2. Автомобиль продан в мае" in prompt
        assert "Правильная сумма" not in prompt

    def test_includes_latest_calculation(self):
        prompt = build_analysis_prompt(make_dispute(), make_calculation())

        assert "Правильная сумма (по расчету): 5 250 руб." in prompt
        assert "Разница: 6 750 руб." in prompt
        assert "Ставка: 35" in prompt
        assert "Период владения: 5 мес." in prompt


class TestFallback:
    @pytest.mark.parametrize(
        "calculation,expected",
        [
            (None, 50),
            (make_calculation(5250.0), 70),
            (make_calculation(11000.0), 50),
        ],
    )
    def test_probability_follows_discrepancy(self, calculation, expected):
        analysis = fallback_analysis(make_dispute(), calculation)

        assert analysis.success_probability == expected

    def test_baseline_content(self):
        analysis = fallback_analysis(make_dispute(tax_type="NDFL"))

        assert "НДФЛ" in analysis.overall_assessment
        assert "2023" in analysis.overall_assessment
        assert analysis.strategy.preferred_approach == "administrative"
        assert analysis.estimated_timeline == "1-3 месяца"
        assert analysis.legal_arguments
        assert analysis.risks


class TestTaxAnalysisSchema:
    @pytest.mark.parametrize(
        "raw,expected",
        [(150, 100), (-5, 0), (64.6, 65), ("80", 80), ("много", 50), (float("nan"), 50)],
    )
    def test_probability_clamped(self, raw, expected):
        analysis = TaxAnalysis(overall_assessment="Оценка", success_probability=raw)

        assert analysis.success_probability == expected

    def test_defaults(self):
        analysis = TaxAnalysis(overall_assessment="Оценка")

        assert analysis.success_probability == 50
        assert analysis.estimated_costs.total_estimated == 0
        assert analysis.strategy.step_by_step_plan == []


def test_unknown_tax_type_label_passes_through():
    assert tax_type_label("land") == "Земельный налог"
    assert tax_type_label("customs") == "customs"
