"""
Tests for statutory deductions and income recognition.
"""

import pytest
from mortgagelab.calculators.income import (
    INCOME_TYPES,
    recognize_income,
    statutory_deductions,
)
from mortgagelab.core.handbook import load_handbook


class TestStatutoryDeductions:
    def test_mid_salary(self):
        d = statutory_deductions(5_000)

        assert d.epf == 550.0
        assert d.socso == 25.0
        assert d.pcb == 75.0
        assert d.total == 650.0

    def test_child_relief(self):
        assert statutory_deductions(5_000, children=2).pcb == 69.0
        # Relief is capped at five children
        assert statutory_deductions(5_000, children=9).pcb == statutory_deductions(
            5_000, children=5
        ).pcb

    def test_high_salary_bands_and_socso_cap(self):
        d = statutory_deductions(20_000)

        assert d.socso == 80.0
        assert d.pcb == pytest.approx((20_000 - 2_500) * 0.15)

    def test_eight_percent_band(self):
        assert statutory_deductions(8_000).pcb == pytest.approx(5_500 * 0.08)

    def test_zero_salary(self):
        assert statutory_deductions(None).total == 0.0


class TestRecognizeIncome:
    def test_default_haircuts(self):
        result = recognize_income(
            {"basicSalary": 5_000, "commission": 1_000, "other": 500}
        )
        by_type = {row.income_type: row for row in result.rows}

        assert [row.income_type for row in result.rows] == list(INCOME_TYPES)
        assert by_type["basicSalary"].statutory_deduction == 650.0
        assert by_type["basicSalary"].net_recognized == 4_350.0
        assert by_type["commission"].net_recognized == 800.0
        assert by_type["other"].net_recognized == 150.0
        assert result.total_raw == 6_500.0
        assert result.total_recognized == 5_300.0

    def test_manual_overrides(self):
        result = recognize_income(
            {"basicSalary": 5_000, "commission": 1_000},
            haircut_overrides={"commission": 1.0},
            statutory_override=0,
        )
        by_type = {row.income_type: row for row in result.rows}

        assert by_type["commission"].net_recognized == 1_000.0
        assert by_type["commission"].manual_haircut
        assert by_type["basicSalary"].net_recognized == 5_000.0
        assert by_type["basicSalary"].manual_statutory

    def test_handbook_haircuts(self):
        handbook = load_handbook({"incomeMatrix": {"rental": {"haircut": 0.5}}})
        result = recognize_income({"rental": 2_000}, handbook)

        assert result.total_recognized == 1_000.0

    def test_unknown_type_counts_in_full(self):
        result = recognize_income({"dividends": 300})

        assert result.rows[-1].income_type == "dividends"
        assert result.total_recognized == 300.0

    def test_loose_amounts(self):
        result = recognize_income({"bonus": "1,000", "commission": "abc"})
        assert result.total_recognized == 700.0
