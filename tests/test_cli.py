"""
Tests for the command-line interface.
"""

import json

import pytest
from mortgagelab.cli import main


def _run(capsys, *argv):
    with pytest.raises(SystemExit) as exc:
        main(list(argv))
    out, err = capsys.readouterr()
    return exc.value.code, out, err


class TestCLI:
    def test_installment(self, capsys):
        code, out, _ = _run(
            capsys, "installment", "--principal", "450000", "--rate", "4.1", "--years", "35"
        )

        assert code == 0
        assert 2019.0 < json.loads(out)["installment"] < 2021.0

    def test_entry_costs(self, capsys):
        code, out, _ = _run(capsys, "entry-costs", "--price", "600000", "--loan", "540000")

        assert code == 0
        assert json.loads(out) == {
            "legal_fee": 5800.0,
            "mot_stamp_duty": 12000.0,
            "loan_stamp_duty": 2700.0,
            "total": 20500.0,
        }

    def test_dsr(self, capsys):
        code, out, _ = _run(
            capsys, "dsr", "--commitment", "3000", "--income", "5000", "--baseline", "1500"
        )
        data = json.loads(out)

        assert code == 0
        assert data["band"] == "YELLOW"
        assert data["net_disposable_income"] == 2000.0
        assert data["gap"] == {"extra_income_needed": 0.0, "debt_clearance_needed": 0.0}
        assert [b["decision"] for b in data["banks"]] == ["TIER_1", "TIER_1"]

    def test_dsr_with_handbook(self, capsys, tmp_path):
        path = tmp_path / "handbook.yaml"
        path.write_text("bankStrategies:\n  defaultDsrLimit: 0.5\n", encoding="utf-8")

        code, out, _ = _run(
            capsys, "dsr", "--commitment", "2750", "--income", "5000", "--handbook", str(path)
        )
        data = json.loads(out)

        assert code == 0
        assert data["band"] == "YELLOW"
        assert [b["decision"] for b in data["banks"]] == ["TIER_1", "TIER_1"]

    def test_bad_handbook_reports_error(self, capsys, tmp_path):
        path = tmp_path / "handbook.yaml"
        path.write_text("- not\n- a mapping\n", encoding="utf-8")

        code, out, err = _run(
            capsys, "dsr", "--commitment", "1", "--income", "2", "--handbook", str(path)
        )

        assert code == 1
        assert out == ""
        assert err.startswith("Error assessing affordability:")

    def test_schedule_annual_to_file(self, capsys, tmp_path):
        target = tmp_path / "schedule.json"
        code, out, _ = _run(
            capsys,
            "schedule",
            "--principal", "12000",
            "--rate", "3",
            "--years", "1",
            "--start", "2026-01-01",
            "--annual",
            "-o", str(target),
        )
        data = json.loads(target.read_text(encoding="utf-8"))

        assert code == 0
        assert "Schedule saved" in out
        assert [row["year"] for row in data["rows"]] == [2026, 2027]
        assert data["totals"]["periods"] == 12
        assert data["totals"]["payoff_date"] == "2027-01-01"

    def test_schedule_rejects_invalid_terms(self, capsys):
        code, _, err = _run(
            capsys, "schedule", "--principal", "0", "--rate", "3", "--years", "1"
        )

        assert code == 1
        assert "Error building schedule" in err

    def test_income(self, capsys):
        code, out, _ = _run(
            capsys, "income", "--income", "basicSalary=5000", "--income", "commission=1000"
        )

        assert code == 0
        assert json.loads(out)["total_recognized"] == 5150.0

    def test_reverse(self, capsys):
        code, out, _ = _run(
            capsys, "reverse", "--payment", "2000", "--rate", "0", "--years", "10",
            "--margin", "0.8",
        )

        assert code == 0
        assert json.loads(out) == {
            "max_loan_amount": 240000.0,
            "max_property_price": 300000.0,
            "implied_dsr": 0.6,
        }

    def test_flexi(self, capsys):
        code, out, _ = _run(
            capsys,
            "flexi",
            "--principal", "450000",
            "--rate", "4.1",
            "--years", "35",
            "--start", "2026-01-01",
            "--type", "full-flexi",
            "--advance", "2026-02-01:50000",
            "--events",
        )
        data = json.loads(out)

        assert code == 0
        assert data["summary"]["interest_savings"] > 0
        assert data["summary"]["truncated"] is True
        assert "smart_logic_trigger" in {e["kind"] for e in data["events"]}

    def test_flexi_principal_repayment(self, capsys):
        code, out, _ = _run(
            capsys,
            "flexi",
            "--principal", "450000",
            "--rate", "4.1",
            "--years", "35",
            "--start", "2026-01-01",
            "--type", "full-flexi",
            "--advance", "2026-02-01:50000",
            "--method", "principal-repayment",
            "--events",
        )
        data = json.loads(out)
        kinds = {e["kind"] for e in data["events"]}

        assert code == 0
        assert "smart_logic_trigger" not in kinds
        assert data["events"][0]["payment_method"] == "principal-repayment"

    def test_flexi_rejects_unknown_method(self, capsys):
        code, _, err = _run(
            capsys,
            "flexi", "--principal", "1000", "--rate", "4", "--years", "1",
            "--method", "cheque",
        )

        assert code == 2
        assert "--method" in err

    def test_flexi_rejects_bad_advance(self, capsys):
        code, _, err = _run(
            capsys,
            "flexi", "--principal", "1000", "--rate", "4", "--years", "1",
            "--advance", "tomorrow",
        )

        assert code == 2
        assert "YYYY-MM-DD:AMOUNT" in err

    def test_example(self, capsys):
        code, out, _ = _run(capsys, "example")
        data = json.loads(out)

        assert code == 0
        assert data["incomeMatrix"]["commission"] == {"haircut": 0.8}
        assert data["global"] == {"maxTenure": 35, "maxAge": 70}

    def test_version(self, capsys):
        code, out, _ = _run(capsys, "--version")

        assert code == 0
        assert out.strip() == "MortgageLab 0.1.0"
