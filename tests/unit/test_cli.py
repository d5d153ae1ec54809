"""Tests for the formflow command line."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from formflow.cli import app

runner = CliRunner()


class TestVersion:
    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "formflow" in result.output


class TestCalculate:
    def test_reference_figures(self) -> None:
        result = runner.invoke(
            app, ["calculate", "--property-price", "500000", "--deposit", "100000"]
        )
        assert result.exit_code == 0
        assert "$400,000" in result.output
        assert "5.29% p.a." in result.output
        assert "$634,800" in result.output
        assert "20.0%" in result.output

    def test_custom_rate(self) -> None:
        result = runner.invoke(
            app,
            [
                "calculate",
                "--property-price",
                "500000",
                "--deposit",
                "100000",
                "--term",
                "10",
                "--custom-rate",
                "5",
            ],
        )
        assert result.exit_code == 0
        assert "$200,000" in result.output

    def test_price_below_minimum(self) -> None:
        result = runner.invoke(app, ["calculate", "--property-price", "1000"])
        assert result.exit_code == 2

    def test_unknown_fixed_term(self) -> None:
        result = runner.invoke(
            app, ["calculate", "--property-price", "500000", "--fixed-term", "7"]
        )
        assert result.exit_code == 2


class TestValidate:
    def test_valid_record(self, tmp_path: Path) -> None:
        path = tmp_path / "loan.json"
        path.write_text(
            json.dumps(
                {
                    "loan_purpose": "buying-first-home",
                    "borrow_amount": 500000,
                    "deposit_amount": 100000,
                    "annual_income": 90000,
                }
            )
        )
        result = runner.invoke(app, ["validate", "enquiry-loan", str(path)])
        assert result.exit_code == 0
        assert "OK" in result.output

    def test_invalid_record(self, tmp_path: Path) -> None:
        path = tmp_path / "loan.json"
        path.write_text(json.dumps({"loan_purpose": "boat"}))
        result = runner.invoke(app, ["validate", "enquiry-loan", str(path)])
        assert result.exit_code == 1

    def test_unknown_form(self, tmp_path: Path) -> None:
        path = tmp_path / "record.json"
        path.write_text("{}")
        result = runner.invoke(app, ["validate", "nope", str(path)])
        assert result.exit_code == 2

    def test_not_json(self, tmp_path: Path) -> None:
        path = tmp_path / "record.json"
        path.write_text("not json")
        result = runner.invoke(app, ["validate", "applicant-details", str(path)])
        assert result.exit_code == 2
