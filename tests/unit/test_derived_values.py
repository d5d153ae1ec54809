"""Tests for the derived value engine and home loan arithmetic."""

from __future__ import annotations

from typing import Any

import pytest

from formflow.derived import (
    DerivedValueEngine,
    ResetRule,
    clamp_numeric_entry,
    compute_loan_snapshot,
    create_loan_engine,
    format_currency,
    js_round,
)
from formflow.derived.loan import select_rate
from formflow.forms.loan_calculator import DEFAULTS, calculator_schema
from formflow.validation import FormSession


def _record(**overrides: Any) -> dict[str, Any]:
    return {**DEFAULTS, **overrides}


class TestClampNumericEntry:
    @pytest.mark.parametrize(
        ("raw", "minimum", "maximum", "expected"),
        [
            ("$12,500", 0, 10000, 10000),
            ("12,500", 0, None, 12500),
            ("abc", 1, 30, 1),
            ("", 0, 600000, 0),
            (None, 30000, None, 30000),
            ("45 years", 1, 30, 30),
            ("-5", 1, 30, 5),
            (17, 1, 30, 17),
        ],
    )
    def test_clamp(self, raw: Any, minimum: int, maximum: int | None, expected: int) -> None:
        assert clamp_numeric_entry(raw, minimum, maximum) == expected


class TestLoanSnapshot:
    def test_reference_example(self) -> None:
        snapshot = compute_loan_snapshot(
            _record(property_price=500000, deposit=100000, term=30, fixed_term="6")
        )
        assert snapshot["loan_amount"] == 400000
        assert snapshot["selected_rate"] == 5.29
        assert snapshot["total_interest"] == 634800
        assert snapshot["deposit_percentage"] == 20.0

    def test_over_deposit_floors_at_zero(self) -> None:
        snapshot = compute_loan_snapshot(_record(property_price=600000, deposit=700000))
        assert snapshot["loan_amount"] == 0
        assert snapshot["total_interest"] == 0

    def test_custom_rate(self) -> None:
        snapshot = compute_loan_snapshot(
            _record(property_price=500000, deposit=100000, term=10, rate_type="custom", custom_rate="5")
        )
        assert snapshot["selected_rate"] == 5.0
        assert snapshot["total_interest"] == 200000

    def test_unparsable_custom_rate_is_zero(self) -> None:
        snapshot = compute_loan_snapshot(_record(rate_type="custom", custom_rate="abc"))
        assert snapshot["selected_rate"] == 0
        assert snapshot["total_interest"] == 0

    def test_zero_price_percentage(self) -> None:
        snapshot = compute_loan_snapshot(_record(property_price=0, deposit=0))
        assert snapshot["deposit_percentage"] == 0.0

    def test_percentage_rounds_half_up(self) -> None:
        # 6.25% rounds half up to one decimal
        assert compute_loan_snapshot(_record(property_price=160000, deposit=10000))[
            "deposit_percentage"
        ] == 6.3


class TestSelectRate:
    @pytest.mark.parametrize(
        ("fixed_term", "expected"),
        [("6", 5.29), ("12", 4.89), ("60", 5.59), (36, 5.09)],
    )
    def test_fixed_terms(self, fixed_term: Any, expected: float) -> None:
        assert select_rate("fixed", fixed_term, "") == expected

    def test_unknown_term_falls_back_to_shortest(self) -> None:
        assert select_rate("fixed", "7", "") == 5.29
        assert select_rate("fixed", "", "") == 5.29


class TestFormatting:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(600000, "$600,000"), (0, "$0"), (-1000, "-$1,000"), (1234.5, "$1,235")],
    )
    def test_format_currency(self, value: float, expected: str) -> None:
        assert format_currency(value) == expected

    def test_js_round(self) -> None:
        assert js_round(2.5) == 3
        assert js_round(-2.5) == -2
        assert js_round(2.4) == 2


class TestDerivedValueEngine:
    def test_recompute_is_pure(self) -> None:
        engine = create_loan_engine()
        record = _record(property_price=500000, deposit=100000)
        first = engine.recompute(record)
        second = engine.recompute(dict(record))
        assert first == second
        assert record == _record(property_price=500000, deposit=100000)

    def test_price_change_resets_deposit(self) -> None:
        engine = create_loan_engine()
        record, snapshot = engine.apply_change(
            _record(property_price=600000, deposit=550000), "property_price", 700000
        )
        assert record["deposit"] == 0
        assert snapshot["loan_amount"] == 700000

    def test_same_price_keeps_deposit(self) -> None:
        engine = create_loan_engine()
        record, _ = engine.apply_change(_record(deposit=550000), "property_price", 600000)
        assert record["deposit"] == 550000

    def test_other_changes_do_not_reset(self) -> None:
        engine = create_loan_engine()
        record, snapshot = engine.apply_change(_record(deposit=100000), "term", 10)
        assert record["deposit"] == 100000
        assert snapshot["loan_amount"] == 500000

    def test_custom_reset_value(self) -> None:
        engine = DerivedValueEngine(
            inputs=["a"],
            compute=lambda r: {"double": float(r["a"]) * 2},
            resets=[ResetRule(trigger="a", target="b", value=5)],
        )
        assert engine.resets_for("a", 1, 2) == {"b": 5}
        assert engine.resets_for("a", 2, 2) == {}
        assert engine.resets_for("c", 1, 2) == {}


class TestSessionBinding:
    def test_bind_computes_immediately(self) -> None:
        session = FormSession(calculator_schema())
        engine = create_loan_engine()
        engine.bind(session)
        assert engine.snapshot["loan_amount"] == 50000

    def test_snapshot_never_lags_change(self) -> None:
        session = FormSession(calculator_schema())
        engine = create_loan_engine()
        engine.bind(session)
        session.change("deposit", 100000)
        assert engine.snapshot["loan_amount"] == 500000

    def test_price_change_resets_session_deposit(self) -> None:
        session = FormSession(calculator_schema())
        engine = create_loan_engine()
        engine.bind(session)
        session.change("property_price", 800000)
        assert session.value("deposit") == 0
        assert engine.snapshot["loan_amount"] == 800000
        assert engine.snapshot["deposit_percentage"] == 0.0

    def test_unbind(self) -> None:
        session = FormSession(calculator_schema())
        engine = create_loan_engine()
        unbind = engine.bind(session)
        unbind()
        session.change("deposit", 0)
        assert engine.snapshot["loan_amount"] == 50000

    def test_unwatched_field_ignored(self) -> None:
        session = FormSession(calculator_schema())
        engine = create_loan_engine()
        engine.bind(session)
        before = engine.snapshot
        session.change("purpose", "investment")
        assert engine.snapshot is before
