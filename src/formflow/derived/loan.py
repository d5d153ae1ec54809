"""
Home loan arithmetic.

Pure functions over a calculator record: loan amount, selected rate,
total interest and deposit percentage, plus the currency formatting used
wherever these figures are displayed.
"""

from __future__ import annotations

import math
from typing import Any

from formflow.derived.engine import DerivedValueEngine, ResetRule

# Fixed-term rates, months -> % per annum
FIXED_TERMS: dict[int, float] = {
    6: 5.29,
    12: 4.89,
    18: 4.89,
    24: 4.95,
    36: 5.09,
    48: 5.49,
    60: 5.59,
}

PROPERTY_MIN = 30000
DEPOSIT_MIN = 0
TERM_MIN = 1
TERM_MAX = 30

LOAN_INPUTS = ["property_price", "deposit", "term", "rate_type", "fixed_term", "custom_rate"]


def js_round(value: float) -> int:
    """Round half up, e.g. ``js_round(2.5) == 3`` and ``js_round(-2.5) == -2``."""
    return math.floor(value + 0.5)


def _as_number(value: Any, default: float = 0) -> float:
    """Read a number the lenient way: blank or unparsable gives ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if text == "":
            return default
        try:
            number = float(text)
        except ValueError:
            return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def shortest_term_rate() -> float:
    return FIXED_TERMS[min(FIXED_TERMS)]


def select_rate(rate_type: Any, fixed_term: Any, custom_rate: Any) -> float:
    """
    Rate in % per annum.

    A custom rate is used as typed (0 if it does not parse). Otherwise the
    fixed-term table is consulted, falling back to the shortest term's
    rate when the term is not in the table.
    """
    if rate_type == "custom":
        return _as_number(custom_rate)
    term = _as_number(fixed_term, default=-1)
    if term.is_integer() and int(term) in FIXED_TERMS:
        return FIXED_TERMS[int(term)]
    return shortest_term_rate()


def compute_loan_snapshot(record: dict[str, Any]) -> dict[str, float]:
    """Loan amount, selected rate, total interest and deposit percentage."""
    price = _as_number(record.get("property_price"))
    deposit = _as_number(record.get("deposit"))
    term = _as_number(record.get("term"))

    loan_amount = max(price - deposit, 0)
    rate = select_rate(record.get("rate_type"), record.get("fixed_term"), record.get("custom_rate"))
    total_interest = js_round(loan_amount * (rate / 100) * term) if loan_amount > 0 else 0
    deposit_percentage = js_round(deposit / price * 1000) / 10 if price else 0.0

    return {
        "loan_amount": loan_amount,
        "selected_rate": rate,
        "total_interest": total_interest,
        "deposit_percentage": deposit_percentage,
    }


def create_loan_engine() -> DerivedValueEngine:
    """Engine for the home loan calculator: deposit resets on a new price."""
    return DerivedValueEngine(
        inputs=LOAN_INPUTS,
        compute=compute_loan_snapshot,
        resets=[ResetRule(trigger="property_price", target="deposit", value=DEPOSIT_MIN)],
    )


def format_currency(value: float) -> str:
    """Whole US dollars, e.g. ``$600,000`` or ``-$1,000``."""
    amount = js_round(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,}"
