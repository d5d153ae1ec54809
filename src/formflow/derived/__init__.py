"""Derived values: reactive recomputation and the home loan arithmetic."""

from __future__ import annotations

from formflow.derived.engine import (
    DerivedSnapshot,
    DerivedValueEngine,
    ResetRule,
    clamp_numeric_entry,
)
from formflow.derived.loan import (
    FIXED_TERMS,
    compute_loan_snapshot,
    create_loan_engine,
    format_currency,
    js_round,
)

__all__ = [
    "DerivedSnapshot",
    "DerivedValueEngine",
    "FIXED_TERMS",
    "ResetRule",
    "clamp_numeric_entry",
    "compute_loan_snapshot",
    "create_loan_engine",
    "format_currency",
    "js_round",
]
