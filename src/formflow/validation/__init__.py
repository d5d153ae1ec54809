"""
Validation for formflow.

ValidationEngine evaluates a FormSchema against a FormRecord and returns
data, never raising. FormSession applies the blur/change/submit timing on
top of it.
"""

from __future__ import annotations

from formflow.validation.engine import ValidationEngine
from formflow.validation.rules import age_on, is_empty, normalize_value
from formflow.validation.session import FormSession

__all__ = [
    "FormSession",
    "ValidationEngine",
    "age_on",
    "is_empty",
    "normalize_value",
]
