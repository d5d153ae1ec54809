"""
Data specifications for formflow.

Pydantic models describing fields, schemas, rules and validation outcomes.
"""

from __future__ import annotations

from formflow.specs.fields import (
    ChoiceOption,
    FieldDescriptor,
    FieldKind,
    FormSchema,
    check_unique_options,
)
from formflow.specs.rules import (
    AcceptedRule,
    EmailRule,
    LengthRule,
    MinimumAgeRule,
    NumericRangeRule,
    OneOfRule,
    PatternRule,
    RefinementSpec,
    RequiredRule,
    RuleSpec,
    required_when_equals,
    required_when_selected,
)
from formflow.specs.validation import (
    ErrorKind,
    ErrorSummary,
    ValidationError,
    ValidationResult,
)

__all__ = [
    # Fields
    "ChoiceOption",
    "FieldDescriptor",
    "FieldKind",
    "FormSchema",
    "check_unique_options",
    # Rules
    "AcceptedRule",
    "EmailRule",
    "LengthRule",
    "MinimumAgeRule",
    "NumericRangeRule",
    "OneOfRule",
    "PatternRule",
    "RefinementSpec",
    "RequiredRule",
    "RuleSpec",
    "required_when_equals",
    "required_when_selected",
    # Outcomes
    "ErrorKind",
    "ErrorSummary",
    "ValidationError",
    "ValidationResult",
]
