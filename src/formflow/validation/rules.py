"""
Rule evaluation and value normalization.

This module gives meaning to the rule models in
``formflow.specs.rules``. Each evaluator receives an already-normalized,
non-empty value and returns a ValidationError or None.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from formflow.specs.fields import FieldDescriptor, FieldKind
from formflow.specs.rules import (
    AcceptedRule,
    EmailRule,
    LengthRule,
    MinimumAgeRule,
    NumericRangeRule,
    OneOfRule,
    PatternRule,
    RequiredRule,
    RuleSpec,
)
from formflow.specs.validation import ErrorKind, ValidationError

# Local part may not start with a dot or contain "..", domain needs a TLD of 2+ letters
EMAIL_RE = re.compile(
    r"^(?!\.)(?!.*\.\.)[A-Z0-9_'+\-.]*[A-Z0-9_+\-]@([A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}$",
    re.IGNORECASE,
)

_TRUTHY = {"true", "on", "1", "yes"}
_FALSY = {"false", "off", "0", "no", ""}


# =============================================================================
# Helpers
# =============================================================================


def field_label(descriptor: FieldDescriptor) -> str:
    """Label used in default messages."""
    if descriptor.label:
        return descriptor.label
    words = re.sub(r"([a-z])([A-Z])", r"\1 \2", descriptor.name).replace("_", " ")
    return words.strip().capitalize()


def _fmt_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,}"


def is_empty(value: Any, kind: FieldKind) -> bool:
    """True when a raw value counts as "not provided" for its kind."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    if kind == FieldKind.BOOLEAN and value is False:
        return True
    return False


def age_on(birth: date, today: date) -> int:
    """Whole years between ``birth`` and ``today``.

    The year difference drops by one if the birth month/day has not yet
    occurred in ``today``'s year.
    """
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


# =============================================================================
# Normalization
# =============================================================================


def _to_number(value: Any) -> int | float:
    if isinstance(value, bool):
        raise ValueError("Enter a valid number")
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "").replace("$", "").replace(" ", "")
        try:
            number = float(Decimal(text))
        except (InvalidOperation, ValueError):
            raise ValueError("Enter a valid number") from None
    if math.isnan(number) or math.isinf(number):
        raise ValueError("Enter a valid number")
    if number.is_integer():
        return int(number)
    return number


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValueError("Enter a valid date") from None


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ValueError("Enter yes or no")


def _to_selection(value: Any) -> list[str]:
    if value is None:
        return []
    items = [value] if isinstance(value, (str, int, float)) else list(value)
    selection: list[str] = []
    for item in items:
        text = str(item)
        if text not in selection:
            selection.append(text)
    return selection


def normalize_value(descriptor: FieldDescriptor, value: Any) -> Any:
    """
    Coerce a raw, non-empty value to its kind's canonical Python type.

    Args:
        descriptor: Field the value belongs to
        value: Raw value, typically a string from a submitted form

    Returns:
        int/float for numbers, ``datetime.date`` for dates, bool for
        booleans, a de-duplicated list of strings for multi-choice, str
        otherwise.

    Raises:
        ValueError: If the value cannot be read as its kind. The message
            is suitable for display.
    """
    kind = descriptor.kind
    if kind == FieldKind.NUMBER:
        return _to_number(value)
    if kind == FieldKind.DATE:
        return _to_date(value)
    if kind == FieldKind.BOOLEAN:
        return _to_bool(value)
    if kind == FieldKind.MULTI_CHOICE:
        return _to_selection(value)
    return str(value)


# =============================================================================
# Rule Evaluation
# =============================================================================


def _error(descriptor: FieldDescriptor, message: str, kind: ErrorKind) -> ValidationError:
    return ValidationError(field_path=descriptor.name, message=message, kind=kind)


def _check_pattern(rule: PatternRule, value: Any, descriptor: FieldDescriptor) -> ValidationError | None:
    if re.fullmatch(rule.pattern, str(value)):
        return None
    message = rule.message or f"{field_label(descriptor)} is invalid"
    return _error(descriptor, message, ErrorKind.FORMAT_INVALID)


def _check_email(rule: EmailRule, value: Any, descriptor: FieldDescriptor) -> ValidationError | None:
    if EMAIL_RE.match(str(value).strip()):
        return None
    message = rule.message or "Please enter a valid email address"
    return _error(descriptor, message, ErrorKind.FORMAT_INVALID)


def _check_range(
    rule: NumericRangeRule, value: Any, descriptor: FieldDescriptor
) -> ValidationError | None:
    try:
        number = _to_number(value)
    except ValueError as e:
        return _error(descriptor, str(e), ErrorKind.FORMAT_INVALID)

    too_low = rule.min is not None and number < rule.min
    too_high = rule.max is not None and number > rule.max
    if not (too_low or too_high):
        return None

    if rule.message:
        message = rule.message
    elif rule.min is not None and rule.max is not None:
        message = (
            f"{field_label(descriptor)} must be between "
            f"{_fmt_number(rule.min)} and {_fmt_number(rule.max)}"
        )
    elif too_low:
        message = f"{field_label(descriptor)} must be at least {_fmt_number(rule.min)}"  # type: ignore[arg-type]
    else:
        message = f"{field_label(descriptor)} must be at most {_fmt_number(rule.max)}"  # type: ignore[arg-type]
    return _error(descriptor, message, ErrorKind.RANGE_VIOLATION)


def _check_length(rule: LengthRule, value: Any, descriptor: FieldDescriptor) -> ValidationError | None:
    is_selection = isinstance(value, list)
    size = len(value) if is_selection else len(str(value))
    too_short = rule.min is not None and size < rule.min
    too_long = rule.max is not None and size > rule.max
    if not (too_short or too_long):
        return None

    if rule.message:
        message = rule.message
    elif is_selection:
        message = (
            f"Select at least {rule.min} option(s)"
            if too_short
            else f"Select at most {rule.max} option(s)"
        )
    elif too_short:
        message = f"{field_label(descriptor)} must be at least {rule.min} characters"
    else:
        message = f"{field_label(descriptor)} must be at most {rule.max} characters"
    return _error(descriptor, message, ErrorKind.RANGE_VIOLATION)


def _check_one_of(rule: OneOfRule, value: Any, descriptor: FieldDescriptor) -> ValidationError | None:
    return check_membership(descriptor, value, rule.values, rule.message)


def check_membership(
    descriptor: FieldDescriptor,
    value: Any,
    allowed: list[str],
    message: str | None = None,
) -> ValidationError | None:
    """Reject any value (or selected value) outside ``allowed``."""
    values = value if isinstance(value, list) else [value]
    if all(str(v) in allowed for v in values):
        return None
    return _error(descriptor, message or "Please select a valid option", ErrorKind.FORMAT_INVALID)


def _check_minimum_age(
    rule: MinimumAgeRule, value: Any, descriptor: FieldDescriptor, today: date
) -> ValidationError | None:
    try:
        birth = _to_date(value)
    except ValueError as e:
        return _error(descriptor, str(e), ErrorKind.FORMAT_INVALID)
    if age_on(birth, today) >= rule.years:
        return None
    message = rule.message or f"You must be at least {rule.years} years old"
    return _error(descriptor, message, ErrorKind.RANGE_VIOLATION)


def _check_accepted(rule: AcceptedRule, value: Any, descriptor: FieldDescriptor) -> ValidationError | None:
    if value is True:
        return None
    return accepted_error(rule, descriptor)


def required_error(rule: RequiredRule, descriptor: FieldDescriptor) -> ValidationError:
    """The error reported when a required field is empty."""
    message = rule.message or f"{field_label(descriptor)} is required"
    return _error(descriptor, message, ErrorKind.REQUIRED_MISSING)


def evaluate_rule(
    rule: RuleSpec,
    value: Any,
    descriptor: FieldDescriptor,
    today: date,
) -> ValidationError | None:
    """
    Evaluate one field-level rule against a normalized, non-empty value.

    RequiredRule is handled by the engine before normalization and always
    passes here.

    Returns:
        The failure, or None when the rule holds.
    """
    if isinstance(rule, RequiredRule):
        return None
    elif isinstance(rule, PatternRule):
        return _check_pattern(rule, value, descriptor)
    elif isinstance(rule, EmailRule):
        return _check_email(rule, value, descriptor)
    elif isinstance(rule, NumericRangeRule):
        return _check_range(rule, value, descriptor)
    elif isinstance(rule, LengthRule):
        return _check_length(rule, value, descriptor)
    elif isinstance(rule, OneOfRule):
        return _check_one_of(rule, value, descriptor)
    elif isinstance(rule, MinimumAgeRule):
        return _check_minimum_age(rule, value, descriptor, today)
    elif isinstance(rule, AcceptedRule):
        return _check_accepted(rule, value, descriptor)
    else:
        return None


def accepted_error(rule: AcceptedRule, descriptor: FieldDescriptor) -> ValidationError:
    """The error reported when a consent field is left unticked."""
    message = rule.message or f"{field_label(descriptor)} must be accepted"
    return _error(descriptor, message, ErrorKind.REQUIRED_MISSING)
