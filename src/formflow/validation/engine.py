"""
Schema-driven validation engine.

Evaluates a FormSchema against a candidate FormRecord:

1. Field-level rules for every field, in declaration order. Within a
   field the first failing rule wins.
2. Refinements, in declaration order, appended after field-level errors.
   A field that already failed may additionally receive a refinement
   error when a refinement targets it.

The engine never raises for invalid input and never mutates the record
it is given.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from formflow.specs.fields import FieldDescriptor, FieldKind, FormSchema
from formflow.specs.rules import AcceptedRule, RefinementSpec, RequiredRule
from formflow.specs.validation import ErrorKind, ValidationError, ValidationResult
from formflow.validation.rules import (
    accepted_error,
    check_membership,
    evaluate_rule,
    is_empty,
    normalize_value,
    required_error,
)

logger = logging.getLogger(__name__)


def _empty_normalized(descriptor: FieldDescriptor) -> Any:
    """Normalized form of an omitted optional value."""
    if descriptor.kind == FieldKind.MULTI_CHOICE:
        return []
    if descriptor.kind == FieldKind.BOOLEAN:
        return False
    if descriptor.kind in (FieldKind.NUMBER, FieldKind.DATE):
        return None
    return ""


class ValidationEngine:
    """Validates FormRecords against one FormSchema."""

    def __init__(self, schema: FormSchema):
        self.schema = schema

    # -------------------------------------------------------------------------
    # Field level
    # -------------------------------------------------------------------------

    def _check_field(
        self,
        descriptor: FieldDescriptor,
        raw: Any,
        today: date,
    ) -> tuple[Any, ValidationError | None]:
        """Validate one field. Returns (normalized value, first error)."""
        if is_empty(raw, descriptor.kind):
            for rule in descriptor.rules:
                if isinstance(rule, RequiredRule):
                    return raw, required_error(rule, descriptor)
                if isinstance(rule, AcceptedRule):
                    return raw, accepted_error(rule, descriptor)
            return _empty_normalized(descriptor), None

        try:
            value = normalize_value(descriptor, raw)
        except ValueError as e:
            return raw, ValidationError(
                field_path=descriptor.name,
                message=str(e),
                kind=ErrorKind.FORMAT_INVALID,
            )

        for rule in descriptor.rules:
            error = evaluate_rule(rule, value, descriptor, today)
            if error is not None:
                return value, error

        # Choice values must stay inside the declared option set
        if descriptor.kind in (FieldKind.CHOICE, FieldKind.MULTI_CHOICE):
            error = check_membership(descriptor, value, descriptor.option_values)
            if error is not None:
                return value, error

        return value, None

    # -------------------------------------------------------------------------
    # Refinements
    # -------------------------------------------------------------------------

    def _check_refinement(
        self,
        refinement: RefinementSpec,
        working: dict[str, Any],
    ) -> ValidationError | None:
        if refinement.predicate(working):
            return None
        return ValidationError(
            field_path=refinement.path,
            message=refinement.message,
            kind=ErrorKind.CROSS_FIELD_REFINEMENT_FAILED,
        )

    def _field_pass(
        self,
        record: dict[str, Any],
        today: date,
    ) -> tuple[dict[str, Any], dict[str, Any], list[ValidationError]]:
        """Run every field's rules. Returns (normalized, working record, errors)."""
        working = dict(record)
        normalized: dict[str, Any] = {}
        errors: list[ValidationError] = []
        for descriptor in self.schema.fields:
            value, error = self._check_field(descriptor, record.get(descriptor.name), today)
            if error is None:
                normalized[descriptor.name] = value
                working[descriptor.name] = value
            else:
                errors.append(error)
        return normalized, working, errors

    def _refinement_pass(self, working: dict[str, Any]) -> list[ValidationError]:
        errors: list[ValidationError] = []
        for refinement in self.schema.refinements:
            error = self._check_refinement(refinement, working)
            if error is not None:
                errors.append(error)
        return errors

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def validate(self, record: dict[str, Any], today: date | None = None) -> ValidationResult:
        """
        Validate a whole record (submission-time validation).

        Args:
            record: Candidate FormRecord; left untouched
            today: Reference date for age rules (defaults to today)

        Returns:
            Success with the normalized record (declared fields only), or
            failure with ordered errors.
        """
        today = today or date.today()
        normalized, working, errors = self._field_pass(record, today)
        errors.extend(self._refinement_pass(working))

        if errors:
            logger.debug(
                "Schema '%s' failed with %d error(s): %s",
                self.schema.name,
                len(errors),
                [e.field_path for e in errors],
            )
            return ValidationResult.failure(errors)

        logger.debug("Schema '%s' validated", self.schema.name)
        return ValidationResult.success(normalized)

    def validate_field(
        self,
        name: str,
        record: dict[str, Any],
        today: date | None = None,
    ) -> ValidationResult:
        """
        Validate a single field (loss-of-focus validation).

        Runs the field's own rules, then every refinement that targets it.
        The refinement predicates see the record with this field's value
        normalized when it parsed.

        Returns:
            Success carrying ``{name: normalized value}``, or the field's
            errors.
        """
        descriptor = self.schema.get_field(name)
        if descriptor is None:
            raise KeyError(f"Schema '{self.schema.name}' has no field '{name}'")

        today = today or date.today()
        value, error = self._check_field(descriptor, record.get(name), today)
        errors: list[ValidationError] = [] if error is None else [error]

        working = dict(record)
        if error is None:
            working[name] = value
        for refinement in self.schema.refinements:
            if refinement.path != name:
                continue
            refinement_error = self._check_refinement(refinement, working)
            if refinement_error is not None:
                errors.append(refinement_error)

        if errors:
            return ValidationResult.failure(errors)
        return ValidationResult.success({name: value})

    def validate_refinements(
        self,
        record: dict[str, Any],
        today: date | None = None,
    ) -> list[ValidationError]:
        """Evaluate only the refinements, over the normalized working record."""
        _, working, _ = self._field_pass(record, today or date.today())
        return self._refinement_pass(working)
