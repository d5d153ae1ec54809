"""
Form session: one FormRecord plus its validation timing.

A FormSession owns a record for the lifetime of one rendered form and
applies the re-validation policy:

- ``change`` commits a value and notifies subscribers synchronously,
  before anything else can observe the record.
- ``blur`` validates the field that lost focus.
- ``submit`` validates the whole record and, on failure, builds the
  focus-receiving error summary.

After a submission has been attempted, every change re-validates the
changed field and refreshes refinement errors, so correcting one input
clears its message without touching unrelated fields.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import Any

from formflow.specs.fields import FormSchema
from formflow.specs.validation import (
    ErrorKind,
    ErrorSummary,
    ValidationError,
    ValidationResult,
)
from formflow.validation.engine import ValidationEngine

logger = logging.getLogger(__name__)

# (session, field name, old value, new value)
ChangeListener = Callable[["FormSession", str, Any, Any], None]


class FormSession:
    """Holds one FormRecord and its current per-field errors."""

    def __init__(
        self,
        schema: FormSchema,
        initial: dict[str, Any] | None = None,
        today: date | None = None,
        summary_id: str = "error-summary",
    ):
        self.schema = schema
        self.engine = ValidationEngine(schema)
        self.today = today
        self.summary_id = summary_id
        self.submitted = False
        self.summary: ErrorSummary | None = None
        self._record: dict[str, Any] = schema.defaults()
        if initial:
            self._record.update(initial)
        self._errors: dict[str, list[ValidationError]] = {}
        self._listeners: list[ChangeListener] = []

    # -------------------------------------------------------------------------
    # Record access
    # -------------------------------------------------------------------------

    @property
    def record(self) -> dict[str, Any]:
        """A copy of the current record."""
        return dict(self._record)

    def value(self, name: str, default: Any = None) -> Any:
        return self._record.get(name, default)

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_value(self, name: str, value: Any, *, notify: bool = True) -> None:
        """Commit a value programmatically (no validation)."""
        old = self._record.get(name)
        self._record[name] = value
        if notify:
            for listener in list(self._listeners):
                listener(self, name, old, value)

    # -------------------------------------------------------------------------
    # User events
    # -------------------------------------------------------------------------

    def change(self, name: str, value: Any) -> None:
        """Field-change event: commit, notify, then re-validate if submitted."""
        self.set_value(name, value)
        if self.submitted and self.schema.get_field(name) is not None:
            self._revalidate(name, refresh_refinements=True)

    def blur(self, name: str) -> ValidationResult:
        """Loss-of-focus event: validate ``name`` and refinements targeting it."""
        return self._revalidate(name, refresh_refinements=self.submitted)

    def submit(self) -> ValidationResult:
        """Submission: validate everything; build the summary on failure."""
        result = self.engine.validate(self._record, today=self.today)
        self.show_result(result)
        return result

    def show_result(self, result: ValidationResult) -> None:
        """Display a whole-record result as if it came from a submission.

        Used when another owner (e.g. a wizard step) ran the validation.
        """
        self.submitted = True
        self._errors = {}
        for error in result.errors:
            self._errors.setdefault(error.field_path, []).append(error)

        if result.is_valid:
            self.summary = None
            logger.debug("Form '%s' submitted cleanly", self.schema.name)
        else:
            self.summary = ErrorSummary(id=self.summary_id, messages=result.messages())
            logger.debug(
                "Form '%s' submission blocked by %d error(s)",
                self.schema.name,
                len(result.errors),
            )

    def dismiss_summary(self) -> None:
        if self.summary is not None:
            self.summary.dismissed = True

    # -------------------------------------------------------------------------
    # Errors
    # -------------------------------------------------------------------------

    def _revalidate(self, name: str, refresh_refinements: bool) -> ValidationResult:
        result = self.engine.validate_field(name, self._record, today=self.today)
        self._errors[name] = list(result.errors)

        if refresh_refinements:
            refinement_errors = self.engine.validate_refinements(self._record, today=self.today)
            for path, errors in self._errors.items():
                self._errors[path] = [
                    e for e in errors if e.kind != ErrorKind.CROSS_FIELD_REFINEMENT_FAILED
                ]
            for error in refinement_errors:
                self._errors.setdefault(error.field_path, []).append(error)

        self._errors = {path: errs for path, errs in self._errors.items() if errs}
        if self.summary is not None:
            self.summary.messages = [e.message for e in self.errors]
        return result

    @property
    def errors(self) -> list[ValidationError]:
        """Current errors: field-level in declaration order, then refinements."""
        ordered = [
            error
            for name in self.schema.field_names
            for error in self._errors.get(name, [])
            if error.kind != ErrorKind.CROSS_FIELD_REFINEMENT_FAILED
        ]
        ordered.extend(
            error
            for name in self.schema.field_names
            for error in self._errors.get(name, [])
            if error.kind == ErrorKind.CROSS_FIELD_REFINEMENT_FAILED
        )
        return ordered

    def error_for(self, name: str) -> str | None:
        """The message a field displays, if any."""
        errors = self._errors.get(name)
        if not errors:
            return None
        field_level = [e for e in errors if e.kind != ErrorKind.CROSS_FIELD_REFINEMENT_FAILED]
        return (field_level or errors)[0].message

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)
