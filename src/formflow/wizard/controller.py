"""
Multi-step wizard controller.

States are step indices ``0 .. N-1`` plus a terminal "complete" state.
Only a successful ``advance`` from a step writes that step's record;
``retreat`` never touches stored records, so going forward again
prefills what was entered before.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from formflow.core.errors import WizardError
from formflow.specs.fields import FormSchema
from formflow.specs.validation import ValidationResult
from formflow.validation.engine import ValidationEngine
from formflow.validation.rules import is_empty, normalize_value

logger = logging.getLogger(__name__)

CompletionHandler = Callable[[dict[str, Any]], None]


@dataclass(frozen=True)
class WizardStep:
    """One page of a wizard: its own schema plus optional prefill defaults."""

    name: str
    title: str
    schema: FormSchema
    defaults: dict[str, Any] = field(default_factory=dict)


class WizardState(BaseModel):
    """Position and stored per-step records of an in-progress wizard."""

    current_step_index: int = 0
    per_step_records: list[dict[str, Any] | None] = Field(default_factory=list)
    started_at: float = Field(default_factory=time.time)

    @classmethod
    def start(cls, step_count: int) -> WizardState:
        """Fresh state: first step, every step empty."""
        return cls(per_step_records=[None] * step_count)


class StepIndicator(BaseModel):
    """Progress entry for one step."""

    number: int
    name: str
    title: str
    active: bool = False
    completed: bool = False


class WizardController:
    """
    Sequences validated steps into one composite record.

    Args:
        steps: Ordered steps; at least one
        on_complete: Called with the composite record when the last step
            validates
        state: Resume from a previously saved state
        today: Reference date for age rules
    """

    def __init__(
        self,
        steps: list[WizardStep],
        on_complete: CompletionHandler | None = None,
        state: WizardState | None = None,
        today: date | None = None,
    ):
        if not steps:
            raise WizardError("A wizard needs at least one step")
        self.steps = list(steps)
        self.on_complete = on_complete
        self.today = today
        self._engines = [ValidationEngine(step.schema) for step in self.steps]
        self._state: WizardState | None = self._check_state(state) if state else WizardState.start(len(steps))
        self._result: dict[str, Any] | None = None
        self._by_step: dict[str, dict[str, Any]] = {}

    def _check_state(self, state: WizardState) -> WizardState:
        if len(state.per_step_records) != len(self.steps):
            raise WizardError(
                f"State holds {len(state.per_step_records)} step(s), wizard has {len(self.steps)}"
            )
        if not 0 <= state.current_step_index < len(self.steps):
            raise WizardError(f"Step index {state.current_step_index} is out of range")
        state = state.model_copy(deep=True)
        state.per_step_records = [
            None if record is None else self._restore_record(step, record)
            for step, record in zip(self.steps, state.per_step_records)
        ]
        return state

    @staticmethod
    def _restore_record(step: WizardStep, record: dict[str, Any]) -> dict[str, Any]:
        """Bring a stored record's values back to their kinds' Python types.

        Records that went through a serialized state hold dates as ISO
        strings; these are parsed again per declared field.
        """
        restored = dict(record)
        for descriptor in step.schema.fields:
            value = restored.get(descriptor.name)
            if is_empty(value, descriptor.kind):
                continue
            try:
                restored[descriptor.name] = normalize_value(descriptor, value)
            except ValueError as e:
                raise WizardError(
                    f"Stored value for '{descriptor.name}' in step '{step.name}' is invalid: {e}"
                ) from e
        return restored

    def _require_active(self) -> WizardState:
        if self._state is None:
            raise WizardError("The wizard has already completed")
        return self._state

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> WizardState | None:
        """Current state, or None once the wizard has completed."""
        return self._state

    @property
    def is_complete(self) -> bool:
        return self._state is None

    @property
    def current_index(self) -> int:
        return self._require_active().current_step_index

    @property
    def current_step(self) -> WizardStep:
        return self.steps[self.current_index]

    @property
    def is_first(self) -> bool:
        return self.current_index == 0

    @property
    def is_last(self) -> bool:
        return self.current_index == len(self.steps) - 1

    def initial_data(self) -> dict[str, Any]:
        """Prefill for the current step: defaults overlaid with its stored record."""
        state = self._require_active()
        step = self.current_step
        data = {**step.schema.defaults(), **step.defaults}
        stored = state.per_step_records[state.current_step_index]
        if stored:
            data.update(stored)
        return data

    def progress(self) -> list[StepIndicator]:
        state = self._require_active()
        return [
            StepIndicator(
                number=index + 1,
                name=step.name,
                title=step.title,
                active=index <= state.current_step_index,
                completed=state.per_step_records[index] is not None,
            )
            for index, step in enumerate(self.steps)
        ]

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def advance(self, step_record: dict[str, Any]) -> ValidationResult:
        """
        Validate the current step's record and move forward on success.

        On failure the index and stored records are left untouched and the
        failed result is returned for display. On success from the last
        step the wizard completes: the composite record is handed to
        ``on_complete`` and the state is discarded.
        """
        state = self._require_active()
        index = state.current_step_index
        step = self.steps[index]
        result = self._engines[index].validate(step_record, today=self.today)
        if not result.is_valid:
            logger.debug("Wizard step '%s' rejected (%d error(s))", step.name, len(result.errors))
            return result

        state.per_step_records[index] = dict(result.record or {})
        if index + 1 < len(self.steps):
            state.current_step_index = index + 1
            logger.info("Wizard advanced from '%s' to '%s'", step.name, self.steps[index + 1].name)
        else:
            self._complete(state)
        return result

    def retreat(self) -> int:
        """Move back one step, keeping every stored record. Returns the new index."""
        state = self._require_active()
        if state.current_step_index == 0:
            raise WizardError("Cannot go back from the first step")
        state.current_step_index -= 1
        logger.info("Wizard returned to '%s'", self.steps[state.current_step_index].name)
        return state.current_step_index

    def _complete(self, state: WizardState) -> None:
        composite = self._merge(state)
        self._result = composite
        self._by_step = {
            step.name: dict(record or {}) for step, record in zip(self.steps, state.per_step_records)
        }
        self._state = None
        logger.info("Wizard completed with %d field(s)", len(composite))
        if self.on_complete is not None:
            self.on_complete(dict(composite))

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def _merge(self, state: WizardState) -> dict[str, Any]:
        composite: dict[str, Any] = {}
        for record in state.per_step_records:
            if record:
                composite.update(record)
        return composite

    def composite(self) -> dict[str, Any]:
        """Ordered merge of the stored step records; later steps win on collisions."""
        if self._state is None:
            return dict(self._result or {})
        return self._merge(self._state)

    def composite_by_step(self) -> dict[str, dict[str, Any]]:
        """Stored records keyed by step name (empty dict for steps not yet stored)."""
        if self._state is None:
            return {name: dict(record) for name, record in self._by_step.items()}
        return {
            step.name: dict(record or {})
            for step, record in zip(self.steps, self._state.per_step_records)
        }
