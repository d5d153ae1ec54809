"""
Derived value engine.

Recomputes a small set of numeric outputs whenever one of its declared
input fields changes. Computation is a pure function of the current
record; the engine stores nothing but the latest snapshot.

Reset rules force a dependent field back to a fixed value when an
independent field changes (e.g. deposit back to 0 on a new property
price). Resets run before recomputation, inside the same change event.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from formflow.validation.session import FormSession

logger = logging.getLogger(__name__)

ComputeFn = Callable[[dict[str, Any]], dict[str, float]]


def clamp_numeric_entry(raw: Any, minimum: int, maximum: int | None = None) -> int:
    """
    Read a manually typed numeric entry.

    Non-digit characters are stripped and the remainder is parsed as an
    integer. An empty remainder parses to ``minimum``. The result is then
    clamped to ``[minimum, maximum]``.

    >>> clamp_numeric_entry("$12,500", 0, 10000)
    10000
    >>> clamp_numeric_entry("abc", 1, 30)
    1
    """
    if isinstance(raw, bool):
        raw = int(raw)
    if isinstance(raw, float):
        raw = int(raw)
    digits = re.sub(r"[^0-9]", "", str(raw if raw is not None else ""))
    number = int(digits) if digits else minimum
    number = max(minimum, number)
    if maximum is not None:
        number = min(maximum, number)
    return number


class DerivedSnapshot(BaseModel):
    """Computed outputs for one version of the input record."""

    computed_fields: dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def __getitem__(self, name: str) -> float:
        return self.computed_fields[name]

    def get(self, name: str, default: float = 0) -> float:
        return self.computed_fields.get(name, default)


class ResetRule(BaseModel):
    """When ``trigger`` changes value, force ``target`` to ``value``."""

    trigger: str
    target: str
    value: Any = 0

    model_config = ConfigDict(frozen=True)


class DerivedValueEngine:
    """
    Recomputes derived outputs from declared input fields.

    Attributes:
        inputs: Field names whose changes trigger recomputation
        compute: Pure function from a record to named numeric outputs
        resets: Reset rules applied before recomputation
    """

    def __init__(
        self,
        inputs: list[str],
        compute: ComputeFn,
        resets: list[ResetRule] | None = None,
    ):
        self.inputs = list(inputs)
        self.compute = compute
        self.resets = list(resets or [])
        self._snapshot = DerivedSnapshot()

    @property
    def snapshot(self) -> DerivedSnapshot:
        """The snapshot for the most recently processed record."""
        return self._snapshot

    def recompute(self, record: dict[str, Any]) -> DerivedSnapshot:
        self._snapshot = DerivedSnapshot(computed_fields=self.compute(record))
        logger.debug("Recomputed derived values: %s", self._snapshot.computed_fields)
        return self._snapshot

    def resets_for(self, name: str, old: Any, new: Any) -> dict[str, Any]:
        """Field updates forced by a change of ``name`` from ``old`` to ``new``."""
        if old == new:
            return {}
        updates: dict[str, Any] = {}
        for rule in self.resets:
            if rule.trigger == name:
                updates[rule.target] = rule.value
        return updates

    def apply_change(
        self,
        record: dict[str, Any],
        name: str,
        value: Any,
    ) -> tuple[dict[str, Any], DerivedSnapshot]:
        """
        Commit one field change to a copy of ``record``.

        Returns:
            The updated record (with resets applied) and its snapshot.
        """
        updated = dict(record)
        old = updated.get(name)
        updated[name] = value
        updated.update(self._fire_resets(name, old, value))
        return updated, self.recompute(updated)

    def _fire_resets(self, name: str, old: Any, new: Any) -> dict[str, Any]:
        updates = self.resets_for(name, old, new)
        if updates:
            logger.debug("Change of '%s' reset %s", name, updates)
        return updates

    def bind(self, session: FormSession) -> Callable[[], None]:
        """
        Observe a FormSession.

        Each committed change to an input field applies the reset rules
        and recomputes before the change event returns, so the snapshot
        never lags the record. Returns a callable that unbinds.
        """
        watched = set(self.inputs) | {rule.trigger for rule in self.resets}

        def _on_change(session: FormSession, name: str, old: Any, new: Any) -> None:
            if name not in watched:
                return
            for target, value in self._fire_resets(name, old, new).items():
                session.set_value(target, value, notify=False)
            self.recompute(session.record)

        self.recompute(session.record)
        return session.subscribe(_on_change)
