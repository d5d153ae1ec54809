"""
Choice groups: radio and checkbox collections over a fixed option set.

A ChoiceGroupController owns its option set, its current value and an
IdGenerator seeded once at construction. Option ids take the form
``<name>-<value>-<seed>``, so two groups built from the same options
never collide, however many are rendered on one page.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from markupsafe import Markup

from formflow.components.composer import FieldBinding, LegendText
from formflow.core.errors import ChoiceError, SchemaError
from formflow.core.ids import IdGenerator
from formflow.runtime.template_renderer import render_fragment
from formflow.specs.fields import ChoiceOption, check_unique_options

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[Any], None]

_NEXT_KEYS = {"ArrowRight", "ArrowDown"}
_PREVIOUS_KEYS = {"ArrowLeft", "ArrowUp"}


class ChoicePresentation(str, Enum):
    """How options are drawn."""

    STANDARD = "standard"
    CHIP = "chip"


class ChoiceGroupController:
    """
    Single- or multi-select group of options.

    Single-select value is one option value or None. Multi-select value is
    an ordered list without duplicates. Change handlers always receive the
    full new value, never a delta.

    Raises:
        SchemaError: Duplicate option values, or chip presentation on a
            multi-select group
        ChoiceError: Selecting a value outside the option set
    """

    renders_fieldset = True

    def __init__(
        self,
        name: str,
        options: list[ChoiceOption],
        *,
        multiple: bool = False,
        presentation: ChoicePresentation = ChoicePresentation.STANDARD,
        value: Any = None,
        legend: LegendText | None = None,
        on_change: ChangeHandler | None = None,
    ):
        check_unique_options(options, name)
        if multiple and presentation == ChoicePresentation.CHIP:
            raise SchemaError(f"Chip presentation is single-select only (group '{name}')")

        self.name = name
        self.options = list(options)
        self.multiple = multiple
        self.presentation = presentation
        self.legend = legend
        self.on_change = on_change
        self._ids = IdGenerator(name)
        self._value: str | None = None
        self._selected: list[str] = []
        if value not in (None, "", []):
            self._load(value)

    def _load(self, value: Any) -> None:
        if self.multiple:
            values = [value] if isinstance(value, str) else list(value)
            for item in values:
                self._require_option(str(item))
                if str(item) not in self._selected:
                    self._selected.append(str(item))
        else:
            self._require_option(str(value))
            self._value = str(value)

    def _require_option(self, value: str) -> None:
        if value not in self.option_values:
            raise ChoiceError(self.name, value)

    def _emit(self) -> None:
        if self.on_change is not None:
            self.on_change(self.value)

    # -------------------------------------------------------------------------
    # Value
    # -------------------------------------------------------------------------

    @property
    def option_values(self) -> list[str]:
        return [o.value for o in self.options]

    @property
    def value(self) -> Any:
        """Selected value (single) or a copy of the selected list (multi)."""
        if self.multiple:
            return list(self._selected)
        return self._value

    def is_selected(self, value: str) -> bool:
        if self.multiple:
            return value in self._selected
        return self._value == value

    def select(self, value: str) -> str:
        """Replace the single-select value."""
        if self.multiple:
            raise ChoiceError(self.name, value, f"Group '{self.name}' is multi-select; use toggle()")
        self._require_option(value)
        self._value = value
        self._emit()
        return value

    def toggle(self, value: str) -> list[str]:
        """Add ``value`` if absent, remove it if present. Returns the full selection."""
        if not self.multiple:
            raise ChoiceError(self.name, value, f"Group '{self.name}' is single-select; use select()")
        self._require_option(value)
        if value in self._selected:
            self._selected.remove(value)
        else:
            self._selected.append(value)
        self._emit()
        return list(self._selected)

    def clear(self) -> None:
        self._value = None
        self._selected = []
        self._emit()

    # -------------------------------------------------------------------------
    # Identifiers and focus
    # -------------------------------------------------------------------------

    def option_id(self, value: str) -> str:
        """Document-unique id of one option's control, stable for this instance."""
        return self._ids.id_for(value)

    @property
    def group_id(self) -> str:
        return self._ids.root

    def tab_stop(self) -> str | None:
        """The option that takes focus when tabbing into a chip group."""
        if not self.options:
            return None
        if self._value is not None:
            return self._value
        return self.options[0].value

    def tabindex_for(self, value: str) -> int:
        return 0 if value == self.tab_stop() else -1

    def handle_key(self, key: str) -> str | None:
        """
        Radio-style keyboard navigation for single-select groups.

        Arrow keys move the selection to the next or previous option,
        wrapping at the ends; Home and End jump to the first or last. Space
        and Enter select the option holding the tab stop. Other keys are
        ignored. Returns the selected value.
        """
        if self.multiple:
            raise ChoiceError(self.name, key, f"Group '{self.name}' is multi-select")
        values = self.option_values
        current = self.tab_stop()
        if current is None:
            return None
        index = values.index(current)

        if key in _NEXT_KEYS:
            target = values[(index + 1) % len(values)]
        elif key in _PREVIOUS_KEYS:
            target = values[(index - 1) % len(values)]
        elif key == "Home":
            target = values[0]
        elif key == "End":
            target = values[-1]
        elif key in (" ", "Enter"):
            target = current
        else:
            return self._value
        return self.select(target)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def option_contexts(self) -> list[dict[str, Any]]:
        chip = self.presentation == ChoicePresentation.CHIP
        return [
            {
                "value": option.value,
                "label": option.label,
                "id": self.option_id(option.value),
                "checked": self.is_selected(option.value),
                "tabindex": self.tabindex_for(option.value) if chip else None,
            }
            for option in self.options
        ]

    def binding(self) -> FieldBinding:
        """A standalone binding for groups rendered without a composer."""
        return FieldBinding(id=self.group_id, name=self.name, value=self.value, group_legend=self.legend)

    def render(self, binding: FieldBinding | None = None) -> Markup:
        """
        Render the group as a fieldset.

        Invalid state and the describedby reference come from ``binding``;
        the group never computes them. The legend is the binding's group
        legend when the composer redirected its label, else the group's own.
        """
        binding = binding or self.binding()
        if binding.value != self.value:
            self._sync(binding.value)
        legend = binding.group_legend or self.legend or LegendText()
        return Markup(
            render_fragment(
                "controls/choice_group.html",
                group=self,
                binding=binding,
                legend=legend,
                options=self.option_contexts(),
                chip=self.presentation == ChoicePresentation.CHIP,
                input_type="checkbox" if self.multiple else "radio",
            )
        )

    def _sync(self, value: Any) -> None:
        """Adopt a value coming from the record without firing handlers.

        Values outside the option set are not displayed as selected.
        """
        allowed = self.option_values
        self._value = None
        self._selected = []
        if self.multiple:
            values = [value] if isinstance(value, str) else list(value or [])
            for item in values:
                if str(item) in allowed and str(item) not in self._selected:
                    self._selected.append(str(item))
        elif str(value) in allowed:
            self._value = str(value)

    def parse(self, raw: Any) -> Any:
        """Submitted value(s), kept as-is; membership is the validator's job."""
        if self.multiple:
            if raw is None:
                return []
            return [raw] if isinstance(raw, str) else list(raw)
        return raw
