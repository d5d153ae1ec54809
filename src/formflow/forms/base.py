"""
Form views: the controls and composers that render one schema.

A FormView is built per render. It pairs each declared field with a
FieldComposer and a control, turns submitted form data into a
FormRecord, and composes every field with its current value and error.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from formflow.components.choice_group import ChoiceGroupController
from formflow.components.composer import ComposedField, FieldComposer
from formflow.components.controls import Switch
from formflow.specs.fields import FormSchema

if TYPE_CHECKING:
    from markupsafe import Markup

    from formflow.components.composer import FieldBinding
    from formflow.validation.session import FormSession


class Control(Protocol):
    """Anything FieldComposer can compose."""

    name: str

    def render(self, binding: FieldBinding) -> Markup: ...

    def parse(self, raw: Any) -> Any: ...


class FormData(Protocol):
    """Submitted form data (Starlette's FormData satisfies this)."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def getlist(self, key: str) -> list[Any]: ...


@dataclass
class Widget:
    composer: FieldComposer
    control: Control


@dataclass
class FormView:
    """Composers and controls for every field of one schema."""

    schema: FormSchema
    widgets: dict[str, Widget] = field(default_factory=dict)

    def add(self, name: str, composer: FieldComposer, control: Control) -> FormView:
        if self.schema.get_field(name) is None:
            raise KeyError(f"Schema '{self.schema.name}' has no field '{name}'")
        self.widgets[name] = Widget(composer=composer, control=control)
        return self

    def parse(self, data: FormData | Mapping[str, Any]) -> dict[str, Any]:
        """Read a FormRecord from submitted data, one entry per declared field."""
        record: dict[str, Any] = {}
        for descriptor in self.schema.fields:
            name = descriptor.name
            widget = self.widgets.get(name)
            control = widget.control if widget else None

            if isinstance(control, ChoiceGroupController) and control.multiple:
                raw: Any = data.getlist(name) if hasattr(data, "getlist") else data.get(name, [])
            elif isinstance(control, Switch):
                raw = data.get(name, False)
            else:
                raw = data.get(name, "")

            record[name] = control.parse(raw) if control is not None else raw
        return record

    def compose(self, name: str, session: FormSession) -> ComposedField:
        widget = self.widgets[name]
        return widget.composer.compose(
            widget.control,  # type: ignore[arg-type]
            value=session.value(name),
            error_message=session.error_for(name),
        )

    def compose_all(self, session: FormSession) -> dict[str, ComposedField]:
        """Composed fields keyed by name, in schema order."""
        return {
            name: self.compose(name, session)
            for name in self.schema.field_names
            if name in self.widgets
        }
