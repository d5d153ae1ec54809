"""
Field composition: accessible wiring between a label, its helper text,
its error message and exactly one input control.

Controls never inspect or mutate each other. FieldComposer resolves the
accessibility attributes into a FieldBinding and hands it to the control
explicitly; the control renders itself from that binding.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from markupsafe import Markup
from pydantic import BaseModel, ConfigDict

from formflow.core.ids import IdGenerator
from formflow.runtime.template_renderer import render_fragment

if TYPE_CHECKING:
    from formflow.components.controls import FieldControl

logger = logging.getLogger(__name__)


class LegendText(BaseModel):
    """Group legend with an optional secondary line."""

    primary: str = ""
    secondary: str | None = None

    model_config = ConfigDict(frozen=True)


class FieldBinding(BaseModel):
    """Everything a control needs to render itself accessibly."""

    id: str
    name: str
    value: Any = None
    aria_describedby: str | None = None
    aria_invalid: bool = False
    group_legend: LegendText | None = None

    model_config = ConfigDict(frozen=True)


class ComposedField(BaseModel):
    """Render context for one composed field (wrapper + control)."""

    binding: FieldBinding
    label: str | None = None
    secondary_label: str | None = None
    show_label: bool = False
    helper_text: str | None = None
    helper_id: str | None = None
    error_message: str | None = None
    error_id: str | None = None
    control_html: str = ""

    def render(self) -> Markup:
        return Markup(render_fragment("controls/field.html", field=self))

    def __html__(self) -> str:
        return str(self.render())


class FieldComposer:
    """
    Wraps a single control with a label, helper text and error message.

    The identifier is resolved once, at construction: an explicit ``id``
    wins, otherwise a fresh ``form-field-<n>`` id is generated. It never
    changes for the composer's lifetime, so the helper/error association
    survives re-rendering.

    Args:
        label: Primary label text
        secondary_label: Optional second line under the label
        helper_text: Optional guidance shown under the control
        id: Explicit identifier for the control
        label_as_legend: Hand the label to the control as its group
            legend instead of rendering a standalone label; fieldset
            controls such as choice groups always take it as their legend
    """

    def __init__(
        self,
        label: str | None = None,
        secondary_label: str | None = None,
        helper_text: str | None = None,
        id: str | None = None,
        label_as_legend: bool = False,
    ):
        self.label = label
        self.secondary_label = secondary_label
        self.helper_text = helper_text
        self.label_as_legend = label_as_legend
        self.id = id or IdGenerator("form-field").root

    @property
    def helper_id(self) -> str:
        return f"{self.id}-helper"

    @property
    def error_id(self) -> str:
        return f"{self.id}-error"

    def describedby(self, error_message: str | None = None) -> str | None:
        """Helper id and error id joined by a space, or None when neither applies."""
        refs: list[str] = []
        if self.helper_text:
            refs.append(self.helper_id)
        if error_message:
            refs.append(self.error_id)
        return " ".join(refs) or None

    def bind(
        self,
        name: str,
        value: Any = None,
        error_message: str | None = None,
        as_legend: bool | None = None,
    ) -> FieldBinding:
        """Resolve the accessibility attributes for one render."""
        if as_legend is None:
            as_legend = self.label_as_legend
        legend = None
        if as_legend:
            legend = LegendText(primary=self.label or "", secondary=self.secondary_label)
        return FieldBinding(
            id=self.id,
            name=name,
            value=value,
            aria_describedby=self.describedby(error_message),
            aria_invalid=bool(error_message),
            group_legend=legend,
        )

    def compose(
        self,
        control: FieldControl,
        value: Any = None,
        error_message: str | None = None,
    ) -> ComposedField:
        """
        Bind ``control`` and render it inside the field wrapper.

        Args:
            control: The single input control to enhance
            value: Current value from the FormRecord
            error_message: Message to display, usually FormSession.error_for()

        Returns:
            ComposedField, renderable directly inside a Jinja template.
        """
        as_legend = self.label_as_legend or (control.renders_fieldset and bool(self.label))
        binding = self.bind(control.name, value, error_message, as_legend=as_legend)
        return ComposedField(
            binding=binding,
            label=self.label,
            secondary_label=self.secondary_label,
            show_label=bool(self.label) and not as_legend,
            helper_text=self.helper_text,
            helper_id=self.helper_id if self.helper_text else None,
            error_message=error_message or None,
            error_id=self.error_id if error_message else None,
            control_html=str(control.render(binding)),
        )
