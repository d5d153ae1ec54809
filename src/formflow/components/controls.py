"""
Concrete field controls.

Every control satisfies the same contract: it is configured up front,
then rendered from a FieldBinding (id, name, value, aria-describedby,
aria-invalid, optional group legend) produced by FieldComposer.
``parse`` turns a submitted raw value into the value the control commits.
"""

from __future__ import annotations

from typing import Any, ClassVar, Literal

from markupsafe import Markup
from pydantic import BaseModel, Field

from formflow.components.composer import FieldBinding
from formflow.derived.engine import clamp_numeric_entry
from formflow.runtime.template_renderer import render_fragment
from formflow.specs.fields import ChoiceOption


class FieldControl(BaseModel):
    """Base class for controls composable by FieldComposer."""

    name: str
    aria_label: str | None = None

    template: ClassVar[str] = ""
    # Controls rendered as a <fieldset> take the label as their legend
    renders_fieldset: ClassVar[bool] = False

    def context(self, binding: FieldBinding) -> dict[str, Any]:
        return {"control": self, "binding": binding}

    def render(self, binding: FieldBinding) -> Markup:
        return Markup(render_fragment(self.template, **self.context(binding)))

    def parse(self, raw: Any) -> Any:
        return raw


class TextInput(FieldControl):
    """Single-line text entry (text, email, tel or number)."""

    input_type: Literal["text", "email", "tel", "number"] = "text"
    placeholder: str = ""
    autocomplete: str | None = None
    step: str | None = None

    template: ClassVar[str] = "controls/input.html"


class DateInput(FieldControl):
    """Native date picker; value is an ISO ``YYYY-MM-DD`` string."""

    min: str | None = None
    max: str | None = None

    template: ClassVar[str] = "controls/date.html"


class Select(FieldControl):
    """Drop-down over a fixed option list with an optional disabled placeholder."""

    options: list[ChoiceOption] = Field(default_factory=list)
    placeholder: str | None = None

    template: ClassVar[str] = "controls/select.html"


class Switch(FieldControl):
    """On/off toggle backed by a checkbox with ``role="switch"``."""

    text: str = ""

    template: ClassVar[str] = "controls/switch.html"

    def parse(self, raw: Any) -> bool:
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in {"on", "true", "1", "yes"}


class Slider(FieldControl):
    """Range input; typed entries are clamped to ``[min, max]``.

    With ``entry_suffix`` set, a text entry (e.g. "30 years") carries the
    value and the range input mirrors it.
    """

    min: int = 0
    max: int = 100
    step: int = 1
    min_caption: str | None = None
    max_caption: str | None = None
    entry_suffix: str | None = None

    template: ClassVar[str] = "controls/slider.html"

    def parse(self, raw: Any) -> int:
        return clamp_numeric_entry(raw, self.min, self.max)


class CurrencyInput(FieldControl):
    """
    Dollar amount entry with a ``$`` prefix and grouped digits.

    Manual entry strips non-digits and clamps to ``[min, max]``; ``max``
    may be left open. ``suffix`` renders trailing text such as a
    percentage. ``slider_step`` adds a range input over ``[min, max]``.
    ``disabled`` renders the value read-only.
    """

    min: int = 0
    max: int | None = None
    prefix: str = "$"
    suffix: str | None = None
    slider_step: int | None = None
    disabled: bool = False

    template: ClassVar[str] = "controls/currency.html"

    def parse(self, raw: Any) -> int:
        return clamp_numeric_entry(raw, self.min, self.max)

    def display_value(self, value: Any) -> str:
        if value is None or value == "":
            return ""
        try:
            return f"{int(float(str(value).replace(',', ''))):,}"
        except ValueError:
            return str(value)
