"""Field controls, field composition and choice groups."""

from __future__ import annotations

from formflow.components.choice_group import ChoiceGroupController, ChoicePresentation
from formflow.components.composer import ComposedField, FieldBinding, FieldComposer, LegendText
from formflow.components.controls import (
    CurrencyInput,
    DateInput,
    FieldControl,
    Select,
    Slider,
    Switch,
    TextInput,
)

__all__ = [
    "ChoiceGroupController",
    "ChoicePresentation",
    "ComposedField",
    "CurrencyInput",
    "DateInput",
    "FieldBinding",
    "FieldComposer",
    "FieldControl",
    "LegendText",
    "Select",
    "Slider",
    "Switch",
    "TextInput",
]
