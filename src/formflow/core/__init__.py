"""Core building blocks shared by every formflow layer."""

from __future__ import annotations

from .errors import ChoiceError, FormflowError, SchemaError, WizardError
from .ids import IdGenerator, slugify

__all__ = [
    "ChoiceError",
    "FormflowError",
    "IdGenerator",
    "SchemaError",
    "WizardError",
    "slugify",
]
