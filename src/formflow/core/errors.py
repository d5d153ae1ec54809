"""
Error types for formflow schemas, choice groups and wizards.

Validation failures are never raised: they are returned as data
(see ``formflow.specs.validation``). The exceptions here signal misuse
of the toolkit itself, e.g. a malformed schema or an illegal wizard move.
"""

from __future__ import annotations


class FormflowError(Exception):
    """Base exception for all formflow errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class SchemaError(FormflowError):
    """
    Raised when a schema or option set is malformed.

    Examples:
    - Two fields declared with the same name
    - Duplicate option values within one choice group
    - Chip presentation requested for a multi-select group
    - Refinement targeting a field the schema does not declare
    """

    pass


class ChoiceError(FormflowError):
    """
    Raised when a choice group is asked to hold a value outside its options.

    Also raised when a single-select operation is used on a multi-select
    group, or the other way round.
    """

    def __init__(self, group: str, value: str, message: str | None = None):
        self.group = group
        self.value = value
        super().__init__(message or f"'{value}' is not an option of choice group '{group}'")


class WizardError(FormflowError):
    """
    Raised when a wizard transition is not allowed.

    Examples:
    - retreat() from the first step
    - advance() or retreat() after the wizard completed
    """

    pass
