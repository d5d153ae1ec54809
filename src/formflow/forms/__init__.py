"""
Concrete forms and the registry used by the CLI.

Each entry maps a form name to a factory for its schema.
"""

from __future__ import annotations

from collections.abc import Callable

from formflow.forms.applicant_details import applicant_details_schema
from formflow.forms.loan_calculator import calculator_schema
from formflow.forms.loan_enquiry import loan_schema, personal_schema
from formflow.specs.fields import FormSchema

FORMS: dict[str, Callable[[], FormSchema]] = {
    "applicant-details": applicant_details_schema,
    "home-loan-calculator": calculator_schema,
    "enquiry-personal": personal_schema,
    "enquiry-loan": loan_schema,
}


def get_schema(name: str) -> FormSchema:
    """Build the schema registered under ``name``.

    Raises:
        KeyError: If no form is registered under that name.
    """
    try:
        factory = FORMS[name]
    except KeyError:
        raise KeyError(f"Unknown form '{name}'. Available: {', '.join(sorted(FORMS))}") from None
    return factory()


__all__ = ["FORMS", "get_schema"]
