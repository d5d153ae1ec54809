"""
Home loan enquiry: a two-step wizard.

Step one collects personal details, step two the loan itself. The
composite record is only produced once both steps have validated.
"""

from __future__ import annotations

from typing import Any

from formflow.components.choice_group import ChoiceGroupController
from formflow.components.composer import FieldComposer, LegendText
from formflow.components.controls import CurrencyInput, DateInput, Select, TextInput
from formflow.forms.base import FormView
from formflow.forms.reference import YES_NO
from formflow.specs import (
    ChoiceOption,
    EmailRule,
    FieldDescriptor,
    FieldKind,
    FormSchema,
    MinimumAgeRule,
    NumericRangeRule,
    OneOfRule,
    RequiredRule,
)
from formflow.wizard.controller import WizardController, WizardStep

PERSONAL_FORM = "enquiry-personal"
LOAN_FORM = "enquiry-loan"

TITLE_OPTIONS = [
    ChoiceOption(value="mr", label="Mr"),
    ChoiceOption(value="mrs", label="Mrs"),
    ChoiceOption(value="ms", label="Ms"),
    ChoiceOption(value="dr", label="Dr"),
    ChoiceOption(value="prof", label="Prof"),
]

CONTACT_PREFERENCE_OPTIONS = [
    ChoiceOption(value="email", label="Via email"),
    ChoiceOption(value="phone", label="Over the phone"),
]

APPLICANT_TYPE_OPTIONS = [
    ChoiceOption(value="myself", label="For myself"),
    ChoiceOption(value="joint", label="With a joint applicant"),
]

LOAN_PURPOSE_OPTIONS = [
    ChoiceOption(value="buying-first-home", label="Buying a first home"),
    ChoiceOption(value="buying-new-house", label="Buying a new house"),
    ChoiceOption(value="buying-investment-property", label="Buying an investment property"),
    ChoiceOption(value="building-new-home", label="Building a new home"),
    ChoiceOption(value="switching-mortgage", label="Switching my mortgage from another bank"),
]

# Radio questions on the personal step: (field, legend, options, default)
_PERSONAL_QUESTIONS = [
    (
        "contact_preference",
        "How would you like to discuss the next steps of your enquiry?",
        CONTACT_PREFERENCE_OPTIONS,
        "email",
    ),
    ("applicant_type", "I am making this home loan enquiry?", APPLICANT_TYPE_OPTIONS, "myself"),
    ("has_dependants", "Do you have any dependants?", YES_NO, "no"),
    (
        "is_existing_customer",
        "Are you and/or the joint applicant already a customer?",
        YES_NO,
        "no",
    ),
]

# Amount fields on the loan step: (field, label, message)
_LOAN_AMOUNTS = [
    ("borrow_amount", "How much would you like to borrow?", "Please enter the amount you'd like to borrow"),
    ("deposit_amount", "Deposit amount", "Please enter your deposit amount"),
    ("annual_income", "Your annual income", "Please enter your annual income"),
]


def personal_schema() -> FormSchema:
    fields = [
        FieldDescriptor(
            name="title",
            kind=FieldKind.CHOICE,
            label="Title",
            options=TITLE_OPTIONS,
            rules=[RequiredRule(message="Title is required")],
        ),
        FieldDescriptor(
            name="first_name",
            label="First name",
            rules=[RequiredRule(message="First name is required")],
        ),
        FieldDescriptor(
            name="last_name",
            label="Last name",
            rules=[RequiredRule(message="Last name is required")],
        ),
        FieldDescriptor(
            name="date_of_birth",
            kind=FieldKind.DATE,
            label="Date of birth",
            rules=[
                RequiredRule(message="Date of birth is required"),
                MinimumAgeRule(years=18, message="You must be at least 18 years old"),
            ],
        ),
        FieldDescriptor(
            name="phone_number",
            label="Phone number",
            rules=[RequiredRule(message="Phone number is required")],
        ),
        FieldDescriptor(
            name="email",
            label="Email",
            rules=[
                RequiredRule(message="Email is required"),
                EmailRule(message="Please enter a valid email address"),
            ],
        ),
    ]
    for name, legend, options, default in _PERSONAL_QUESTIONS:
        fields.append(
            FieldDescriptor(
                name=name,
                kind=FieldKind.CHOICE,
                label=legend,
                options=options,
                default=default,
                rules=[RequiredRule()],
            )
        )
    return FormSchema(name=PERSONAL_FORM, fields=fields)


def loan_schema() -> FormSchema:
    fields = [
        FieldDescriptor(
            name="loan_purpose",
            kind=FieldKind.CHOICE,
            label="This home loan is for:",
            options=LOAN_PURPOSE_OPTIONS,
            default="buying-first-home",
            rules=[
                RequiredRule(message="Please select a loan purpose"),
                OneOfRule(
                    values=[o.value for o in LOAN_PURPOSE_OPTIONS],
                    message="Please select a loan purpose",
                ),
            ],
        ),
    ]
    for name, label, message in _LOAN_AMOUNTS:
        fields.append(
            FieldDescriptor(
                name=name,
                kind=FieldKind.NUMBER,
                label=label,
                default=0,
                rules=[RequiredRule(message=message), NumericRangeRule(min=1, message=message)],
            )
        )
    return FormSchema(name=LOAN_FORM, fields=fields)


def enquiry_steps() -> list[WizardStep]:
    return [
        WizardStep(name="personal", title="Your details", schema=personal_schema()),
        WizardStep(name="loan", title="Your loan", schema=loan_schema()),
    ]


def create_enquiry_wizard(**kwargs: Any) -> WizardController:
    return WizardController(enquiry_steps(), **kwargs)


def personal_view(schema: FormSchema | None = None) -> FormView:
    view = FormView(schema or personal_schema())
    view.add(
        "title",
        FieldComposer(label="Title"),
        Select(name="title", options=TITLE_OPTIONS, placeholder="Select"),
    )
    view.add("first_name", FieldComposer(label="First name"), TextInput(name="first_name"))
    view.add("last_name", FieldComposer(label="Last name"), TextInput(name="last_name"))
    view.add("date_of_birth", FieldComposer(label="Date of birth"), DateInput(name="date_of_birth"))
    view.add(
        "phone_number",
        FieldComposer(label="Phone number"),
        TextInput(name="phone_number", input_type="tel"),
    )
    view.add("email", FieldComposer(label="Email"), TextInput(name="email", input_type="email"))
    for name, legend, options, _default in _PERSONAL_QUESTIONS:
        view.add(
            name,
            FieldComposer(),
            ChoiceGroupController(name, options, legend=LegendText(primary=legend)),
        )
    return view


def loan_view(schema: FormSchema | None = None) -> FormView:
    view = FormView(schema or loan_schema())
    view.add(
        "loan_purpose",
        FieldComposer(),
        ChoiceGroupController(
            "loan_purpose",
            LOAN_PURPOSE_OPTIONS,
            legend=LegendText(primary="This home loan is for:"),
        ),
    )
    for name, label, _message in _LOAN_AMOUNTS:
        view.add(name, FieldComposer(label=label), CurrencyInput(name=name, aria_label=label))
    return view
