"""
Applicant details: a single-page form validated on submit.

A failed submission shows the error summary; choosing "Other" as a
purpose requires the free-text field beside it.
"""

from __future__ import annotations

from formflow.components.choice_group import ChoiceGroupController
from formflow.components.composer import FieldComposer
from formflow.components.controls import DateInput, Select, Switch, TextInput
from formflow.forms.base import FormView
from formflow.forms.reference import COUNTRIES
from formflow.specs import (
    AcceptedRule,
    ChoiceOption,
    EmailRule,
    FieldDescriptor,
    FieldKind,
    FormSchema,
    LengthRule,
    NumericRangeRule,
    RequiredRule,
    required_when_selected,
)

FORM_NAME = "applicant-details"

GENDER_OPTIONS = [
    ChoiceOption(value="male", label="Male"),
    ChoiceOption(value="female", label="Female"),
    ChoiceOption(value="other", label="Other"),
]

PURPOSE_OPTIONS = [
    ChoiceOption(value="shopping", label="Shopping"),
    ChoiceOption(value="travel", label="Travel"),
    ChoiceOption(value="business", label="Business"),
    ChoiceOption(value="emergency", label="Emergency"),
    ChoiceOption(value="other", label="Other"),
]

CREDIT_LIMIT_OPTIONS = [
    ChoiceOption(value="1000", label="$1,000"),
    ChoiceOption(value="3000", label="$3,000"),
    ChoiceOption(value="5000", label="$5,000"),
    ChoiceOption(value="10000", label="$10,000"),
]


def applicant_details_schema() -> FormSchema:
    return FormSchema(
        name=FORM_NAME,
        fields=[
            FieldDescriptor(
                name="first_name",
                label="First Name",
                rules=[RequiredRule(message="First name is required")],
            ),
            FieldDescriptor(
                name="last_name",
                label="Last Name",
                rules=[RequiredRule(message="Last name is required")],
            ),
            FieldDescriptor(
                name="email",
                label="Email",
                rules=[
                    RequiredRule(message="Invalid email address"),
                    EmailRule(message="Invalid email address"),
                ],
            ),
            FieldDescriptor(
                name="phone",
                label="Phone Number",
                rules=[
                    RequiredRule(message="Phone number is required"),
                    LengthRule(min=8, message="Phone number is required"),
                    LengthRule(max=20, message="Phone number is too long"),
                ],
            ),
            FieldDescriptor(
                name="dob",
                kind=FieldKind.DATE,
                label="Date of Birth",
                rules=[RequiredRule(message="Date of birth is required")],
            ),
            FieldDescriptor(
                name="gender",
                kind=FieldKind.CHOICE,
                label="Gender",
                options=GENDER_OPTIONS,
                rules=[RequiredRule(message="Gender is required")],
            ),
            FieldDescriptor(
                name="address",
                label="Address",
                rules=[RequiredRule(message="Address is required")],
            ),
            FieldDescriptor(
                name="country",
                kind=FieldKind.CHOICE,
                label="Country",
                options=COUNTRIES,
                rules=[RequiredRule(message="Country is required")],
            ),
            FieldDescriptor(
                name="income",
                kind=FieldKind.NUMBER,
                label="Monthly Income",
                rules=[RequiredRule(message="Income is required"), NumericRangeRule(min=0)],
            ),
            FieldDescriptor(
                name="expenses",
                kind=FieldKind.NUMBER,
                label="Monthly Expenses",
                rules=[RequiredRule(message="Expenses is required"), NumericRangeRule(min=0)],
            ),
            FieldDescriptor(
                name="purposes",
                kind=FieldKind.MULTI_CHOICE,
                label="Purpose of Applying",
                options=PURPOSE_OPTIONS,
                rules=[RequiredRule(message="Select at least one purpose")],
            ),
            FieldDescriptor(name="other_purpose", label="Please specify other purpose"),
            FieldDescriptor(
                name="credit_limit",
                kind=FieldKind.CHOICE,
                label="Requested Credit Limit",
                options=CREDIT_LIMIT_OPTIONS,
                rules=[RequiredRule(message="Select a credit limit")],
            ),
            FieldDescriptor(
                name="credit_check",
                kind=FieldKind.BOOLEAN,
                label="Allow credit check",
                rules=[AcceptedRule(message="You must allow a credit check")],
            ),
        ],
        refinements=[
            required_when_selected(
                source="purposes",
                sentinel="other",
                target="other_purpose",
                message="Please specify the other purpose",
            ),
        ],
    )


def applicant_details_view(schema: FormSchema | None = None) -> FormView:
    view = FormView(schema or applicant_details_schema())
    view.add(
        "first_name",
        FieldComposer(label="First Name"),
        TextInput(name="first_name", autocomplete="given-name"),
    )
    view.add(
        "last_name",
        FieldComposer(label="Last Name"),
        TextInput(name="last_name", autocomplete="family-name"),
    )
    view.add(
        "email",
        FieldComposer(label="Email"),
        TextInput(name="email", input_type="email", autocomplete="email"),
    )
    view.add(
        "phone",
        FieldComposer(label="Phone Number"),
        TextInput(name="phone", input_type="tel", autocomplete="tel"),
    )
    view.add("dob", FieldComposer(label="Date of Birth"), DateInput(name="dob"))
    view.add(
        "gender",
        FieldComposer(label="Gender", label_as_legend=True),
        ChoiceGroupController("gender", GENDER_OPTIONS),
    )
    view.add(
        "address",
        FieldComposer(label="Address"),
        TextInput(name="address", autocomplete="street-address"),
    )
    view.add(
        "country",
        FieldComposer(label="Country"),
        Select(name="country", options=COUNTRIES, placeholder="Select a country"),
    )
    view.add(
        "income",
        FieldComposer(label="Monthly Income"),
        TextInput(name="income", input_type="number", step="0.01"),
    )
    view.add(
        "expenses",
        FieldComposer(label="Monthly Expenses"),
        TextInput(name="expenses", input_type="number", step="0.01"),
    )
    view.add(
        "purposes",
        FieldComposer(label="Purpose of Applying", label_as_legend=True),
        ChoiceGroupController("purposes", PURPOSE_OPTIONS, multiple=True),
    )
    view.add(
        "other_purpose",
        FieldComposer(label="Please specify other purpose"),
        TextInput(name="other_purpose"),
    )
    view.add(
        "credit_limit",
        FieldComposer(label="Requested Credit Limit"),
        Select(name="credit_limit", options=CREDIT_LIMIT_OPTIONS, placeholder="Select credit limit"),
    )
    view.add(
        "credit_check",
        FieldComposer(label="Allow credit check"),
        Switch(name="credit_check"),
    )
    return view
