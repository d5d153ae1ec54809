"""Shared pytest fixtures for formflow tests."""

from __future__ import annotations

from datetime import date

import pytest

from formflow.specs import (
    ChoiceOption,
    EmailRule,
    FieldDescriptor,
    FieldKind,
    FormSchema,
    MinimumAgeRule,
    NumericRangeRule,
    RequiredRule,
    required_when_selected,
)


@pytest.fixture
def today() -> date:
    """Fixed reference date for age rules."""
    return date(2024, 6, 15)


@pytest.fixture
def purpose_options() -> list[ChoiceOption]:
    return [
        ChoiceOption(value="shopping", label="Shopping"),
        ChoiceOption(value="travel", label="Travel"),
        ChoiceOption(value="other", label="Other"),
    ]


@pytest.fixture
def simple_schema(purpose_options: list[ChoiceOption]) -> FormSchema:
    """A small schema covering every rule family the engine evaluates."""
    return FormSchema(
        name="simple",
        fields=[
            FieldDescriptor(
                name="name",
                label="Name",
                rules=[RequiredRule(message="Name is required")],
            ),
            FieldDescriptor(
                name="email",
                label="Email",
                rules=[
                    RequiredRule(message="Email is required"),
                    EmailRule(message="Invalid email address"),
                ],
            ),
            FieldDescriptor(
                name="age",
                kind=FieldKind.NUMBER,
                label="Age",
                rules=[NumericRangeRule(min=0, max=120)],
            ),
            FieldDescriptor(
                name="dob",
                kind=FieldKind.DATE,
                label="Date of birth",
                rules=[MinimumAgeRule(years=18)],
            ),
            FieldDescriptor(
                name="purposes",
                kind=FieldKind.MULTI_CHOICE,
                label="Purposes",
                options=purpose_options,
                rules=[RequiredRule(message="Select at least one purpose")],
            ),
            FieldDescriptor(name="other_purpose", label="Other purpose"),
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


@pytest.fixture
def valid_record() -> dict[str, object]:
    return {
        "name": "Ada",
        "email": "ada@example.com",
        "age": "36",
        "dob": "1990-01-01",
        "purposes": ["travel"],
        "other_purpose": "",
    }
