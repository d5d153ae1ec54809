"""
Home loan calculator.

Results are derived, never stored: the loan engine recomputes them from
the current record, and a new property price sends the deposit back to 0.
"""

from __future__ import annotations

from typing import Any

from formflow.components.choice_group import ChoiceGroupController, ChoicePresentation
from formflow.components.composer import FieldComposer, LegendText
from formflow.components.controls import CurrencyInput, Slider, TextInput
from formflow.derived.engine import DerivedSnapshot, clamp_numeric_entry
from formflow.derived.loan import (
    DEPOSIT_MIN,
    FIXED_TERMS,
    PROPERTY_MIN,
    TERM_MAX,
    TERM_MIN,
    format_currency,
)
from formflow.forms.base import FormData, FormView
from formflow.specs import (
    ChoiceOption,
    FieldDescriptor,
    FieldKind,
    FormSchema,
    NumericRangeRule,
    RefinementSpec,
    RequiredRule,
    required_when_equals,
)

FORM_NAME = "home-loan-calculator"

LOAN_PURPOSES = [
    ChoiceOption(value="first_home", label="First home"),
    ChoiceOption(value="next_home", label="Next home"),
    ChoiceOption(value="investment", label="Investment"),
    ChoiceOption(value="refinance", label="Refinance"),
]

RATE_TYPES = [
    ChoiceOption(value="fixed", label="Fixed term"),
    ChoiceOption(value="custom", label="or enter a rate"),
]

FIXED_TERM_OPTIONS = [
    ChoiceOption(value=str(months), label=f"{months} months ({rate:.2f}% p.a.)")
    for months, rate in FIXED_TERMS.items()
]

DEFAULTS: dict[str, Any] = {
    "purpose": "first_home",
    "property_price": 600000,
    "deposit": 550000,
    "term": 30,
    "rate_type": "fixed",
    "fixed_term": "6",
    "custom_rate": "",
}


def _is_positive_rate(value: Any) -> bool:
    try:
        return float(str(value).strip()) > 0
    except ValueError:
        return False


def _deposit_within_price(record: dict[str, Any]) -> bool:
    price, deposit = record.get("property_price"), record.get("deposit")
    if not isinstance(price, (int, float)) or not isinstance(deposit, (int, float)):
        return True
    return deposit <= price


def calculator_schema() -> FormSchema:
    return FormSchema(
        name=FORM_NAME,
        fields=[
            FieldDescriptor(
                name="purpose",
                kind=FieldKind.CHOICE,
                label="Loan purpose",
                options=LOAN_PURPOSES,
                default=DEFAULTS["purpose"],
                rules=[RequiredRule()],
            ),
            FieldDescriptor(
                name="property_price",
                kind=FieldKind.NUMBER,
                label="Estimated property price",
                default=DEFAULTS["property_price"],
                rules=[
                    RequiredRule(message="Property price is required"),
                    NumericRangeRule(
                        min=PROPERTY_MIN,
                        message=f"Minimum property price is {format_currency(PROPERTY_MIN)}",
                    ),
                ],
            ),
            FieldDescriptor(
                name="deposit",
                kind=FieldKind.NUMBER,
                label="Deposit amount",
                default=DEFAULTS["deposit"],
                rules=[NumericRangeRule(min=DEPOSIT_MIN)],
            ),
            FieldDescriptor(
                name="term",
                kind=FieldKind.NUMBER,
                label="Loan term",
                default=DEFAULTS["term"],
                rules=[
                    RequiredRule(),
                    NumericRangeRule(min=TERM_MIN, max=TERM_MAX),
                ],
            ),
            FieldDescriptor(
                name="rate_type",
                kind=FieldKind.CHOICE,
                label="Choose a rate",
                options=RATE_TYPES,
                default=DEFAULTS["rate_type"],
                rules=[RequiredRule()],
            ),
            FieldDescriptor(
                name="fixed_term",
                kind=FieldKind.CHOICE,
                label="Fixed term",
                options=FIXED_TERM_OPTIONS,
                default=DEFAULTS["fixed_term"],
            ),
            FieldDescriptor(
                name="custom_rate",
                label="Custom rate (%)",
                default=DEFAULTS["custom_rate"],
            ),
        ],
        refinements=[
            RefinementSpec(
                path="deposit",
                message="Deposit cannot exceed the property price",
                predicate=_deposit_within_price,
                name="deposit_within_price",
            ),
            required_when_equals(
                source="rate_type",
                expected="custom",
                target="custom_rate",
                message="Enter a valid rate",
                check=_is_positive_rate,
            ),
        ],
    )


def calculator_view(
    record: dict[str, Any],
    snapshot: DerivedSnapshot | None = None,
    schema: FormSchema | None = None,
) -> FormView:
    """Controls for the calculator; the deposit range follows the current price."""
    price = record.get("property_price")
    price_max = int(price) if isinstance(price, (int, float)) and price > 0 else None
    suffix = f"{snapshot.get('deposit_percentage'):.1f}%" if snapshot is not None else None

    view = FormView(schema or calculator_schema())
    view.add(
        "purpose",
        FieldComposer(),
        ChoiceGroupController(
            "purpose",
            LOAN_PURPOSES,
            presentation=ChoicePresentation.CHIP,
            legend=LegendText(primary="Loan purpose"),
        ),
    )
    view.add(
        "property_price",
        FieldComposer(label="Estimated property price"),
        CurrencyInput(name="property_price", aria_label="Estimated property price"),
    )
    view.add(
        "deposit",
        FieldComposer(label="Deposit amount"),
        CurrencyInput(
            name="deposit",
            min=DEPOSIT_MIN,
            max=price_max,
            suffix=suffix,
            slider_step=1000,
            aria_label="Deposit amount",
        ),
    )
    view.add(
        "term",
        FieldComposer(label="Loan term"),
        Slider(
            name="term",
            min=TERM_MIN,
            max=TERM_MAX,
            entry_suffix=" years",
            min_caption=f"{TERM_MIN} year",
            max_caption=f"{TERM_MAX} years",
            aria_label="Loan term (years)",
        ),
    )
    view.add(
        "rate_type",
        FieldComposer(label="Choose a rate", label_as_legend=True),
        ChoiceGroupController("rate_type", RATE_TYPES, presentation=ChoicePresentation.CHIP),
    )
    view.add(
        "fixed_term",
        FieldComposer(label="Fixed term", label_as_legend=True),
        ChoiceGroupController("fixed_term", FIXED_TERM_OPTIONS),
    )
    view.add(
        "custom_rate",
        FieldComposer(label="Custom rate (%)"),
        TextInput(
            name="custom_rate",
            input_type="number",
            step="0.01",
            placeholder="e.g. 5.25",
            aria_label="Custom rate",
        ),
    )
    return view


def parse_calculator(data: FormData) -> dict[str, Any]:
    """Read a calculator record, clamping the deposit to ``[0, property price]``."""
    record = calculator_view({}).parse(data)
    price = record.get("property_price")
    if isinstance(price, int):
        record["deposit"] = clamp_numeric_entry(data.get("deposit", ""), DEPOSIT_MIN, price)
    return record
