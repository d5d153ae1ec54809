"""Tests for the multi-step wizard controller."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from formflow.core.errors import WizardError
from formflow.forms.loan_enquiry import create_enquiry_wizard
from formflow.specs import FieldDescriptor, FormSchema, RequiredRule
from formflow.wizard import WizardController, WizardState, WizardStep


@pytest.fixture
def personal() -> dict[str, Any]:
    return {
        "title": "dr",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "date_of_birth": "1990-01-01",
        "phone_number": "0400 000 000",
        "email": "ada@example.com",
        "contact_preference": "email",
        "applicant_type": "myself",
        "has_dependants": "no",
        "is_existing_customer": "yes",
    }


@pytest.fixture
def loan() -> dict[str, Any]:
    return {
        "loan_purpose": "buying-first-home",
        "borrow_amount": "500000",
        "deposit_amount": "100000",
        "annual_income": "120000",
    }


def _step(name: str, field: str) -> WizardStep:
    schema = FormSchema(
        name=name,
        fields=[FieldDescriptor(name=field, rules=[RequiredRule()]), FieldDescriptor(name="note")],
    )
    return WizardStep(name=name, title=name.title(), schema=schema)


class TestAdvance:
    def test_failure_keeps_position(self, today: date) -> None:
        wizard = create_enquiry_wizard(today=today)
        result = wizard.advance({"first_name": "Ada"})
        assert not result.is_valid
        assert wizard.current_index == 0
        assert wizard.state is not None
        assert wizard.state.per_step_records == [None, None]

    def test_success_stores_normalized_record(
        self, personal: dict[str, Any], today: date
    ) -> None:
        wizard = create_enquiry_wizard(today=today)
        result = wizard.advance(personal)
        assert result.is_valid
        assert wizard.current_index == 1
        assert wizard.current_step.name == "loan"
        stored = wizard.composite_by_step()["personal"]
        assert stored["date_of_birth"] == date(1990, 1, 1)

    def test_underage_applicant_blocked(self, personal: dict[str, Any], today: date) -> None:
        wizard = create_enquiry_wizard(today=today)
        result = wizard.advance({**personal, "date_of_birth": "2006-06-16"})
        assert result.messages() == ["You must be at least 18 years old"]
        assert wizard.current_index == 0

    def test_zero_amount_blocked(
        self, personal: dict[str, Any], loan: dict[str, Any], today: date
    ) -> None:
        wizard = create_enquiry_wizard(today=today)
        wizard.advance(personal)
        result = wizard.advance({**loan, "borrow_amount": "0"})
        assert result.messages() == ["Please enter the amount you'd like to borrow"]
        assert not wizard.is_complete


class TestRetreat:
    def test_retreat_keeps_records(self, personal: dict[str, Any], today: date) -> None:
        wizard = create_enquiry_wizard(today=today)
        wizard.advance(personal)
        assert wizard.retreat() == 0
        assert wizard.initial_data()["first_name"] == "Ada"
        assert wizard.state is not None
        assert wizard.state.per_step_records[0] is not None

    def test_retreat_from_first_step(self) -> None:
        wizard = create_enquiry_wizard()
        with pytest.raises(WizardError):
            wizard.retreat()

    def test_revisit_prefills_later_step(self, today: date) -> None:
        steps = [_step("one", "a"), _step("two", "b"), _step("three", "c")]
        wizard = WizardController(steps, today=today)
        wizard.advance({"a": "1"})
        wizard.advance({"b": "2"})
        wizard.retreat()
        wizard.retreat()
        wizard.advance({"a": "1"})
        assert wizard.initial_data()["b"] == "2"


class TestCompletion:
    def test_complete_hands_over_composite(
        self, personal: dict[str, Any], loan: dict[str, Any], today: date
    ) -> None:
        received: list[dict[str, Any]] = []
        wizard = create_enquiry_wizard(on_complete=received.append, today=today)
        wizard.advance(personal)
        result = wizard.advance(loan)

        assert result.is_valid
        assert wizard.is_complete
        assert wizard.state is None
        assert len(received) == 1
        composite = received[0]
        assert composite["first_name"] == "Ada"
        assert composite["borrow_amount"] == 500000
        assert composite == wizard.composite()
        assert set(wizard.composite_by_step()) == {"personal", "loan"}

    def test_no_moves_after_completion(self, today: date) -> None:
        wizard = WizardController([_step("only", "a")], today=today)
        wizard.advance({"a": "x"})
        assert wizard.is_complete
        with pytest.raises(WizardError):
            wizard.advance({"a": "x"})
        with pytest.raises(WizardError):
            wizard.retreat()

    def test_later_steps_win_on_collision(self, today: date) -> None:
        wizard = WizardController([_step("one", "a"), _step("two", "b")], today=today)
        wizard.advance({"a": "1", "note": "first"})
        wizard.advance({"b": "2", "note": "second"})
        assert wizard.composite() == {"a": "1", "note": "second", "b": "2"}


class TestProgress:
    def test_indicators(self, personal: dict[str, Any], today: date) -> None:
        wizard = create_enquiry_wizard(today=today)
        wizard.advance(personal)
        progress = wizard.progress()
        assert [p.number for p in progress] == [1, 2]
        assert [p.active for p in progress] == [True, True]
        assert [p.completed for p in progress] == [True, False]
        assert progress[1].title == "Your loan"


class TestState:
    def test_resume_from_state(self, personal: dict[str, Any], today: date) -> None:
        first = create_enquiry_wizard(today=today)
        first.advance(personal)
        assert first.state is not None
        resumed = create_enquiry_wizard(state=first.state, today=today)
        assert resumed.current_index == 1
        assert resumed.composite()["email"] == "ada@example.com"

    def test_mismatched_state_rejected(self) -> None:
        with pytest.raises(WizardError):
            create_enquiry_wizard(state=WizardState.start(3))

    def test_out_of_range_index_rejected(self) -> None:
        state = WizardState.start(2)
        state.current_step_index = 5
        with pytest.raises(WizardError):
            create_enquiry_wizard(state=state)

    def test_empty_wizard_rejected(self) -> None:
        with pytest.raises(WizardError):
            WizardController([])
