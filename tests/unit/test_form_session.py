"""Tests for FormSession validation timing."""

from __future__ import annotations

from datetime import date

from formflow.specs import ErrorKind, FormSchema
from formflow.validation import FormSession


class TestBlur:
    def test_blur_validates_only_that_field(self, simple_schema: FormSchema) -> None:
        session = FormSession(simple_schema)
        result = session.blur("name")
        assert result.messages() == ["Name is required"]
        assert session.error_for("name") == "Name is required"
        assert session.error_for("email") is None
        assert session.summary is None

    def test_blur_clears_fixed_field(self, simple_schema: FormSchema) -> None:
        session = FormSession(simple_schema)
        session.blur("name")
        session.change("name", "Ada")
        # before a submission, change alone does not re-validate
        assert session.error_for("name") == "Name is required"
        session.blur("name")
        assert session.error_for("name") is None
        assert not session.has_errors


class TestSubmit:
    def test_failed_submit_builds_summary(self, simple_schema: FormSchema) -> None:
        session = FormSession(simple_schema, summary_id="summary")
        result = session.submit()
        assert not result.is_valid
        assert session.submitted
        assert session.summary is not None
        assert session.summary.id == "summary"
        assert session.summary.visible
        assert session.summary.messages == [
            "Name is required",
            "Email is required",
            "Select at least one purpose",
        ]

    def test_successful_submit(self, simple_schema: FormSchema, valid_record: dict, today: date) -> None:
        session = FormSession(simple_schema, initial=valid_record, today=today)
        result = session.submit()
        assert result.is_valid
        assert session.summary is None
        assert session.errors == []

    def test_dismiss_summary(self, simple_schema: FormSchema) -> None:
        session = FormSession(simple_schema)
        session.submit()
        session.dismiss_summary()
        assert session.summary is not None
        assert not session.summary.visible

    def test_initial_record_starts_from_defaults(self, simple_schema: FormSchema) -> None:
        session = FormSession(simple_schema, initial={"name": "Ada"})
        assert session.record["name"] == "Ada"
        assert session.record["purposes"] == []
        assert session.record["other_purpose"] == ""


class TestChangeAfterSubmit:
    def test_correcting_one_field_leaves_others(self, simple_schema: FormSchema) -> None:
        session = FormSession(simple_schema)
        session.submit()
        session.change("name", "Ada")
        assert session.error_for("name") is None
        assert session.error_for("email") == "Email is required"
        assert session.summary is not None
        assert session.summary.messages == ["Email is required", "Select at least one purpose"]

    def test_refinement_error_removed_when_resolved(
        self, simple_schema: FormSchema, valid_record: dict, today: date
    ) -> None:
        record = {**valid_record, "purposes": ["other"], "other_purpose": ""}
        session = FormSession(simple_schema, initial=record, today=today)
        session.submit()
        assert session.error_for("other_purpose") == "Please specify the other purpose"

        session.change("purposes", ["travel"])
        assert session.error_for("other_purpose") is None
        assert not session.has_errors

    def test_refinement_error_appears_on_change(
        self, simple_schema: FormSchema, valid_record: dict, today: date
    ) -> None:
        session = FormSession(simple_schema, initial=valid_record, today=today)
        session.submit()
        session.change("purposes", ["travel", "other"])
        errors = session.errors
        assert [e.field_path for e in errors] == ["other_purpose"]
        assert errors[0].kind == ErrorKind.CROSS_FIELD_REFINEMENT_FAILED

    def test_field_level_message_preferred(self, simple_schema: FormSchema) -> None:
        session = FormSession(simple_schema, initial={"purposes": ["other"], "other_purpose": ""})
        session.submit()
        # other_purpose only carries the refinement error; name carries a field-level one
        assert session.error_for("name") == "Name is required"
        assert session.errors[-1].field_path == "other_purpose"


class TestListeners:
    def test_listener_sees_old_and_new(self, simple_schema: FormSchema) -> None:
        seen: list[tuple[str, object, object]] = []
        session = FormSession(simple_schema, initial={"name": "Ada"})
        session.subscribe(lambda s, name, old, new: seen.append((name, old, new)))
        session.change("name", "Grace")
        assert seen == [("name", "Ada", "Grace")]
        assert session.value("name") == "Grace"

    def test_unsubscribe(self, simple_schema: FormSchema) -> None:
        seen: list[str] = []
        session = FormSession(simple_schema)
        unsubscribe = session.subscribe(lambda s, name, old, new: seen.append(name))
        unsubscribe()
        session.change("name", "Ada")
        assert seen == []

    def test_silent_set_value(self, simple_schema: FormSchema) -> None:
        seen: list[str] = []
        session = FormSession(simple_schema)
        session.subscribe(lambda s, name, old, new: seen.append(name))
        session.set_value("name", "Ada", notify=False)
        assert seen == []
        assert session.value("name") == "Ada"

    def test_record_is_a_copy(self, simple_schema: FormSchema) -> None:
        session = FormSession(simple_schema)
        session.record["name"] = "Mallory"
        assert session.value("name") == ""
