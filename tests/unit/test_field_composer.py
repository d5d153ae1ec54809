"""Tests for FieldComposer accessibility wiring."""

from __future__ import annotations

import re

from formflow.components import (
    ChoiceGroupController,
    FieldComposer,
    LegendText,
    TextInput,
)
from formflow.specs import ChoiceOption

GENDERS = [
    ChoiceOption(value="male", label="Male"),
    ChoiceOption(value="female", label="Female"),
]


class TestIdentifier:
    def test_explicit_id_wins(self) -> None:
        composer = FieldComposer(label="Email", id="email-field")
        assert composer.id == "email-field"
        assert composer.helper_id == "email-field-helper"
        assert composer.error_id == "email-field-error"

    def test_generated_id_is_stable(self) -> None:
        composer = FieldComposer(label="Email")
        first = composer.compose(TextInput(name="email"))
        second = composer.compose(TextInput(name="email"), value="a@b.co", error_message="Bad")
        assert first.binding.id == second.binding.id == composer.id
        assert composer.id.startswith("form-field-")

    def test_generated_ids_are_distinct(self) -> None:
        assert FieldComposer().id != FieldComposer().id


class TestDescribedBy:
    def test_neither_helper_nor_error(self) -> None:
        composer = FieldComposer(label="Name", id="name")
        field = composer.compose(TextInput(name="name"))
        assert field.binding.aria_describedby is None
        assert field.binding.aria_invalid is False
        assert "aria-describedby" not in field.control_html
        assert 'aria-invalid="false"' in field.control_html

    def test_helper_only(self) -> None:
        composer = FieldComposer(label="Phone", helper_text="Include area code", id="phone")
        field = composer.compose(TextInput(name="phone"))
        assert field.binding.aria_describedby == "phone-helper"
        assert field.helper_id == "phone-helper"
        assert field.error_id is None

    def test_error_only(self) -> None:
        composer = FieldComposer(label="Email", id="email")
        field = composer.compose(TextInput(name="email"), error_message="Invalid email address")
        assert field.binding.aria_describedby == "email-error"
        assert field.binding.aria_invalid is True

    def test_helper_and_error_joined_in_order(self) -> None:
        composer = FieldComposer(label="Email", helper_text="Work address", id="email")
        field = composer.compose(TextInput(name="email"), error_message="Invalid email address")
        assert field.binding.aria_describedby == "email-helper email-error"
        assert 'aria-describedby="email-helper email-error"' in field.control_html
        assert 'aria-invalid="true"' in field.control_html

    def test_error_cleared_on_next_compose(self) -> None:
        composer = FieldComposer(label="Email", id="email")
        composer.compose(TextInput(name="email"), error_message="Invalid email address")
        field = composer.compose(TextInput(name="email"), value="ada@example.com")
        assert field.binding.aria_invalid is False
        assert field.error_message is None


class TestRendering:
    def test_label_targets_control(self) -> None:
        composer = FieldComposer(label="First Name", id="first")
        html = str(composer.compose(TextInput(name="first_name"), value="Ada").render())
        assert '<label for="first"' in html
        assert 'id="first"' in html
        assert 'name="first_name"' in html
        assert 'value="Ada"' in html

    def test_no_label_renders_no_label_element(self) -> None:
        composer = FieldComposer()
        field = composer.compose(TextInput(name="q"))
        assert field.show_label is False
        assert "<label" not in str(field.render())

    def test_secondary_label(self) -> None:
        composer = FieldComposer(label="Income", secondary_label="Before tax", id="income")
        html = str(composer.compose(TextInput(name="income")).render())
        assert "Before tax" in html

    def test_error_message_rendered_with_error_id(self) -> None:
        composer = FieldComposer(label="Email", id="email")
        html = str(composer.compose(TextInput(name="email"), error_message="Invalid email address").render())
        assert re.search(r'<p id="email-error"[^>]*>Invalid email address</p>', html)

    def test_values_are_escaped(self) -> None:
        composer = FieldComposer(label="Name", id="name")
        html = str(composer.compose(TextInput(name="name"), value='<script>"x"</script>').render())
        assert "<script>" not in html
        assert "&lt;script&gt;" in html


class TestLabelAsLegend:
    def test_label_moves_into_group_legend(self) -> None:
        composer = FieldComposer(label="Gender", secondary_label="Optional", label_as_legend=True)
        group = ChoiceGroupController("gender", GENDERS)
        field = composer.compose(group)

        assert field.show_label is False
        assert field.binding.group_legend == LegendText(primary="Gender", secondary="Optional")
        assert f'<legend id="{composer.id}"' in field.control_html
        assert "Gender" in field.control_html
        assert "Optional" in field.control_html

    def test_group_receives_invalid_state(self) -> None:
        composer = FieldComposer(label="Gender", label_as_legend=True, id="gender-field")
        group = ChoiceGroupController("gender", GENDERS)
        field = composer.compose(group, error_message="Gender is required")
        assert 'aria-invalid="true"' in field.control_html
        assert 'aria-describedby="gender-field-error"' in field.control_html

    def test_group_label_becomes_legend_without_flag(self) -> None:
        composer = FieldComposer(label="Gender", id="gender-field")
        field = composer.compose(ChoiceGroupController("gender", GENDERS))
        assert field.show_label is False
        assert '<label for="gender-field"' not in str(field.render())
        assert '<legend id="gender-field"' in field.control_html
        assert "Gender" in field.control_html

    def test_unlabelled_composer_keeps_group_legend(self) -> None:
        group = ChoiceGroupController("gender", GENDERS, legend=LegendText(primary="Sex"))
        field = FieldComposer().compose(group)
        assert "Sex" in field.control_html
