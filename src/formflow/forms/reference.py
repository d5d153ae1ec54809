"""Static reference data shared by the forms."""

from __future__ import annotations

from formflow.specs.fields import ChoiceOption

COUNTRIES: list[ChoiceOption] = [
    ChoiceOption(value="US", label="United States"),
    ChoiceOption(value="CA", label="Canada"),
    ChoiceOption(value="GB", label="United Kingdom"),
    ChoiceOption(value="AU", label="Australia"),
    ChoiceOption(value="IN", label="India"),
    ChoiceOption(value="DE", label="Germany"),
    ChoiceOption(value="FR", label="France"),
    ChoiceOption(value="JP", label="Japan"),
    ChoiceOption(value="CN", label="China"),
    ChoiceOption(value="BR", label="Brazil"),
    ChoiceOption(value="ZA", label="South Africa"),
    ChoiceOption(value="SG", label="Singapore"),
    ChoiceOption(value="AE", label="United Arab Emirates"),
    ChoiceOption(value="MX", label="Mexico"),
    ChoiceOption(value="IT", label="Italy"),
    ChoiceOption(value="ES", label="Spain"),
    ChoiceOption(value="RU", label="Russia"),
    ChoiceOption(value="KR", label="South Korea"),
    ChoiceOption(value="SE", label="Sweden"),
    ChoiceOption(value="NL", label="Netherlands"),
]

YES_NO: list[ChoiceOption] = [
    ChoiceOption(value="no", label="No"),
    ChoiceOption(value="yes", label="Yes"),
]
