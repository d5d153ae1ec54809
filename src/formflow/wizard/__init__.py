"""Multi-step wizards."""

from __future__ import annotations

from formflow.wizard.controller import StepIndicator, WizardController, WizardState, WizardStep

__all__ = ["StepIndicator", "WizardController", "WizardState", "WizardStep"]
