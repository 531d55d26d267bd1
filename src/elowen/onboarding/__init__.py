"""
Elowen Onboarding.

Three-step assessment wizard (skin type, concerns, sensitivity + lifestyle)
whose final step requests a personalized routine.
"""

from .forms import get_form_options
from .wizard import AssessmentDraft, AssessmentWizard, WizardStep

__all__ = [
    "AssessmentDraft",
    "AssessmentWizard",
    "WizardStep",
    "get_form_options",
]
