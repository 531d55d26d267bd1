"""
Onboarding Wizard - Assessment state machine.

Three fixed steps build up an AssessmentDraft:
  0. Skin type (single choice, default Normal)
  1. Concerns (zero or more)
  2. Sensitivity (1-5, default 3) + lifestyle factors

Advancing past the last step freezes the draft and hands it to the submit
callable supplied by the owning session.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Awaitable, Callable

from elowen.core.models import Assessment, SkinType
from elowen.onboarding.forms import (
    CONCERN_OPTIONS,
    DEFAULT_SENSITIVITY,
    LIFESTYLE_OPTIONS,
    WIZARD_STEPS,
    check_option,
    clamp_sensitivity,
)

logger = logging.getLogger(__name__)

SubmitAssessment = Callable[[Assessment], Awaitable[bool]]


class WizardStep(IntEnum):
    """Wizard steps, in order."""
    SKIN_TYPE = 0
    CONCERNS = 1
    LIFESTYLE = 2


LAST_STEP = WizardStep.LIFESTYLE


@dataclass
class AssessmentDraft:
    """Mutable assessment under construction."""
    skin_type: SkinType = SkinType.NORMAL
    concerns: list[str] = field(default_factory=list)
    sensitivity: int = DEFAULT_SENSITIVITY
    lifestyle: list[str] = field(default_factory=list)
    current_routine: str = ""

    def freeze(self) -> Assessment:
        return Assessment(
            skin_type=self.skin_type,
            concerns=tuple(self.concerns),
            sensitivity=self.sensitivity,
            lifestyle=tuple(self.lifestyle),
            current_routine=self.current_routine,
        )

    @classmethod
    def from_assessment(cls, assessment: Assessment) -> "AssessmentDraft":
        return cls(
            skin_type=assessment.skin_type,
            concerns=list(assessment.concerns),
            sensitivity=assessment.sensitivity,
            lifestyle=list(assessment.lifestyle),
            current_routine=assessment.current_routine,
        )


def _toggle(values: list[str], value: str) -> None:
    if value in values:
        values.remove(value)
    else:
        values.append(value)


class AssessmentWizard:
    """
    Walks the user through the assessment.

    The wizard never talks to the collaborator itself; `submit` does, and
    reports whether the routine was generated and committed. While `is_busy`
    reports True the wizard holds its step.
    """

    def __init__(self, submit: SubmitAssessment, is_busy: Callable[[], bool] = lambda: False):
        self._submit = submit
        self._is_busy = is_busy
        self.current_step_index: int = WizardStep.SKIN_TYPE
        self.draft = AssessmentDraft()

    @property
    def step(self) -> dict:
        """Title and description of the current step."""
        return WIZARD_STEPS[self.current_step_index]

    @property
    def is_last_step(self) -> bool:
        return self.current_step_index == LAST_STEP

    # -------------------------------------------------------------------------
    # Draft mutations
    # -------------------------------------------------------------------------

    def select_skin_type(self, skin_type: SkinType | str) -> None:
        self.draft.skin_type = SkinType(skin_type)

    def toggle_concern(self, concern: str) -> None:
        _toggle(self.draft.concerns, check_option(concern, CONCERN_OPTIONS, "concern"))

    def set_sensitivity(self, value: int) -> None:
        self.draft.sensitivity = clamp_sensitivity(value)

    def toggle_lifestyle_factor(self, factor: str) -> None:
        _toggle(self.draft.lifestyle, check_option(factor, LIFESTYLE_OPTIONS, "lifestyle factor"))

    def set_current_routine(self, text: str) -> None:
        self.draft.current_routine = text.strip()

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    async def advance(self) -> bool:
        """
        Move to the next step, or submit from the last one.

        Returns True when the wizard moved forward or the submission
        succeeded. On a failed submission the wizard stays on the last step
        with the draft untouched, so calling advance() again retries.
        Returns False without moving while a submission is in flight.
        """
        if self._is_busy():
            logger.info("Wizard advance rejected: submission in flight")
            return False
        if not self.is_last_step:
            self.current_step_index += 1
            return True

        assessment = self.draft.freeze()
        logger.info(f"Submitting assessment ({assessment.skin_type.value}, sensitivity {assessment.sensitivity})")
        return await self._submit(assessment)

    def retreat(self) -> None:
        if self._is_busy():
            logger.info("Wizard retreat rejected: submission in flight")
            return
        if self.current_step_index > WizardStep.SKIN_TYPE:
            self.current_step_index -= 1

    def reset(self, prefill: Assessment | None = None) -> None:
        """Start over, optionally from a previous assessment."""
        self.current_step_index = WizardStep.SKIN_TYPE
        self.draft = AssessmentDraft.from_assessment(prefill) if prefill else AssessmentDraft()
