"""
Elowen - Profile & Routine Store.

Single source of truth for the session's UserProfile. Every update is a
whole-value commit; callers never write profile fields directly.
"""

import logging
from datetime import datetime

from elowen.core.errors import InvariantViolation, NotFoundWarning
from elowen.core.models import (
    Assessment,
    CarePlan,
    DailyRoutine,
    Period,
    Ready,
    SkinAnalysis,
    UserProfile,
)

logger = logging.getLogger(__name__)


class ProfileStore:
    """
    Holds the UserProfile and enforces its invariants.

    - The plan becomes Ready only through commit_routine().
    - Analyses are prepended, never removed or reordered.
    - Completion metrics are derived on read.
    """

    def __init__(self, display_name: str = "", profile: UserProfile | None = None):
        self._profile = profile or UserProfile(display_name=display_name)

    @property
    def profile(self) -> UserProfile:
        return self._profile

    @property
    def assessment(self) -> Assessment | None:
        return self._profile.assessment

    @property
    def routine(self) -> DailyRoutine | None:
        return self._profile.routine

    @property
    def analyses(self) -> list[SkinAnalysis]:
        return self._profile.analyses

    @property
    def has_plan(self) -> bool:
        return isinstance(self._profile.plan, Ready)

    # -------------------------------------------------------------------------
    # Commits
    # -------------------------------------------------------------------------

    def commit_routine(self, assessment: Assessment, routine: DailyRoutine) -> None:
        """Set assessment and routine together, replacing any earlier plan."""
        if assessment is None or routine is None:
            raise InvariantViolation("A routine must be committed together with its assessment")

        # Own a copy so later toggles never alias the collaborator's objects
        owned = routine.model_copy(deep=True)
        for period in Period:
            for step in owned.steps(period):
                step.is_completed = False

        self._profile.plan = Ready(CarePlan(assessment=assessment, routine=owned))
        logger.info(
            f"Committed routine for {assessment.skin_type.value} skin "
            f"({len(owned.am)} AM / {len(owned.pm)} PM steps)"
        )

    def append_analysis(self, analysis: SkinAnalysis) -> None:
        """Insert a new analysis at the head of the history."""
        if any(existing.id == analysis.id for existing in self._profile.analyses):
            raise InvariantViolation(f"Duplicate analysis id: {analysis.id}")
        self._profile.analyses = [analysis, *self._profile.analyses]
        logger.info(f"Appended analysis {analysis.id} ({len(self._profile.analyses)} total)")

    def toggle_step(self, period: Period | str, step_id: str) -> bool | None:
        """
        Flip a step's completion flag.

        Returns the new value, or None when the step does not exist (stale
        id after a routine was regenerated). Missing steps are ignored.
        """
        routine = self.routine
        if routine is None:
            logger.debug(f"toggle_step({period}, {step_id}) ignored: no routine")
            return None

        for step in routine.steps(period):
            if step.id == step_id:
                step.is_completed = not step.is_completed
                return step.is_completed

        logger.debug(f"{NotFoundWarning.__name__}: no step {step_id!r} in {Period(period).value} routine")
        return None

    def reset(self, display_name: str | None = None) -> None:
        """Discard everything (sign-out)."""
        name = self._profile.display_name if display_name is None else display_name
        self._profile = UserProfile(display_name=name)
        logger.info("Profile store reset")

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    def total_steps(self, period: Period | str) -> int:
        routine = self.routine
        return len(routine.steps(period)) if routine else 0

    def completed_count(self, period: Period | str) -> int:
        routine = self.routine
        if routine is None:
            return 0
        return sum(1 for step in routine.steps(period) if step.is_completed)

    def progress_ratio(self) -> float:
        """Completed steps over all steps; 0 when there are no steps."""
        total = self.total_steps(Period.AM) + self.total_steps(Period.PM)
        if total == 0:
            return 0.0
        completed = self.completed_count(Period.AM) + self.completed_count(Period.PM)
        return completed / total

    def latest_analysis(self) -> SkinAnalysis | None:
        return self._profile.analyses[0] if self._profile.analyses else None

    def progress_series(self) -> list[dict]:
        """Metric points oldest first, for charting."""
        points = []
        for analysis in reversed(self._profile.analyses):
            captured: datetime = analysis.captured_at
            points.append({
                "date": captured.date().isoformat(),
                **analysis.metrics.model_dump(),
            })
        return points
