"""
Elowen - App session (view/navigation state machine).

Sequences onboarding -> capture -> daily use and owns the busy gate: at most
one collaborator call is in flight at any time.

Forced transitions:
    onboarding -> capture   routine generated and committed
    capture    -> home      photo analyzed and appended, or skipped
    profile    -> onboarding  sign-out (full reset) or re-assessment

Every other view change is a user navigation, allowed only when a care
plan exists and nothing is in flight.
"""

import hashlib
import logging
import uuid
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Callable

from elowen.coach import CoachChat
from elowen.collaborator import SkinCollaborator
from elowen.core.errors import CollaboratorFailure
from elowen.core.models import Assessment, Period, SkinAnalysis
from elowen.core.store import ProfileStore
from elowen.export.ics import CalendarExport, build_export
from elowen.onboarding.wizard import AssessmentWizard

logger = logging.getLogger(__name__)


class View(Enum):
    """App screens."""
    ONBOARDING = "onboarding"
    CAPTURE = "capture"
    HOME = "home"
    ROUTINE = "routine"
    PROGRESS = "progress"
    CHAT = "chat"
    LIBRARY = "library"
    PROFILE = "profile"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def image_ref(image: bytes) -> str:
    """Opaque handle for an image payload."""
    return "sha256:" + hashlib.sha256(image).hexdigest()


class AppSession:
    """
    One user session.

    Dependencies are explicit: the store, the collaborator and (optionally)
    a clock and the calendar time zone. Actions return False when rejected
    (busy, wrong view, no data yet) rather than raising.
    """

    def __init__(
        self,
        store: ProfileStore,
        collaborator: SkinCollaborator,
        *,
        reply_delay: float = 1.2,
        tz: tzinfo | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.collaborator = collaborator
        self.tz = tz
        self.clock = clock
        self.view = View.ONBOARDING
        self.busy = False
        self.last_error: str | None = None
        self.wizard = AssessmentWizard(submit=self.generate_routine, is_busy=lambda: self.busy)
        self.chat = CoachChat(store.profile.display_name, reply_delay=reply_delay)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _reject(self, action: str, reason: str) -> bool:
        logger.info(f"{action} rejected: {reason}")
        return False

    def _set_view(self, view: View) -> None:
        if view != self.view:
            logger.debug(f"View {self.view.value} -> {view.value}")
        self.view = view

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def can_navigate(self, target: View) -> bool:
        return not self.busy and target != View.ONBOARDING and self.store.has_plan

    def navigate(self, target: View) -> bool:
        """User-driven view change."""
        if self.busy:
            return self._reject(f"navigate({target.value})", "collaborator call in flight")
        if target == View.ONBOARDING:
            return self._reject("navigate(onboarding)", "use sign-out or retake")
        if not self.store.has_plan:
            return self._reject(f"navigate({target.value})", "no routine yet")
        self._set_view(target)
        return True

    def skip_capture(self) -> bool:
        if self.busy or self.view != View.CAPTURE:
            return self._reject("skip_capture", f"view={self.view.value}, busy={self.busy}")
        self._set_view(View.HOME)
        return True

    def retake_assessment(self) -> bool:
        """Re-run the wizard, pre-filled with the current answers."""
        if self.busy or self.view != View.PROFILE:
            return self._reject("retake_assessment", f"view={self.view.value}, busy={self.busy}")
        self.wizard.reset(prefill=self.store.assessment)
        self._set_view(View.ONBOARDING)
        return True

    def sign_out(self) -> bool:
        """Reset everything to a fresh session."""
        if self.busy or self.view != View.PROFILE:
            return self._reject("sign_out", f"view={self.view.value}, busy={self.busy}")
        self.store.reset()
        self.wizard.reset()
        self.chat.reset(self.store.profile.display_name)
        self.last_error = None
        self._set_view(View.ONBOARDING)
        logger.info("Signed out")
        return True

    # -------------------------------------------------------------------------
    # Collaborator actions (busy-gated)
    # -------------------------------------------------------------------------

    async def generate_routine(self, assessment: Assessment) -> bool:
        """
        Request a routine and commit it with its assessment.

        Called by the wizard from its last step. On failure the store and
        view are unchanged and the user may retry.
        """
        if self.busy:
            return self._reject("generate_routine", "collaborator call in flight")
        if self.view != View.ONBOARDING:
            return self._reject("generate_routine", f"view={self.view.value}")

        self.busy = True
        try:
            routine = await self.collaborator.generate_routine(assessment)
            self.store.commit_routine(assessment, routine)
            self.last_error = None
            self._set_view(View.CAPTURE)
            return True
        except CollaboratorFailure as e:
            logger.error(f"Routine generation failed: {e}")
            self.last_error = str(e)
            return False
        finally:
            self.busy = False

    async def submit_photo(self, image: bytes) -> bool:
        """Analyze a photo and prepend the result to the history."""
        if self.busy:
            return self._reject("submit_photo", "collaborator call in flight")
        if self.view != View.CAPTURE:
            return self._reject("submit_photo", f"view={self.view.value}")

        payload = bytes(image)
        self.busy = True
        try:
            result = await self.collaborator.analyze_image(payload)
            analysis = SkinAnalysis(
                id=uuid.uuid4().hex,
                captured_at=self.clock(),
                image_ref=image_ref(payload),
                metrics=result.metrics,
                summary=result.summary,
                coach_note=result.coach_note,
            )
            self.store.append_analysis(analysis)
            self.last_error = None
            self._set_view(View.HOME)
            return True
        except CollaboratorFailure as e:
            logger.error(f"Photo analysis failed: {e}")
            self.last_error = str(e)
            return False
        finally:
            self.busy = False

    # -------------------------------------------------------------------------
    # Daily use
    # -------------------------------------------------------------------------

    def toggle_step(self, period: Period | str, step_id: str) -> bool | None:
        return self.store.toggle_step(period, step_id)

    def export_calendar(self, now: datetime | None = None) -> CalendarExport | None:
        """Calendar file for the current routine, or None without one."""
        routine = self.store.routine
        if routine is None:
            return None
        return build_export(routine, now or self.clock(), self.tz)

    def send_chat(self, text: str) -> bool:
        return self.chat.send(text)

    async def close(self) -> None:
        """Let scheduled coach replies finish."""
        await self.chat.drain()
