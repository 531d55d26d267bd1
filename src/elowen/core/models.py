"""
Elowen - Data model.

Pydantic models for everything that crosses the collaborator boundary
(assessment, routine, analysis) and a dataclass aggregate for the profile.

Presence of the care plan is modeled as a tagged variant:

    plan = NotStarted()               # no routine yet
    plan = Ready(CarePlan(a, r))      # assessment and routine, always together
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Enumerations
# =============================================================================


class SkinType(str, Enum):
    OILY = "Oily"
    DRY = "Dry"
    COMBINATION = "Combination"
    NORMAL = "Normal"
    SENSITIVE = "Sensitive"


class StepCategory(str, Enum):
    CLEANSER = "cleanser"
    TONER = "toner"
    SERUM = "serum"
    MOISTURIZER = "moisturizer"
    SPF = "spf"
    TREATMENT = "treatment"


class HydrationImpact(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class Period(str, Enum):
    """A routine half."""
    AM = "am"
    PM = "pm"


def _dedupe(values: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    """Drop duplicates while keeping first-seen order."""
    seen: list[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return tuple(seen)


# =============================================================================
# Assessment
# =============================================================================


class Assessment(BaseModel):
    """
    A completed onboarding assessment.

    Immutable: built by the wizard from a mutable draft, then handed to the
    collaborator as-is.
    """

    model_config = ConfigDict(frozen=True)

    skin_type: SkinType = SkinType.NORMAL
    concerns: tuple[str, ...] = ()
    sensitivity: int = Field(default=3, ge=1, le=5)
    lifestyle: tuple[str, ...] = ()
    current_routine: str = ""

    @field_validator("concerns", "lifestyle")
    @classmethod
    def unique_in_order(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _dedupe(v)


# =============================================================================
# Routine
# =============================================================================


class Recommendation(BaseModel):
    """A product suggestion attached to a routine step."""

    product_name: str
    description: str = ""
    reference_url: str = ""
    hydration_impact: str = ""  # free-form display text from the collaborator

    @property
    def hydration_level(self) -> HydrationImpact | None:
        """Parsed hydration impact, or None when the text is not a known level."""
        text = self.hydration_impact.strip().capitalize()
        try:
            return HydrationImpact(text)
        except ValueError:
            return None


class RoutineStep(BaseModel):
    """
    One step of a routine half.

    `id` is assigned by the collaborator and never regenerated.
    `is_completed` is the only field the client changes.
    """

    id: str
    name: str
    category: str = ""
    description: str = ""
    rationale: str = ""
    product_guidance: str = ""
    is_completed: bool = False
    recommendations: list[Recommendation] = Field(default_factory=list)

    @property
    def known_category(self) -> StepCategory | None:
        try:
            return StepCategory(self.category.strip().lower())
        except ValueError:
            return None


class DailyRoutine(BaseModel):
    """AM and PM steps in execution order."""

    am: list[RoutineStep] = Field(default_factory=list)
    pm: list[RoutineStep] = Field(default_factory=list)

    @model_validator(mode="after")
    def ids_unique_per_half(self) -> "DailyRoutine":
        for period in Period:
            ids = [step.id for step in self.steps(period)]
            duplicates = sorted({i for i in ids if ids.count(i) > 1})
            if duplicates:
                raise ValueError(
                    f"Duplicate step ids in {period.value} routine: {', '.join(duplicates)}"
                )
        return self

    def steps(self, period: Period | str) -> list[RoutineStep]:
        return self.am if Period(period) == Period.AM else self.pm


# =============================================================================
# Skin analysis
# =============================================================================


class SkinMetrics(BaseModel):
    """Photo-derived scores, each 0-100."""

    model_config = ConfigDict(frozen=True)

    hydration: float = Field(ge=0, le=100)
    clarity: float = Field(ge=0, le=100)
    texture: float = Field(ge=0, le=100)
    redness: float = Field(ge=0, le=100)


class SkinAnalysis(BaseModel):
    """Result of one successful photo analysis. Never modified after creation."""

    model_config = ConfigDict(frozen=True)

    id: str
    captured_at: datetime
    image_ref: str
    metrics: SkinMetrics
    summary: str
    coach_note: str


# =============================================================================
# Profile aggregate
# =============================================================================


T = TypeVar("T")


@dataclass(frozen=True)
class NotStarted:
    """No assessment has been processed yet."""


@dataclass(frozen=True)
class Ready(Generic[T]):
    """A value that is available."""
    value: T


@dataclass(frozen=True)
class CarePlan:
    """An assessment and the routine generated from it."""
    assessment: Assessment
    routine: DailyRoutine


PlanState = Union[NotStarted, Ready[CarePlan]]


@dataclass
class UserProfile:
    """
    Root aggregate for one session.

    `analyses` is newest first and only ever grows at the head.
    """
    display_name: str = ""
    plan: PlanState = field(default_factory=NotStarted)
    analyses: list[SkinAnalysis] = field(default_factory=list)
    is_subscribed: bool = False

    @property
    def assessment(self) -> Assessment | None:
        return self.plan.value.assessment if isinstance(self.plan, Ready) else None

    @property
    def routine(self) -> DailyRoutine | None:
        return self.plan.value.routine if isinstance(self.plan, Ready) else None


# =============================================================================
# Coach chat
# =============================================================================


class ChatMessage(BaseModel):
    """One entry of the coach transcript."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    text: str
    sent_at: datetime
