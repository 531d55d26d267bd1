"""
Elowen - AI Collaborator Interface.

Two request/response contracts consumed by the session:

    generate_routine(assessment) -> DailyRoutine
    analyze_image(image_bytes)   -> AnalysisResult

Both raise CollaboratorFailure on any service error or malformed response.
LLMCollaborator fulfils them with structured OpenAI calls via Instructor;
tests substitute any object with the same two coroutines.
"""

import logging
from typing import Protocol

from pydantic import BaseModel, Field, model_validator

from elowen.core.errors import CollaboratorFailure
from elowen.core.models import (
    Assessment,
    DailyRoutine,
    Recommendation,
    RoutineStep,
    SkinMetrics,
)
from elowen.llm.client import call_llm, call_llm_vision

logger = logging.getLogger(__name__)


# =============================================================================
# Defaults for missing analysis fields
# =============================================================================

DEFAULT_METRICS = {
    "hydration": 60.0,
    "clarity": 70.0,
    "texture": 65.0,
    "redness": 40.0,
}
DEFAULT_SUMMARY = "Healthy baseline captured."
DEFAULT_COACH_NOTE = "Great first photo! Consistency is key."


# =============================================================================
# Response Models
# =============================================================================


class GeneratedRecommendation(BaseModel):
    """A product recommendation as produced by the model."""

    product_name: str
    description: str
    reference_url: str = Field(description="Link where the user can learn more about the product")
    hydration_impact: str = Field(
        description="The level of hydration this product provides, e.g. 'High', 'Medium', 'Low'"
    )


class GeneratedStep(BaseModel):
    """A routine step as produced by the model."""

    id: str = Field(description="Identifier unique within its AM or PM list")
    name: str
    category: str = Field(description="One of: cleanser, toner, serum, moisturizer, spf, treatment")
    description: str
    rationale: str = Field(description="Why this step is included for this skin profile")
    product_guidance: str = Field(description="Ingredients and product features to look for")
    recommendations: list[GeneratedRecommendation] = Field(default_factory=list)


class RoutinePlan(BaseModel):
    """Structured routine response. Both halves must be non-empty."""

    am: list[GeneratedStep] = Field(min_length=1)
    pm: list[GeneratedStep] = Field(min_length=1)

    @model_validator(mode="after")
    def unique_ids(self) -> "RoutinePlan":
        for label, steps in (("am", self.am), ("pm", self.pm)):
            ids = [s.id for s in steps]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Step ids must be unique within the {label} routine")
        return self

    def to_routine(self) -> DailyRoutine:
        """Convert to the domain routine; every step starts incomplete."""

        def convert(step: GeneratedStep) -> RoutineStep:
            return RoutineStep(
                id=step.id,
                name=step.name,
                category=step.category,
                description=step.description,
                rationale=step.rationale,
                product_guidance=step.product_guidance,
                is_completed=False,
                recommendations=[Recommendation(**r.model_dump()) for r in step.recommendations],
            )

        return DailyRoutine(
            am=[convert(s) for s in self.am],
            pm=[convert(s) for s in self.pm],
        )


class PartialMetrics(BaseModel):
    """Metrics as returned by the model; any field may be missing."""

    hydration: float | None = None
    clarity: float | None = None
    texture: float | None = None
    redness: float | None = None


class PhotoAssessment(BaseModel):
    """Structured photo analysis response."""

    metrics: PartialMetrics | None = None
    summary: str | None = None
    coach_note: str | None = None


class AnalysisResult(BaseModel):
    """Photo analysis with defaults applied."""

    metrics: SkinMetrics
    summary: str
    coach_note: str


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


def normalize_analysis(response: PhotoAssessment) -> AnalysisResult:
    """Fill missing fields with defaults and clamp metrics into 0-100."""
    raw = response.metrics.model_dump() if response.metrics else {}
    metrics = {
        name: _clamp(raw[name]) if raw.get(name) is not None else default
        for name, default in DEFAULT_METRICS.items()
    }
    return AnalysisResult(
        metrics=SkinMetrics(**metrics),
        summary=response.summary or DEFAULT_SUMMARY,
        coach_note=response.coach_note or DEFAULT_COACH_NOTE,
    )


# =============================================================================
# Contract
# =============================================================================


class SkinCollaborator(Protocol):
    """What the session needs from the AI service."""

    async def generate_routine(self, assessment: Assessment) -> DailyRoutine:
        ...

    async def analyze_image(self, image: bytes) -> AnalysisResult:
        ...


# =============================================================================
# LLM-backed implementation
# =============================================================================

ROUTINE_SYSTEM_PROMPT = (
    "You are Elowen, a skincare coach. You design simple, evidence-based AM and PM "
    "routines and explain every step in plain language."
)

ANALYSIS_SYSTEM_PROMPT = (
    "You are Elowen, a skincare coach reviewing a progress photo. Be accurate, "
    "kind and encouraging."
)

ANALYSIS_USER_PROMPT = (
    "Analyze this skin photo. Provide numerical metrics (0-100) for hydration, clarity, "
    "texture, and redness. Also provide a summary and a supportive coach's note."
)


def build_routine_prompt(assessment: Assessment) -> str:
    """User prompt for routine generation."""
    concerns = ", ".join(assessment.concerns) or "none"
    lifestyle = ", ".join(assessment.lifestyle) or "none"
    prompt = f"""Based on this skin assessment, generate a personalized AM and PM skincare routine.
Skin Type: {assessment.skin_type.value}
Concerns: {concerns}
Sensitivity (1-5): {assessment.sensitivity}
Lifestyle: {lifestyle}
"""
    if assessment.current_routine:
        prompt += f"Current routine: {assessment.current_routine}\n"
    prompt += """
Explain why each step is included and what ingredients/features to look for in products.
For each step, provide 2-3 real product recommendations that fit this skin profile.
For each recommendation, estimate the "hydration_impact" ("High", "Medium", or "Low") based on the product's typical formulation."""
    return prompt


class LLMCollaborator:
    """SkinCollaborator backed by OpenAI structured outputs."""

    def __init__(self, max_retries: int = 2, mime_type: str = "image/jpeg"):
        self.max_retries = max_retries
        self.mime_type = mime_type

    async def generate_routine(self, assessment: Assessment) -> DailyRoutine:
        try:
            plan = await call_llm(
                response_model=RoutinePlan,
                system_prompt=ROUTINE_SYSTEM_PROMPT,
                user_prompt=build_routine_prompt(assessment),
                task="routine",
                max_retries=self.max_retries,
            )
            return plan.to_routine()
        except Exception as e:
            logger.error(f"Routine generation failed: {e}")
            raise CollaboratorFailure("generate_routine", str(e)) from e

    async def analyze_image(self, image: bytes) -> AnalysisResult:
        try:
            response = await call_llm_vision(
                response_model=PhotoAssessment,
                system_prompt=ANALYSIS_SYSTEM_PROMPT,
                user_prompt=ANALYSIS_USER_PROMPT,
                image=image,
                mime_type=self.mime_type,
                max_retries=self.max_retries,
            )
        except Exception as e:
            logger.error(f"Photo analysis failed: {e}")
            raise CollaboratorFailure("analyze_image", str(e)) from e
        return normalize_analysis(response)
