"""
Pytest configuration and fixtures for Elowen tests.
"""

import asyncio
import os
from unittest.mock import AsyncMock

import pytest

# Set test environment before importing elowen modules
os.environ["ELOWEN_ENV"] = "development"
os.environ.setdefault("OPENAI_API_KEY", "test-key-not-real")

from elowen.collaborator import AnalysisResult
from elowen.core.models import (
    Assessment,
    DailyRoutine,
    Recommendation,
    RoutineStep,
    SkinMetrics,
    SkinType,
)
from elowen.core.store import ProfileStore
from elowen.session import AppSession


def run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio needed)."""
    return asyncio.run(coro)


def make_step(step_id: str, name: str, category: str = "serum", description: str = "") -> RoutineStep:
    return RoutineStep(
        id=step_id,
        name=name,
        category=category,
        description=description or f"Apply {name.lower()}",
        rationale=f"{name} keeps the barrier balanced",
        product_guidance="Fragrance-free formulas",
        recommendations=[
            Recommendation(
                product_name=f"{name} Basics",
                description="Gentle everyday option",
                reference_url="https://example.com/product",
                hydration_impact="Medium",
            )
        ],
    )


def make_routine(am: int = 3, pm: int = 4) -> DailyRoutine:
    am_names = ["Cleanse", "Tone", "Protect", "Hydrate", "Treat"]
    pm_names = ["Double Cleanse", "Exfoliate", "Treat", "Moisturize", "Repair"]
    return DailyRoutine(
        am=[make_step(f"am-{i + 1}", am_names[i % len(am_names)]) for i in range(am)],
        pm=[make_step(f"pm-{i + 1}", pm_names[i % len(pm_names)]) for i in range(pm)],
    )


def make_result(hydration=80, clarity=70, texture=60, redness=50) -> AnalysisResult:
    return AnalysisResult(
        metrics=SkinMetrics(hydration=hydration, clarity=clarity, texture=texture, redness=redness),
        summary="Even tone, mild dryness.",
        coach_note="Keep going!",
    )


@pytest.fixture
def sample_assessment():
    """Assessment from end-to-end scenario A."""
    return Assessment(
        skin_type=SkinType.DRY,
        concerns=["Acne"],
        sensitivity=4,
        lifestyle=[],
        current_routine="",
    )


@pytest.fixture
def sample_routine():
    """3 AM / 4 PM steps."""
    return make_routine(3, 4)


@pytest.fixture
def store():
    return ProfileStore(display_name="Melissa")


@pytest.fixture
def committed_store(store, sample_assessment, sample_routine):
    store.commit_routine(sample_assessment, sample_routine)
    return store


@pytest.fixture
def mock_collaborator(sample_routine):
    """Collaborator double: returns the sample routine and a fixed analysis."""
    collaborator = AsyncMock()
    collaborator.generate_routine.return_value = sample_routine
    collaborator.analyze_image.return_value = make_result()
    return collaborator


@pytest.fixture
def session(store, mock_collaborator):
    return AppSession(store, mock_collaborator, reply_delay=0)
