"""
Tests for the data model.
"""

import pytest
from pydantic import ValidationError

from conftest import make_step
from elowen.core.models import (
    Assessment,
    CarePlan,
    DailyRoutine,
    HydrationImpact,
    Period,
    Ready,
    Recommendation,
    SkinType,
    StepCategory,
    UserProfile,
)


class TestAssessment:
    def test_defaults(self):
        a = Assessment()
        assert a.skin_type == SkinType.NORMAL
        assert a.sensitivity == 3
        assert a.concerns == ()

    def test_is_immutable(self, sample_assessment):
        with pytest.raises(ValidationError):
            sample_assessment.sensitivity = 2

    def test_sensitivity_bounds(self):
        with pytest.raises(ValidationError):
            Assessment(sensitivity=0)
        with pytest.raises(ValidationError):
            Assessment(sensitivity=6)

    def test_concerns_deduplicated_in_order(self):
        a = Assessment(concerns=["Acne", "Aging", "Acne"])
        assert a.concerns == ("Acne", "Aging")

    def test_skin_type_from_string(self):
        assert Assessment(skin_type="Oily").skin_type == SkinType.OILY


class TestRoutine:
    def test_duplicate_ids_within_half_rejected(self):
        with pytest.raises(ValidationError):
            DailyRoutine(am=[make_step("x", "Cleanse"), make_step("x", "Tone")])

    def test_same_id_across_halves_allowed(self):
        routine = DailyRoutine(am=[make_step("x", "Cleanse")], pm=[make_step("x", "Cleanse")])
        assert routine.steps(Period.AM)[0].id == routine.steps("pm")[0].id

    def test_step_defaults_incomplete(self):
        assert make_step("s1", "Cleanse").is_completed is False

    def test_known_category(self):
        assert make_step("s1", "Cleanse", category="Cleanser").known_category == StepCategory.CLEANSER
        assert make_step("s2", "Mist", category="facial mist").known_category is None

    def test_hydration_level_is_lenient(self):
        assert Recommendation(product_name="A", hydration_impact="high").hydration_level == HydrationImpact.HIGH
        assert Recommendation(product_name="B", hydration_impact="Very hydrating").hydration_level is None


class TestUserProfile:
    def test_empty_profile(self):
        profile = UserProfile(display_name="Melissa")
        assert profile.assessment is None
        assert profile.routine is None
        assert profile.analyses == []
        assert profile.is_subscribed is False

    def test_ready_plan_exposes_values(self, sample_assessment, sample_routine):
        profile = UserProfile(plan=Ready(CarePlan(sample_assessment, sample_routine)))
        assert profile.assessment is sample_assessment
        assert profile.routine is sample_routine
