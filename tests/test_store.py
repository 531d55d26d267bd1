"""
Tests for the profile store: commits, completion toggling and history order.
"""

import random
from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_routine
from elowen.core.errors import InvariantViolation
from elowen.core.models import NotStarted, Period, Ready, SkinAnalysis, SkinMetrics
from elowen.core.store import ProfileStore


def make_analysis(analysis_id: str, minutes: int = 0, **metrics) -> SkinAnalysis:
    values = {"hydration": 60, "clarity": 70, "texture": 65, "redness": 40}
    values.update(metrics)
    return SkinAnalysis(
        id=analysis_id,
        captured_at=datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc) + timedelta(minutes=minutes),
        image_ref=f"sha256:{analysis_id}",
        metrics=SkinMetrics(**values),
        summary="ok",
        coach_note="ok",
    )


class TestCommitRoutine:
    """commit_routine is the only way the plan becomes ready."""

    def test_new_store_has_no_plan(self, store):
        assert isinstance(store.profile.plan, NotStarted)
        assert store.assessment is None
        assert store.routine is None
        assert store.has_plan is False

    def test_commit_sets_both(self, store, sample_assessment, sample_routine):
        store.commit_routine(sample_assessment, sample_routine)

        assert isinstance(store.profile.plan, Ready)
        assert store.assessment == sample_assessment
        assert len(store.routine.am) == 3
        assert len(store.routine.pm) == 4

    def test_commit_without_assessment_fails_loudly(self, store, sample_routine):
        with pytest.raises(InvariantViolation):
            store.commit_routine(None, sample_routine)
        assert store.has_plan is False

    def test_commit_without_routine_fails_loudly(self, store, sample_assessment):
        with pytest.raises(InvariantViolation):
            store.commit_routine(sample_assessment, None)

    def test_commit_preserves_step_order(self, store, sample_assessment):
        routine = make_routine(3, 4)
        routine.am.reverse()
        store.commit_routine(sample_assessment, routine)
        assert [s.id for s in store.routine.am] == ["am-3", "am-2", "am-1"]

    def test_commit_starts_all_steps_incomplete(self, store, sample_assessment, sample_routine):
        sample_routine.am[0].is_completed = True
        store.commit_routine(sample_assessment, sample_routine)
        assert store.completed_count(Period.AM) == 0

    def test_commit_does_not_alias_input(self, store, sample_assessment, sample_routine):
        store.commit_routine(sample_assessment, sample_routine)
        store.toggle_step("am", "am-1")
        assert sample_routine.am[0].is_completed is False

    def test_later_commit_overwrites(self, committed_store, sample_assessment):
        committed_store.commit_routine(sample_assessment, make_routine(1, 1))
        assert committed_store.total_steps(Period.AM) == 1
        assert committed_store.total_steps(Period.PM) == 1


class TestToggleStep:
    """Completion toggling and derived counts."""

    def test_toggle_marks_complete(self, committed_store):
        assert committed_store.toggle_step(Period.AM, "am-1") is True
        assert committed_store.routine.am[0].is_completed is True
        assert committed_store.completed_count(Period.AM) == 1

    def test_toggle_twice_restores(self, committed_store):
        committed_store.toggle_step("pm", "pm-2")
        committed_store.toggle_step("pm", "pm-2")
        assert committed_store.routine.pm[1].is_completed is False

    def test_steps_are_independent(self, committed_store):
        committed_store.toggle_step("am", "am-3")
        flags = [s.is_completed for s in committed_store.routine.am]
        assert flags == [False, False, True]

    def test_unknown_id_is_noop(self, committed_store):
        before = committed_store.routine.model_dump()
        assert committed_store.toggle_step("am", "does-not-exist") is None
        assert committed_store.routine.model_dump() == before

    def test_id_from_other_half_is_noop(self, committed_store):
        assert committed_store.toggle_step("am", "pm-1") is None
        assert committed_store.completed_count(Period.AM) == 0
        assert committed_store.completed_count(Period.PM) == 0

    def test_toggle_without_routine_is_noop(self, store):
        assert store.toggle_step("am", "am-1") is None

    def test_completed_count_matches_flags_for_random_sequences(self, committed_store):
        rng = random.Random(7)
        ids = {"am": ["am-1", "am-2", "am-3", "ghost"], "pm": ["pm-1", "pm-2", "pm-3", "pm-4", "ghost"]}
        for _ in range(200):
            period = rng.choice(["am", "pm"])
            committed_store.toggle_step(period, rng.choice(ids[period]))
            for p in Period:
                expected = sum(1 for s in committed_store.routine.steps(p) if s.is_completed)
                count = committed_store.completed_count(p)
                assert count == expected
                assert 0 <= count <= committed_store.total_steps(p)
            assert 0.0 <= committed_store.progress_ratio() <= 1.0


class TestProgressRatio:
    """progress_ratio = completed / total, 0 for an empty routine."""

    def test_zero_without_routine(self, store):
        assert store.progress_ratio() == 0.0

    def test_zero_for_empty_routine(self, store, sample_assessment):
        store.commit_routine(sample_assessment, make_routine(0, 0))
        assert store.progress_ratio() == 0.0

    def test_fresh_routine_is_zero(self, committed_store):
        assert committed_store.progress_ratio() == 0.0

    def test_one_of_seven(self, committed_store):
        committed_store.toggle_step("am", "am-1")
        assert committed_store.progress_ratio() == pytest.approx(1 / 7)

    def test_all_complete(self, committed_store):
        for period in Period:
            for step in committed_store.routine.steps(period):
                committed_store.toggle_step(period, step.id)
        assert committed_store.progress_ratio() == 1.0


class TestAppendAnalysis:
    """Analyses are prepended and never reordered."""

    def test_prepends(self, store):
        first = make_analysis("a1")
        second = make_analysis("a2", minutes=5)
        store.append_analysis(first)
        prior = list(store.analyses)
        store.append_analysis(second)

        assert store.analyses[0] == second
        assert store.analyses[1:] == prior

    def test_prior_list_object_untouched(self, store):
        store.append_analysis(make_analysis("a1"))
        snapshot = store.analyses
        store.append_analysis(make_analysis("a2"))
        assert [a.id for a in snapshot] == ["a1"]

    def test_duplicate_id_fails_loudly(self, store):
        store.append_analysis(make_analysis("a1"))
        with pytest.raises(InvariantViolation):
            store.append_analysis(make_analysis("a1", minutes=1))
        assert len(store.analyses) == 1

    def test_latest_analysis(self, store):
        assert store.latest_analysis() is None
        store.append_analysis(make_analysis("a1"))
        store.append_analysis(make_analysis("a2"))
        assert store.latest_analysis().id == "a2"

    def test_progress_series_oldest_first(self, store):
        store.append_analysis(make_analysis("a1", hydration=80))
        store.append_analysis(make_analysis("a2", hydration=85))
        series = store.progress_series()
        assert [p["hydration"] for p in series] == [80, 85]
        assert series[0]["date"] == "2026-10-19"


class TestReset:
    def test_reset_clears_everything(self, committed_store):
        committed_store.append_analysis(make_analysis("a1"))
        committed_store.reset()

        assert committed_store.has_plan is False
        assert committed_store.analyses == []
        assert committed_store.profile.display_name == "Melissa"

    def test_reset_with_new_name(self, store):
        store.reset("Ada")
        assert store.profile.display_name == "Ada"

    def test_store_accepts_existing_profile(self):
        from elowen.core.models import UserProfile

        profile = UserProfile(display_name="Ada", is_subscribed=True)
        store = ProfileStore(profile=profile)
        assert store.profile is profile
