"""Tests for civic_triage.services.resolution_predictor."""

from datetime import timedelta

import pytest

from civic_triage.core.errors import ValidationError
from civic_triage.models.problem import ResolutionPayload
from civic_triage.services.resolution_predictor import round_half_up

from conftest import make_draft


def _resolve_after(engine, clock, days, **draft):
    problem = engine.create_problem(make_draft(**draft))
    clock.advance(days=days)
    engine.change_status(problem.id, "resolved", "dept-1", resolution=ResolutionPayload(description="fixed"))
    return problem


class TestEmptyHistory:

    def test_defaults_to_seven_days(self, engine):
        prediction = engine.predict_resolution("waste", "Butwal", "medium")

        assert prediction.predicted_days == 7
        assert prediction.sample_size == 0
        assert prediction.confidence == pytest.approx(0.3)
        assert prediction.average_days == 7

    @pytest.mark.parametrize("priority,days", [
        ("critical", 4),   # 3.5 rounds up
        ("medium", 7),
        ("low", 9),        # 9.1
    ])
    def test_priority_multiplier(self, engine, priority, days):
        assert engine.predict_resolution("waste", "Butwal", priority).predicted_days == days


class TestWithHistory:

    def test_average_of_matching_resolved_problems(self, engine, clock):
        _resolve_after(engine, clock, days=4)
        _resolve_after(engine, clock, days=6)

        prediction = engine.predict_resolution("waste", "Butwal", "medium")

        assert prediction.sample_size == 2
        assert prediction.average_days == 5
        assert prediction.predicted_days == 5
        assert prediction.confidence == pytest.approx(0.44)

    def test_other_category_and_municipality_excluded(self, engine, clock):
        _resolve_after(engine, clock, days=2)
        _resolve_after(engine, clock, days=30, category="water")
        _resolve_after(engine, clock, days=30, municipality="Tilottama")

        prediction = engine.predict_resolution("waste", "butwal", "medium")

        assert prediction.sample_size == 1
        assert prediction.predicted_days == 2

    def test_open_problems_excluded(self, engine, clock):
        engine.create_problem(make_draft())
        clock.advance(days=40)
        assert engine.predict_resolution("waste", "Butwal", "medium").sample_size == 0

    def test_confidence_is_capped(self, engine, clock):
        for _ in range(12):
            _resolve_after(engine, clock, days=1)

        prediction = engine.predict_resolution("waste", "Butwal", "critical")

        assert prediction.sample_size == 12
        assert prediction.confidence == 0.95
        assert prediction.predicted_days == 1   # 0.5 rounds up


class TestInputValidation:

    def test_unknown_category(self, engine):
        with pytest.raises(ValidationError):
            engine.predict_resolution("potholes", "Butwal", "medium")

    def test_unknown_priority(self, engine):
        with pytest.raises(ValidationError):
            engine.predict_resolution("waste", "Butwal", "urgent")

    def test_missing_municipality(self, engine):
        with pytest.raises(ValidationError):
            engine.predict_resolution("waste", " ", "medium")


class TestEstimate:

    def test_estimate_sets_expected_date(self, engine, clock):
        problem = engine.create_problem(make_draft())
        engine.set_priority(problem.id, "critical")

        updated = engine.estimate_resolution(problem.id)

        assert updated.estimated_resolution_time == clock.now + timedelta(days=4)


@pytest.mark.parametrize("value,expected", [(0.5, 1), (2.5, 3), (3.4999, 3), (9.1, 9), (0.0, 0)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
