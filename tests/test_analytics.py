"""Tests for the dashboard statistics, comment sentiment and progress updates."""

from datetime import datetime, timezone

import pytest

from civic_triage.directory.memory import InMemoryDirectory
from civic_triage.models.problem import ResolutionPayload
from civic_triage.services.comment_sentiment import analyze_sentiment
from civic_triage.services.progress_updates import generate_progress_update

from conftest import make_department, make_draft

DONE = ResolutionPayload(description="fixed")


class TestStats:

    def test_empty(self, engine):
        stats = engine.get_stats()
        assert stats.overview.total == 0
        assert stats.overview.resolution_rate == 0
        assert stats.monthly == []

    def test_counts(self, engine, clock):
        a = engine.create_problem(make_draft())
        b = engine.create_problem(make_draft(category="water"))
        c = engine.create_problem(make_draft(municipality="Tilottama"))
        engine.create_problem(make_draft())
        engine.change_status(a.id, "resolved", "admin-1", resolution=DONE)
        engine.change_status(b.id, "in_progress", "admin-1")
        engine.change_status(c.id, "rejected", "admin-1")

        stats = engine.get_stats()

        assert stats.overview.total == 4
        assert stats.overview.resolved == 1
        assert stats.overview.pending == 1
        assert stats.overview.in_progress == 1
        assert stats.overview.rejected == 1
        assert stats.overview.resolution_rate == 25.0
        assert stats.by_category["waste"].count == 3
        assert stats.by_category["waste"].resolved == 1
        assert stats.by_category["water"].count == 1
        assert stats.by_municipality["Butwal"].count == 3
        assert stats.by_municipality["Tilottama"].count == 1

    def test_monthly_newest_first_and_limited(self, engine, clock):
        for month in range(1, 13):
            clock.now = datetime(2025, month, 5, tzinfo=timezone.utc)
            engine.create_problem(make_draft())
        clock.now = datetime(2026, 1, 5, tzinfo=timezone.utc)
        engine.create_problem(make_draft())

        monthly = engine.get_stats().monthly

        assert len(monthly) == 12
        assert (monthly[0].year, monthly[0].month) == (2026, 1)
        assert (monthly[-1].year, monthly[-1].month) == (2025, 2)


class TestSentiment:

    def test_positive(self):
        result = analyze_sentiment("Thanks, great and quick work!")
        assert result.sentiment == "positive"
        assert result.score == 1.0
        assert result.is_positive is True

    def test_negative(self):
        result = analyze_sentiment("Terrible. The crew never came, useless.")
        assert result.sentiment == "negative"
        assert result.negative_words == 3
        assert result.is_negative is True

    def test_mixed_is_neutral_band(self):
        result = analyze_sentiment("good start but slow")
        assert result.score == 0
        assert result.sentiment == "neutral"
        assert result.is_neutral is True

    def test_no_lexicon_words(self):
        result = analyze_sentiment("the bins are by the road")
        assert result.score == 0
        assert result.is_neutral is True

    def test_engine_rejects_empty_text(self, engine):
        from civic_triage.core.errors import ValidationError

        with pytest.raises(ValidationError):
            engine.analyze_sentiment("  ")


class TestProgressUpdate:

    def test_pending(self, engine):
        problem = engine.create_problem(make_draft())
        update = generate_progress_update(problem)

        assert "Garbage overflow near market" in update.progress_update
        assert "Butwal" in update.progress_update
        assert update.suggested_actions[1] == "Assign to department"
        assert update.estimated_timeline == "Timeline being assessed"

    def test_in_progress_names_department(self, engine, directory):
        directory.upsert_department(make_department("dept-a", name="Sanitation"))
        problem = engine.create_problem(make_draft())
        engine.assign_department(problem.id, "dept-a")
        engine.change_status(problem.id, "in_progress", "admin-1")

        update = engine.progress_update(problem.id)

        assert "the Sanitation department" in update.progress_update
        assert update.suggested_actions == ["Monitor progress", "Update reporter", "Allocate resources"]

    def test_rejected_uses_generic_message(self, engine):
        problem = engine.create_problem(make_draft())
        engine.change_status(problem.id, "rejected", "admin-1")

        update = engine.progress_update(problem.id)

        assert "Current status: rejected" in update.progress_update
        assert update.suggested_actions == ["Review case"]

    def test_estimated_timeline(self, engine):
        problem = engine.create_problem(make_draft())
        engine.estimate_resolution(problem.id)

        update = engine.progress_update(problem.id)

        # clock starts 2026-01-10, medium priority with no history: 7 days
        assert update.estimated_timeline == "Expected resolution: Sat Jan 17 2026"

    def test_department_missing_from_directory(self, engine, directory):
        directory.upsert_department(make_department("dept-a", name="Sanitation"))
        problem = engine.create_problem(make_draft())
        engine.assign_department(problem.id, "dept-a")
        engine.change_status(problem.id, "in_progress", "admin-1")
        engine.directory = InMemoryDirectory()

        update = engine.progress_update(problem.id)

        assert "assigned to a department" in update.progress_update
