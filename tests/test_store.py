"""Tests for civic_triage.store.memory.

The in-memory store is the reference implementation of the ProblemStore
contract: snapshots out, atomic per-problem mutations in.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from civic_triage.core.errors import NotFoundError, ValidationError
from civic_triage.models.problem import Category, Location, Problem, ProblemStatus
from civic_triage.store.memory import InMemoryProblemStore

from conftest import START


def _problem(problem_id: str, **overrides) -> Problem:
    data = {
        "id": problem_id,
        "title": "Broken street light",
        "description": "Light has been out for days",
        "category": Category.ELECTRICAL,
        "location": Location(municipality="Butwal", ward=3),
        "reporter_id": "reporter-1",
        "created_at": START,
        "updated_at": START,
    }
    data.update(overrides)
    return Problem(**data)


class TestSnapshots:
    """Readers never get live objects."""

    def test_get_returns_copy(self):
        store = InMemoryProblemStore()
        store.add(_problem("p1"))

        snapshot = store.get("p1")
        snapshot.upvoters.append("intruder")

        assert store.get("p1").upvoters == []

    def test_add_does_not_alias_input(self):
        store = InMemoryProblemStore()
        problem = _problem("p1")
        store.add(problem)
        problem.title = "changed after add"

        assert store.get("p1").title == "Broken street light"

    def test_get_unknown_raises(self):
        with pytest.raises(NotFoundError):
            InMemoryProblemStore().get("missing")

    def test_duplicate_id_rejected(self):
        store = InMemoryProblemStore()
        store.add(_problem("p1"))
        with pytest.raises(ValidationError):
            store.add(_problem("p1"))


class TestMutate:

    def test_mutate_bumps_version_and_returns_result(self):
        store = InMemoryProblemStore()
        store.add(_problem("p1"))

        def apply(problem):
            problem.tags.append("night")
            return "ok"

        problem, result = store.mutate("p1", apply)

        assert result == "ok"
        assert problem.version == 1
        assert store.get("p1").tags == ["night"]

    def test_failed_mutation_writes_nothing(self):
        store = InMemoryProblemStore()
        store.add(_problem("p1"))

        def apply(problem):
            problem.tags.append("half-written")
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            store.mutate("p1", apply)

        stored = store.get("p1")
        assert stored.tags == []
        assert stored.version == 0

    def test_mutate_unknown_raises(self):
        with pytest.raises(NotFoundError):
            InMemoryProblemStore().mutate("missing", lambda p: None)

    def test_concurrent_mutations_are_not_lost(self):
        """Every concurrent append must survive."""
        store = InMemoryProblemStore()
        store.add(_problem("p1"))

        def append(user_id):
            store.mutate("p1", lambda p: p.upvoters.append(user_id))

        users = [f"user-{i}" for i in range(200)]
        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(append, users))

        stored = store.get("p1")
        assert sorted(stored.upvoters) == sorted(users)
        assert stored.version == len(users)


class TestFind:

    @pytest.fixture
    def store(self):
        store = InMemoryProblemStore()
        store.add(_problem("late", created_at=START + timedelta(days=2)))
        store.add(_problem("early", created_at=START))
        store.add(_problem("water", category=Category.WATER))
        store.add(_problem("elsewhere", location=Location(municipality="Tilottama", ward=1)))
        store.add(_problem("done", status=ProblemStatus.RESOLVED, created_at=START + timedelta(days=1)))
        return store

    def test_no_filters_returns_all_oldest_first(self, store):
        ids = [p.id for p in store.find()]
        assert len(ids) == 5
        assert ids.index("early") < ids.index("done") < ids.index("late")

    def test_filter_by_category(self, store):
        assert [p.id for p in store.find(category=Category.WATER)] == ["water"]

    def test_municipality_match_ignores_case(self, store):
        ids = {p.id for p in store.find(municipality="  tilottama ")}
        assert ids == {"elsewhere"}

    def test_filter_by_status(self, store):
        ids = {p.id for p in store.find(statuses=[ProblemStatus.RESOLVED])}
        assert ids == {"done"}

    def test_empty_status_list_matches_nothing(self, store):
        assert store.find(statuses=[]) == []
