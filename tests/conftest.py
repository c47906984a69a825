"""Shared fixtures: a controllable clock and an engine over in-memory backends."""

from datetime import datetime, timedelta, timezone

import pytest

from civic_triage.core.scoring import default_scoring_config
from civic_triage.directory.memory import InMemoryDirectory
from civic_triage.models.department import Department, Workload
from civic_triage.services.engine import TriageEngine
from civic_triage.store.memory import InMemoryProblemStore

START = datetime(2026, 1, 10, 9, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def make_draft(**overrides) -> dict:
    draft = {
        "title": "Garbage overflow near market",
        "description": "Bins near the vegetable market have not been emptied for a week.",
        "category": "waste",
        "municipality": "Butwal",
        "ward": 7,
        "reporter_id": "reporter-1",
    }
    draft.update(overrides)
    return draft


def make_department(dept_id: str, active_cases: int = 0, completion_rate: float = 0.0, **overrides) -> Department:
    data = {
        "id": dept_id,
        "name": f"Department {dept_id}",
        "category": "waste",
        "municipality": "Butwal",
        "workload": Workload(active_cases=active_cases, completion_rate=completion_rate),
    }
    data.update(overrides)
    return Department(**data)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store():
    return InMemoryProblemStore()


@pytest.fixture
def directory():
    return InMemoryDirectory()


@pytest.fixture
def config():
    return default_scoring_config()


@pytest.fixture
def engine(store, directory, clock, config):
    return TriageEngine(store, directory, clock=clock, config=config, award_points=10)
