"""
In-memory ProblemStore.

Used for tests and for local development (USE_MOCK_DB=true).

Concurrency: one lock per problem id serializes writers to that problem.
Committed problems are never edited in place; mutate() swaps in a new object,
so readers copy whatever is current without taking the per-problem lock.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from civic_triage.core.errors import NotFoundError, ValidationError
from civic_triage.models.problem import Category, Problem, ProblemStatus
from civic_triage.store.base import Mutation, ProblemStore, T
from civic_triage.utils.municipality import same_municipality

logger = logging.getLogger(__name__)


class InMemoryProblemStore(ProblemStore):

    def __init__(self):
        self._problems: Dict[str, Problem] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def add(self, problem: Problem) -> Problem:
        stored = problem.model_copy(deep=True)
        with self._registry_lock:
            if stored.id in self._problems:
                raise ValidationError(f"Problem {stored.id} already exists", field="id")
            self._locks[stored.id] = threading.Lock()
            self._problems[stored.id] = stored
        return stored.model_copy(deep=True)

    def get(self, problem_id: str) -> Problem:
        problem = self._problems.get(problem_id)
        if problem is None:
            raise NotFoundError(f"Problem {problem_id} not found")
        return problem.model_copy(deep=True)

    def find(
        self,
        category: Optional[Category] = None,
        municipality: Optional[str] = None,
        statuses: Optional[Iterable[ProblemStatus]] = None,
    ) -> List[Problem]:
        wanted = set(statuses) if statuses is not None else None
        results = []
        for problem in list(self._problems.values()):
            if category is not None and problem.category != category:
                continue
            if municipality is not None and not same_municipality(problem.location.municipality, municipality):
                continue
            if wanted is not None and problem.status not in wanted:
                continue
            results.append(problem.model_copy(deep=True))
        results.sort(key=lambda p: (p.created_at, p.id))
        return results

    def mutate(self, problem_id: str, fn: Mutation) -> Tuple[Problem, T]:
        lock = self._locks.get(problem_id)
        if lock is None:
            raise NotFoundError(f"Problem {problem_id} not found")

        with lock:
            current = self._problems[problem_id]
            working = current.model_copy(deep=True)
            result = fn(working)
            working.version = current.version + 1
            self._problems[problem_id] = working
            logger.debug(f"Committed problem {problem_id} at version {working.version}")
            return working.model_copy(deep=True), result

    def clear(self) -> None:
        with self._registry_lock:
            self._problems.clear()
            self._locks.clear()

    def __len__(self) -> int:
        return len(self._problems)
