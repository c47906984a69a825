"""
ProblemStore interface.

All writes to a problem go through mutate(), which applies a function to a
private copy of the current state and commits it atomically. Implementations
serialize mutate() calls per problem id and let different ids proceed in
parallel. Readers receive snapshots and are never handed live objects.
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar

from civic_triage.models.problem import Category, Problem, ProblemStatus

T = TypeVar("T")

# A mutation edits the problem in place and returns a result for the caller.
# It must not have side effects outside the problem: backends may re-run it.
Mutation = Callable[[Problem], T]


class ProblemStore(ABC):

    @abstractmethod
    def add(self, problem: Problem) -> Problem:
        """Persist a new problem. Returns the stored snapshot."""

    @abstractmethod
    def get(self, problem_id: str) -> Problem:
        """Snapshot of one problem. Raises NotFoundError."""

    @abstractmethod
    def find(
        self,
        category: Optional[Category] = None,
        municipality: Optional[str] = None,
        statuses: Optional[Iterable[ProblemStatus]] = None,
    ) -> List[Problem]:
        """Snapshots matching every given filter, oldest first."""

    @abstractmethod
    def mutate(self, problem_id: str, fn: Mutation) -> Tuple[Problem, T]:
        """
        Atomically apply fn to the problem and bump its version.

        If fn raises, nothing is written and the exception propagates.
        Returns the committed snapshot and fn's return value.
        """

    def ping(self) -> bool:
        """Cheap connectivity check for health endpoints."""
        return True

    @property
    def backend_name(self) -> str:
        return type(self).__name__
