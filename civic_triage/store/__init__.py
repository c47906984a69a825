"""
Problem persistence backends.
"""

import logging

from civic_triage.core.settings import settings
from civic_triage.store.base import ProblemStore
from civic_triage.store.memory import InMemoryProblemStore

logger = logging.getLogger(__name__)


def create_problem_store() -> ProblemStore:
    """Pick the backend from settings. Firestore is imported only when used."""
    if settings.USE_MOCK_DB:
        logger.info("[STORE] Using in-memory problem store")
        return InMemoryProblemStore()

    from civic_triage.store.firestore_store import FirestoreProblemStore
    logger.info("[STORE] Using Firestore problem store")
    return FirestoreProblemStore()


__all__ = ["ProblemStore", "InMemoryProblemStore", "create_problem_store"]
