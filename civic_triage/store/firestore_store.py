"""
Firestore-backed ProblemStore.

Each problem is one document in the problems collection. mutate() runs inside
a Firestore transaction: the document is read, the mutation is applied to a
fresh model, and the result is written back. Concurrent writers to the same
document make Firestore abort and re-run the transaction, which is why
mutations must be free of outside side effects. Writes to different documents
never contend.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists, GoogleAPICallError

from civic_triage.config.firebase import get_db
from civic_triage.core.errors import NotFoundError, StorageError, TriageError, ValidationError
from civic_triage.core.settings import settings
from civic_triage.models.problem import Category, Problem, ProblemStatus
from civic_triage.store.base import Mutation, ProblemStore, T
from civic_triage.utils.firestore_helpers import client_or_storage_error, where_filter
from civic_triage.utils.municipality import canonical_municipality

logger = logging.getLogger(__name__)


class FirestoreProblemStore(ProblemStore):

    def __init__(self, db=None, collection_name: Optional[str] = None):
        self._db = db
        self.collection_name = collection_name or settings.PROBLEMS_COLLECTION

    @property
    def db(self):
        if self._db is None:
            self._db = client_or_storage_error(get_db)
        return self._db

    def _collection(self):
        return self.db.collection(self.collection_name)

    def add(self, problem: Problem) -> Problem:
        ref = self._collection().document(problem.id)
        try:
            # create() fails if the document already exists
            ref.create(problem.to_document())
        except AlreadyExists:
            raise ValidationError(f"Problem {problem.id} already exists", field="id")
        except GoogleAPICallError as e:
            logger.error(f"Failed to store problem {problem.id}: {e}", exc_info=True)
            raise StorageError(f"Failed to store problem: {e}") from e
        return problem.model_copy(deep=True)

    def get(self, problem_id: str) -> Problem:
        try:
            snapshot = self._collection().document(problem_id).get()
        except GoogleAPICallError as e:
            logger.error(f"Failed to read problem {problem_id}: {e}", exc_info=True)
            raise StorageError(f"Failed to read problem: {e}") from e

        if not snapshot.exists:
            raise NotFoundError(f"Problem {problem_id} not found")
        return Problem.from_document(snapshot.id, snapshot.to_dict())

    def find(
        self,
        category: Optional[Category] = None,
        municipality: Optional[str] = None,
        statuses: Optional[Iterable[ProblemStatus]] = None,
    ) -> List[Problem]:
        query = self._collection()
        if category is not None:
            query = where_filter(query, "category", "==", Category(category).value)
        if municipality is not None:
            query = where_filter(query, "location.municipality", "==", canonical_municipality(municipality))
        if statuses is not None:
            values = [ProblemStatus(s).value for s in statuses]
            if not values:
                return []
            query = where_filter(query, "status", "in", values)

        try:
            problems = [Problem.from_document(doc.id, doc.to_dict()) for doc in query.stream()]
        except GoogleAPICallError as e:
            logger.error(f"Failed to query problems: {e}", exc_info=True)
            raise StorageError(f"Failed to query problems: {e}") from e

        # Sorted client-side so no composite index is needed per filter combination
        problems.sort(key=lambda p: (p.created_at, p.id))
        return problems

    def mutate(self, problem_id: str, fn: Mutation) -> Tuple[Problem, T]:
        ref = self._collection().document(problem_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def apply_in_transaction(transaction):
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError(f"Problem {problem_id} not found")
            problem = Problem.from_document(snapshot.id, snapshot.to_dict())
            result = fn(problem)
            problem.version += 1
            transaction.set(ref, problem.to_document())
            return problem, result

        try:
            problem, result = apply_in_transaction(transaction)
        except TriageError:
            raise
        except (GoogleAPICallError, ValueError) as e:
            # ValueError: retries on contention exhausted
            logger.error(f"Transaction on problem {problem_id} failed: {e}", exc_info=True)
            raise StorageError(f"Failed to update problem: {e}") from e

        logger.debug(f"Committed problem {problem_id} at version {problem.version}")
        return problem, result

    def ping(self) -> bool:
        try:
            list(self._collection().limit(1).stream())
        except GoogleAPICallError as e:
            raise StorageError(f"Firestore unavailable: {e}") from e
        return True
