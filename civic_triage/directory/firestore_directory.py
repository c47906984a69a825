"""
Firestore-backed directory over the users collection.

Departments are user documents with role == "department". Reporter points are
the integer "points" field on the reporter's user document.
"""

import logging
from typing import List, Optional

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPICallError

from civic_triage.config.firebase import get_db
from civic_triage.core.errors import NotFoundError, StorageError
from civic_triage.core.settings import settings
from civic_triage.directory.base import Directory
from civic_triage.models.department import Department
from civic_triage.models.problem import Category
from civic_triage.utils.firestore_helpers import client_or_storage_error, where_filter
from civic_triage.utils.municipality import canonical_municipality

logger = logging.getLogger(__name__)


class FirestoreDirectory(Directory):

    def __init__(self, db=None, collection_name: Optional[str] = None):
        self._db = db
        self.collection_name = collection_name or settings.USERS_COLLECTION

    @property
    def db(self):
        if self._db is None:
            self._db = client_or_storage_error(get_db)
        return self._db

    def _users(self):
        return self.db.collection(self.collection_name)

    def get_department(self, department_id: str) -> Department:
        try:
            doc = self._users().document(department_id).get()
        except GoogleAPICallError as e:
            raise StorageError(f"Failed to read department: {e}") from e

        if not doc.exists or (doc.to_dict() or {}).get("role") != "department":
            raise NotFoundError(f"Department {department_id} not found")
        return Department.from_document(doc.id, doc.to_dict())

    def list_departments(
        self,
        category: Optional[Category] = None,
        municipality: Optional[str] = None,
    ) -> List[Department]:
        query = where_filter(self._users(), "role", "==", "department")
        if category is not None:
            query = where_filter(query, "category", "==", Category(category).value)
        if municipality is not None:
            query = where_filter(query, "municipality", "==", canonical_municipality(municipality))

        try:
            docs = list(query.stream())
        except GoogleAPICallError as e:
            logger.error(f"Failed to list departments: {e}", exc_info=True)
            raise StorageError(f"Failed to list departments: {e}") from e

        departments = [Department.from_document(doc.id, doc.to_dict()) for doc in docs]
        departments.sort(key=lambda d: d.id)
        return departments

    def upsert_department(self, department: Department) -> Department:
        try:
            self._users().document(department.id).set(department.to_document(), merge=True)
        except GoogleAPICallError as e:
            raise StorageError(f"Failed to store department: {e}") from e
        return department

    def award_points(self, user_id: str, points: int) -> int:
        """Read and write the balance in one transaction so the returned value is ours."""
        ref = self._users().document(user_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def credit(transaction):
            snapshot = ref.get(transaction=transaction)
            current = (snapshot.to_dict() or {}).get("points", 0) if snapshot.exists else 0
            balance = current + points
            transaction.set(ref, {"points": balance}, merge=True)
            return balance

        try:
            balance = credit(transaction)
        except (GoogleAPICallError, ValueError) as e:
            logger.error(f"Failed to award points to {user_id}: {e}", exc_info=True)
            raise StorageError(f"Failed to award points: {e}") from e

        logger.info(f"Awarded {points} points to user {user_id} (balance {balance})")
        return balance

    def get_points(self, user_id: str) -> int:
        try:
            doc = self._users().document(user_id).get()
        except GoogleAPICallError as e:
            raise StorageError(f"Failed to read user: {e}") from e
        if not doc.exists:
            return 0
        return (doc.to_dict() or {}).get("points", 0)
