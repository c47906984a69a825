"""
In-memory directory for tests and local development.
"""

import logging
import threading
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from civic_triage.core.errors import NotFoundError
from civic_triage.directory.base import Directory
from civic_triage.models.department import Department
from civic_triage.models.problem import Category
from civic_triage.utils.municipality import same_municipality

logger = logging.getLogger(__name__)


class InMemoryDirectory(Directory):

    def __init__(self, departments: Optional[Iterable[Department]] = None):
        self._departments: Dict[str, Department] = {}
        self._points: Dict[str, int] = defaultdict(int)
        self._lock = threading.Lock()
        for department in departments or []:
            self.upsert_department(department)

    def upsert_department(self, department: Department) -> Department:
        with self._lock:
            self._departments[department.id] = department.model_copy(deep=True)
        return department

    def get_department(self, department_id: str) -> Department:
        department = self._departments.get(department_id)
        if department is None:
            raise NotFoundError(f"Department {department_id} not found")
        return department.model_copy(deep=True)

    def list_departments(
        self,
        category: Optional[Category] = None,
        municipality: Optional[str] = None,
    ) -> List[Department]:
        results = []
        for department in list(self._departments.values()):
            if category is not None and department.category != category:
                continue
            if municipality is not None and not same_municipality(department.municipality, municipality):
                continue
            results.append(department.model_copy(deep=True))
        results.sort(key=lambda d: d.id)
        return results

    def award_points(self, user_id: str, points: int) -> int:
        with self._lock:
            self._points[user_id] += points
            balance = self._points[user_id]
        logger.info(f"Awarded {points} points to user {user_id} (balance {balance})")
        return balance

    def get_points(self, user_id: str) -> int:
        return self._points.get(user_id, 0)
