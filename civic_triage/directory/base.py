"""
User/Department directory interface.

The engine reads department workload snapshots from here and credits
reporter points on resolution.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from civic_triage.models.department import Department
from civic_triage.models.problem import Category


class Directory(ABC):

    @abstractmethod
    def get_department(self, department_id: str) -> Department:
        """Raises NotFoundError for unknown ids."""

    @abstractmethod
    def list_departments(
        self,
        category: Optional[Category] = None,
        municipality: Optional[str] = None,
    ) -> List[Department]:
        """Departments matching the filters, ordered by id."""

    @abstractmethod
    def upsert_department(self, department: Department) -> Department:
        """Create or replace a department record."""

    @abstractmethod
    def award_points(self, user_id: str, points: int) -> int:
        """Credit points to a user. Returns the new balance."""

    @abstractmethod
    def get_points(self, user_id: str) -> int:
        """Current balance, 0 for users never credited."""
