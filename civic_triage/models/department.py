"""
Department models. Departments are read-only here; the directory owns them.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from civic_triage.models.problem import Category
from civic_triage.utils.municipality import canonical_municipality


class Workload(BaseModel):
    """Point-in-time workload snapshot."""
    active_cases: int = Field(0, ge=0)
    completion_rate: float = Field(0.0, ge=0.0, le=1.0)


class Department(BaseModel):
    id: str
    name: str
    category: Category
    municipality: str
    contact: Optional[str] = None
    workload: Workload = Field(default_factory=Workload)

    @field_validator("municipality")
    @classmethod
    def _canonical_municipality(cls, value: str) -> str:
        return canonical_municipality(value)

    def to_document(self) -> Dict[str, Any]:
        data = self.model_dump(mode="python")
        data["category"] = self.category.value
        data["role"] = "department"
        data.pop("id", None)
        return data

    @classmethod
    def from_document(cls, department_id: str, data: Dict[str, Any]) -> "Department":
        data = {k: v for k, v in data.items() if k in cls.model_fields and k != "id"}
        return cls(id=department_id, **data)
