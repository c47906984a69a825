"""
Pydantic models for reported civic problems.
These models describe the stored entity and the payloads that create or
mutate it. Business rules live in the services layer, not here.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from civic_triage.utils.municipality import canonical_municipality
from civic_triage.utils.time import utc_now


class Category(str, Enum):
    """Problem categories. Departments specialize in exactly one."""
    WASTE = "waste"
    ELECTRICAL = "electrical"
    WATER = "water"
    STREET = "street"
    OTHER = "other"


class ProblemStatus(str, Enum):
    """
    Lifecycle states.

    pending → in_progress → resolved
    pending / in_progress → rejected
    resolved and rejected are terminal.
    """
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class Location(BaseModel):
    """Where the problem is. Municipality and ward are mandatory."""
    municipality: str = Field(..., description="Municipality name")
    ward: int = Field(..., description="Ward number within the municipality")
    exact_location: Optional[str] = Field(None, description="Free-text location")
    coordinates: Optional[Coordinates] = None
    landmark: Optional[str] = None

    @field_validator("municipality")
    @classmethod
    def _canonical_municipality(cls, value: str) -> str:
        return canonical_municipality(value)


class Comment(BaseModel):
    """A comment on a problem. Immutable once appended."""
    id: str
    author_id: Optional[str] = Field(None, description="None when posted anonymously")
    is_anonymous: bool = False
    text: str
    created_at: datetime


class ResolutionDetails(BaseModel):
    resolved_at: datetime
    resolved_by: str
    description: str
    images: List[str] = Field(default_factory=list)
    cost: Optional[float] = Field(None, ge=0)


class StatusHistoryEntry(BaseModel):
    """Status transition audit entry."""
    from_status: ProblemStatus
    to_status: ProblemStatus
    changed_by: str
    timestamp: datetime
    note: str = ""


class ProblemDraft(BaseModel):
    """
    Reporter-supplied fields for a new problem.

    Every field is optional here; the lifecycle controller reports missing
    required fields as a ValidationError naming the first one.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    municipality: Optional[str] = None
    ward: Optional[int] = None
    exact_location: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    landmark: Optional[str] = None
    reporter_id: Optional[str] = None
    is_anonymous: bool = False
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Garbage overflow near market",
                "description": "Bins near the vegetable market have not been emptied for a week.",
                "category": "waste",
                "municipality": "Butwal",
                "ward": 7,
                "exact_location": "Traffic Chowk, east side",
                "reporter_id": "user-42",
                "is_anonymous": False,
            }
        }
        extra = "ignore"


class ResolutionPayload(BaseModel):
    """Extra data required to move a problem to resolved."""
    description: str = Field(..., description="What was done to resolve the problem")
    images: List[str] = Field(default_factory=list)
    cost: Optional[float] = Field(None, ge=0)


class Problem(BaseModel):
    """
    Stored problem entity.

    Invariants maintained by the lifecycle controller:
    - upvote_count == len(upvoters)
    - resolution_details is set iff status == resolved
    """
    id: str
    title: str
    description: str
    category: Category
    sub_category: Optional[str] = None
    location: Location
    reporter_id: str
    is_anonymous: bool = False
    images: List[str] = Field(default_factory=list)

    status: ProblemStatus = ProblemStatus.PENDING
    priority: Priority = Priority.MEDIUM
    assigned_to: Optional[str] = None
    upvoters: List[str] = Field(default_factory=list)
    upvote_count: int = 0
    comments: List[Comment] = Field(default_factory=list)
    resolution_details: Optional[ResolutionDetails] = None
    tags: List[str] = Field(default_factory=list)
    estimated_resolution_time: Optional[datetime] = None
    status_history: List[StatusHistoryEntry] = Field(default_factory=list)
    points_awarded: bool = False

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    version: int = 0

    def to_document(self) -> Dict[str, Any]:
        """Serialize for storage (enums as values, datetimes kept native)."""
        data = self.model_dump(mode="python")
        data["category"] = self.category.value
        data["status"] = self.status.value
        data["priority"] = self.priority.value
        for entry in data["status_history"]:
            entry["from_status"] = entry["from_status"].value
            entry["to_status"] = entry["to_status"].value
        data.pop("id", None)
        return data

    @classmethod
    def from_document(cls, problem_id: str, data: Dict[str, Any]) -> "Problem":
        return cls(id=problem_id, **data)


class UpvoteResult(BaseModel):
    upvoted: bool
    count: int
