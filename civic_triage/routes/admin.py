"""
Admin endpoints - status workflow, assignment and dashboard statistics.

SCOPE OF ADMIN:
- Change problem status along the lifecycle (pending → in_progress → resolved / rejected)
- Assign a department and set priority
- Read dashboard statistics

Admins can NOT reopen resolved or rejected problems, edit report content,
or delete problems.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from civic_triage.models.analytics import ProblemStats
from civic_triage.models.problem import Priority, Problem, ProblemStatus, ResolutionPayload
from civic_triage.services.engine import TriageEngine, get_triage_engine

router = APIRouter(prefix="/admin", tags=["Admin"])


class StatusUpdateRequest(BaseModel):
    """Request to move a problem along its lifecycle."""
    status: ProblemStatus = Field(..., description="Target status")
    actor_id: str = Field(..., min_length=1, description="Admin or department user making the change")
    note: Optional[str] = Field(None, max_length=500, description="Optional note explaining the change")
    resolution: Optional[ResolutionPayload] = Field(None, description="Required when status is resolved")


class AssignRequest(BaseModel):
    department_id: str = Field(..., min_length=1)


class PriorityRequest(BaseModel):
    priority: Priority


class TagsRequest(BaseModel):
    tags: List[str] = Field(..., min_length=1)


@router.patch("/problems/{problem_id}/status", response_model=Problem)
def update_status(problem_id: str, request: StatusUpdateRequest, engine: TriageEngine = Depends(get_triage_engine)):
    """
    Change problem status.

    Resolving credits the reporter once. Invalid transitions answer 409.
    """
    return engine.change_status(
        problem_id,
        request.status.value,
        request.actor_id,
        resolution=request.resolution,
        note=request.note,
    )


@router.patch("/problems/{problem_id}/assign", response_model=Problem)
def assign_department(problem_id: str, request: AssignRequest, engine: TriageEngine = Depends(get_triage_engine)):
    return engine.assign_department(problem_id, request.department_id)


@router.patch("/problems/{problem_id}/priority", response_model=Problem)
def set_priority(problem_id: str, request: PriorityRequest, engine: TriageEngine = Depends(get_triage_engine)):
    return engine.set_priority(problem_id, request.priority.value)


@router.post("/problems/{problem_id}/tags", response_model=Problem)
def add_tags(problem_id: str, request: TagsRequest, engine: TriageEngine = Depends(get_triage_engine)):
    return engine.add_tags(problem_id, request.tags)


@router.post("/problems/{problem_id}/estimate", response_model=Problem)
def estimate_resolution(problem_id: str, engine: TriageEngine = Depends(get_triage_engine)):
    """Fill estimated_resolution_time from the resolution predictor."""
    return engine.estimate_resolution(problem_id)


@router.get("/stats", response_model=ProblemStats)
def get_stats(engine: TriageEngine = Depends(get_triage_engine)):
    return engine.get_stats()
