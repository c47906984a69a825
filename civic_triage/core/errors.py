"""
Error taxonomy for the triage engine.

Every error carries the HTTP status the adapter layer should answer with,
so routes never have to guess. None of these are fatal to the service.
"""

from typing import Optional


class TriageError(Exception):
    """Base class for all engine errors."""

    status_code: int = 500

    def __init__(self, detail: str, *, field: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.field = field


class ValidationError(TriageError):
    """Malformed or missing input."""
    status_code = 400


class NotFoundError(TriageError):
    """Unknown problem, department or user reference."""
    status_code = 404


class InvalidTransitionError(TriageError):
    """Requested status change is not an edge of the lifecycle state machine."""
    status_code = 409

    def __init__(self, from_status: str, to_status: str, allowed=None):
        allowed = list(allowed or [])
        super().__init__(
            f"Invalid status transition: {from_status} → {to_status}. "
            f"Allowed transitions from {from_status}: {allowed}"
        )
        self.from_status = from_status
        self.to_status = to_status
        self.allowed = allowed


class NoCandidateError(TriageError):
    """No department is eligible to receive the problem."""
    status_code = 404


class StorageError(TriageError):
    """The persistence layer failed. Retrying is the caller's decision."""
    status_code = 503
