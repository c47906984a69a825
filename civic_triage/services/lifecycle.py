"""
Lifecycle Controller - problem state machine and every write to a problem.

DESIGN PRINCIPLES:
- No transition out of a terminal state (resolved, rejected)
- Repeating the current status is rejected, not treated as a no-op
- All transitions logged in status_history
- Every mutation goes through ProblemStore.mutate(), so writes to one
  problem are serialized and never lose a concurrent upvote
- The reporter award happens once per problem, on the edge into resolved
"""

import logging
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from civic_triage.core.errors import InvalidTransitionError, ValidationError
from civic_triage.core.settings import settings
from civic_triage.directory.base import Directory
from civic_triage.models.problem import (
    Category,
    Comment,
    Location,
    Priority,
    Problem,
    ProblemDraft,
    ProblemStatus,
    ResolutionDetails,
    ResolutionPayload,
    StatusHistoryEntry,
    UpvoteResult,
)
from civic_triage.store.base import ProblemStore
from civic_triage.utils.municipality import canonical_municipality
from civic_triage.utils.time import Clock, utc_now

logger = logging.getLogger(__name__)


class LifecycleController:
    """
    Sole writer of status and resolution_details.

    pending → in_progress → resolved
    pending → resolved
    pending / in_progress → rejected
    """

    # Allowed transitions map: {from_status: [to_status, ...]}
    ALLOWED_TRANSITIONS: Dict[ProblemStatus, List[ProblemStatus]] = {
        ProblemStatus.PENDING: [ProblemStatus.IN_PROGRESS, ProblemStatus.RESOLVED, ProblemStatus.REJECTED],
        ProblemStatus.IN_PROGRESS: [ProblemStatus.RESOLVED, ProblemStatus.REJECTED],
        ProblemStatus.RESOLVED: [],  # Terminal
        ProblemStatus.REJECTED: [],  # Terminal
    }

    def __init__(
        self,
        store: ProblemStore,
        directory: Directory,
        clock: Clock = utc_now,
        award_points: Optional[int] = None,
    ):
        self.store = store
        self.directory = directory
        self.clock = clock
        self.award_points = settings.RESOLUTION_AWARD_POINTS if award_points is None else award_points

    @classmethod
    def is_valid_transition(cls, from_status: str, to_status: str) -> bool:
        try:
            from_enum = ProblemStatus(from_status)
            to_enum = ProblemStatus(to_status)
        except ValueError:
            return False
        return to_enum in cls.ALLOWED_TRANSITIONS.get(from_enum, [])

    @classmethod
    def get_allowed_transitions(cls, current_status: str) -> List[str]:
        try:
            current_enum = ProblemStatus(current_status)
        except ValueError:
            return []
        return [status.value for status in cls.ALLOWED_TRANSITIONS.get(current_enum, [])]

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(self, draft: ProblemDraft) -> Problem:
        """
        Validate a reporter draft and store it as a new pending problem.

        Raises:
            ValidationError: required field missing or category unknown
        """
        missing = [
            name for name, value in (
                ("title", draft.title),
                ("description", draft.description),
                ("category", draft.category),
                ("municipality", draft.municipality),
                ("ward", draft.ward),
                ("reporter_id", draft.reporter_id),
            )
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", field=missing[0])

        try:
            category = Category(draft.category.strip().lower())
        except ValueError:
            allowed = [c.value for c in Category]
            raise ValidationError(f"Invalid category '{draft.category}'. Allowed: {allowed}", field="category")

        now = self.clock()
        problem = Problem(
            id=uuid.uuid4().hex,
            title=draft.title.strip(),
            description=draft.description.strip(),
            category=category,
            sub_category=draft.sub_category,
            location=Location(
                municipality=canonical_municipality(draft.municipality),
                ward=draft.ward,
                exact_location=draft.exact_location,
                coordinates=draft.coordinates,
                landmark=draft.landmark,
            ),
            reporter_id=draft.reporter_id,
            is_anonymous=draft.is_anonymous,
            images=list(draft.images),
            tags=_normalize_tags(draft.tags),
            created_at=now,
            updated_at=now,
        )

        stored = self.store.add(problem)
        logger.info(
            f"Problem created: {stored.id} ({stored.category.value}, "
            f"{stored.location.municipality} ward {stored.location.ward})"
        )
        return stored

    # ------------------------------------------------------------------
    # Community interaction
    # ------------------------------------------------------------------

    def toggle_upvote(self, problem_id: str, user_id: str) -> UpvoteResult:
        """
        Add the user's upvote if absent, remove it if present.

        Raises:
            NotFoundError: unknown problem
            ValidationError: empty user id
        """
        if not user_id or not user_id.strip():
            raise ValidationError("user_id is required to upvote", field="user_id")

        now = self.clock()

        def apply(problem: Problem) -> bool:
            if user_id in problem.upvoters:
                problem.upvoters.remove(user_id)
                upvoted = False
            else:
                problem.upvoters.append(user_id)
                upvoted = True
            problem.upvote_count = len(problem.upvoters)
            problem.updated_at = now
            return upvoted

        problem, upvoted = self.store.mutate(problem_id, apply)
        logger.debug(f"User {user_id} {'upvoted' if upvoted else 'removed upvote on'} problem {problem_id}")
        return UpvoteResult(upvoted=upvoted, count=problem.upvote_count)

    def add_comment(
        self,
        problem_id: str,
        author_id: Optional[str],
        text: str,
        is_anonymous: bool = False,
    ) -> Comment:
        """
        Append a comment with a server-assigned timestamp.

        An anonymous comment (or one without an author) stores no author id.
        """
        if text is None or not text.strip():
            raise ValidationError("Comment text must not be empty", field="text")

        anonymous = is_anonymous or not author_id
        comment = Comment(
            id=uuid.uuid4().hex,
            author_id=None if anonymous else author_id,
            is_anonymous=anonymous,
            text=text.strip(),
            created_at=self.clock(),
        )

        def apply(problem: Problem) -> None:
            problem.comments.append(comment)
            problem.updated_at = comment.created_at

        self.store.mutate(problem_id, apply)
        logger.info(f"Comment {comment.id} added to problem {problem_id}")
        return comment

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def transition_status(
        self,
        problem_id: str,
        target_status: str,
        actor: str,
        resolution: Optional[ResolutionPayload] = None,
        note: Optional[str] = None,
    ) -> Problem:
        """
        Move a problem along the state machine.

        Resolving requires a resolution payload and records resolved_at/by.
        The first (and only) entry into resolved credits the reporter.

        Raises:
            ValidationError: unknown target, missing actor or resolution payload
            InvalidTransitionError: target not reachable from the current status
            NotFoundError: unknown problem
        """
        try:
            target = ProblemStatus(target_status)
        except ValueError:
            allowed = [s.value for s in ProblemStatus]
            raise ValidationError(f"Invalid status '{target_status}'. Allowed: {allowed}", field="status")

        if not actor or not actor.strip():
            raise ValidationError("actor is required to change status", field="actor")

        now = self.clock()

        def apply(problem: Problem) -> bool:
            current = problem.status
            if not self.is_valid_transition(current, target):
                raise InvalidTransitionError(current.value, target.value, self.get_allowed_transitions(current))

            # after the legality check, so terminal states always report InvalidTransitionError
            if target == ProblemStatus.RESOLVED and (resolution is None or not resolution.description.strip()):
                raise ValidationError("Resolution details are required to resolve a problem", field="resolution")

            award = False
            if target == ProblemStatus.RESOLVED:
                problem.resolution_details = ResolutionDetails(
                    resolved_at=now,
                    resolved_by=actor,
                    description=resolution.description.strip(),
                    images=list(resolution.images),
                    cost=resolution.cost,
                )
                if not problem.points_awarded:
                    problem.points_awarded = True
                    award = True

            problem.status = target
            problem.status_history.append(StatusHistoryEntry(
                from_status=current,
                to_status=target,
                changed_by=actor,
                timestamp=now,
                note=note or "",
            ))
            problem.updated_at = now
            return award

        problem, award = self.store.mutate(problem_id, apply)
        logger.info(f"Problem {problem_id} status changed to {target.value} by {actor}")

        if award and self.award_points:
            self.directory.award_points(problem.reporter_id, self.award_points)

        return problem

    def assign_department(self, problem_id: str, department_id: str) -> Problem:
        """
        Set assigned_to. Status is left alone.

        Raises:
            NotFoundError: unknown problem or department
        """
        department = self.directory.get_department(department_id)
        now = self.clock()

        def apply(problem: Problem) -> None:
            problem.assigned_to = department.id
            problem.updated_at = now

        problem, _ = self.store.mutate(problem_id, apply)
        logger.info(f"Problem {problem_id} assigned to department {department.id}")
        return problem

    def set_priority(self, problem_id: str, priority: str) -> Problem:
        try:
            level = Priority(priority)
        except ValueError:
            allowed = [p.value for p in Priority]
            raise ValidationError(f"Invalid priority '{priority}'. Allowed: {allowed}", field="priority")

        now = self.clock()

        def apply(problem: Problem) -> None:
            problem.priority = level
            problem.updated_at = now

        problem, _ = self.store.mutate(problem_id, apply)
        logger.info(f"Problem {problem_id} priority set to {level.value}")
        return problem

    def set_estimated_resolution(self, problem_id: str, when: datetime) -> Problem:
        now = self.clock()

        def apply(problem: Problem) -> None:
            problem.estimated_resolution_time = when
            problem.updated_at = now

        problem, _ = self.store.mutate(problem_id, apply)
        return problem

    def add_tags(self, problem_id: str, tags: Iterable[str]) -> Problem:
        new_tags = _normalize_tags(tags)
        now = self.clock()

        def apply(problem: Problem) -> None:
            for tag in new_tags:
                if tag not in problem.tags:
                    problem.tags.append(tag)
            problem.updated_at = now

        problem, _ = self.store.mutate(problem_id, apply)
        return problem


def _normalize_tags(tags: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for tag in tags or []:
        cleaned = tag.strip().lower() if isinstance(tag, str) else ""
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen
