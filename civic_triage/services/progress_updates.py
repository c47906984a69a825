"""
Progress updates - status messages for reporters and next steps for staff.
"""

from typing import Dict, List, Optional

from civic_triage.models.analytics import ProgressUpdate
from civic_triage.models.problem import Problem, ProblemStatus

SUGGESTED_ACTIONS: Dict[ProblemStatus, List[str]] = {
    ProblemStatus.PENDING: ["Review problem details", "Assign to department", "Estimate timeline"],
    ProblemStatus.IN_PROGRESS: ["Monitor progress", "Update reporter", "Allocate resources"],
    ProblemStatus.RESOLVED: ["Verify resolution", "Close case", "Request feedback"],
}

DEFAULT_ACTIONS = ["Review case"]


def progress_message(problem: Problem, department_name: Optional[str] = None) -> str:
    title = problem.title
    municipality = problem.location.municipality

    if problem.status == ProblemStatus.PENDING:
        return (
            f"We've received your report about {title} in {municipality}. Our team is "
            f"currently reviewing the issue and will assign it to the appropriate department shortly."
        )
    if problem.status == ProblemStatus.IN_PROGRESS:
        assignee = f"the {department_name} department" if department_name else "a department"
        return (
            f'Good news! Your reported issue "{title}" has been assigned to {assignee}. '
            f"Our team is actively working on a solution."
        )
    if problem.status == ProblemStatus.RESOLVED:
        return (
            f'We\'re pleased to inform you that the issue "{title}" has been successfully '
            f"resolved. Thank you for helping us improve {municipality}."
        )
    return f"Update on your reported issue: {title}. Current status: {problem.status.value}."


def generate_progress_update(problem: Problem, department_name: Optional[str] = None) -> ProgressUpdate:
    if problem.estimated_resolution_time:
        timeline = f"Expected resolution: {problem.estimated_resolution_time.strftime('%a %b %d %Y')}"
    else:
        timeline = "Timeline being assessed"

    return ProgressUpdate(
        progress_update=progress_message(problem, department_name),
        suggested_actions=list(SUGGESTED_ACTIONS.get(problem.status, DEFAULT_ACTIONS)),
        estimated_timeline=timeline,
    )
