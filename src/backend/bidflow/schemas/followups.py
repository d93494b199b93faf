"""
Schemas for follow-up urgency and deadline endpoints.
"""

from datetime import date

from pydantic import Field

from bidflow.engine.phases import PhaseStatus
from bidflow.engine.urgency import UrgencyLevel
from bidflow.schemas.common import BaseSchema


class UrgencyCounts(BaseSchema):
    """Assignments (or tasks) per urgency level."""

    overdue: int = 0
    due_today: int = 0
    critical: int = 0
    normal: int = 0

    @classmethod
    def from_tally(cls, tally: dict[UrgencyLevel, int]) -> "UrgencyCounts":
        return cls(**{level.value: count for level, count in tally.items()})


class NextDeadlineResponse(BaseSchema):
    """Earliest open follow-up across a project's vendors."""

    soonest_date: date | None = None
    phase_names: list[str] = Field(default_factory=list)
    assignment_count: int = 0


class ProjectFollowUpSummary(BaseSchema):
    """Data behind the project detail deadline cards."""

    project_id: int
    today: date
    next_deadline: NextDeadlineResponse
    urgency_counts: UrgencyCounts
    most_severe: UrgencyLevel
    open_assignments: int = Field(description="Vendor assignments without a closeout")


class PhaseResponse(BaseSchema):
    id: int | None
    phase_name: str
    status: PhaseStatus
    notes: str | None = None


class FollowUpTaskResponse(BaseSchema):
    """One open phase on the follow-up task board."""

    assignment_id: int
    project_id: int
    vendor_id: int
    phase: PhaseResponse
    follow_up_date: date
    urgency: UrgencyLevel
    days_remaining: int = 0
    days_overdue: int = 0


class FollowUpTaskListResponse(BaseSchema):
    items: list[FollowUpTaskResponse]
    total: int
    counts: UrgencyCounts
