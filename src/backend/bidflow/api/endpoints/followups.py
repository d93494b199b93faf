"""
Follow-up endpoints.

Deadline cards and urgency counters for a project, and the cross-project
follow-up task board.
"""

from fastapi import APIRouter, Query

from bidflow.api.deps import ClockDep, Store, UrgencyOptions
from bidflow.engine.deadlines import (
    count_by_urgency,
    follow_up_tasks,
    soonest_across_assignments,
    tally_tasks,
)
from bidflow.engine.urgency import UrgencyLevel, most_severe
from bidflow.schemas.common import ErrorResponse
from bidflow.schemas.followups import (
    FollowUpTaskListResponse,
    FollowUpTaskResponse,
    NextDeadlineResponse,
    PhaseResponse,
    ProjectFollowUpSummary,
    UrgencyCounts,
)

router = APIRouter()


@router.get(
    "/projects/{project_id}/follow-ups",
    response_model=ProjectFollowUpSummary,
    responses={404: {"model": ErrorResponse}},
)
async def get_project_follow_ups(
    project_id: int,
    store: Store,
    clock: ClockDep,
    options: UrgencyOptions,
) -> ProjectFollowUpSummary:
    """
    Next deadline and urgency breakdown for one project.

    Vendors with a closeout received are ignored; each remaining vendor
    counts once, by its soonest open follow-up.
    """
    # Raises EntityNotFoundException for unknown projects
    await store.get_project(project_id)
    assignments = await store.list_vendor_assignments(project_id)
    today = clock.today()

    next_deadline = soonest_across_assignments(assignments)
    counts = count_by_urgency(assignments, today, **options)

    return ProjectFollowUpSummary(
        project_id=project_id,
        today=today,
        next_deadline=NextDeadlineResponse(
            soonest_date=next_deadline.soonest_date,
            phase_names=sorted(next_deadline.phase_names),
            assignment_count=next_deadline.assignment_count,
        ),
        urgency_counts=UrgencyCounts.from_tally(counts),
        most_severe=most_severe(level for level, count in counts.items() if count),
        open_assignments=sum(1 for assignment in assignments if not assignment.is_closed),
    )


@router.get("/follow-ups/tasks", response_model=FollowUpTaskListResponse)
async def list_follow_up_tasks(
    store: Store,
    clock: ClockDep,
    options: UrgencyOptions,
    urgency: list[UrgencyLevel] | None = Query(default=None),
    project_id: int | None = None,
) -> FollowUpTaskListResponse:
    """
    One row per open phase across all vendor assignments.

    Counts are computed over the filtered rows, matching the quick-stat
    chips shown above the task table.
    """
    assignments = await store.list_vendor_assignments(project_id)
    tasks = follow_up_tasks(assignments, clock.today(), **options)
    if urgency:
        tasks = [task for task in tasks if task.urgency.level in urgency]

    items = [
        FollowUpTaskResponse(
            assignment_id=task.assignment_id,
            project_id=task.project_id,
            vendor_id=task.vendor_id,
            phase=PhaseResponse.model_validate(task.phase),
            follow_up_date=task.follow_up_date,
            urgency=task.urgency.level,
            days_remaining=task.urgency.days_remaining,
            days_overdue=task.urgency.days_overdue,
        )
        for task in tasks
    ]
    return FollowUpTaskListResponse(
        items=items,
        total=len(items),
        counts=UrgencyCounts.from_tally(tally_tasks(tasks)),
    )
