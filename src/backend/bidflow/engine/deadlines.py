"""
Soonest-deadline aggregation across phases and vendor assignments.

Drives the "next follow-up" table column, the "next deadline" card,
urgency counters and the follow-up task board. Every function takes a
snapshot and returns a fresh value; callers may memoize on
(assignments, today).
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from bidflow.engine.dates import to_calendar_date
from bidflow.engine.phases import COMPLETED_PHASE_KEY, LEGACY_PHASES, Phase, VendorAssignment
from bidflow.engine.urgency import (
    DEFAULT_CRITICAL_WINDOW_DAYS,
    UrgencyLevel,
    UrgencyResult,
    assess,
    most_severe,
)


@dataclass(frozen=True)
class SoonestPhases:
    """Earliest open follow-up date of one assignment and the phases sharing it."""

    soonest_date: date | None = None
    phases: list[Phase] = field(default_factory=list)


@dataclass(frozen=True)
class NextDeadline:
    """Earliest open follow-up date across many assignments."""

    soonest_date: date | None = None
    phase_names: frozenset[str] = frozenset()
    assignment_count: int = 0

    @property
    def has_deadline(self) -> bool:
        return self.soonest_date is not None


@dataclass(frozen=True)
class FollowUpTask:
    """One open phase of one assignment, as shown on the task board."""

    assignment_id: int
    project_id: int
    vendor_id: int
    phase: Phase
    follow_up_date: date
    urgency: UrgencyResult


def soonest_open_phase(assignment: VendorAssignment) -> SoonestPhases:
    """
    Find the earliest follow-up date among the assignment's open phases.

    Phases that are received/completed or lack a parsable follow-up date
    are ignored. Every open phase due on the earliest date is returned,
    in their original order.
    """
    open_phases = assignment.open_phases()
    if not open_phases:
        return SoonestPhases()

    soonest = min(phase.due_date for phase in open_phases)
    return SoonestPhases(
        soonest_date=soonest,
        phases=[phase for phase in open_phases if phase.due_date == soonest],
    )


def legacy_follow_up_date(assignment: VendorAssignment) -> date | None:
    """Follow-up date for assignments tracked with the single-phase columns."""
    key = assignment.current_phase
    if key == COMPLETED_PHASE_KEY:
        return None
    if key in LEGACY_PHASES:
        return to_calendar_date(assignment.legacy_follow_up_dates.get(key))
    return to_calendar_date(assignment.next_follow_up_date)


def effective_follow_up_date(assignment: VendorAssignment) -> date | None:
    """Soonest open phase date, or the legacy lookup when no phases are tracked."""
    if assignment.phases:
        return soonest_open_phase(assignment).soonest_date
    return legacy_follow_up_date(assignment)


def soonest_across_assignments(assignments: Iterable[VendorAssignment]) -> NextDeadline:
    """
    Earliest open deadline across assignments, for "next deadline" cards.

    Closed assignments are skipped. The returned phase names are the
    union over every assignment whose own soonest date equals the
    global minimum, and ``assignment_count`` counts those assignments.
    """
    per_assignment = [
        soonest_open_phase(assignment)
        for assignment in assignments
        if not assignment.is_closed
    ]
    dated = [soonest for soonest in per_assignment if soonest.soonest_date is not None]
    if not dated:
        return NextDeadline()

    earliest = min(soonest.soonest_date for soonest in dated)
    matching = [soonest for soonest in dated if soonest.soonest_date == earliest and soonest.phases]
    if not matching:
        return NextDeadline()

    names = frozenset(phase.phase_name for soonest in matching for phase in soonest.phases)
    return NextDeadline(soonest_date=earliest, phase_names=names, assignment_count=len(matching))


def count_by_urgency(
    assignments: Iterable[VendorAssignment],
    today: date,
    *,
    critical_window_days: int = DEFAULT_CRITICAL_WINDOW_DAYS,
    business_days: bool = True,
) -> dict[UrgencyLevel, int]:
    """
    Tally non-closed assignments by the urgency of their soonest deadline.

    Each assignment lands in at most one bucket. Assignments with no
    open deadline are not counted.
    """
    counts = {level: 0 for level in UrgencyLevel}
    for assignment in assignments:
        if assignment.is_closed:
            continue
        due = effective_follow_up_date(assignment)
        if due is None:
            continue
        level = assess(
            today,
            due,
            critical_window_days=critical_window_days,
            business_days=business_days,
        ).level
        counts[level] += 1
    return counts


def most_severe_urgency(
    assignments: Iterable[VendorAssignment],
    today: date,
    *,
    critical_window_days: int = DEFAULT_CRITICAL_WINDOW_DAYS,
    business_days: bool = True,
) -> UrgencyLevel:
    """Worst urgency among non-closed assignments; NORMAL when nothing is due."""
    counts = count_by_urgency(
        assignments,
        today,
        critical_window_days=critical_window_days,
        business_days=business_days,
    )
    return most_severe(level for level, count in counts.items() if count)


def follow_up_tasks(
    assignments: Iterable[VendorAssignment],
    today: date,
    *,
    critical_window_days: int = DEFAULT_CRITICAL_WINDOW_DAYS,
    business_days: bool = True,
) -> list[FollowUpTask]:
    """
    One task per open phase of every non-closed assignment.

    Sorted by follow-up date, then assignment id, then phase order.
    """
    tasks = []
    for assignment in assignments:
        if assignment.is_closed:
            continue
        for phase in assignment.open_phases():
            tasks.append(
                FollowUpTask(
                    assignment_id=assignment.id,
                    project_id=assignment.project_id,
                    vendor_id=assignment.vendor_id,
                    phase=phase,
                    follow_up_date=phase.due_date,
                    urgency=assess(
                        today,
                        phase.due_date,
                        critical_window_days=critical_window_days,
                        business_days=business_days,
                    ),
                )
            )
    tasks.sort(key=lambda t: (t.follow_up_date, t.assignment_id, t.phase.sort_order))
    return tasks


def tally_tasks(tasks: Iterable[FollowUpTask]) -> dict[UrgencyLevel, int]:
    counts = {level: 0 for level in UrgencyLevel}
    for task in tasks:
        counts[task.urgency.level] += 1
    return counts
