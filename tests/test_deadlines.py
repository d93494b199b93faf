"""
Tests for soonest-deadline aggregation, urgency counts and the task board.
"""

from datetime import date

from bidflow.engine.deadlines import (
    count_by_urgency,
    effective_follow_up_date,
    follow_up_tasks,
    legacy_follow_up_date,
    most_severe_urgency,
    soonest_across_assignments,
    soonest_open_phase,
    tally_tasks,
)
from bidflow.engine.phases import PhaseStatus
from bidflow.engine.urgency import UrgencyLevel
from tests.factories import make_assignment, make_phase


class TestSoonestOpenPhase:

    def test_picks_earliest_open_phase(self):
        assignment = make_assignment(1, [
            make_phase("Requested", "2024-06-15"),
            make_phase("Closeout", "2024-06-12"),
        ])

        soonest = soonest_open_phase(assignment)

        assert soonest.soonest_date == date(2024, 6, 12)
        assert [phase.phase_name for phase in soonest.phases] == ["Closeout"]

    def test_keeps_every_phase_on_the_earliest_day(self):
        assignment = make_assignment(1, [
            make_phase("Submittals", "2024-06-12"),
            make_phase("Purchase Order", "2024-06-20"),
            make_phase("Buy Number", date(2024, 6, 12)),
        ])

        soonest = soonest_open_phase(assignment)

        assert soonest.soonest_date == date(2024, 6, 12)
        assert [phase.phase_name for phase in soonest.phases] == ["Submittals", "Buy Number"]

    def test_mixed_formats_compare_by_calendar_day(self):
        assignment = make_assignment(1, [
            make_phase("Submittals", "2024-06-12T21:00:00-04:00"),
            make_phase("Buy Number", "2024-06-12"),
        ])

        assert len(soonest_open_phase(assignment).phases) == 2

    def test_received_phases_are_excluded(self):
        assignment = make_assignment(1, [
            make_phase("Submittals", "2024-06-01", received="2024-06-02"),
            make_phase("Closeouts", "2024-06-20", status=PhaseStatus.COMPLETED),
            make_phase("Revised Plans", "2024-06-18"),
        ])

        soonest = soonest_open_phase(assignment)

        assert soonest.soonest_date == date(2024, 6, 18)
        assert [phase.phase_name for phase in soonest.phases] == ["Revised Plans"]

    def test_no_open_phase(self):
        assignment = make_assignment(1, [
            make_phase("Submittals", None),
            make_phase("Closeouts", "garbage"),
            make_phase("Buy Number", "2024-06-01", received=date(2024, 6, 1)),
        ])

        soonest = soonest_open_phase(assignment)

        assert soonest.soonest_date is None
        assert soonest.phases == []

    def test_does_not_mutate_input(self):
        phases = [make_phase("B", "2024-06-15"), make_phase("A", "2024-06-12")]
        assignment = make_assignment(1, phases)

        soonest_open_phase(assignment)

        assert [phase.phase_name for phase in assignment.phases] == ["B", "A"]


class TestLegacyFallback:

    def test_uses_current_phase_column(self):
        assignment = make_assignment(
            1,
            current_phase="submittals",
            legacy_follow_up_dates={"submittals": "2024-06-11", "po": "2024-06-01"},
        )

        assert legacy_follow_up_date(assignment) == date(2024, 6, 11)
        assert effective_follow_up_date(assignment) == date(2024, 6, 11)

    def test_completed_has_no_follow_up(self):
        assignment = make_assignment(1, current_phase="completed", next_follow_up_date="2024-06-11")

        assert legacy_follow_up_date(assignment) is None

    def test_unknown_phase_uses_next_follow_up(self):
        assignment = make_assignment(1, current_phase="quote_confirmed", next_follow_up_date="2024-06-11")

        assert legacy_follow_up_date(assignment) == date(2024, 6, 11)

    def test_phase_rows_take_precedence(self):
        assignment = make_assignment(
            1,
            [make_phase("Submittals", "2024-06-20")],
            current_phase="po",
            legacy_follow_up_dates={"po": "2024-06-01"},
        )

        assert effective_follow_up_date(assignment) == date(2024, 6, 20)


class TestSoonestAcrossAssignments:

    def test_union_of_phase_names_on_earliest_day(self):
        assignments = [
            make_assignment(1, [make_phase("Submittals", "2024-06-12")]),
            make_assignment(2, [make_phase("Buy Number", "2024-06-12"), make_phase("Closeouts", "2024-06-30")]),
            make_assignment(3, [make_phase("Revised Plans", "2024-06-14")]),
        ]

        deadline = soonest_across_assignments(assignments)

        assert deadline.has_deadline
        assert deadline.soonest_date == date(2024, 6, 12)
        assert deadline.phase_names == {"Submittals", "Buy Number"}
        assert deadline.assignment_count == 2

    def test_closed_assignments_are_skipped(self):
        assignments = [
            make_assignment(1, [make_phase("Submittals", "2024-06-01")], closeout="2024-06-05"),
            make_assignment(2, [make_phase("Buy Number", "2024-06-12")]),
        ]

        deadline = soonest_across_assignments(assignments)

        assert deadline.soonest_date == date(2024, 6, 12)
        assert deadline.phase_names == {"Buy Number"}

    def test_nothing_open(self):
        deadline = soonest_across_assignments([make_assignment(1, [make_phase("Submittals", None)])])

        assert not deadline.has_deadline
        assert deadline.assignment_count == 0


class TestUrgencyCounts:

    def test_each_assignment_counted_once(self, monday):
        assignments = [
            # Overdue and critical phases: counted once, by the soonest
            make_assignment(1, [make_phase("Submittals", "2024-06-07"), make_phase("Buy Number", "2024-06-12")]),
            make_assignment(2, [make_phase("Closeouts", "2024-06-10")]),
            make_assignment(3, [make_phase("Closeouts", "2024-06-12")]),
            make_assignment(4, [make_phase("Closeouts", "2024-07-01")]),
            make_assignment(5, [make_phase("Closeouts", "2024-06-01")], closeout="2024-06-02"),
            make_assignment(6, [make_phase("Closeouts", None)]),
            make_assignment(7, current_phase="po", legacy_follow_up_dates={"po": "2024-06-03"}),
        ]

        counts = count_by_urgency(assignments, monday)

        assert counts == {
            UrgencyLevel.OVERDUE: 2,
            UrgencyLevel.DUE_TODAY: 1,
            UrgencyLevel.CRITICAL: 1,
            UrgencyLevel.NORMAL: 1,
        }
        assert sum(counts.values()) == 5

    def test_most_severe_urgency(self, monday):
        assignments = [
            make_assignment(1, [make_phase("Closeouts", "2024-06-12")]),
            make_assignment(2, [make_phase("Closeouts", "2024-06-10")]),
        ]

        assert most_severe_urgency(assignments, monday) is UrgencyLevel.DUE_TODAY
        assert most_severe_urgency([], monday) is UrgencyLevel.NORMAL


class TestFollowUpTasks:

    def test_one_task_per_open_phase_sorted(self, monday):
        assignments = [
            make_assignment(2, [
                make_phase("Closeouts", "2024-06-12", phase_id=21, sort_order=2),
                make_phase("Submittals", "2024-06-12", phase_id=20, sort_order=1),
            ], project_id=7),
            make_assignment(1, [
                make_phase("Buy Number", "2024-06-12", phase_id=10),
                make_phase("Purchase Order", "2024-06-07", phase_id=11),
                make_phase("Revised Plans", "2024-06-05", phase_id=12, received="2024-06-06"),
            ]),
            make_assignment(3, [make_phase("Closeouts", "2024-06-01")], closeout="2024-06-02"),
        ]

        tasks = follow_up_tasks(assignments, monday)

        assert [task.phase.id for task in tasks] == [11, 10, 20, 21]
        assert tasks[0].urgency.level is UrgencyLevel.OVERDUE
        assert tasks[2].project_id == 7
        assert tasks[2].vendor_id == 20

    def test_tally(self, monday):
        assignments = [
            make_assignment(1, [make_phase("A", "2024-06-07"), make_phase("B", "2024-06-11")]),
            make_assignment(2, [make_phase("C", "2024-06-11")]),
        ]

        tally = tally_tasks(follow_up_tasks(assignments, monday))

        assert tally[UrgencyLevel.OVERDUE] == 1
        assert tally[UrgencyLevel.CRITICAL] == 2
        assert tally[UrgencyLevel.NORMAL] == 0
