"""
Vendor follow-up workflow engine.

Pure, synchronous functions over snapshots: date normalization, urgency
classification, soonest-deadline aggregation and the lifecycle state
machine. Persistence lives in ``bidflow.services``.
"""

from bidflow.engine.deadlines import (
    FollowUpTask,
    NextDeadline,
    SoonestPhases,
    count_by_urgency,
    effective_follow_up_date,
    follow_up_tasks,
    legacy_follow_up_date,
    most_severe_urgency,
    soonest_across_assignments,
    soonest_open_phase,
    tally_tasks,
)
from bidflow.engine.lifecycle import (
    ApmState,
    FlagPatch,
    GeneralState,
    LifecycleState,
    LifecycleView,
    ProjectFlags,
    ProjectSnapshot,
    available_transitions,
    derive_apm_state,
    derive_general_state,
    from_flags,
    remove_from_apm,
    request_transition,
    send_to_apm,
    to_flags,
)
from bidflow.engine.phases import Phase, PhaseStatus, VendorAssignment
from bidflow.engine.urgency import UrgencyLevel, UrgencyResult, assess, classify

__all__ = [
    # Phases
    "Phase",
    "PhaseStatus",
    "VendorAssignment",
    # Urgency
    "UrgencyLevel",
    "UrgencyResult",
    "assess",
    "classify",
    # Deadlines
    "FollowUpTask",
    "NextDeadline",
    "SoonestPhases",
    "count_by_urgency",
    "effective_follow_up_date",
    "follow_up_tasks",
    "legacy_follow_up_date",
    "most_severe_urgency",
    "soonest_across_assignments",
    "soonest_open_phase",
    "tally_tasks",
    # Lifecycle
    "ApmState",
    "FlagPatch",
    "GeneralState",
    "LifecycleState",
    "LifecycleView",
    "ProjectFlags",
    "ProjectSnapshot",
    "available_transitions",
    "derive_apm_state",
    "derive_general_state",
    "from_flags",
    "remove_from_apm",
    "request_transition",
    "send_to_apm",
    "to_flags",
]
