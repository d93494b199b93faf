"""
Snapshot types for vendor assignments and their workflow phases.

These are plain dataclasses handed to the engine by the store layer.
The engine reads them and never mutates them.
"""

import enum
from dataclasses import dataclass, field
from datetime import date

from bidflow.engine.dates import DateLike, to_calendar_date


class PhaseStatus(str, enum.Enum):
    """Status vocabulary for a single workflow phase."""

    PENDING = "Pending"
    REQUESTED = "Requested"
    RECEIVED = "Received"
    COMPLETED = "Completed"

    @property
    def is_resolved(self) -> bool:
        return self in (PhaseStatus.RECEIVED, PhaseStatus.COMPLETED)


# Legacy column-based phases, in workflow order
LEGACY_PHASES: dict[str, str] = {
    "buy_number": "Buy Number",
    "po": "Purchase Order",
    "submittals": "Submittals",
    "revised_plans": "Revised Plans",
    "equipment_release": "Equipment Release",
    "closeouts": "Closeouts",
}
COMPLETED_PHASE_KEY = "completed"


@dataclass(frozen=True)
class Phase:
    """One named step of a vendor assignment's workflow."""

    id: int | None
    phase_name: str
    status: PhaseStatus = PhaseStatus.PENDING
    requested_date: DateLike | None = None
    follow_up_date: DateLike | None = None
    received_date: DateLike | None = None
    notes: str | None = None
    sort_order: int = 0

    @property
    def key(self) -> str:
        """Snake-case key derived from the display name."""
        return phase_key(self.phase_name)

    @property
    def is_resolved(self) -> bool:
        return self.status.is_resolved or self.received_date is not None

    @property
    def due_date(self) -> date | None:
        """Parsed follow-up date, or None when missing or malformed."""
        return to_calendar_date(self.follow_up_date)

    @property
    def is_open(self) -> bool:
        """Unresolved and carrying a usable follow-up date."""
        return not self.is_resolved and self.due_date is not None


@dataclass(frozen=True)
class VendorAssignment:
    """
    Link between one vendor and one project.

    ``phases`` holds the per-phase tracking rows. Assignments created
    before per-phase tracking existed only carry ``current_phase`` plus
    the legacy per-phase follow-up columns.
    """

    id: int
    project_id: int
    vendor_id: int
    closeout_received_date: DateLike | None = None
    phases: list[Phase] = field(default_factory=list)
    current_phase: str | None = None
    legacy_follow_up_dates: dict[str, DateLike | None] = field(default_factory=dict)
    next_follow_up_date: DateLike | None = None

    @property
    def is_closed(self) -> bool:
        return self.closeout_received_date is not None

    def open_phases(self) -> list[Phase]:
        return [phase for phase in self.phases if phase.is_open]


def phase_key(name: str) -> str:
    return "_".join(name.strip().lower().split())


def phase_display_name(key: str | None) -> str:
    """Human-readable label for a legacy phase key."""
    if not key:
        return "Unknown Phase"
    if key in LEGACY_PHASES:
        return LEGACY_PHASES[key]
    if key == COMPLETED_PHASE_KEY:
        return "Completed"
    if key == "quote_confirmed":
        return "Quote Confirmed"
    return key.replace("_", " ").upper()


def all_phases_completed(assignment: VendorAssignment) -> bool:
    if not assignment.phases:
        return False
    return all(phase.status is PhaseStatus.COMPLETED for phase in assignment.phases)


def any_phase_started(assignment: VendorAssignment) -> bool:
    return any(
        phase.follow_up_date or phase.requested_date or phase.received_date
        for phase in assignment.phases
    )


def phase_progress(assignment: VendorAssignment) -> int:
    """Percentage of completed phases, rounded to a whole number."""
    if not assignment.phases:
        return 0
    completed = sum(1 for phase in assignment.phases if phase.status is PhaseStatus.COMPLETED)
    return round(completed * 100 / len(assignment.phases))


def current_phase(assignment: VendorAssignment) -> Phase | None:
    """First phase, in workflow order, that is not completed."""
    ordered = sorted(assignment.phases, key=lambda p: p.sort_order)
    return next((p for p in ordered if p.status is not PhaseStatus.COMPLETED), None)


def find_phase(assignment: VendorAssignment, name: str) -> Phase | None:
    """Look a phase up by display name or by its snake-case key."""
    wanted = name.lower()
    for phase in assignment.phases:
        if phase.phase_name == name or phase.key == wanted:
            return phase
    return None
