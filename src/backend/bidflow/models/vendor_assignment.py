"""
ProjectVendor model - a vendor assigned to a project.

Per-phase follow-ups live in ``apm_phases``. The single-phase columns
(``apm_phase`` plus one follow-up date per legacy phase) are kept for
assignments created before per-phase tracking existed.
"""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bidflow.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from bidflow.models.phase import ApmPhase
    from bidflow.models.project import Project


# Legacy phase key -> follow-up date column
LEGACY_FOLLOW_UP_COLUMNS: dict[str, str] = {
    "buy_number": "buy_number_follow_up_date",
    "po": "po_follow_up_date",
    "submittals": "submittals_follow_up_date",
    "revised_plans": "revised_plans_follow_up_date",
    "equipment_release": "equipment_release_follow_up_date",
    "closeouts": "closeout_follow_up_date",
}


class ProjectVendor(Base, TimestampMixin):
    """Link between one vendor and one project."""

    __tablename__ = "project_vendors"

    project_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vendor_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    # Set once the closeout package is in; the assignment is then resolved
    closeout_received_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Legacy single-phase tracking
    apm_phase: Mapped[str | None] = mapped_column(
        String(30),
        nullable=True,
        comment="buy_number, po, submittals, revised_plans, equipment_release, closeouts, completed",
    )
    next_follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    buy_number_follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    po_follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    submittals_follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    revised_plans_follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    equipment_release_follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    closeout_follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Relationships
    project: Mapped["Project"] = relationship(
        "Project",
        back_populates="vendor_assignments",
    )
    phases: Mapped[list["ApmPhase"]] = relationship(
        "ApmPhase",
        back_populates="vendor_assignment",
        cascade="all, delete-orphan",
        order_by="ApmPhase.sort_order",
    )

    def __repr__(self) -> str:
        return f"<ProjectVendor(id={self.id}, project_id={self.project_id}, vendor_id={self.vendor_id})>"
