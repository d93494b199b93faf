"""
ApmPhase model - one tracked workflow step of a vendor assignment.
"""

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bidflow.db.base import Base, TimestampMixin
from bidflow.engine.phases import PhaseStatus

if TYPE_CHECKING:
    from bidflow.models.vendor_assignment import ProjectVendor


class ApmPhase(Base, TimestampMixin):
    """
    A named phase (Buy Number, Submittals, Closeouts, ...) with its dates.

    A phase with a received date is resolved and never counts as a
    pending follow-up.
    """

    __tablename__ = "apm_phases"

    project_vendor_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("project_vendors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    phase_name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[PhaseStatus] = mapped_column(
        Enum(
            PhaseStatus,
            name="phasestatus",
            native_enum=False,
            length=20,
            values_callable=lambda x: [e.value for e in x],
        ),
        default=PhaseStatus.PENDING,
        nullable=False,
    )
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Dates
    requested_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    received_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    vendor_assignment: Mapped["ProjectVendor"] = relationship(
        "ProjectVendor",
        back_populates="phases",
    )

    def __repr__(self) -> str:
        return f"<ApmPhase(id={self.id}, name='{self.phase_name}', status='{self.status.value}')>"
