"""
Project model - a bid tracked through the estimating and APM views.

Lifecycle is stored as five booleans with matching ``*_at`` audit
timestamps; the lifecycle engine derives one state per view from them.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bidflow.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from bidflow.models.vendor_assignment import ProjectVendor


# Lifecycle flag -> audit timestamp column
LIFECYCLE_TIMESTAMPS: dict[str, str] = {
    "archived": "archived_at",
    "on_hold": "on_hold_at",
    "sent_to_apm": "sent_to_apm_at",
    "apm_archived": "apm_archived_at",
    "apm_on_hold": "apm_on_hold_at",
}


class Project(Base, TimestampMixin):
    """
    A construction project ("bid").

    Descriptive columns are carried for the surrounding application; the
    follow-up engine only reads the lifecycle flags and vendor links.
    """

    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("NOT (archived AND on_hold)", name="ck_projects_general_exclusive"),
        CheckConstraint("NOT (apm_archived AND apm_on_hold)", name="ck_projects_apm_exclusive"),
    )

    # Basic Information
    project_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    project_address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    general_contractor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    project_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    estimated_value: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)

    # General lifecycle
    archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    on_hold: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    on_hold_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # APM lifecycle
    sent_to_apm: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    sent_to_apm_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    apm_archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    apm_archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    apm_on_hold: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    apm_on_hold_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    vendor_assignments: Mapped[list["ProjectVendor"]] = relationship(
        "ProjectVendor",
        back_populates="project",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name='{self.project_name[:50]}')>"
