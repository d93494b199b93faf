"""
Entity store used by the follow-up engine.

``EntityStore`` is the narrow contract the engine depends on;
``SqlAlchemyEntityStore`` implements it over the ORM models. Each call
runs in its own session and transaction, so calls may be issued
concurrently and are never atomic with one another.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from bidflow.core.exceptions import EntityNotFoundException, ValidationException
from bidflow.core.logging import LoggerMixin
from bidflow.db.session import get_session_factory, session_scope
from bidflow.engine.lifecycle import ProjectFlags, ProjectSnapshot
from bidflow.engine.phases import Phase, VendorAssignment
from bidflow.models import (
    LEGACY_FOLLOW_UP_COLUMNS,
    LIFECYCLE_TIMESTAMPS,
    ApmPhase,
    Project,
    ProjectVendor,
)


class EntityStore(Protocol):
    """Read snapshots and issue independent writes."""

    async def get_projects(self, project_ids: Iterable[int]) -> dict[int, ProjectSnapshot]: ...

    async def get_project(self, project_id: int) -> ProjectSnapshot: ...

    async def list_vendor_assignments(
        self, project_id: int | None = None
    ) -> list[VendorAssignment]: ...

    async def update_project(self, project_id: int, patch: Mapping[str, Any]) -> None: ...

    async def update_vendor_assignment(self, assignment_id: int, patch: Mapping[str, Any]) -> None: ...

    async def delete_project(self, project_id: int) -> None: ...


# Columns a project patch may touch
PROJECT_WRITABLE = frozenset(LIFECYCLE_TIMESTAMPS) | {
    "project_name",
    "project_address",
    "general_contractor",
    "project_description",
    "due_date",
    "estimated_value",
}

VENDOR_ASSIGNMENT_WRITABLE = frozenset(LEGACY_FOLLOW_UP_COLUMNS.values()) | {
    "closeout_received_date",
    "apm_phase",
    "next_follow_up_date",
}


def project_snapshot(project: Project) -> ProjectSnapshot:
    return ProjectSnapshot(
        id=project.id,
        name=project.project_name,
        flags=ProjectFlags(
            archived=project.archived,
            on_hold=project.on_hold,
            sent_to_apm=project.sent_to_apm,
            apm_archived=project.apm_archived,
            apm_on_hold=project.apm_on_hold,
        ),
    )


def phase_snapshot(phase: ApmPhase) -> Phase:
    return Phase(
        id=phase.id,
        phase_name=phase.phase_name,
        status=phase.status,
        requested_date=phase.requested_date,
        follow_up_date=phase.follow_up_date,
        received_date=phase.received_date,
        notes=phase.notes,
        sort_order=phase.sort_order,
    )


def assignment_snapshot(row: ProjectVendor) -> VendorAssignment:
    return VendorAssignment(
        id=row.id,
        project_id=row.project_id,
        vendor_id=row.vendor_id,
        closeout_received_date=row.closeout_received_date,
        phases=[phase_snapshot(phase) for phase in row.phases],
        current_phase=row.apm_phase,
        legacy_follow_up_dates={
            key: getattr(row, column) for key, column in LEGACY_FOLLOW_UP_COLUMNS.items()
        },
        next_follow_up_date=row.next_follow_up_date,
    )


def _reject_unknown(entity: str, patch: Mapping[str, Any], allowed: frozenset[str]) -> None:
    unknown = sorted(set(patch) - allowed)
    if unknown:
        raise ValidationException(
            f"Cannot update {entity} fields: {', '.join(unknown)}",
            {field: ["not writable"] for field in unknown},
        )


class SqlAlchemyEntityStore(LoggerMixin):
    """
    EntityStore backed by PostgreSQL through async SQLAlchemy.

    Lifecycle audit timestamps follow their flag: set when the flag turns
    true, cleared when it turns false, untouched when it is rewritten
    with the value it already holds.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self.session_factory = session_factory or get_session_factory()

    async def get_projects(self, project_ids: Iterable[int]) -> dict[int, ProjectSnapshot]:
        ids = list(dict.fromkeys(project_ids))
        if not ids:
            return {}
        async with session_scope(self.session_factory) as db:
            result = await db.execute(select(Project).where(Project.id.in_(ids)))
            return {project.id: project_snapshot(project) for project in result.scalars().all()}

    async def get_project(self, project_id: int) -> ProjectSnapshot:
        async with session_scope(self.session_factory) as db:
            project = await db.get(Project, project_id)
            if project is None:
                raise EntityNotFoundException("Project", project_id)
            return project_snapshot(project)

    async def list_vendor_assignments(self, project_id: int | None = None) -> list[VendorAssignment]:
        query = select(ProjectVendor).options(selectinload(ProjectVendor.phases)).order_by(ProjectVendor.id)
        if project_id is not None:
            query = query.where(ProjectVendor.project_id == project_id)
        async with session_scope(self.session_factory) as db:
            result = await db.execute(query)
            return [assignment_snapshot(row) for row in result.scalars().all()]

    async def update_project(self, project_id: int, patch: Mapping[str, Any]) -> None:
        _reject_unknown("project", patch, PROJECT_WRITABLE)
        async with session_scope(self.session_factory) as db:
            project = await db.get(Project, project_id)
            if project is None:
                raise EntityNotFoundException("Project", project_id)

            for field, value in patch.items():
                stamp_column = LIFECYCLE_TIMESTAMPS.get(field)
                if stamp_column and bool(value) != bool(getattr(project, field)):
                    setattr(project, stamp_column, func.now() if value else None)
                setattr(project, field, value)

        self.logger.debug("Project updated", project_id=project_id, fields=sorted(patch))

    async def update_vendor_assignment(self, assignment_id: int, patch: Mapping[str, Any]) -> None:
        _reject_unknown("vendor assignment", patch, VENDOR_ASSIGNMENT_WRITABLE)
        async with session_scope(self.session_factory) as db:
            row = await db.get(ProjectVendor, assignment_id)
            if row is None:
                raise EntityNotFoundException("Vendor assignment", assignment_id)
            for field, value in patch.items():
                setattr(row, field, value)

        self.logger.debug("Vendor assignment updated", assignment_id=assignment_id, fields=sorted(patch))

    async def delete_project(self, project_id: int) -> None:
        async with session_scope(self.session_factory) as db:
            project = await db.get(Project, project_id)
            if project is None:
                raise EntityNotFoundException("Project", project_id)
            await db.execute(
                delete(ApmPhase).where(
                    ApmPhase.project_vendor_id.in_(
                        select(ProjectVendor.id).where(ProjectVendor.project_id == project_id)
                    )
                )
            )
            await db.execute(delete(ProjectVendor).where(ProjectVendor.project_id == project_id))
            await db.delete(project)

        self.logger.info("Project deleted", project_id=project_id)
