"""
Builders and fakes shared by the test modules.
"""

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from bidflow.core.exceptions import EntityNotFoundException
from bidflow.engine.lifecycle import ProjectFlags, ProjectSnapshot
from bidflow.engine.phases import Phase, PhaseStatus, VendorAssignment


class InMemoryStore:
    """EntityStore fake. ``failures`` maps project ids to the error their writes raise."""

    def __init__(
        self,
        projects: Iterable[ProjectSnapshot] = (),
        assignments: Iterable[VendorAssignment] = (),
        failures: Mapping[int, Exception] | None = None,
    ) -> None:
        self.projects = {project.id: project for project in projects}
        self.assignments = list(assignments)
        self.failures = dict(failures or {})
        self.writes: list[tuple[int, dict[str, Any]]] = []
        self.deleted: list[int] = []

    def add_project(self, project_id: int, **flags: bool) -> ProjectSnapshot:
        project = ProjectSnapshot(id=project_id, name=f"Project {project_id}", flags=ProjectFlags(**flags))
        self.projects[project_id] = project
        return project

    def flags(self, project_id: int) -> ProjectFlags:
        return self.projects[project_id].flags

    async def get_projects(self, project_ids: Iterable[int]) -> dict[int, ProjectSnapshot]:
        return {pid: self.projects[pid] for pid in project_ids if pid in self.projects}

    async def get_project(self, project_id: int) -> ProjectSnapshot:
        if project_id not in self.projects:
            raise EntityNotFoundException("Project", project_id)
        return self.projects[project_id]

    async def list_vendor_assignments(self, project_id: int | None = None) -> list[VendorAssignment]:
        return [a for a in self.assignments if project_id is None or a.project_id == project_id]

    async def update_project(self, project_id: int, patch: Mapping[str, Any]) -> None:
        await asyncio.sleep(0)
        if project_id in self.failures:
            raise self.failures[project_id]
        if project_id not in self.projects:
            raise EntityNotFoundException("Project", project_id)
        project = self.projects[project_id]
        self.projects[project_id] = replace(project, flags=replace(project.flags, **patch))
        self.writes.append((project_id, dict(patch)))

    async def update_vendor_assignment(self, assignment_id: int, patch: Mapping[str, Any]) -> None:
        raise NotImplementedError

    async def delete_project(self, project_id: int) -> None:
        await asyncio.sleep(0)
        if project_id in self.failures:
            raise self.failures[project_id]
        if self.projects.pop(project_id, None) is None:
            raise EntityNotFoundException("Project", project_id)
        self.deleted.append(project_id)


def make_phase(
    name: str,
    follow_up: Any = None,
    *,
    received: Any = None,
    status: PhaseStatus = PhaseStatus.REQUESTED,
    phase_id: int | None = None,
    sort_order: int = 0,
) -> Phase:
    return Phase(
        id=phase_id,
        phase_name=name,
        status=status,
        follow_up_date=follow_up,
        received_date=received,
        sort_order=sort_order,
    )


def make_assignment(
    assignment_id: int,
    phases: Iterable[Phase] = (),
    *,
    project_id: int = 1,
    vendor_id: int | None = None,
    closeout: Any = None,
    **legacy: Any,
) -> VendorAssignment:
    return VendorAssignment(
        id=assignment_id,
        project_id=project_id,
        vendor_id=vendor_id if vendor_id is not None else assignment_id * 10,
        closeout_received_date=closeout,
        phases=list(phases),
        **legacy,
    )
