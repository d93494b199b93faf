"""
Bulk lifecycle operations over many projects.

Every id gets its own independent write. Writes run concurrently and
all of them settle before a result is returned: one failure never
blocks or rolls back the others. There is no retry and no cross-id
transaction; the result lists exactly which ids failed so the caller
can retry just those.
"""

import asyncio
import enum
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from bidflow.core.exceptions import EntityNotFoundException, ValidationException
from bidflow.core.logging import bound_context, get_logger
from bidflow.engine.lifecycle import (
    ApmState,
    FlagPatch,
    GeneralState,
    LifecycleView,
    ProjectFlags,
    remove_from_apm,
    request_transition,
    send_to_apm,
)
from bidflow.services.store import EntityStore

logger = get_logger(__name__)


@dataclass
class BulkResult:
    """Outcome of a bulk operation, shaped for toast/alert rendering."""

    success: bool = True
    success_count: int = 0
    failure_count: int = 0
    errors: list[str] = field(default_factory=list)


class BulkAction(str, enum.Enum):
    """Bulk operations offered on the project tables."""

    MOVE_TO_ACTIVE = "move_to_active"
    ARCHIVE = "archive"
    PUT_ON_HOLD = "on_hold"
    APM_MOVE_TO_ACTIVE = "apm_move_to_active"
    APM_ARCHIVE = "apm_archive"
    APM_PUT_ON_HOLD = "apm_on_hold"
    SEND_TO_APM = "send_to_apm"
    REMOVE_FROM_APM = "remove_from_apm"
    DELETE = "delete"

    @property
    def failure_message(self) -> str:
        return _FAILURE_MESSAGES[self]

    def build_patch(self, flags: ProjectFlags, project_id: int | None = None) -> FlagPatch:
        """
        Patch for one project, validated against its current flags.

        Raises:
            InvalidStateException: the transition is not allowed
            ValueError: the action does not write flags (DELETE)
        """
        if self is BulkAction.SEND_TO_APM:
            return send_to_apm(flags)
        if self is BulkAction.REMOVE_FROM_APM:
            return remove_from_apm(flags)
        if self not in _TARGETS:
            raise ValueError(f"{self.value} does not produce a flag patch")
        target, view = _TARGETS[self]
        return request_transition(flags, target, view, project_id=project_id)


_TARGETS: dict[BulkAction, tuple[GeneralState | ApmState, LifecycleView]] = {
    BulkAction.MOVE_TO_ACTIVE: (GeneralState.ACTIVE, LifecycleView.GENERAL),
    BulkAction.ARCHIVE: (GeneralState.ARCHIVED, LifecycleView.GENERAL),
    BulkAction.PUT_ON_HOLD: (GeneralState.ON_HOLD, LifecycleView.GENERAL),
    BulkAction.APM_MOVE_TO_ACTIVE: (ApmState.ACTIVE, LifecycleView.APM),
    BulkAction.APM_ARCHIVE: (ApmState.ARCHIVED, LifecycleView.APM),
    BulkAction.APM_PUT_ON_HOLD: (ApmState.ON_HOLD, LifecycleView.APM),
}

_FAILURE_MESSAGES: dict[BulkAction, str] = {
    BulkAction.MOVE_TO_ACTIVE: "Failed to move bid {id} to active",
    BulkAction.ARCHIVE: "Failed to archive bid {id}",
    BulkAction.PUT_ON_HOLD: "Failed to move bid {id} to on-hold",
    BulkAction.APM_MOVE_TO_ACTIVE: "Failed to move APM bid {id} to active",
    BulkAction.APM_ARCHIVE: "Failed to archive APM bid {id}",
    BulkAction.APM_PUT_ON_HOLD: "Failed to put APM bid {id} on hold",
    BulkAction.SEND_TO_APM: "Failed to send bid {id} to APM",
    BulkAction.REMOVE_FROM_APM: "Failed to remove bid {id} from APM",
    BulkAction.DELETE: "Failed to delete bid {id}",
}


async def _settle_all(
    ids: Sequence[int],
    operation: Callable[[int], Awaitable[None]],
    failure_message: str,
    result: BulkResult | None = None,
) -> BulkResult:
    """Run ``operation`` for every id concurrently and collect per-id outcomes."""
    if result is None:
        result = BulkResult()
    outcomes = await asyncio.gather(*(operation(item_id) for item_id in ids), return_exceptions=True)

    for item_id, outcome in zip(ids, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                # Cancellation and interpreter exits are not item failures
                raise outcome
            result.errors.append(f"{failure_message.format(id=item_id)}: {outcome}")
            logger.warning("Bulk item failed", item_id=item_id, error=str(outcome))
        else:
            result.success_count += 1

    result.failure_count = len(result.errors)
    result.success = result.failure_count == 0
    return result


def _require_ids(ids: Sequence[int]) -> list[int]:
    ids = list(ids)
    if not ids:
        raise ValidationException("At least one project id is required", {"ids": ["must not be empty"]})
    return ids


async def execute_bulk(
    ids: Sequence[int],
    patch_fn: Callable[[int], FlagPatch],
    store: EntityStore,
    *,
    failure_message: str = "Failed to update bid {id}",
) -> BulkResult:
    """
    Apply a lifecycle patch to many projects independently.

    Every patch is built before the first write, so an
    ``InvalidStateException`` from ``patch_fn`` aborts the whole
    operation with nothing written. An ``EntityNotFoundException`` from
    ``patch_fn`` only fails that id.

    Args:
        ids: Non-empty list of project ids
        patch_fn: Builds the patch for one id
        store: Store receiving one ``update_project`` call per id
        failure_message: Error prefix, formatted with ``id``

    Returns:
        BulkResult: ``success`` is true iff every write succeeded
    """
    ids = _require_ids(ids)

    result = BulkResult()
    patches: dict[int, FlagPatch] = {}
    for project_id in ids:
        try:
            patches[project_id] = patch_fn(project_id)
        except EntityNotFoundException as exc:
            result.errors.append(f"{failure_message.format(id=project_id)}: {exc}")

    writable = [project_id for project_id in ids if project_id in patches]

    async def write(project_id: int) -> None:
        await store.update_project(project_id, patches[project_id].as_update())

    await _settle_all(writable, write, failure_message, result)

    logger.info(
        "Bulk update completed",
        requested=len(ids),
        success_count=result.success_count,
        failure_count=result.failure_count,
    )
    return result


async def run_bulk_action(action: BulkAction, ids: Sequence[int], store: EntityStore) -> BulkResult:
    """
    Run one named bulk action against the current state of each project.

    Projects are loaded first so each patch is checked against that
    project's flags; unknown ids fail individually.
    """
    ids = _require_ids(ids)

    with bound_context(bulk_action=action.value):
        if action is BulkAction.DELETE:
            return await bulk_delete(ids, store)

        projects = await store.get_projects(ids)

        def patch_for(project_id: int) -> FlagPatch:
            project = projects.get(project_id)
            if project is None:
                raise EntityNotFoundException("Project", project_id)
            return action.build_patch(project.flags, project_id)

        return await execute_bulk(ids, patch_for, store, failure_message=action.failure_message)


async def bulk_delete(ids: Sequence[int], store: EntityStore) -> BulkResult:
    """Permanently delete many projects, settling every delete."""
    ids = _require_ids(ids)
    result = await _settle_all(ids, store.delete_project, BulkAction.DELETE.failure_message)
    logger.info(
        "Bulk delete completed",
        requested=len(ids),
        success_count=result.success_count,
        failure_count=result.failure_count,
    )
    return result


async def apply_action(action: BulkAction, project_id: int, store: EntityStore) -> FlagPatch | None:
    """
    Single-project counterpart of :func:`run_bulk_action`.

    Errors propagate to the caller instead of being collected. Returns
    the patch written, or None for DELETE.
    """
    if action is BulkAction.DELETE:
        await store.delete_project(project_id)
        return None

    project = await store.get_project(project_id)
    patch = action.build_patch(project.flags, project_id)
    await store.update_project(project_id, patch.as_update())
    logger.info("Lifecycle transition applied", project_id=project_id, action=action.value)
    return patch
