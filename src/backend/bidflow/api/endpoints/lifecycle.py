"""
Project lifecycle endpoints.

Derived lifecycle state per view and the bulk actions behind the
active / on-hold / archived / APM tables.
"""

from fastapi import APIRouter

from bidflow.api.deps import Store
from bidflow.core.logging import get_logger
from bidflow.engine.lifecycle import LifecycleView, available_transitions
from bidflow.schemas.common import ErrorResponse
from bidflow.schemas.lifecycle import BulkActionRequest, BulkResultResponse, ProjectLifecycleResponse
from bidflow.services.bulk_operations import BulkAction, run_bulk_action

logger = get_logger(__name__)
router = APIRouter()


@router.get(
    "/{project_id}/lifecycle",
    response_model=ProjectLifecycleResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_project_lifecycle(project_id: int, store: Store) -> ProjectLifecycleResponse:
    """Current state of a project in both views."""
    project = await store.get_project(project_id)
    state = project.state

    return ProjectLifecycleResponse(
        project_id=project.id,
        general_state=state.general,
        apm_state=state.apm,
        general_transitions=available_transitions(project.flags, LifecycleView.GENERAL),
        apm_transitions=available_transitions(project.flags, LifecycleView.APM),
    )


@router.post(
    "/bulk/{action}",
    response_model=BulkResultResponse,
    responses={409: {"model": ErrorResponse}},
)
async def run_bulk(action: BulkAction, request: BulkActionRequest, store: Store) -> BulkResultResponse:
    """
    Apply one lifecycle action to every selected project.

    Partial failure is reported in the body with a 200 status; the
    error list names each failed id. A transition that is not allowed
    for one of the projects rejects the whole request before any write.
    """
    logger.info("Bulk action requested", action=action.value, count=len(request.ids))
    result = await run_bulk_action(action, request.ids, store)
    return BulkResultResponse.model_validate(result)
