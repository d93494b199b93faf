"""
Schemas for project lifecycle endpoints.
"""

from pydantic import BaseModel, Field

from bidflow.engine.lifecycle import ApmState, GeneralState
from bidflow.schemas.common import BaseSchema


class ProjectLifecycleResponse(BaseSchema):
    """Derived lifecycle of one project and the moves a UI may offer."""

    project_id: int
    general_state: GeneralState
    apm_state: ApmState
    general_transitions: list[GeneralState]
    apm_transitions: list[ApmState]


class BulkActionRequest(BaseModel):
    """Ids selected in a project table."""

    ids: list[int] = Field(..., min_length=1, description="Project ids to update")


class BulkResultResponse(BaseSchema):
    """Outcome of a bulk operation."""

    success: bool
    success_count: int
    failure_count: int
    errors: list[str] = Field(default_factory=list)
