"""
Pydantic schemas for API request/response validation.
"""

from bidflow.schemas.common import BaseSchema, ErrorDetail, ErrorResponse, HealthResponse
from bidflow.schemas.followups import (
    FollowUpTaskListResponse,
    FollowUpTaskResponse,
    NextDeadlineResponse,
    PhaseResponse,
    ProjectFollowUpSummary,
    UrgencyCounts,
)
from bidflow.schemas.lifecycle import BulkActionRequest, BulkResultResponse, ProjectLifecycleResponse

__all__ = [
    # Common
    "BaseSchema",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    # Follow-ups
    "FollowUpTaskListResponse",
    "FollowUpTaskResponse",
    "NextDeadlineResponse",
    "PhaseResponse",
    "ProjectFollowUpSummary",
    "UrgencyCounts",
    # Lifecycle
    "BulkActionRequest",
    "BulkResultResponse",
    "ProjectLifecycleResponse",
]
