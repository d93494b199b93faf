"""
SQLAlchemy ORM models for the project store.

Projects own vendor assignments, which own their workflow phases.
"""

from bidflow.models.phase import ApmPhase
from bidflow.models.project import LIFECYCLE_TIMESTAMPS, Project
from bidflow.models.vendor_assignment import LEGACY_FOLLOW_UP_COLUMNS, ProjectVendor

__all__ = [
    # Project
    "Project",
    "LIFECYCLE_TIMESTAMPS",
    # Vendor assignment
    "ProjectVendor",
    "LEGACY_FOLLOW_UP_COLUMNS",
    # Phase
    "ApmPhase",
]
