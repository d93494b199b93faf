"""
Services that perform I/O on behalf of the follow-up engine.
"""

from bidflow.services.bulk_operations import (
    BulkAction,
    BulkResult,
    apply_action,
    bulk_delete,
    execute_bulk,
    run_bulk_action,
)
from bidflow.services.store import EntityStore, SqlAlchemyEntityStore

__all__ = [
    "BulkAction",
    "BulkResult",
    "apply_action",
    "bulk_delete",
    "execute_bulk",
    "run_bulk_action",
    "EntityStore",
    "SqlAlchemyEntityStore",
]
