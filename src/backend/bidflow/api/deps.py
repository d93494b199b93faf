"""
Shared FastAPI dependencies.

Tests override these with an in-memory store and a fixed clock.
"""

from typing import Annotated, Any

from fastapi import Depends

from bidflow.core.clock import Clock, SystemClock
from bidflow.core.config import Settings, get_settings
from bidflow.services.store import EntityStore, SqlAlchemyEntityStore


def get_store() -> EntityStore:
    return SqlAlchemyEntityStore()


def get_clock(settings: Annotated[Settings, Depends(get_settings)]) -> Clock:
    return SystemClock(settings.business_timezone)


def get_urgency_options(settings: Annotated[Settings, Depends(get_settings)]) -> dict[str, Any]:
    """Keyword arguments for the urgency classifier."""
    return {
        "critical_window_days": settings.followup_critical_window_days,
        "business_days": settings.followup_business_days,
    }


Store = Annotated[EntityStore, Depends(get_store)]
ClockDep = Annotated[Clock, Depends(get_clock)]
UrgencyOptions = Annotated[dict[str, Any], Depends(get_urgency_options)]
