"""
Core module containing configuration, settings, and foundational utilities.
"""

from bidflow.core.clock import Clock, FixedClock, SystemClock
from bidflow.core.config import get_settings, Settings
from bidflow.core.logging import get_logger, setup_logging

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "get_settings",
    "Settings",
    "get_logger",
    "setup_logging",
]
