"""
Bidflow: vendor follow-up workflow engine for construction bid tracking.
"""

__version__ = "1.0.0"
