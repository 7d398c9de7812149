"""
API routers.
"""

from . import time_entries, timesheets

__all__ = ["time_entries", "timesheets"]
