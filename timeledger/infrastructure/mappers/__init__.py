"""
Mappers between domain entities and database models.
"""

from .time_entry_mapper import TimeEntryMapper
from .timesheet_mapper import TimesheetMapper

__all__ = ["TimeEntryMapper", "TimesheetMapper"]
