"""
Repository interfaces for the domain layer.
This module exports all repository interfaces (ports) for dependency injection.
"""

from .time_entry_repository import TimeEntryRepository, TimeEntryFilter, UNSET, SORTABLE_FIELDS
from .timesheet_repository import TimesheetRepository, TimesheetFilter
from .project_repository import MembershipChecker, ProjectCatalog, ProjectInfo, TeamDirectory
from .policy_repository import TimesheetPolicyRepository

__all__ = [
    "TimeEntryRepository",
    "TimeEntryFilter",
    "UNSET",
    "SORTABLE_FIELDS",
    "TimesheetRepository",
    "TimesheetFilter",
    "MembershipChecker",
    "ProjectCatalog",
    "ProjectInfo",
    "TeamDirectory",
    "TimesheetPolicyRepository",
]
