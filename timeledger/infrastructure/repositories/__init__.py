"""
Repository implementations for the infrastructure layer.
"""

from .time_entry_repository import SQLAlchemyTimeEntryRepository
from .timesheet_repository import SQLAlchemyTimesheetRepository
from .project_repository import SQLAlchemyProjectRepository, SQLAlchemyTeamDirectory
from .policy_repository import SQLAlchemyTimesheetPolicyRepository

__all__ = [
    "SQLAlchemyTimeEntryRepository",
    "SQLAlchemyTimesheetRepository",
    "SQLAlchemyProjectRepository",
    "SQLAlchemyTeamDirectory",
    "SQLAlchemyTimesheetPolicyRepository",
]
