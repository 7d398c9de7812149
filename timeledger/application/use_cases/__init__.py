"""
Application layer use cases.
Business logic for the timesheet and time entry workflow.
"""

from .base_use_case import (
    UseCaseResult,
    BaseUseCase,
    QueryUseCase,
    CommandUseCase,
    BulkUseCase,
    PaginatedQueryUseCase,
    AuthorizedUseCase
)
from .time_entry_use_cases import (
    UpdateTimeEntryCommand,
    CreateTimeEntryUseCase,
    UpdateTimeEntryUseCase,
    DeleteTimeEntryUseCase,
    GetTimeEntryUseCase,
    ListTimeEntriesUseCase
)
from .batch_use_cases import BulkSyncTimeEntriesUseCase, CopyWeekUseCase
from .timesheet_use_cases import (
    ReviewTimesheetCommand,
    CurrentTimesheetQuery,
    get_or_create_timesheet,
    CreateTimesheetUseCase,
    SubmitTimesheetUseCase,
    ApproveTimesheetUseCase,
    RejectTimesheetUseCase,
    RecallTimesheetUseCase,
    DeleteTimesheetUseCase,
    GetCurrentTimesheetUseCase,
    GetTimesheetUseCase,
    ListTimesheetsUseCase,
    ValidateTimesheetUseCase
)
from .report_use_cases import (
    WeeklyHoursQuery,
    UserProjectStatsQuery,
    WeekViewQuery,
    GetWeeklyHoursUseCase,
    GetProjectHoursUseCase,
    GetUserProjectStatsUseCase,
    GetWeekViewUseCase
)

__all__ = [
    # Base Use Cases
    "UseCaseResult",
    "BaseUseCase",
    "QueryUseCase",
    "CommandUseCase",
    "BulkUseCase",
    "PaginatedQueryUseCase",
    "AuthorizedUseCase",

    # Time Entry Use Cases
    "UpdateTimeEntryCommand",
    "CreateTimeEntryUseCase",
    "UpdateTimeEntryUseCase",
    "DeleteTimeEntryUseCase",
    "GetTimeEntryUseCase",
    "ListTimeEntriesUseCase",
    "BulkSyncTimeEntriesUseCase",
    "CopyWeekUseCase",

    # Timesheet Use Cases
    "ReviewTimesheetCommand",
    "CurrentTimesheetQuery",
    "get_or_create_timesheet",
    "CreateTimesheetUseCase",
    "SubmitTimesheetUseCase",
    "ApproveTimesheetUseCase",
    "RejectTimesheetUseCase",
    "RecallTimesheetUseCase",
    "DeleteTimesheetUseCase",
    "GetCurrentTimesheetUseCase",
    "GetTimesheetUseCase",
    "ListTimesheetsUseCase",
    "ValidateTimesheetUseCase",

    # Report Use Cases
    "WeeklyHoursQuery",
    "UserProjectStatsQuery",
    "WeekViewQuery",
    "GetWeeklyHoursUseCase",
    "GetProjectHoursUseCase",
    "GetUserProjectStatsUseCase",
    "GetWeekViewUseCase",
]
