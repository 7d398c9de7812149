"""
Data Transfer Objects for the application layer.
"""

from .base_dto import (
    BaseDTO,
    RequestDTO,
    ResponseDTO,
    EntityResponseDTO,
    ListRequestDTO,
    ListResponseDTO
)

from .time_entry_dto import (
    CreateTimeEntryRequestDTO,
    UpdateTimeEntryRequestDTO,
    ListTimeEntriesRequestDTO,
    BulkTimeEntryItemDTO,
    BulkTimeEntryRequestDTO,
    CopyWeekRequestDTO,
    TimeEntryResponseDTO,
    TimeEntryListResponseDTO,
    BulkSyncErrorDTO,
    BulkSyncSummaryDTO,
    BulkSyncResponseDTO,
    CopySkipDTO,
    CopyWeekResponseDTO,
    WeeklyHoursResponseDTO,
    ProjectHoursResponseDTO,
    ProjectShareDTO,
    UserProjectStatsResponseDTO,
    WeekViewEntryDTO,
    ProjectBreakdownDTO,
    WeekViewTimesheetDTO,
    WeekViewResponseDTO
)

from .timesheet_dto import (
    CreateTimesheetRequestDTO,
    ReviewTimesheetRequestDTO,
    ListTimesheetsRequestDTO,
    TimesheetResponseDTO,
    TimesheetDetailResponseDTO,
    TimesheetListResponseDTO,
    CurrentTimesheetResponseDTO,
    RecallTimesheetResponseDTO,
    ValidationIssueDTO,
    ValidationSummaryDTO,
    TimesheetValidationResponseDTO
)
