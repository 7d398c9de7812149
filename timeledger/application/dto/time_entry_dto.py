"""
Time Entry DTOs for the application layer.
Data Transfer Objects for weekly time entry operations.
"""

from typing import Optional, List, Dict, Any, Tuple
from datetime import date, datetime
from decimal import Decimal
from pydantic import Field, field_validator, model_validator
import uuid

from timeledger.domain.models.time_entry import TimeEntry, MAX_NOTE_LENGTH
from timeledger.domain.repositories.time_entry_repository import SORTABLE_FIELDS
from .base_dto import RequestDTO, ResponseDTO, EntityResponseDTO, ListRequestDTO, ListResponseDTO


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value.strip()) == 0:
        return None
    return value


# Request DTOs
class CreateTimeEntryRequestDTO(RequestDTO):
    """DTO for logging hours on one day of a week."""

    project_id: uuid.UUID = Field(description="Project ID")
    task_id: Optional[uuid.UUID] = Field(default=None, description="Task ID (optional)")
    week_start_date: date = Field(description="First date of the week")
    day_of_week: int = Field(ge=0, le=6, description="Day inside the week, 0=Sunday")
    hours: Decimal = Field(ge=0, le=24, description="Hours worked")
    note: Optional[str] = Field(default=None, max_length=MAX_NOTE_LENGTH, description="Free text note")

    @field_validator('note')
    @classmethod
    def validate_note(cls, v):
        """Treat blank notes as missing."""
        return _blank_to_none(v)


class UpdateTimeEntryRequestDTO(RequestDTO):
    """DTO for changing hours or note of an entry; other columns are immutable."""

    hours: Optional[Decimal] = Field(default=None, ge=0, le=24, description="Hours worked")
    note: Optional[str] = Field(default=None, max_length=MAX_NOTE_LENGTH, description="Free text note")


class ListTimeEntriesRequestDTO(ListRequestDTO):
    """DTO for filtered time entry listings."""

    user_id: Optional[uuid.UUID] = Field(default=None, description="Filter by user")
    project_id: Optional[uuid.UUID] = Field(default=None, description="Filter by project")
    task_id: Optional[uuid.UUID] = Field(default=None, description="Filter by task")
    without_task: bool = Field(default=False, description="Only entries not attached to a task")
    week_start_date: Optional[date] = Field(default=None, description="Exact week, or range start with week_end_date")
    week_end_date: Optional[date] = Field(default=None, description="Range end on week start date")
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6, description="Filter by day")
    sort: Optional[str] = Field(default=None, pattern=r"^[a-z_]+:(asc|desc)$", description="field:asc|desc")

    @field_validator('sort')
    @classmethod
    def validate_sort(cls, v):
        """Only whitelisted columns can be sorted on."""
        if v is not None and v.split(':')[0] not in SORTABLE_FIELDS:
            raise ValueError(f"Sort field must be one of {', '.join(SORTABLE_FIELDS)}")
        return v

    @model_validator(mode='after')
    def validate_task_filter(self):
        if self.without_task and self.task_id is not None:
            raise ValueError('task_id and without_task are mutually exclusive')
        return self

    @property
    def ordering(self) -> Tuple[str, bool]:
        """(column, descending) pair; newest first by default."""
        if not self.sort:
            return "created_at", True
        field, direction = self.sort.split(':')
        return field, direction == "desc"


class BulkTimeEntryItemDTO(RequestDTO):
    """One cell of the weekly grid."""

    project_id: uuid.UUID
    task_id: Optional[uuid.UUID] = None
    day_of_week: int = Field(ge=0, le=6)
    hours: Decimal = Field(ge=0, le=24)
    note: Optional[str] = Field(default=None, max_length=MAX_NOTE_LENGTH)


class BulkTimeEntryRequestDTO(RequestDTO):
    """DTO for syncing a week's entries in one request."""

    user_id: Optional[uuid.UUID] = Field(default=None, description="Owner of the entries, defaults to caller")
    week_start_date: date
    entries: List[BulkTimeEntryItemDTO] = Field(default_factory=list)


class CopyWeekRequestDTO(RequestDTO):
    """DTO for copying one week's entries into another."""

    user_id: Optional[uuid.UUID] = Field(default=None, description="Owner of the entries, defaults to caller")
    from_week_start: date
    to_week_start: date
    overwrite_existing: bool = False
    copy_notes: bool = False


# Response DTOs
class TimeEntryResponseDTO(EntityResponseDTO):
    """DTO for time entry responses."""

    tenant_id: uuid.UUID
    user_id: uuid.UUID
    project_id: uuid.UUID
    task_id: Optional[uuid.UUID] = None
    week_start_date: date
    day_of_week: int
    date: date
    hours: float
    note: Optional[str] = None

    @classmethod
    def from_domain(cls, entry: TimeEntry) -> "TimeEntryResponseDTO":
        return cls(
            id=entry.id,
            tenant_id=entry.tenant_id,
            user_id=entry.user_id,
            project_id=entry.project_id,
            task_id=entry.task_id,
            week_start_date=entry.week_start_date,
            day_of_week=entry.day_of_week,
            date=entry.entry_date,
            hours=entry.hours_float,
            note=entry.note,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class TimeEntryListResponseDTO(ListResponseDTO[TimeEntryResponseDTO]):
    """Paginated time entries."""
    pass


class BulkSyncErrorDTO(ResponseDTO):
    day_of_week: int
    project_id: uuid.UUID
    error: str


class BulkSyncSummaryDTO(ResponseDTO):
    created_count: int
    updated_count: int
    error_count: int
    total_requested: int


class BulkSyncResponseDTO(ResponseDTO):
    """Per-item outcome of a bulk sync; the batch is not atomic."""

    created: List[TimeEntryResponseDTO] = Field(default_factory=list)
    updated: List[TimeEntryResponseDTO] = Field(default_factory=list)
    errors: List[BulkSyncErrorDTO] = Field(default_factory=list)
    summary: BulkSyncSummaryDTO


class CopySkipDTO(ResponseDTO):
    day_of_week: int
    project_id: uuid.UUID
    reason: str


class CopyWeekResponseDTO(ResponseDTO):
    """Outcome of a week copy. ``copied_count`` counts new rows only."""

    copied_count: int = 0
    skipped_count: int = 0
    overwritten_count: int = 0
    entries: List[TimeEntryResponseDTO] = Field(default_factory=list)
    skipped: List[CopySkipDTO] = Field(default_factory=list)


class WeeklyHoursResponseDTO(ResponseDTO):
    user_id: uuid.UUID
    week_start_date: date
    week_end_date: date
    total_hours: float
    hours_per_day: Dict[str, float]
    entries_count: int


class ProjectHoursResponseDTO(ResponseDTO):
    project_id: uuid.UUID
    total_hours: float


class ProjectShareDTO(ResponseDTO):
    project_id: uuid.UUID
    project_name: str
    total_hours: float
    percentage: float


class UserProjectStatsResponseDTO(ResponseDTO):
    user_id: uuid.UUID
    total_hours: float
    projects: List[ProjectShareDTO] = Field(default_factory=list)


class WeekViewEntryDTO(ResponseDTO):
    id: uuid.UUID
    project_id: uuid.UUID
    project_name: str
    project_code: str
    task_id: Optional[uuid.UUID] = None
    task_name: Optional[str] = None
    day_of_week: int
    date: date
    hours: float
    note: Optional[str] = None


class ProjectBreakdownDTO(ResponseDTO):
    project_id: uuid.UUID
    project_name: str
    project_code: str
    total_hours: float


class WeekViewTimesheetDTO(ResponseDTO):
    id: uuid.UUID
    status: str
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    review_note: Optional[str] = None


class WeekViewResponseDTO(ResponseDTO):
    """Everything needed to render one week's editing grid."""

    week_start_date: date
    week_end_date: date
    user_id: uuid.UUID
    entries: List[WeekViewEntryDTO] = Field(default_factory=list)
    daily_totals: List[float]
    weekly_total: float
    by_project: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    project_breakdown: List[ProjectBreakdownDTO] = Field(default_factory=list)
    timesheet: Optional[WeekViewTimesheetDTO] = None
