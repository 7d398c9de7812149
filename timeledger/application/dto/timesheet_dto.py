"""
Timesheet DTOs for the application layer.
"""

from typing import Optional, List, Dict, Any
from datetime import date, datetime
from pydantic import Field, field_validator
import uuid

from timeledger.domain.models.timesheet import Timesheet, TimesheetStatus
from .base_dto import RequestDTO, ResponseDTO, EntityResponseDTO, ListRequestDTO, ListResponseDTO
from .time_entry_dto import TimeEntryResponseDTO


# Request DTOs
class CreateTimesheetRequestDTO(RequestDTO):
    """DTO for explicitly opening a week's timesheet."""

    user_id: Optional[uuid.UUID] = Field(default=None, description="Owner, defaults to the caller")
    week_start_date: date = Field(description="First date of the week")


class ReviewTimesheetRequestDTO(RequestDTO):
    """DTO for approve and reject actions."""

    review_note: Optional[str] = Field(default=None, max_length=2000, description="Reviewer comment")

    @field_validator('review_note')
    @classmethod
    def strip_note(cls, v):
        if v is not None:
            v = v.strip()
        return v or None


class ListTimesheetsRequestDTO(ListRequestDTO):
    """DTO for timesheet listings."""

    user_id: Optional[uuid.UUID] = Field(default=None, description="Filter by owner")
    week_start_date: Optional[date] = Field(default=None, description="Exact week")
    status: Optional[TimesheetStatus] = Field(default=None, description="Filter by status")
    from_date: Optional[date] = Field(default=None, description="Week start on or after")
    to_date: Optional[date] = Field(default=None, description="Week start on or before")
    team: bool = Field(default=False, description="Only timesheets of the caller's direct reports")


# Response DTOs
class TimesheetResponseDTO(EntityResponseDTO):
    """DTO for timesheet responses."""

    tenant_id: uuid.UUID
    user_id: uuid.UUID
    week_start_date: date
    week_end_date: date
    status: TimesheetStatus
    submitted_at: Optional[datetime] = None
    submitted_by_user_id: Optional[uuid.UUID] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by_user_id: Optional[uuid.UUID] = None
    review_note: Optional[str] = None
    total_hours: Optional[float] = None

    @classmethod
    def from_domain(cls, timesheet: Timesheet, **extra: Any) -> "TimesheetResponseDTO":
        return cls(
            id=timesheet.id,
            tenant_id=timesheet.tenant_id,
            user_id=timesheet.user_id,
            week_start_date=timesheet.week_start_date,
            week_end_date=timesheet.week.end,
            status=timesheet.status,
            submitted_at=timesheet.submitted_at,
            submitted_by_user_id=timesheet.submitted_by_user_id,
            reviewed_at=timesheet.reviewed_at,
            reviewed_by_user_id=timesheet.reviewed_by_user_id,
            review_note=timesheet.review_note,
            created_at=timesheet.created_at,
            updated_at=timesheet.updated_at,
            **extra
        )


class TimesheetDetailResponseDTO(TimesheetResponseDTO):
    """Timesheet with the entries matching its tenant, user and week."""

    time_entries: List[TimeEntryResponseDTO] = Field(default_factory=list)


class TimesheetListResponseDTO(ListResponseDTO[TimesheetResponseDTO]):
    """Paginated timesheets."""
    pass


class CurrentTimesheetResponseDTO(ResponseDTO):
    timesheet: TimesheetResponseDTO
    auto_created: bool


class RecallTimesheetResponseDTO(ResponseDTO):
    id: uuid.UUID
    status: TimesheetStatus
    previous_status: TimesheetStatus
    recalled_at: datetime
    recalled_by_user_id: uuid.UUID


class ValidationIssueDTO(ResponseDTO):
    type: str
    severity: str
    message: str
    day_of_week: Optional[int] = None
    date: Optional[str] = None
    hours: Optional[float] = None
    max_allowed: Optional[float] = None


class ValidationSummaryDTO(ResponseDTO):
    total_hours: float
    days_with_entries: int
    entry_count: int
    project_count: int
    status: str


class TimesheetValidationResponseDTO(ResponseDTO):
    valid: bool
    errors: List[ValidationIssueDTO] = Field(default_factory=list)
    warnings: List[ValidationIssueDTO] = Field(default_factory=list)
    summary: ValidationSummaryDTO

    @classmethod
    def from_report(cls, report: Dict[str, Any]) -> "TimesheetValidationResponseDTO":
        return cls.model_validate(report)
