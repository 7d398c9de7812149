"""
Timesheet router.
Weekly timesheets and their approval workflow.
"""

from datetime import date
from typing import Optional
import uuid

from fastapi import APIRouter, Body, Query, Response, status

from timeledger.application.dto.timesheet_dto import (
    CreateTimesheetRequestDTO,
    ReviewTimesheetRequestDTO,
    ListTimesheetsRequestDTO,
    TimesheetResponseDTO,
    TimesheetDetailResponseDTO,
    TimesheetListResponseDTO,
    CurrentTimesheetResponseDTO,
    RecallTimesheetResponseDTO,
    TimesheetValidationResponseDTO
)
from timeledger.application.use_cases.timesheet_use_cases import (
    ReviewTimesheetCommand,
    CurrentTimesheetQuery,
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
from timeledger.domain.models.timesheet import TimesheetStatus
from timeledger.infrastructure.web.dependencies import (
    act_as,
    CurrentUserDep,
    SettingsDep,
    TimeEntryRepositoryDep,
    TimesheetRepositoryDep,
    TeamDirectoryDep,
    PolicyRepositoryDep,
    ValidationServiceDep
)
from timeledger.infrastructure.web.errors import unwrap, build_request


router = APIRouter()


@router.get("", response_model=TimesheetListResponseDTO)
async def list_timesheets(
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimesheetRepositoryDep,
    time_entry_repository: TimeEntryRepositoryDep,
    team_directory: TeamDirectoryDep,
    user_id: Optional[uuid.UUID] = Query(None, description="Filter by owner"),
    week_start_date: Optional[date] = Query(None, description="Exact week"),
    status_filter: Optional[TimesheetStatus] = Query(None, alias="status", description="Filter by status"),
    from_date: Optional[date] = Query(None, alias="from", description="Week start on or after"),
    to_date: Optional[date] = Query(None, alias="to", description="Week start on or before"),
    team: bool = Query(False, description="Only timesheets of the caller's direct reports"),
    page: int = Query(1, description="Page number"),
    page_size: Optional[int] = Query(None, description="Items per page")
):
    """List timesheets, newest week first, each with its logged hours."""
    request = build_request(
        ListTimesheetsRequestDTO,
        user_id=user_id,
        week_start_date=week_start_date,
        status=status_filter,
        from_date=from_date,
        to_date=to_date,
        team=team,
        page=page,
        page_size=page_size or settings.default_page_size
    )
    use_case = ListTimesheetsUseCase(
        repository, time_entry_repository, team_directory,
        settings.default_page_size, settings.max_page_size
    )
    return unwrap(await act_as(use_case, user, settings).execute(request))


@router.get("/my-current", response_model=CurrentTimesheetResponseDTO)
async def get_my_current_timesheet(
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimesheetRepositoryDep,
    policy_repository: PolicyRepositoryDep,
    week_start: Optional[int] = Query(None, ge=0, le=6, description="Week start weekday, 0=Sunday")
):
    """The caller's timesheet for the current week, created as draft when missing."""
    use_case = GetCurrentTimesheetUseCase(repository, policy_repository, settings.default_week_start)
    return unwrap(await act_as(use_case, user, settings).execute(CurrentTimesheetQuery(week_start=week_start)))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TimesheetResponseDTO)
async def create_timesheet(
    request: CreateTimesheetRequestDTO,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimesheetRepositoryDep
):
    use_case = act_as(CreateTimesheetUseCase(repository), user, settings)
    return unwrap(await use_case.execute(request))


@router.get("/{timesheet_id}", response_model=TimesheetDetailResponseDTO)
async def get_timesheet(
    timesheet_id: uuid.UUID,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimesheetRepositoryDep,
    time_entry_repository: TimeEntryRepositoryDep
):
    """Timesheet with the entries of its week."""
    use_case = act_as(GetTimesheetUseCase(repository, time_entry_repository), user, settings)
    return unwrap(await use_case.execute(timesheet_id))


@router.post("/{timesheet_id}/submit", response_model=TimesheetResponseDTO)
async def submit_timesheet(
    timesheet_id: uuid.UUID,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimesheetRepositoryDep
):
    use_case = act_as(SubmitTimesheetUseCase(repository), user, settings)
    return unwrap(await use_case.execute(timesheet_id))


@router.post("/{timesheet_id}/approve", response_model=TimesheetResponseDTO)
async def approve_timesheet(
    timesheet_id: uuid.UUID,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimesheetRepositoryDep,
    request: Optional[ReviewTimesheetRequestDTO] = Body(None)
):
    command = ReviewTimesheetCommand(timesheet_id=timesheet_id, review_note=request.review_note if request else None)
    use_case = act_as(ApproveTimesheetUseCase(repository), user, settings)
    return unwrap(await use_case.execute(command))


@router.post("/{timesheet_id}/reject", response_model=TimesheetResponseDTO)
async def reject_timesheet(
    timesheet_id: uuid.UUID,
    request: ReviewTimesheetRequestDTO,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimesheetRepositoryDep
):
    """Reject a submitted timesheet; ``review_note`` is required."""
    command = ReviewTimesheetCommand(timesheet_id=timesheet_id, review_note=request.review_note)
    use_case = act_as(RejectTimesheetUseCase(repository), user, settings)
    return unwrap(await use_case.execute(command))


@router.post("/{timesheet_id}/recall", response_model=RecallTimesheetResponseDTO)
async def recall_timesheet(
    timesheet_id: uuid.UUID,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimesheetRepositoryDep
):
    use_case = act_as(RecallTimesheetUseCase(repository), user, settings)
    return unwrap(await use_case.execute(timesheet_id))


@router.get("/{timesheet_id}/validate", response_model=TimesheetValidationResponseDTO)
async def validate_timesheet(
    timesheet_id: uuid.UUID,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimesheetRepositoryDep,
    time_entry_repository: TimeEntryRepositoryDep,
    policy_repository: PolicyRepositoryDep,
    validation_service: ValidationServiceDep
):
    """Errors and warnings for the timesheet's week under the tenant policy."""
    use_case = ValidateTimesheetUseCase(repository, time_entry_repository, policy_repository, validation_service)
    return unwrap(await act_as(use_case, user, settings).execute(timesheet_id))


@router.delete("/{timesheet_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_timesheet(
    timesheet_id: uuid.UUID,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimesheetRepositoryDep
):
    use_case = act_as(DeleteTimesheetUseCase(repository), user, settings)
    unwrap(await use_case.execute(timesheet_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
