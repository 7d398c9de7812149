"""
Time tracking router.
Handles single entries, week batches and hour reports.
"""

from datetime import date
from typing import Optional
import uuid

from fastapi import APIRouter, Query, Response, status

from timeledger.application.dto.time_entry_dto import (
    CreateTimeEntryRequestDTO,
    UpdateTimeEntryRequestDTO,
    ListTimeEntriesRequestDTO,
    BulkTimeEntryRequestDTO,
    CopyWeekRequestDTO,
    TimeEntryResponseDTO,
    TimeEntryListResponseDTO,
    BulkSyncResponseDTO,
    CopyWeekResponseDTO,
    WeeklyHoursResponseDTO,
    ProjectHoursResponseDTO,
    UserProjectStatsResponseDTO,
    WeekViewResponseDTO
)
from timeledger.application.use_cases.time_entry_use_cases import (
    UpdateTimeEntryCommand,
    CreateTimeEntryUseCase,
    UpdateTimeEntryUseCase,
    DeleteTimeEntryUseCase,
    GetTimeEntryUseCase,
    ListTimeEntriesUseCase
)
from timeledger.application.use_cases.batch_use_cases import BulkSyncTimeEntriesUseCase, CopyWeekUseCase
from timeledger.application.use_cases.report_use_cases import (
    WeeklyHoursQuery,
    UserProjectStatsQuery,
    WeekViewQuery,
    GetWeeklyHoursUseCase,
    GetProjectHoursUseCase,
    GetUserProjectStatsUseCase,
    GetWeekViewUseCase
)
from timeledger.infrastructure.web.dependencies import (
    act_as,
    CurrentUserDep,
    SettingsDep,
    TimeEntryRepositoryDep,
    TimesheetRepositoryDep,
    MembershipCheckerDep,
    ProjectCatalogDep,
    EditabilityGuardDep
)
from timeledger.infrastructure.web.errors import unwrap, build_request


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TimeEntryResponseDTO)
async def create_time_entry(
    request: CreateTimeEntryRequestDTO,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimeEntryRepositoryDep,
    membership_checker: MembershipCheckerDep,
    guard: EditabilityGuardDep
):
    """
    Log hours for the caller.

    - **project_id**: Project the caller is a member of
    - **week_start_date** / **day_of_week**: Position of the entry (0=Sunday)
    - **hours**: 0 to 24
    """
    use_case = act_as(CreateTimeEntryUseCase(repository, membership_checker, guard), user, settings)
    return unwrap(await use_case.execute(request))


@router.get("", response_model=TimeEntryListResponseDTO)
async def list_time_entries(
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimeEntryRepositoryDep,
    user_id: Optional[uuid.UUID] = Query(None, description="Filter by user"),
    project_id: Optional[uuid.UUID] = Query(None, description="Filter by project"),
    task_id: Optional[uuid.UUID] = Query(None, description="Filter by task"),
    without_task: bool = Query(False, description="Only entries without a task"),
    week_start_date: Optional[date] = Query(None, description="Exact week, or range start with week_end_date"),
    week_end_date: Optional[date] = Query(None, description="Range end"),
    day_of_week: Optional[int] = Query(None, description="Filter by day, 0=Sunday"),
    sort: Optional[str] = Query(None, description="field:asc|desc"),
    page: int = Query(1, description="Page number"),
    page_size: Optional[int] = Query(None, description="Items per page")
):
    """List time entries of the caller's tenant."""
    request = build_request(
        ListTimeEntriesRequestDTO,
        user_id=user_id,
        project_id=project_id,
        task_id=task_id,
        without_task=without_task,
        week_start_date=week_start_date,
        week_end_date=week_end_date,
        day_of_week=day_of_week,
        sort=sort,
        page=page,
        page_size=page_size or settings.default_page_size
    )
    use_case = ListTimeEntriesUseCase(repository, settings.default_page_size, settings.max_page_size)
    return unwrap(await act_as(use_case, user, settings).execute(request))


@router.post("/bulk", response_model=BulkSyncResponseDTO)
async def bulk_sync_time_entries(
    request: BulkTimeEntryRequestDTO,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimeEntryRepositoryDep,
    membership_checker: MembershipCheckerDep
):
    """
    Create or update many entries of one week.
    Items fail individually; see ``errors`` and ``summary`` in the response.
    """
    use_case = BulkSyncTimeEntriesUseCase(repository, membership_checker, max_batch_size=settings.max_bulk_entries)
    return unwrap(await act_as(use_case, user, settings).execute(request))


@router.post("/copy-week", response_model=CopyWeekResponseDTO)
async def copy_week(
    request: CopyWeekRequestDTO,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimeEntryRepositoryDep
):
    """
    Copy a week's entries into another week.

    - **overwrite_existing**: Replace hours of entries already present in the target week
    - **copy_notes**: Carry notes over as well
    """
    use_case = act_as(CopyWeekUseCase(repository), user, settings)
    return unwrap(await use_case.execute(request))


@router.get("/weekly-hours", response_model=WeeklyHoursResponseDTO)
async def get_weekly_hours(
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimeEntryRepositoryDep,
    week_start_date: date = Query(..., description="First date of the week"),
    user_id: Optional[uuid.UUID] = Query(None, description="Defaults to the caller")
):
    """Weekly total with one bucket per date."""
    query = WeeklyHoursQuery(user_id=user_id or user.user_id, week_start_date=week_start_date)
    use_case = act_as(GetWeeklyHoursUseCase(repository), user, settings)
    return unwrap(await use_case.execute(query))


@router.get("/week-view", response_model=WeekViewResponseDTO)
async def get_week_view(
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimeEntryRepositoryDep,
    timesheet_repository: TimesheetRepositoryDep,
    project_catalog: ProjectCatalogDep,
    week_start_date: date = Query(..., description="First date of the week"),
    user_id: Optional[uuid.UUID] = Query(None, description="Defaults to the caller")
):
    """Entries, totals and timesheet of a week for the editing grid."""
    use_case = act_as(GetWeekViewUseCase(repository, timesheet_repository, project_catalog), user, settings)
    return unwrap(await use_case.execute(WeekViewQuery(week_start_date=week_start_date, user_id=user_id)))


@router.get("/projects/{project_id}/hours", response_model=ProjectHoursResponseDTO)
async def get_project_hours(
    project_id: uuid.UUID,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimeEntryRepositoryDep
):
    use_case = act_as(GetProjectHoursUseCase(repository), user, settings)
    return unwrap(await use_case.execute(project_id))


@router.get("/users/{user_id}/project-stats", response_model=UserProjectStatsResponseDTO)
async def get_user_project_stats(
    user_id: uuid.UUID,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimeEntryRepositoryDep,
    project_catalog: ProjectCatalogDep,
    week_start_date: Optional[date] = Query(None, description="Exact week"),
    start_date: Optional[date] = Query(None, description="Week start on or after"),
    end_date: Optional[date] = Query(None, description="Week start on or before")
):
    """Share of the user's hours per project, largest first."""
    query = UserProjectStatsQuery(
        user_id=user_id,
        week_start_date=week_start_date,
        start_date=start_date,
        end_date=end_date
    )
    use_case = act_as(GetUserProjectStatsUseCase(repository, project_catalog), user, settings)
    return unwrap(await use_case.execute(query))


@router.get("/{time_entry_id}", response_model=TimeEntryResponseDTO)
async def get_time_entry(
    time_entry_id: uuid.UUID,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimeEntryRepositoryDep
):
    use_case = act_as(GetTimeEntryUseCase(repository), user, settings)
    return unwrap(await use_case.execute(time_entry_id))


@router.patch("/{time_entry_id}", response_model=TimeEntryResponseDTO)
async def update_time_entry(
    time_entry_id: uuid.UUID,
    request: UpdateTimeEntryRequestDTO,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimeEntryRepositoryDep,
    guard: EditabilityGuardDep
):
    """
    Update hours and/or note of an entry.
    Sending ``"note": null`` clears the note.
    """
    use_case = act_as(UpdateTimeEntryUseCase(repository, guard), user, settings)
    return unwrap(await use_case.execute(UpdateTimeEntryCommand(entry_id=time_entry_id, changes=request)))


@router.delete("/{time_entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_entry(
    time_entry_id: uuid.UUID,
    user: CurrentUserDep,
    settings: SettingsDep,
    repository: TimeEntryRepositoryDep,
    guard: EditabilityGuardDep
):
    use_case = act_as(DeleteTimeEntryUseCase(repository, guard), user, settings)
    unwrap(await use_case.execute(time_entry_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
