"""
Reporting use cases over time entries.
All hour sums are rounded to two decimals only when they leave the use case.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, List, Optional
import logging
import uuid

from timeledger.application.use_cases.base_use_case import AuthorizedUseCase, CommandUseCase, QueryUseCase
from timeledger.application.use_cases.timesheet_use_cases import get_or_create_timesheet
from timeledger.application.dto.time_entry_dto import (
    WeeklyHoursResponseDTO,
    ProjectHoursResponseDTO,
    ProjectShareDTO,
    UserProjectStatsResponseDTO,
    WeekViewEntryDTO,
    ProjectBreakdownDTO,
    WeekViewTimesheetDTO,
    WeekViewResponseDTO
)
from timeledger.domain.models.value_objects import Week, DAYS_IN_WEEK, round_hours
from timeledger.domain.repositories.time_entry_repository import TimeEntryRepository, TimeEntryFilter
from timeledger.domain.repositories.timesheet_repository import TimesheetRepository
from timeledger.domain.repositories.project_repository import ProjectCatalog


logger = logging.getLogger(__name__)

UNKNOWN_PROJECT = "Unknown Project"


@dataclass
class WeeklyHoursQuery:
    user_id: uuid.UUID
    week_start_date: date


@dataclass
class UserProjectStatsQuery:
    """
    Window selection: an exact ``week_start_date`` wins over the
    ``start_date``/``end_date`` range; with neither, the current week is used.
    """
    user_id: uuid.UUID
    week_start_date: Optional[date] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass
class WeekViewQuery:
    week_start_date: date
    user_id: Optional[uuid.UUID] = None


def percentage_of(part: Decimal, total: Decimal) -> float:
    """Share of ``part`` in ``total`` as a percentage with two decimals."""
    if not total:
        return 0.0
    return round_hours(part * 100 / total)


class GetWeeklyHoursUseCase(AuthorizedUseCase, QueryUseCase[WeeklyHoursQuery, WeeklyHoursResponseDTO]):
    """Weekly total of a user with one bucket per calendar date."""

    def __init__(self, time_entry_repository: TimeEntryRepository):
        super().__init__()
        self.time_entry_repository = time_entry_repository

    async def _check_authorization(self, request: WeeklyHoursQuery) -> None:
        self._require_owner_or_reviewer(request.user_id, "You can only view your own hours")

    async def _execute_business_logic(self, request: WeeklyHoursQuery) -> WeeklyHoursResponseDTO:
        week = Week(request.week_start_date)
        entries = await self.time_entry_repository.find_by_week(request.user_id, week.start)

        per_day: Dict[date, Decimal] = {day: Decimal("0") for day in week.dates}
        for entry in entries:
            # entries with a day outside the week still count toward the total
            per_day[entry.entry_date] = per_day.get(entry.entry_date, Decimal("0")) + entry.hours
        total = sum((entry.hours for entry in entries), Decimal("0"))

        return WeeklyHoursResponseDTO(
            user_id=request.user_id,
            week_start_date=week.start,
            week_end_date=week.end,
            total_hours=round_hours(total),
            hours_per_day={day.isoformat(): round_hours(per_day[day]) for day in week.dates},
            entries_count=len(entries)
        )


class GetProjectHoursUseCase(AuthorizedUseCase, QueryUseCase[uuid.UUID, ProjectHoursResponseDTO]):
    """
    Total hours logged on a project.
    The sum spans every tenant and user.
    """

    def __init__(self, time_entry_repository: TimeEntryRepository):
        super().__init__()
        self.time_entry_repository = time_entry_repository

    async def _execute_business_logic(self, request: uuid.UUID) -> ProjectHoursResponseDTO:
        total = await self.time_entry_repository.sum_hours(project_id=request)
        return ProjectHoursResponseDTO(project_id=request, total_hours=round_hours(total))


class GetUserProjectStatsUseCase(AuthorizedUseCase, QueryUseCase[UserProjectStatsQuery, UserProjectStatsResponseDTO]):
    """Per-project share of a user's hours, largest first."""

    def __init__(
        self,
        time_entry_repository: TimeEntryRepository,
        project_catalog: ProjectCatalog,
        today: Callable[[], date] = date.today
    ):
        super().__init__()
        self.time_entry_repository = time_entry_repository
        self.project_catalog = project_catalog
        self.today = today

    async def _check_authorization(self, request: UserProjectStatsQuery) -> None:
        self._require_owner_or_reviewer(request.user_id, "You can only view your own statistics")

    def _criteria(self, request: UserProjectStatsQuery) -> TimeEntryFilter:
        criteria = TimeEntryFilter(user_id=request.user_id)
        if request.week_start_date:
            criteria.week_start_date = request.week_start_date
        elif request.start_date or request.end_date:
            criteria.week_start_from = request.start_date
            criteria.week_start_to = request.end_date
        else:
            criteria.week_start_date = Week.current(1, today=self.today()).start
        return criteria

    async def _execute_business_logic(self, request: UserProjectStatsQuery) -> UserProjectStatsResponseDTO:
        entries, _ = await self.time_entry_repository.find_many(self._criteria(request))

        per_project: Dict[uuid.UUID, Decimal] = defaultdict(Decimal)
        for entry in entries:
            per_project[entry.project_id] += entry.hours
        total = sum(per_project.values(), Decimal("0"))

        projects = await self.project_catalog.get_projects(per_project.keys())
        shares = [
            ProjectShareDTO(
                project_id=project_id,
                project_name=projects[project_id].name if project_id in projects else UNKNOWN_PROJECT,
                total_hours=round_hours(hours),
                percentage=percentage_of(hours, total)
            )
            for project_id, hours in per_project.items()
        ]
        shares.sort(key=lambda share: share.total_hours, reverse=True)

        return UserProjectStatsResponseDTO(
            user_id=request.user_id,
            total_hours=round_hours(total),
            projects=shares
        )


class GetWeekViewUseCase(AuthorizedUseCase, CommandUseCase[WeekViewQuery, WeekViewResponseDTO]):
    """
    Composite week grid: entries with project and task names, daily and
    project totals, and the week's timesheet (created as draft when missing).
    """

    def __init__(
        self,
        time_entry_repository: TimeEntryRepository,
        timesheet_repository: TimesheetRepository,
        project_catalog: ProjectCatalog
    ):
        super().__init__()
        self.time_entry_repository = time_entry_repository
        self.timesheet_repository = timesheet_repository
        self.project_catalog = project_catalog

    async def _check_authorization(self, request: WeekViewQuery) -> None:
        if request.user_id is not None:
            self._require_owner_or_reviewer(request.user_id, "You can only view your own weeks")

    async def _execute_command_logic(self, request: WeekViewQuery) -> WeekViewResponseDTO:
        tenant_id = self.current_tenant_id
        user_id = request.user_id or self.current_user_id
        week = Week(request.week_start_date)

        entries = await self.time_entry_repository.find_by_week(user_id, week.start, tenant_id=tenant_id)
        projects = await self.project_catalog.get_projects({entry.project_id for entry in entries})
        task_names = await self.project_catalog.get_task_names(
            {entry.task_id for entry in entries if entry.task_id is not None}
        )

        rows: List[WeekViewEntryDTO] = []
        daily = [Decimal("0")] * DAYS_IN_WEEK
        per_project: Dict[uuid.UUID, Decimal] = {}

        for entry in entries:
            project = projects.get(entry.project_id)
            rows.append(WeekViewEntryDTO(
                id=entry.id,
                project_id=entry.project_id,
                project_name=project.name if project else "",
                project_code=(project.code or "") if project else "",
                task_id=entry.task_id,
                task_name=task_names.get(entry.task_id) if entry.task_id else None,
                day_of_week=entry.day_of_week,
                date=entry.entry_date,
                hours=entry.hours_float,
                note=entry.note
            ))
            daily[entry.day_of_week] += entry.hours
            per_project[entry.project_id] = per_project.get(entry.project_id, Decimal("0")) + entry.hours

        rows.sort(key=lambda row: (row.day_of_week, row.project_name))

        breakdown = []
        for project_id, hours in per_project.items():
            project = projects.get(project_id)
            breakdown.append(ProjectBreakdownDTO(
                project_id=project_id,
                project_name=project.name if project else "",
                project_code=(project.code or "") if project else "",
                total_hours=round_hours(hours)
            ))

        timesheet, created = await get_or_create_timesheet(
            self.timesheet_repository, tenant_id, user_id, week.start, actor_id=self.current_user_id
        )
        if created:
            self._collect(timesheet)

        return WeekViewResponseDTO(
            week_start_date=week.start,
            week_end_date=week.end,
            user_id=user_id,
            entries=rows,
            daily_totals=[round_hours(hours) for hours in daily],
            weekly_total=round_hours(sum(daily, Decimal("0"))),
            by_project={
                str(item.project_id): {
                    "project_name": item.project_name,
                    "project_code": item.project_code,
                    "hours": item.total_hours,
                }
                for item in breakdown
            },
            project_breakdown=breakdown,
            timesheet=WeekViewTimesheetDTO(
                id=timesheet.id,
                status=timesheet.status.value,
                submitted_at=timesheet.submitted_at,
                reviewed_at=timesheet.reviewed_at,
                review_note=timesheet.review_note
            )
        )
