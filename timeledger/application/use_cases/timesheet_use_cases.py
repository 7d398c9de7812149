"""
Timesheet use cases for the application layer.
Lifecycle transitions, lazy creation of the current week and listings.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Tuple
import logging
import uuid

from timeledger.application.use_cases.base_use_case import (
    AuthorizedUseCase,
    CommandUseCase,
    QueryUseCase,
    PaginatedQueryUseCase
)
from timeledger.application.dto.time_entry_dto import TimeEntryResponseDTO
from timeledger.application.dto.timesheet_dto import (
    CreateTimesheetRequestDTO,
    ListTimesheetsRequestDTO,
    TimesheetResponseDTO,
    TimesheetDetailResponseDTO,
    TimesheetListResponseDTO,
    CurrentTimesheetResponseDTO,
    RecallTimesheetResponseDTO,
    TimesheetValidationResponseDTO
)
from timeledger.domain.models.base import DuplicateEntityError, EntityNotFoundError
from timeledger.domain.models.timesheet import Timesheet, TimesheetStatus
from timeledger.domain.models.value_objects import Week, round_hours
from timeledger.domain.repositories.timesheet_repository import TimesheetRepository, TimesheetFilter
from timeledger.domain.repositories.time_entry_repository import TimeEntryRepository
from timeledger.domain.repositories.policy_repository import TimesheetPolicyRepository
from timeledger.domain.repositories.project_repository import TeamDirectory
from timeledger.domain.services.timesheet_validation_service import TimesheetValidationService


logger = logging.getLogger(__name__)


@dataclass
class ReviewTimesheetCommand:
    timesheet_id: uuid.UUID
    review_note: Optional[str] = None


@dataclass
class CurrentTimesheetQuery:
    """Explicit week start weekday (0=Sunday) overriding the tenant policy."""
    week_start: Optional[int] = None


async def get_or_create_timesheet(
    repository: TimesheetRepository,
    tenant_id: uuid.UUID,
    user_id: uuid.UUID,
    week_start_date: date,
    actor_id: Optional[uuid.UUID] = None
) -> Tuple[Timesheet, bool]:
    """
    Return the timesheet of a week, creating a draft when there is none.
    A concurrent creation of the same week resolves to the row that won.
    """
    existing = await repository.find_by_user_week(tenant_id, user_id, week_start_date)
    if existing is not None:
        return existing, False

    timesheet = Timesheet.open(tenant_id, user_id, week_start_date, actor_id=actor_id)
    try:
        await repository.add(timesheet)
        return timesheet, True
    except DuplicateEntityError:
        logger.info("Timesheet for user %s week %s created concurrently", user_id, week_start_date)
        existing = await repository.find_by_user_week(tenant_id, user_id, week_start_date)
        if existing is None:
            raise
        return existing, False


class _TimesheetAccessMixin:
    """Loads a timesheet of the caller's tenant."""

    timesheet_repository: TimesheetRepository

    async def _load_timesheet(self, timesheet_id: uuid.UUID) -> Timesheet:
        timesheet = await self.timesheet_repository.find_by_id(self.current_tenant_id, timesheet_id)
        if timesheet is None:
            raise EntityNotFoundError("Timesheet", timesheet_id)
        return timesheet


class CreateTimesheetUseCase(AuthorizedUseCase, CommandUseCase[CreateTimesheetRequestDTO, TimesheetResponseDTO]):
    """Explicitly open a draft timesheet for a week."""

    def __init__(self, timesheet_repository: TimesheetRepository):
        super().__init__()
        self.timesheet_repository = timesheet_repository

    async def _check_authorization(self, request: CreateTimesheetRequestDTO) -> None:
        if request.user_id is not None:
            self._require_owner_or_reviewer(request.user_id, "You can only create your own timesheets")

    async def _execute_command_logic(self, request: CreateTimesheetRequestDTO) -> TimesheetResponseDTO:
        tenant_id = self.current_tenant_id
        user_id = request.user_id or self.current_user_id

        if await self.timesheet_repository.find_by_user_week(tenant_id, user_id, request.week_start_date):
            raise DuplicateEntityError(
                "Timesheet", "week_start_date", request.week_start_date,
                message=f"Timesheet already exists for user {user_id} and week {request.week_start_date}"
            )

        timesheet = Timesheet.open(tenant_id, user_id, request.week_start_date, actor_id=self.current_user_id)
        saved = await self.timesheet_repository.add(timesheet)
        self._collect(timesheet)
        return TimesheetResponseDTO.from_domain(saved)


class SubmitTimesheetUseCase(_TimesheetAccessMixin, AuthorizedUseCase, CommandUseCase[uuid.UUID, TimesheetResponseDTO]):

    def __init__(self, timesheet_repository: TimesheetRepository):
        super().__init__()
        self.timesheet_repository = timesheet_repository

    async def _execute_command_logic(self, request: uuid.UUID) -> TimesheetResponseDTO:
        timesheet = await self._load_timesheet(request)
        timesheet.submit(self.current_user_id)

        saved = await self.timesheet_repository.update(timesheet)
        self._collect(timesheet)
        logger.info("Timesheet %s submitted by %s", saved.id, self.current_user_id)
        return TimesheetResponseDTO.from_domain(saved)


class ApproveTimesheetUseCase(_TimesheetAccessMixin, AuthorizedUseCase, CommandUseCase[ReviewTimesheetCommand, TimesheetResponseDTO]):
    """Reviewer accepts a submitted timesheet."""

    def __init__(self, timesheet_repository: TimesheetRepository):
        super().__init__()
        self.timesheet_repository = timesheet_repository

    async def _check_authorization(self, request: ReviewTimesheetCommand) -> None:
        self._require_reviewer()

    async def _execute_command_logic(self, request: ReviewTimesheetCommand) -> TimesheetResponseDTO:
        timesheet = await self._load_timesheet(request.timesheet_id)
        timesheet.approve(self.current_user_id, request.review_note)

        saved = await self.timesheet_repository.update(timesheet)
        self._collect(timesheet)
        logger.info("Timesheet %s approved by %s", saved.id, self.current_user_id)
        return TimesheetResponseDTO.from_domain(saved)


class RejectTimesheetUseCase(_TimesheetAccessMixin, AuthorizedUseCase, CommandUseCase[ReviewTimesheetCommand, TimesheetResponseDTO]):
    """Reviewer sends a submitted timesheet back with a mandatory note."""

    def __init__(self, timesheet_repository: TimesheetRepository):
        super().__init__()
        self.timesheet_repository = timesheet_repository

    async def _check_authorization(self, request: ReviewTimesheetCommand) -> None:
        self._require_reviewer()

    async def _execute_command_logic(self, request: ReviewTimesheetCommand) -> TimesheetResponseDTO:
        timesheet = await self._load_timesheet(request.timesheet_id)
        timesheet.reject(self.current_user_id, request.review_note)

        saved = await self.timesheet_repository.update(timesheet)
        self._collect(timesheet)
        logger.info("Timesheet %s rejected by %s", saved.id, self.current_user_id)
        return TimesheetResponseDTO.from_domain(saved)


class RecallTimesheetUseCase(_TimesheetAccessMixin, AuthorizedUseCase, CommandUseCase[uuid.UUID, RecallTimesheetResponseDTO]):
    """Owner pulls a submitted timesheet back to draft before review."""

    def __init__(self, timesheet_repository: TimesheetRepository):
        super().__init__()
        self.timesheet_repository = timesheet_repository

    async def _execute_command_logic(self, request: uuid.UUID) -> RecallTimesheetResponseDTO:
        timesheet = await self._load_timesheet(request)
        previous_status = timesheet.recall(self.current_user_id)

        saved = await self.timesheet_repository.update(timesheet)
        self._collect(timesheet)
        logger.info("Timesheet %s recalled by %s", saved.id, self.current_user_id)
        return RecallTimesheetResponseDTO(
            id=saved.id,
            status=saved.status,
            previous_status=previous_status,
            recalled_at=saved.updated_at,
            recalled_by_user_id=self.current_user_id
        )


class DeleteTimesheetUseCase(_TimesheetAccessMixin, AuthorizedUseCase, CommandUseCase[uuid.UUID, bool]):
    """
    Owner deletes a draft timesheet.
    Entries of the week are left in place and re-attach to any later timesheet.
    """

    def __init__(self, timesheet_repository: TimesheetRepository):
        super().__init__()
        self.timesheet_repository = timesheet_repository

    async def _execute_command_logic(self, request: uuid.UUID) -> bool:
        timesheet = await self._load_timesheet(request)
        timesheet.ensure_deletable(self.current_user_id)

        deleted = await self.timesheet_repository.delete(timesheet.id)
        self._collect(timesheet)
        return deleted


class GetCurrentTimesheetUseCase(AuthorizedUseCase, CommandUseCase[CurrentTimesheetQuery, CurrentTimesheetResponseDTO]):
    """
    Resolve the caller's timesheet for the week containing today.
    The week start comes from the query, else the tenant policy, else the default.
    """

    def __init__(
        self,
        timesheet_repository: TimesheetRepository,
        policy_repository: TimesheetPolicyRepository,
        default_week_start: int = 1,
        today: Callable[[], date] = date.today
    ):
        super().__init__()
        self.timesheet_repository = timesheet_repository
        self.policy_repository = policy_repository
        self.default_week_start = default_week_start
        self.today = today

    async def _resolve_week_start(self, requested: Optional[int]) -> int:
        if requested is not None:
            return requested
        policy = await self.policy_repository.find_by_tenant(self.current_tenant_id)
        return policy.week_start if policy is not None else self.default_week_start

    async def _execute_command_logic(self, request: CurrentTimesheetQuery) -> CurrentTimesheetResponseDTO:
        week_start = await self._resolve_week_start(request.week_start)
        week = Week.current(week_start, today=self.today())

        timesheet, created = await get_or_create_timesheet(
            self.timesheet_repository, self.current_tenant_id, self.current_user_id, week.start
        )
        if created:
            self._collect(timesheet)
        return CurrentTimesheetResponseDTO(
            timesheet=TimesheetResponseDTO.from_domain(timesheet),
            auto_created=created
        )


class GetTimesheetUseCase(_TimesheetAccessMixin, AuthorizedUseCase, QueryUseCase[uuid.UUID, TimesheetDetailResponseDTO]):
    """Timesheet detail with the entries of its week."""

    def __init__(self, timesheet_repository: TimesheetRepository, time_entry_repository: TimeEntryRepository):
        super().__init__()
        self.timesheet_repository = timesheet_repository
        self.time_entry_repository = time_entry_repository

    async def _execute_business_logic(self, request: uuid.UUID) -> TimesheetDetailResponseDTO:
        timesheet = await self._load_timesheet(request)
        self._require_owner_or_reviewer(timesheet.user_id, "You can only view your own timesheets")

        entries = await self.time_entry_repository.find_by_week(
            timesheet.user_id, timesheet.week_start_date, tenant_id=timesheet.tenant_id
        )
        return TimesheetDetailResponseDTO.from_domain(
            timesheet,
            total_hours=round_hours(sum(entry.hours for entry in entries)),
            time_entries=[TimeEntryResponseDTO.from_domain(entry) for entry in entries]
        )


class ListTimesheetsUseCase(AuthorizedUseCase, PaginatedQueryUseCase[ListTimesheetsRequestDTO, TimesheetListResponseDTO]):
    """
    Paginated timesheets of the caller's tenant, newest week first.
    ``team`` restricts the listing to the caller's direct reports.
    """

    def __init__(
        self,
        timesheet_repository: TimesheetRepository,
        time_entry_repository: TimeEntryRepository,
        team_directory: TeamDirectory,
        default_page_size: int = 20,
        max_page_size: int = 100
    ):
        super().__init__()
        self.timesheet_repository = timesheet_repository
        self.time_entry_repository = time_entry_repository
        self.team_directory = team_directory
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def _check_authorization(self, request: ListTimesheetsRequestDTO) -> None:
        if request.user_id is not None:
            self._require_owner_or_reviewer(request.user_id, "You can only list your own timesheets")

    async def _execute_business_logic(self, request: ListTimesheetsRequestDTO) -> TimesheetListResponseDTO:
        criteria = TimesheetFilter(
            tenant_id=self.current_tenant_id,
            user_id=request.user_id,
            week_start_date=request.week_start_date,
            status=TimesheetStatus(request.status) if request.status else None,
            week_start_from=request.from_date,
            week_start_to=request.to_date
        )

        if request.team:
            reports = await self.team_directory.direct_reports(self.current_tenant_id, self.current_user_id)
            if not reports:
                return TimesheetListResponseDTO.create(items=[], total=0, page=request.page, page_size=request.page_size)
            criteria.user_ids = reports
        elif criteria.user_id is None and not self.is_reviewer:
            criteria.user_id = self.current_user_id

        timesheets, total = await self.timesheet_repository.find_many(
            criteria, offset=request.offset, limit=request.limit
        )

        items = []
        for timesheet in timesheets:
            hours = await self.time_entry_repository.sum_hours(
                tenant_id=timesheet.tenant_id,
                user_id=timesheet.user_id,
                week_start_date=timesheet.week_start_date
            )
            items.append(TimesheetResponseDTO.from_domain(timesheet, total_hours=round_hours(hours)))

        return TimesheetListResponseDTO.create(
            items=items,
            total=total,
            page=request.page,
            page_size=request.page_size
        )


class ValidateTimesheetUseCase(_TimesheetAccessMixin, AuthorizedUseCase, QueryUseCase[uuid.UUID, TimesheetValidationResponseDTO]):
    """Check a timesheet's week against the tenant policy."""

    def __init__(
        self,
        timesheet_repository: TimesheetRepository,
        time_entry_repository: TimeEntryRepository,
        policy_repository: TimesheetPolicyRepository,
        validation_service: TimesheetValidationService
    ):
        super().__init__()
        self.timesheet_repository = timesheet_repository
        self.time_entry_repository = time_entry_repository
        self.policy_repository = policy_repository
        self.validation_service = validation_service

    async def _execute_business_logic(self, request: uuid.UUID) -> TimesheetValidationResponseDTO:
        timesheet = await self._load_timesheet(request)
        self._require_owner_or_reviewer(timesheet.user_id, "You can only validate your own timesheets")

        policy = await self.policy_repository.find_by_tenant(timesheet.tenant_id)
        entries = await self.time_entry_repository.find_by_week(
            timesheet.user_id, timesheet.week_start_date, tenant_id=timesheet.tenant_id
        )

        report = self.validation_service.validate(timesheet, entries, policy)
        if not report["valid"]:
            logger.info("Timesheet %s failed validation with %s errors", timesheet.id, len(report["errors"]))
        return TimesheetValidationResponseDTO.from_report(report)
