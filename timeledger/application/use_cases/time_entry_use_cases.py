"""
Time Entry use cases for the application layer.
Single-entry create, update, delete and lookups, each gated by membership
and by the week's timesheet status.
"""

from dataclasses import dataclass
import logging
import uuid

from timeledger.application.use_cases.base_use_case import (
    AuthorizedUseCase,
    CommandUseCase,
    QueryUseCase,
    PaginatedQueryUseCase
)
from timeledger.application.dto.time_entry_dto import (
    CreateTimeEntryRequestDTO,
    UpdateTimeEntryRequestDTO,
    ListTimeEntriesRequestDTO,
    TimeEntryResponseDTO,
    TimeEntryListResponseDTO
)
from timeledger.domain.models.base import AccessDeniedError, EntityNotFoundError
from timeledger.domain.models.time_entry import TimeEntry
from timeledger.domain.repositories.time_entry_repository import TimeEntryRepository, TimeEntryFilter, UNSET
from timeledger.domain.repositories.project_repository import MembershipChecker
from timeledger.domain.services.editability_guard import EditabilityGuard


logger = logging.getLogger(__name__)


@dataclass
class UpdateTimeEntryCommand:
    entry_id: uuid.UUID
    changes: UpdateTimeEntryRequestDTO


class _EntryAccessMixin:
    """Loads an entry of the caller's tenant and checks who may touch it."""

    time_entry_repository: TimeEntryRepository

    async def _load_entry(self, entry_id: uuid.UUID) -> TimeEntry:
        entry = await self.time_entry_repository.find_by_id(entry_id, tenant_id=self.current_tenant_id)
        if entry is None:
            raise EntityNotFoundError("TimeEntry", entry_id)
        self._require_owner_or_reviewer(entry.user_id, "You can only access your own time entries")
        return entry


class CreateTimeEntryUseCase(AuthorizedUseCase, CommandUseCase[CreateTimeEntryRequestDTO, TimeEntryResponseDTO]):
    """Log hours for the caller on one day of a week."""

    def __init__(
        self,
        time_entry_repository: TimeEntryRepository,
        membership_checker: MembershipChecker,
        editability_guard: EditabilityGuard
    ):
        super().__init__()
        self.time_entry_repository = time_entry_repository
        self.membership_checker = membership_checker
        self.editability_guard = editability_guard

    async def _execute_command_logic(self, request: CreateTimeEntryRequestDTO) -> TimeEntryResponseDTO:
        tenant_id, user_id = self.current_tenant_id, self.current_user_id

        if not await self.membership_checker.is_member(tenant_id, user_id, request.project_id):
            raise AccessDeniedError(f"User is not a member of project {request.project_id}")

        await self.editability_guard.check_editable(tenant_id, user_id, request.week_start_date)

        entry = TimeEntry(
            tenant_id=tenant_id,
            user_id=user_id,
            project_id=request.project_id,
            task_id=request.task_id,
            week_start_date=request.week_start_date,
            day_of_week=request.day_of_week,
            hours=request.hours,
            note=request.note
        )
        saved = await self.time_entry_repository.add(entry)
        logger.info(
            "Created time entry %s for user %s (week %s, day %s, %s h)",
            saved.id, user_id, saved.week_start_date, saved.day_of_week, saved.hours
        )
        return TimeEntryResponseDTO.from_domain(saved)


class UpdateTimeEntryUseCase(_EntryAccessMixin, AuthorizedUseCase, CommandUseCase[UpdateTimeEntryCommand, TimeEntryResponseDTO]):
    """Change hours and/or note of an entry while its week is editable."""

    def __init__(self, time_entry_repository: TimeEntryRepository, editability_guard: EditabilityGuard):
        super().__init__()
        self.time_entry_repository = time_entry_repository
        self.editability_guard = editability_guard

    async def _execute_command_logic(self, request: UpdateTimeEntryCommand) -> TimeEntryResponseDTO:
        entry = await self._load_entry(request.entry_id)
        await self.editability_guard.check_editable(entry.tenant_id, entry.user_id, entry.week_start_date)

        changes = request.changes
        entry.update(
            hours=changes.hours,
            note=changes.note,
            clear_note="note" in changes.model_fields_set
        )
        saved = await self.time_entry_repository.update(entry)
        logger.info("Updated time entry %s", saved.id)
        return TimeEntryResponseDTO.from_domain(saved)


class DeleteTimeEntryUseCase(_EntryAccessMixin, AuthorizedUseCase, CommandUseCase[uuid.UUID, bool]):
    """Remove an entry while its week is editable."""

    def __init__(self, time_entry_repository: TimeEntryRepository, editability_guard: EditabilityGuard):
        super().__init__()
        self.time_entry_repository = time_entry_repository
        self.editability_guard = editability_guard

    async def _execute_command_logic(self, request: uuid.UUID) -> bool:
        entry = await self._load_entry(request)
        await self.editability_guard.check_editable(entry.tenant_id, entry.user_id, entry.week_start_date)

        deleted = await self.time_entry_repository.delete(entry.id)
        logger.info("Deleted time entry %s", entry.id)
        return deleted


class GetTimeEntryUseCase(_EntryAccessMixin, AuthorizedUseCase, QueryUseCase[uuid.UUID, TimeEntryResponseDTO]):

    def __init__(self, time_entry_repository: TimeEntryRepository):
        super().__init__()
        self.time_entry_repository = time_entry_repository

    async def _execute_business_logic(self, request: uuid.UUID) -> TimeEntryResponseDTO:
        return TimeEntryResponseDTO.from_domain(await self._load_entry(request))


class ListTimeEntriesUseCase(AuthorizedUseCase, PaginatedQueryUseCase[ListTimeEntriesRequestDTO, TimeEntryListResponseDTO]):
    """
    Filtered, paginated entry listing inside the caller's tenant.
    Users without a reviewer role only see their own entries.
    """

    def __init__(self, time_entry_repository: TimeEntryRepository, default_page_size: int = 20, max_page_size: int = 100):
        super().__init__()
        self.time_entry_repository = time_entry_repository
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def _check_authorization(self, request: ListTimeEntriesRequestDTO) -> None:
        if request.user_id is not None:
            self._require_owner_or_reviewer(request.user_id, "You can only list your own time entries")

    async def _execute_business_logic(self, request: ListTimeEntriesRequestDTO) -> TimeEntryListResponseDTO:
        user_id = request.user_id
        if user_id is None and not self.is_reviewer:
            user_id = self.current_user_id

        criteria = TimeEntryFilter(
            tenant_id=self.current_tenant_id,
            user_id=user_id,
            project_id=request.project_id,
            task_id=None if request.without_task else (request.task_id or UNSET),
            day_of_week=request.day_of_week,
        )
        if request.week_start_date and request.week_end_date:
            criteria.week_start_from = request.week_start_date
            criteria.week_start_to = request.week_end_date
        elif request.week_start_date:
            criteria.week_start_date = request.week_start_date
        elif request.week_end_date:
            criteria.week_start_to = request.week_end_date

        sort_by, descending = request.ordering
        entries, total = await self.time_entry_repository.find_many(
            criteria,
            offset=request.offset,
            limit=request.limit,
            sort_by=sort_by,
            descending=descending
        )
        return TimeEntryListResponseDTO.create(
            items=[TimeEntryResponseDTO.from_domain(entry) for entry in entries],
            total=total,
            page=request.page,
            page_size=request.page_size
        )
