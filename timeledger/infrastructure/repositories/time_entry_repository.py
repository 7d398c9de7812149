"""
Time entry repository implementation using SQLAlchemy.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
import logging
import uuid

from sqlalchemy import and_, asc, delete, desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timeledger.domain.models.base import DuplicateEntityError, EntityNotFoundError
from timeledger.domain.models.time_entry import TimeEntry
from timeledger.domain.models.value_objects import to_decimal
from timeledger.domain.repositories.time_entry_repository import (
    TimeEntryRepository as TimeEntryRepositoryInterface,
    TimeEntryFilter,
    SORTABLE_FIELDS,
    UNSET
)
from timeledger.infrastructure.db.constraint_errors import translate_integrity_error
from timeledger.infrastructure.db.models import TimeEntryModel
from timeledger.infrastructure.mappers.time_entry_mapper import TimeEntryMapper


logger = logging.getLogger(__name__)


class SQLAlchemyTimeEntryRepository(TimeEntryRepositoryInterface):
    """
    SQLAlchemy implementation of time entry repository.
    Every write runs in its own SAVEPOINT so a violated constraint only
    undoes that write and leaves the request transaction usable.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.mapper = TimeEntryMapper()
        self.model = TimeEntryModel

    @staticmethod
    def _context(entry: TimeEntry) -> Dict[str, Any]:
        return {
            "user_id": entry.user_id,
            "project_id": entry.project_id,
            "task_id": entry.task_id,
            "week_start_date": entry.week_start_date,
            "day_of_week": entry.day_of_week,
        }

    async def _flush(self, entry: TimeEntry, model: Optional[TimeEntryModel] = None) -> None:
        try:
            async with self.session.begin_nested():
                if model is not None:
                    self.session.add(model)
                await self.session.flush()
        except IntegrityError as exc:
            raise translate_integrity_error(exc, self._context(entry)) from exc

    async def add(self, entry: TimeEntry) -> TimeEntry:
        """Insert a new time entry."""
        await self._flush(entry, self.mapper.domain_to_model(entry))
        return entry

    async def update(self, entry: TimeEntry) -> TimeEntry:
        """Persist hours and note of an existing time entry."""
        model = await self.session.get(TimeEntryModel, entry.id)
        if model is None:
            raise EntityNotFoundError("TimeEntry", entry.id)

        self.mapper.update_model(model, entry)
        await self._flush(entry)
        return entry

    async def upsert(self, entry: TimeEntry, replace_note: bool = True) -> Tuple[TimeEntry, bool]:
        """
        Insert or overwrite on the entry key.
        Without ``replace_note`` an existing row keeps its note.
        An insert that loses a race against a concurrent writer is retried
        once as an update.
        """
        for attempt in range(2):
            model = await self._find_model_by_key(*entry.key)
            if model is not None:
                entry.id = model.id
                entry.created_at = model.created_at
                if not replace_note:
                    entry.note = model.note
                self.mapper.update_model(model, entry)
                await self._flush(entry)
                return entry, False

            try:
                return await self.add(entry), True
            except DuplicateEntityError:
                if attempt:
                    raise
                logger.info("Concurrent insert on entry key %s, retrying as update", entry.key)
                entry.id = None

        raise AssertionError("unreachable")

    async def delete(self, entry_id: uuid.UUID) -> bool:
        """Delete time entry by ID."""
        result = await self.session.execute(delete(TimeEntryModel).where(TimeEntryModel.id == entry_id))
        return result.rowcount > 0

    async def find_by_id(self, entry_id: uuid.UUID, tenant_id: Optional[uuid.UUID] = None) -> Optional[TimeEntry]:
        """Get time entry by ID."""
        stmt = select(TimeEntryModel).where(TimeEntryModel.id == entry_id)
        if tenant_id is not None:
            stmt = stmt.where(TimeEntryModel.tenant_id == tenant_id)

        model = (await self.session.execute(stmt)).scalar_one_or_none()
        if not model:
            return None

        return self.mapper.model_to_domain(model)

    async def _find_model_by_key(
        self,
        tenant_id: uuid.UUID,
        user_id: uuid.UUID,
        project_id: uuid.UUID,
        task_id: Optional[uuid.UUID],
        week_start_date: date,
        day_of_week: int
    ) -> Optional[TimeEntryModel]:
        task_clause = TimeEntryModel.task_id.is_(None) if task_id is None else TimeEntryModel.task_id == task_id
        stmt = select(TimeEntryModel).where(
            and_(
                TimeEntryModel.tenant_id == tenant_id,
                TimeEntryModel.user_id == user_id,
                TimeEntryModel.project_id == project_id,
                task_clause,
                TimeEntryModel.week_start_date == week_start_date,
                TimeEntryModel.day_of_week == day_of_week
            )
        )
        return (await self.session.execute(stmt)).scalar_one_or_none()

    async def find_by_key(
        self,
        tenant_id: uuid.UUID,
        user_id: uuid.UUID,
        project_id: uuid.UUID,
        task_id: Optional[uuid.UUID],
        week_start_date: date,
        day_of_week: int
    ) -> Optional[TimeEntry]:
        model = await self._find_model_by_key(tenant_id, user_id, project_id, task_id, week_start_date, day_of_week)
        return self.mapper.model_to_domain(model) if model else None

    async def find_by_week(
        self,
        user_id: uuid.UUID,
        week_start_date: date,
        tenant_id: Optional[uuid.UUID] = None
    ) -> List[TimeEntry]:
        """Get a user's entries of one week ordered by day."""
        stmt = select(TimeEntryModel).where(
            and_(
                TimeEntryModel.user_id == user_id,
                TimeEntryModel.week_start_date == week_start_date
            )
        )
        if tenant_id is not None:
            stmt = stmt.where(TimeEntryModel.tenant_id == tenant_id)

        models = (await self.session.execute(
            stmt.order_by(TimeEntryModel.day_of_week, TimeEntryModel.created_at)
        )).scalars().all()
        return [self.mapper.model_to_domain(model) for model in models]

    def _apply_filter(self, stmt, criteria: TimeEntryFilter):
        if criteria.tenant_id is not None:
            stmt = stmt.where(TimeEntryModel.tenant_id == criteria.tenant_id)
        if criteria.user_id is not None:
            stmt = stmt.where(TimeEntryModel.user_id == criteria.user_id)
        if criteria.project_id is not None:
            stmt = stmt.where(TimeEntryModel.project_id == criteria.project_id)
        if criteria.task_id is None:
            stmt = stmt.where(TimeEntryModel.task_id.is_(None))
        elif criteria.task_id is not UNSET:
            stmt = stmt.where(TimeEntryModel.task_id == criteria.task_id)
        if criteria.week_start_date is not None:
            stmt = stmt.where(TimeEntryModel.week_start_date == criteria.week_start_date)
        if criteria.week_start_from is not None:
            stmt = stmt.where(TimeEntryModel.week_start_date >= criteria.week_start_from)
        if criteria.week_start_to is not None:
            stmt = stmt.where(TimeEntryModel.week_start_date <= criteria.week_start_to)
        if criteria.day_of_week is not None:
            stmt = stmt.where(TimeEntryModel.day_of_week == criteria.day_of_week)
        return stmt

    async def find_many(
        self,
        criteria: TimeEntryFilter,
        offset: int = 0,
        limit: Optional[int] = None,
        sort_by: str = "week_start_date",
        descending: bool = True
    ) -> Tuple[List[TimeEntry], int]:
        """Get a filtered, sorted page of time entries."""
        if sort_by not in SORTABLE_FIELDS:
            sort_by = "week_start_date"

        stmt = self._apply_filter(select(TimeEntryModel), criteria)
        total = (await self.session.execute(
            select(func.count()).select_from(stmt.subquery())
        )).scalar_one()

        direction = desc if descending else asc
        stmt = stmt.order_by(direction(getattr(TimeEntryModel, sort_by)), TimeEntryModel.id)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)

        models = (await self.session.execute(stmt)).scalars().all()
        return [self.mapper.model_to_domain(model) for model in models], total

    async def sum_hours(
        self,
        project_id: Optional[uuid.UUID] = None,
        tenant_id: Optional[uuid.UUID] = None,
        user_id: Optional[uuid.UUID] = None,
        week_start_date: Optional[date] = None
    ) -> Decimal:
        """Get total hours of the matching entries."""
        stmt = self._apply_filter(
            select(func.sum(TimeEntryModel.hours)),
            TimeEntryFilter(
                tenant_id=tenant_id,
                user_id=user_id,
                project_id=project_id,
                week_start_date=week_start_date
            )
        )
        result = (await self.session.execute(stmt)).scalar()
        return to_decimal(result or 0)
