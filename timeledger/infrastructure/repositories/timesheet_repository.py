"""
Timesheet repository implementation using SQLAlchemy.
"""

from datetime import date
from typing import List, Optional, Tuple
import uuid

from sqlalchemy import and_, delete, desc, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timeledger.domain.models.base import EntityNotFoundError
from timeledger.domain.models.timesheet import Timesheet
from timeledger.domain.repositories.timesheet_repository import (
    TimesheetRepository as TimesheetRepositoryInterface,
    TimesheetFilter
)
from timeledger.infrastructure.db.constraint_errors import translate_integrity_error
from timeledger.infrastructure.db.models import TimesheetModel
from timeledger.infrastructure.mappers.timesheet_mapper import TimesheetMapper


class SQLAlchemyTimesheetRepository(TimesheetRepositoryInterface):
    """SQLAlchemy implementation of timesheet repository."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.mapper = TimesheetMapper()
        self.model = TimesheetModel

    async def add(self, timesheet: Timesheet) -> Timesheet:
        model = self.mapper.domain_to_model(timesheet)
        try:
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
        except IntegrityError as exc:
            raise translate_integrity_error(exc, {
                "user_id": timesheet.user_id,
                "week_start_date": timesheet.week_start_date,
            }) from exc
        return timesheet

    async def update(self, timesheet: Timesheet) -> Timesheet:
        model = await self.session.get(TimesheetModel, timesheet.id)
        if model is None:
            raise EntityNotFoundError("Timesheet", timesheet.id)

        self.mapper.update_model(model, timesheet)
        await self.session.flush()
        return timesheet

    async def delete(self, timesheet_id: uuid.UUID) -> bool:
        result = await self.session.execute(delete(TimesheetModel).where(TimesheetModel.id == timesheet_id))
        return result.rowcount > 0

    async def find_by_id(self, tenant_id: uuid.UUID, timesheet_id: uuid.UUID) -> Optional[Timesheet]:
        model = (await self.session.execute(
            select(TimesheetModel).where(
                and_(TimesheetModel.id == timesheet_id, TimesheetModel.tenant_id == tenant_id)
            )
        )).scalar_one_or_none()
        return self.mapper.model_to_domain(model) if model else None

    async def find_by_user_week(
        self,
        tenant_id: uuid.UUID,
        user_id: uuid.UUID,
        week_start_date: date
    ) -> Optional[Timesheet]:
        model = (await self.session.execute(
            select(TimesheetModel).where(
                and_(
                    TimesheetModel.tenant_id == tenant_id,
                    TimesheetModel.user_id == user_id,
                    TimesheetModel.week_start_date == week_start_date
                )
            )
        )).scalar_one_or_none()
        return self.mapper.model_to_domain(model) if model else None

    async def find_many(
        self,
        criteria: TimesheetFilter,
        offset: int = 0,
        limit: Optional[int] = None
    ) -> Tuple[List[Timesheet], int]:
        stmt = select(TimesheetModel).where(TimesheetModel.tenant_id == criteria.tenant_id)

        if criteria.user_id is not None:
            stmt = stmt.where(TimesheetModel.user_id == criteria.user_id)
        if criteria.user_ids is not None:
            stmt = stmt.where(TimesheetModel.user_id.in_(criteria.user_ids))
        if criteria.week_start_date is not None:
            stmt = stmt.where(TimesheetModel.week_start_date == criteria.week_start_date)
        if criteria.status is not None:
            stmt = stmt.where(TimesheetModel.status == criteria.status)
        if criteria.week_start_from is not None:
            stmt = stmt.where(TimesheetModel.week_start_date >= criteria.week_start_from)
        if criteria.week_start_to is not None:
            stmt = stmt.where(TimesheetModel.week_start_date <= criteria.week_start_to)

        total = (await self.session.execute(
            select(func.count()).select_from(stmt.subquery())
        )).scalar_one()

        stmt = stmt.order_by(desc(TimesheetModel.week_start_date), desc(TimesheetModel.created_at))
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)

        models = (await self.session.execute(stmt)).scalars().all()
        return [self.mapper.model_to_domain(model) for model in models], total
