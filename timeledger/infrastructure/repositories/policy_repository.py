"""
Timesheet policy lookup using SQLAlchemy.
"""

from typing import Optional
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from timeledger.domain.models.value_objects import TimesheetPolicy, to_decimal
from timeledger.domain.repositories.policy_repository import TimesheetPolicyRepository
from timeledger.infrastructure.db.models import TimesheetPolicyModel


class SQLAlchemyTimesheetPolicyRepository(TimesheetPolicyRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_tenant(self, tenant_id: uuid.UUID) -> Optional[TimesheetPolicy]:
        model = await self.session.get(TimesheetPolicyModel, tenant_id)
        if model is None:
            return None

        return TimesheetPolicy(
            week_start=model.week_start if model.week_start is not None else 1,
            max_hours_per_day=to_decimal(model.max_hours_per_day) if model.max_hours_per_day is not None else None
        )
