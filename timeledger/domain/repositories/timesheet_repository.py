"""Timesheet repository interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple
import uuid

from timeledger.domain.models.timesheet import Timesheet, TimesheetStatus


@dataclass
class TimesheetFilter:
    """Criteria for listing a tenant's timesheets."""

    tenant_id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    user_ids: Optional[List[uuid.UUID]] = None
    week_start_date: Optional[date] = None
    status: Optional[TimesheetStatus] = None
    week_start_from: Optional[date] = None
    week_start_to: Optional[date] = None


class TimesheetRepository(ABC):
    """
    Repository interface for Timesheet aggregate.
    """

    @abstractmethod
    async def add(self, timesheet: Timesheet) -> Timesheet:
        """
        Insert a new timesheet.
        Raises DuplicateEntityError when one already exists for the tenant, user and week.
        """
        pass

    @abstractmethod
    async def update(self, timesheet: Timesheet) -> Timesheet:
        pass

    @abstractmethod
    async def delete(self, timesheet_id: uuid.UUID) -> bool:
        pass

    @abstractmethod
    async def find_by_id(self, tenant_id: uuid.UUID, timesheet_id: uuid.UUID) -> Optional[Timesheet]:
        pass

    @abstractmethod
    async def find_by_user_week(
        self,
        tenant_id: uuid.UUID,
        user_id: uuid.UUID,
        week_start_date: date
    ) -> Optional[Timesheet]:
        """Lookup on the natural key."""
        pass

    @abstractmethod
    async def find_many(
        self,
        criteria: TimesheetFilter,
        offset: int = 0,
        limit: Optional[int] = None
    ) -> Tuple[List[Timesheet], int]:
        """Page of timesheets, newest week first, plus the unpaged total."""
        pass
