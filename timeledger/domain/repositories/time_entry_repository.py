"""Time Entry repository interface.
Defines the contract for time entry data persistence operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple
import uuid

from timeledger.domain.models.time_entry import TimeEntry


class _Unset:
    """Sentinel distinguishing "no filter" from "filter on NULL"."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


@dataclass
class TimeEntryFilter:
    """
    Criteria for listing time entries.
    ``task_id=None`` selects entries without a task; leave it ``UNSET`` to
    ignore the task column.
    """

    tenant_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None
    project_id: Optional[uuid.UUID] = None
    task_id: object = UNSET
    week_start_date: Optional[date] = None
    week_start_from: Optional[date] = None
    week_start_to: Optional[date] = None
    day_of_week: Optional[int] = None


SORTABLE_FIELDS = ("week_start_date", "day_of_week", "hours", "created_at", "updated_at")


class TimeEntryRepository(ABC):
    """
    Repository interface for TimeEntry entity.
    Defines all operations needed for time entry data persistence.
    """

    @abstractmethod
    async def add(self, entry: TimeEntry) -> TimeEntry:
        """
        Insert a new entry.
        Raises DuplicateEntityError when the entry key is already taken.
        """
        pass

    @abstractmethod
    async def update(self, entry: TimeEntry) -> TimeEntry:
        """Persist hours and note of an existing entry."""
        pass

    @abstractmethod
    async def upsert(self, entry: TimeEntry, replace_note: bool = True) -> Tuple[TimeEntry, bool]:
        """
        Insert the entry or, when its key exists, overwrite hours and note.
        With ``replace_note`` off an existing row keeps its stored note.
        Returns the stored entry and whether it was newly created.
        """
        pass

    @abstractmethod
    async def delete(self, entry_id: uuid.UUID) -> bool:
        """Delete an entry. Returns False when it did not exist."""
        pass

    @abstractmethod
    async def find_by_id(self, entry_id: uuid.UUID, tenant_id: Optional[uuid.UUID] = None) -> Optional[TimeEntry]:
        """
        Find a time entry by its ID.
        Returns None if not found.
        """
        pass

    @abstractmethod
    async def find_by_key(
        self,
        tenant_id: uuid.UUID,
        user_id: uuid.UUID,
        project_id: uuid.UUID,
        task_id: Optional[uuid.UUID],
        week_start_date: date,
        day_of_week: int
    ) -> Optional[TimeEntry]:
        """Point lookup on the uniqueness key (a None task matches NULL)."""
        pass

    @abstractmethod
    async def find_by_week(
        self,
        user_id: uuid.UUID,
        week_start_date: date,
        tenant_id: Optional[uuid.UUID] = None
    ) -> List[TimeEntry]:
        """
        All entries of a user for one week, ordered by day of week.
        Without a tenant the lookup spans all tenants.
        """
        pass

    @abstractmethod
    async def find_many(
        self,
        criteria: TimeEntryFilter,
        offset: int = 0,
        limit: Optional[int] = None,
        sort_by: str = "week_start_date",
        descending: bool = True
    ) -> Tuple[List[TimeEntry], int]:
        """Filtered, sorted page of entries plus the unpaged total."""
        pass

    @abstractmethod
    async def sum_hours(
        self,
        project_id: Optional[uuid.UUID] = None,
        tenant_id: Optional[uuid.UUID] = None,
        user_id: Optional[uuid.UUID] = None,
        week_start_date: Optional[date] = None
    ) -> Decimal:
        """Sum of hours of every entry matching the given columns."""
        pass
