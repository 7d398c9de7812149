"""
In-memory implementations of the repository ports for use case tests.
Stored entities are copied on the way in and out, like rows in a database.
"""

from copy import deepcopy
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Set, Tuple
import uuid

from timeledger.domain.models.base import DuplicateEntityError, EntityNotFoundError
from timeledger.domain.models.time_entry import TimeEntry
from timeledger.domain.models.timesheet import Timesheet
from timeledger.domain.models.value_objects import TimesheetPolicy
from timeledger.domain.repositories import (
    TimeEntryRepository,
    TimeEntryFilter,
    UNSET,
    TimesheetRepository,
    TimesheetFilter,
    MembershipChecker,
    ProjectCatalog,
    ProjectInfo,
    TeamDirectory,
    TimesheetPolicyRepository
)


def _stored(entity):
    stored = deepcopy(entity)
    stored._events = []
    return stored


class InMemoryTimeEntryRepository(TimeEntryRepository):

    def __init__(self, entries: Iterable[TimeEntry] = ()):
        self.rows: Dict[uuid.UUID, TimeEntry] = {}
        self.fail_on_day: Optional[int] = None
        for entry in entries:
            self._insert(entry)

    def _insert(self, entry: TimeEntry) -> TimeEntry:
        if self.fail_on_day is not None and entry.day_of_week == self.fail_on_day:
            raise RuntimeError("connection reset")
        if any(row.key == entry.key for row in self.rows.values()):
            raise DuplicateEntityError(
                "TimeEntry", "key", entry.day_of_week,
                message="Time entry already exists for this user, project, task, week, and day combination"
            )
        if entry.id is None:
            entry.id = uuid.uuid4()
        self.rows[entry.id] = _stored(entry)
        return entry

    async def add(self, entry: TimeEntry) -> TimeEntry:
        return self._insert(entry)

    async def update(self, entry: TimeEntry) -> TimeEntry:
        if entry.id not in self.rows:
            raise EntityNotFoundError("TimeEntry", entry.id)
        self.rows[entry.id] = _stored(entry)
        return entry

    async def upsert(self, entry: TimeEntry, replace_note: bool = True) -> Tuple[TimeEntry, bool]:
        existing = await self.find_by_key(*entry.key)
        if existing is None:
            return self._insert(entry), True
        entry.id = existing.id
        entry.created_at = existing.created_at
        if not replace_note:
            entry.note = existing.note
        return await self.update(entry), False

    async def delete(self, entry_id: uuid.UUID) -> bool:
        return self.rows.pop(entry_id, None) is not None

    async def find_by_id(self, entry_id: uuid.UUID, tenant_id: Optional[uuid.UUID] = None) -> Optional[TimeEntry]:
        row = self.rows.get(entry_id)
        if row is None or (tenant_id is not None and row.tenant_id != tenant_id):
            return None
        return deepcopy(row)

    async def find_by_key(self, tenant_id, user_id, project_id, task_id, week_start_date, day_of_week):
        key = (tenant_id, user_id, project_id, task_id, week_start_date, day_of_week)
        for row in self.rows.values():
            if row.key == key:
                return deepcopy(row)
        return None

    async def find_by_week(self, user_id, week_start_date, tenant_id=None) -> List[TimeEntry]:
        rows = [
            row for row in self.rows.values()
            if row.user_id == user_id and row.week_start_date == week_start_date
            and (tenant_id is None or row.tenant_id == tenant_id)
        ]
        return [deepcopy(row) for row in sorted(rows, key=lambda row: (row.day_of_week, row.created_at))]

    def _matches(self, row: TimeEntry, criteria: TimeEntryFilter) -> bool:
        checks = [
            criteria.tenant_id is None or row.tenant_id == criteria.tenant_id,
            criteria.user_id is None or row.user_id == criteria.user_id,
            criteria.project_id is None or row.project_id == criteria.project_id,
            criteria.task_id is UNSET or row.task_id == criteria.task_id,
            criteria.week_start_date is None or row.week_start_date == criteria.week_start_date,
            criteria.week_start_from is None or row.week_start_date >= criteria.week_start_from,
            criteria.week_start_to is None or row.week_start_date <= criteria.week_start_to,
            criteria.day_of_week is None or row.day_of_week == criteria.day_of_week,
        ]
        return all(checks)

    async def find_many(self, criteria, offset=0, limit=None, sort_by="week_start_date", descending=True):
        rows = [row for row in self.rows.values() if self._matches(row, criteria)]
        rows.sort(key=lambda row: getattr(row, sort_by), reverse=descending)
        page = rows[offset:offset + limit] if limit else rows[offset:]
        return [deepcopy(row) for row in page], len(rows)

    async def sum_hours(self, project_id=None, tenant_id=None, user_id=None, week_start_date=None) -> Decimal:
        criteria = TimeEntryFilter(
            tenant_id=tenant_id, user_id=user_id, project_id=project_id, week_start_date=week_start_date
        )
        return sum((row.hours for row in self.rows.values() if self._matches(row, criteria)), Decimal("0"))


class InMemoryTimesheetRepository(TimesheetRepository):

    def __init__(self, timesheets: Iterable[Timesheet] = ()):
        self.rows: Dict[uuid.UUID, Timesheet] = {}
        self.added = 0
        for timesheet in timesheets:
            self._insert(timesheet)

    def _insert(self, timesheet: Timesheet) -> Timesheet:
        key = (timesheet.tenant_id, timesheet.user_id, timesheet.week_start_date)
        if any((row.tenant_id, row.user_id, row.week_start_date) == key for row in self.rows.values()):
            raise DuplicateEntityError(
                "Timesheet", "week_start_date", timesheet.week_start_date,
                message=f"Timesheet already exists for user {timesheet.user_id} and week {timesheet.week_start_date}"
            )
        if timesheet.id is None:
            timesheet.id = uuid.uuid4()
        self.rows[timesheet.id] = _stored(timesheet)
        return timesheet

    async def add(self, timesheet: Timesheet) -> Timesheet:
        self.added += 1
        return self._insert(timesheet)

    async def update(self, timesheet: Timesheet) -> Timesheet:
        if timesheet.id not in self.rows:
            raise EntityNotFoundError("Timesheet", timesheet.id)
        self.rows[timesheet.id] = _stored(timesheet)
        return timesheet

    async def delete(self, timesheet_id: uuid.UUID) -> bool:
        return self.rows.pop(timesheet_id, None) is not None

    async def find_by_id(self, tenant_id, timesheet_id) -> Optional[Timesheet]:
        row = self.rows.get(timesheet_id)
        if row is None or row.tenant_id != tenant_id:
            return None
        return deepcopy(row)

    async def find_by_user_week(self, tenant_id, user_id, week_start_date) -> Optional[Timesheet]:
        for row in self.rows.values():
            if (row.tenant_id, row.user_id, row.week_start_date) == (tenant_id, user_id, week_start_date):
                return deepcopy(row)
        return None

    async def find_many(self, criteria: TimesheetFilter, offset=0, limit=None):
        rows = [
            row for row in self.rows.values()
            if row.tenant_id == criteria.tenant_id
            and (criteria.user_id is None or row.user_id == criteria.user_id)
            and (criteria.user_ids is None or row.user_id in criteria.user_ids)
            and (criteria.week_start_date is None or row.week_start_date == criteria.week_start_date)
            and (criteria.status is None or row.status == criteria.status)
            and (criteria.week_start_from is None or row.week_start_date >= criteria.week_start_from)
            and (criteria.week_start_to is None or row.week_start_date <= criteria.week_start_to)
        ]
        rows.sort(key=lambda row: row.week_start_date, reverse=True)
        page = rows[offset:offset + limit] if limit else rows[offset:]
        return [deepcopy(row) for row in page], len(rows)


class StaticMembershipChecker(MembershipChecker):
    """Members are (tenant, user, project) triples."""

    def __init__(self, members: Iterable[Tuple[uuid.UUID, uuid.UUID, uuid.UUID]] = ()):
        self.members: Set[Tuple[uuid.UUID, uuid.UUID, uuid.UUID]] = set(members)

    async def is_member(self, tenant_id, user_id, project_id) -> bool:
        return (tenant_id, user_id, project_id) in self.members


class StaticProjectCatalog(ProjectCatalog):

    def __init__(self, projects: Iterable[ProjectInfo] = (), tasks: Optional[Dict[uuid.UUID, str]] = None):
        self.projects = {project.id: project for project in projects}
        self.tasks = dict(tasks or {})

    async def get_projects(self, project_ids):
        return {pid: self.projects[pid] for pid in project_ids if pid in self.projects}

    async def get_task_names(self, task_ids):
        return {tid: self.tasks[tid] for tid in task_ids if tid in self.tasks}


class StaticTeamDirectory(TeamDirectory):

    def __init__(self, reports: Optional[Dict[uuid.UUID, List[uuid.UUID]]] = None):
        self.reports = dict(reports or {})

    async def direct_reports(self, tenant_id, manager_id):
        return list(self.reports.get(manager_id, []))


class StaticPolicyRepository(TimesheetPolicyRepository):

    def __init__(self, policies: Optional[Dict[uuid.UUID, TimesheetPolicy]] = None):
        self.policies = dict(policies or {})

    async def find_by_tenant(self, tenant_id):
        return self.policies.get(tenant_id)
