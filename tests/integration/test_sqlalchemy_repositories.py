"""
Integration tests for the SQLAlchemy repositories.
"""

import pytest
import uuid
from datetime import date
from decimal import Decimal

from timeledger.domain.models.base import DuplicateEntityError
from timeledger.domain.models.time_entry import TimeEntry
from timeledger.domain.models.timesheet import Timesheet, TimesheetStatus
from timeledger.domain.models.value_objects import TimesheetPolicy
from timeledger.domain.repositories import TimeEntryFilter, TimesheetFilter
from timeledger.infrastructure.db.models import (
    ProjectModel,
    TaskModel,
    ProjectMemberModel,
    ProfileModel,
    TimesheetPolicyModel
)
from timeledger.infrastructure.repositories import (
    SQLAlchemyTimeEntryRepository,
    SQLAlchemyTimesheetRepository,
    SQLAlchemyProjectRepository,
    SQLAlchemyTeamDirectory,
    SQLAlchemyTimesheetPolicyRepository
)


WEEK = date(2025, 1, 6)
TENANT_ID = uuid.uuid4()
USER_ID = uuid.uuid4()
PROJECT_ID = uuid.uuid4()
TASK_ID = uuid.uuid4()


def make_entry(day=1, hours=8, task_id=None, week=WEEK, user_id=USER_ID, project_id=PROJECT_ID, note=None):
    return TimeEntry(
        tenant_id=TENANT_ID,
        user_id=user_id,
        project_id=project_id,
        task_id=task_id,
        week_start_date=week,
        day_of_week=day,
        hours=hours,
        note=note
    )


class TestSQLAlchemyTimeEntryRepository:

    @pytest.mark.asyncio
    async def test_add_and_find(self, session):
        repository = SQLAlchemyTimeEntryRepository(session)

        entry = await repository.add(make_entry(note="review"))
        found = await repository.find_by_id(entry.id, tenant_id=TENANT_ID)

        assert entry.id is not None
        assert found.hours == Decimal("8")
        assert found.note == "review"
        assert await repository.find_by_id(entry.id, tenant_id=uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_duplicate_key_keeps_session_usable(self, session):
        repository = SQLAlchemyTimeEntryRepository(session)
        await repository.add(make_entry(task_id=TASK_ID))

        with pytest.raises(DuplicateEntityError, match="Time entry already exists"):
            await repository.add(make_entry(task_id=TASK_ID, hours=2))

        entries = await repository.find_by_week(USER_ID, WEEK)
        assert [entry.hours for entry in entries] == [Decimal("8")]

    @pytest.mark.asyncio
    async def test_upsert_creates_then_updates(self, session):
        repository = SQLAlchemyTimeEntryRepository(session)

        first, created = await repository.upsert(make_entry(hours=8))
        second, created_again = await repository.upsert(make_entry(hours=5, note="shorter"))

        assert created is True
        assert created_again is False
        assert second.id == first.id
        stored = await repository.find_by_key(TENANT_ID, USER_ID, PROJECT_ID, None, WEEK, 1)
        assert stored.hours == Decimal("5")
        assert stored.note == "shorter"

    @pytest.mark.asyncio
    async def test_upsert_without_replace_note_keeps_stored_note(self, session):
        repository = SQLAlchemyTimeEntryRepository(session)
        await repository.upsert(make_entry(hours=8, note="standup"))

        entry, created = await repository.upsert(make_entry(hours=6), replace_note=False)

        assert created is False
        assert entry.note == "standup"
        stored = await repository.find_by_key(TENANT_ID, USER_ID, PROJECT_ID, None, WEEK, 1)
        assert stored.hours == Decimal("6")
        assert stored.note == "standup"

    @pytest.mark.asyncio
    async def test_task_and_no_task_are_distinct_keys(self, session):
        repository = SQLAlchemyTimeEntryRepository(session)

        await repository.upsert(make_entry(hours=3))
        _, created = await repository.upsert(make_entry(hours=4, task_id=TASK_ID))

        assert created is True
        assert len(await repository.find_by_week(USER_ID, WEEK)) == 2

    @pytest.mark.asyncio
    async def test_update_and_delete(self, session):
        repository = SQLAlchemyTimeEntryRepository(session)
        entry = await repository.add(make_entry(note="draft"))

        entry.update(hours=Decimal("6.5"), clear_note=True)
        await repository.update(entry)
        updated = await repository.find_by_id(entry.id)

        assert updated.hours == Decimal("6.5")
        assert updated.note is None
        assert await repository.delete(entry.id) is True
        assert await repository.delete(entry.id) is False
        assert await repository.find_by_id(entry.id) is None

    @pytest.mark.asyncio
    async def test_find_by_week_orders_by_day(self, session):
        repository = SQLAlchemyTimeEntryRepository(session)
        for day in (4, 0, 2):
            await repository.add(make_entry(day=day))
        await repository.add(make_entry(day=1, week=date(2025, 1, 13)))

        entries = await repository.find_by_week(USER_ID, WEEK, tenant_id=TENANT_ID)

        assert [entry.day_of_week for entry in entries] == [0, 2, 4]

    @pytest.mark.asyncio
    async def test_find_many_filters_and_pages(self, session):
        repository = SQLAlchemyTimeEntryRepository(session)
        for day in range(5):
            await repository.add(make_entry(day=day, hours=day + 1))
        await repository.add(make_entry(day=0, task_id=TASK_ID))
        await repository.add(make_entry(day=0, user_id=uuid.uuid4()))

        page, total = await repository.find_many(
            TimeEntryFilter(tenant_id=TENANT_ID, user_id=USER_ID, task_id=None),
            offset=1,
            limit=2,
            sort_by="hours",
            descending=False
        )

        assert total == 5
        assert [entry.hours for entry in page] == [Decimal("2"), Decimal("3")]

    @pytest.mark.asyncio
    async def test_find_many_week_range(self, session):
        repository = SQLAlchemyTimeEntryRepository(session)
        await repository.add(make_entry(week=date(2024, 12, 30)))
        await repository.add(make_entry(week=WEEK))
        await repository.add(make_entry(week=date(2025, 1, 13)))

        entries, total = await repository.find_many(
            TimeEntryFilter(week_start_from=date(2024, 12, 30), week_start_to=WEEK)
        )

        assert total == 2
        assert [entry.week_start_date for entry in entries] == [WEEK, date(2024, 12, 30)]

    @pytest.mark.asyncio
    async def test_sum_hours(self, session):
        repository = SQLAlchemyTimeEntryRepository(session)
        await repository.add(make_entry(day=1, hours=Decimal("7.25")))
        await repository.add(make_entry(day=2, hours=Decimal("0.75")))
        await repository.add(make_entry(day=2, project_id=uuid.uuid4(), hours=3))

        assert await repository.sum_hours(project_id=PROJECT_ID) == Decimal("8")
        assert await repository.sum_hours(tenant_id=TENANT_ID, user_id=USER_ID, week_start_date=WEEK) == Decimal("11")
        assert await repository.sum_hours(project_id=uuid.uuid4()) == Decimal("0")


class TestSQLAlchemyTimesheetRepository:

    @pytest.mark.asyncio
    async def test_add_update_find(self, session):
        repository = SQLAlchemyTimesheetRepository(session)
        timesheet = await repository.add(Timesheet.open(TENANT_ID, USER_ID, WEEK))

        timesheet.submit(USER_ID)
        await repository.update(timesheet)
        found = await repository.find_by_user_week(TENANT_ID, USER_ID, WEEK)

        assert found.id == timesheet.id
        assert found.status == TimesheetStatus.SUBMITTED
        assert found.submitted_by_user_id == USER_ID
        assert await repository.find_by_id(uuid.uuid4(), timesheet.id) is None

    @pytest.mark.asyncio
    async def test_one_timesheet_per_week(self, session):
        repository = SQLAlchemyTimesheetRepository(session)
        await repository.add(Timesheet.open(TENANT_ID, USER_ID, WEEK))

        with pytest.raises(DuplicateEntityError) as exc_info:
            await repository.add(Timesheet.open(TENANT_ID, USER_ID, WEEK))

        assert exc_info.value.message == f"Timesheet already exists for user {USER_ID} and week {WEEK}"
        assert await repository.find_by_user_week(TENANT_ID, USER_ID, WEEK) is not None

    @pytest.mark.asyncio
    async def test_find_many(self, session):
        repository = SQLAlchemyTimesheetRepository(session)
        other_user = uuid.uuid4()
        await repository.add(Timesheet(tenant_id=TENANT_ID, user_id=USER_ID, week_start_date=date(2024, 12, 30)))
        await repository.add(Timesheet(
            tenant_id=TENANT_ID, user_id=USER_ID, week_start_date=WEEK, status=TimesheetStatus.SUBMITTED
        ))
        await repository.add(Timesheet(tenant_id=TENANT_ID, user_id=other_user, week_start_date=WEEK))
        await repository.add(Timesheet(tenant_id=uuid.uuid4(), user_id=USER_ID, week_start_date=WEEK))

        mine, total = await repository.find_many(TimesheetFilter(tenant_id=TENANT_ID, user_id=USER_ID))
        submitted, _ = await repository.find_many(
            TimesheetFilter(tenant_id=TENANT_ID, status=TimesheetStatus.SUBMITTED)
        )
        team, team_total = await repository.find_many(TimesheetFilter(tenant_id=TENANT_ID, user_ids=[other_user]))

        assert total == 2
        assert [timesheet.week_start_date for timesheet in mine] == [WEEK, date(2024, 12, 30)]
        assert [timesheet.user_id for timesheet in submitted] == [USER_ID]
        assert team_total == 1

    @pytest.mark.asyncio
    async def test_delete(self, session):
        repository = SQLAlchemyTimesheetRepository(session)
        timesheet = await repository.add(Timesheet.open(TENANT_ID, USER_ID, WEEK))

        assert await repository.delete(timesheet.id) is True
        assert await repository.find_by_id(TENANT_ID, timesheet.id) is None


class TestReadOnlyAdapters:

    @pytest.mark.asyncio
    async def test_membership_and_catalog(self, session):
        session.add(ProjectModel(id=PROJECT_ID, tenant_id=TENANT_ID, name="Alpha", code="ALP"))
        session.add(TaskModel(id=TASK_ID, tenant_id=TENANT_ID, project_id=PROJECT_ID, name="Design"))
        session.add(ProjectMemberModel(tenant_id=TENANT_ID, project_id=PROJECT_ID, user_id=USER_ID))
        await session.flush()
        repository = SQLAlchemyProjectRepository(session)

        assert await repository.is_member(TENANT_ID, USER_ID, PROJECT_ID) is True
        assert await repository.is_member(TENANT_ID, uuid.uuid4(), PROJECT_ID) is False
        assert await repository.is_member(uuid.uuid4(), USER_ID, PROJECT_ID) is False

        projects = await repository.get_projects([PROJECT_ID, uuid.uuid4()])
        assert list(projects) == [PROJECT_ID]
        assert projects[PROJECT_ID].code == "ALP"
        assert await repository.get_task_names([TASK_ID]) == {TASK_ID: "Design"}
        assert await repository.get_projects([]) == {}

    @pytest.mark.asyncio
    async def test_team_directory(self, session):
        manager_id = uuid.uuid4()
        session.add(ProfileModel(user_id=USER_ID, tenant_id=TENANT_ID, manager_user_id=manager_id))
        session.add(ProfileModel(user_id=uuid.uuid4(), tenant_id=TENANT_ID, manager_user_id=uuid.uuid4()))
        await session.flush()

        assert await SQLAlchemyTeamDirectory(session).direct_reports(TENANT_ID, manager_id) == [USER_ID]

    @pytest.mark.asyncio
    async def test_policy(self, session):
        session.add(TimesheetPolicyModel(tenant_id=TENANT_ID, week_start=0, max_hours_per_day=Decimal("10")))
        await session.flush()
        repository = SQLAlchemyTimesheetPolicyRepository(session)

        policy = await repository.find_by_tenant(TENANT_ID)

        assert policy.week_start == 0
        assert policy.max_hours_per_day == Decimal("10")
        assert policy == TimesheetPolicy(week_start=0, max_hours_per_day=Decimal("10"))
        assert await repository.find_by_tenant(uuid.uuid4()) is None
