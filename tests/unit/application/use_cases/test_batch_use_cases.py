"""
Unit tests for bulk sync and week copy.
"""

import pytest
import uuid
from datetime import date

from timeledger.application.dto.time_entry_dto import BulkTimeEntryRequestDTO, CopyWeekRequestDTO
from timeledger.application.use_cases.batch_use_cases import (
    BulkSyncTimeEntriesUseCase,
    CopyWeekUseCase,
    describe_failure
)
from timeledger.domain.models.base import BusinessRuleViolation
from timeledger.domain.models.time_entry import TimeEntry
from tests.fakes import InMemoryTimeEntryRepository, StaticMembershipChecker


FROM_WEEK = date(2025, 1, 6)
TO_WEEK = date(2025, 1, 13)


class TestBulkSyncTimeEntriesUseCase:
    """Test cases for BulkSyncTimeEntriesUseCase."""

    def setup_method(self):
        self.tenant_id = uuid.uuid4()
        self.user_id = uuid.uuid4()
        self.project_id = uuid.uuid4()
        self.repository = InMemoryTimeEntryRepository()
        self.members = StaticMembershipChecker({(self.tenant_id, self.user_id, self.project_id)})

    def use_case(self, roles=None, max_batch_size=200):
        use_case = BulkSyncTimeEntriesUseCase(self.repository, self.members, max_batch_size=max_batch_size)
        return use_case.set_current_user(self.user_id, self.tenant_id, roles or ["member"])

    def request(self, items, **overrides):
        values = dict(week_start_date=FROM_WEEK, entries=items)
        values.update(overrides)
        return BulkTimeEntryRequestDTO(**values)

    def item(self, day, hours, project_id=None, **extra):
        return dict(project_id=project_id or self.project_id, day_of_week=day, hours=hours, **extra)

    @pytest.mark.asyncio
    async def test_creates_new_entries(self):
        result = await self.use_case().execute(self.request([self.item(1, 8), self.item(2, 7.5)]))

        assert result.success is True
        summary = result.data.summary
        assert (summary.created_count, summary.updated_count, summary.error_count, summary.total_requested) == (2, 0, 0, 2)
        assert len(self.repository.rows) == 2

    @pytest.mark.asyncio
    async def test_replay_updates_instead_of_duplicating(self):
        request = self.request([self.item(1, 8), self.item(2, 7.5)])
        await self.use_case().execute(request)

        replay = self.request([self.item(1, 6), self.item(2, 7.5)])
        result = await self.use_case().execute(replay)

        assert result.data.summary.created_count == 0
        assert result.data.summary.updated_count == 2
        assert len(self.repository.rows) == 2
        assert sorted(float(row.hours) for row in self.repository.rows.values()) == [6.0, 7.5]

    @pytest.mark.asyncio
    async def test_hours_only_resync_keeps_note(self):
        await self.use_case().execute(self.request([self.item(1, 8, note="standup")]))

        result = await self.use_case().execute(self.request([self.item(1, 6)]))

        assert result.data.summary.updated_count == 1
        row = next(iter(self.repository.rows.values()))
        assert float(row.hours) == 6.0
        assert row.note == "standup"

    @pytest.mark.asyncio
    async def test_explicit_null_note_clears_on_resync(self):
        await self.use_case().execute(self.request([self.item(1, 8, note="standup")]))

        await self.use_case().execute(self.request([self.item(1, 8, note=None)]))

        row = next(iter(self.repository.rows.values()))
        assert row.note is None

    @pytest.mark.asyncio
    async def test_non_member_item_is_reported(self):
        stranger = uuid.uuid4()

        result = await self.use_case().execute(self.request([self.item(1, 8), self.item(2, 8, project_id=stranger)]))

        assert result.success is True
        assert result.data.summary.created_count == 1
        assert len(result.data.errors) == 1
        error = result.data.errors[0]
        assert error.day_of_week == 2
        assert error.project_id == stranger
        assert error.error == f"User is not a member of project {stranger}"

    @pytest.mark.asyncio
    async def test_storage_failure_is_isolated(self):
        self.repository.fail_on_day = 3
        items = [self.item(1, 8), self.item(3, 8), self.item(5, 8)]

        result = await self.use_case().execute(self.request(items))

        assert result.data.summary.created_count == 2
        assert result.data.summary.error_count == 1
        assert result.data.errors[0].error == "connection reset"
        assert {row.day_of_week for row in self.repository.rows.values()} == {1, 5}

    @pytest.mark.asyncio
    async def test_batch_size_limit(self):
        items = [self.item(day, 1) for day in range(3)]

        result = await self.use_case(max_batch_size=2).execute(self.request(items))

        assert result.success is False
        assert result.error == "Batch size cannot exceed 2"

    @pytest.mark.asyncio
    async def test_member_cannot_sync_for_other_user(self):
        result = await self.use_case().execute(self.request([self.item(1, 8)], user_id=uuid.uuid4()))

        assert result.success is False
        assert result.error_code == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_reviewer_syncs_for_member(self):
        manager_id = uuid.uuid4()
        use_case = BulkSyncTimeEntriesUseCase(self.repository, self.members)
        use_case.set_current_user(manager_id, self.tenant_id, ["manager"])

        result = await use_case.execute(self.request([self.item(1, 8)], user_id=self.user_id))

        assert result.data.created[0].user_id == self.user_id

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        result = await self.use_case().execute(self.request([]))

        assert result.data.summary.total_requested == 0
        assert result.data.created == []


class TestCopyWeekUseCase:
    """Test cases for CopyWeekUseCase."""

    def setup_method(self):
        self.tenant_id = uuid.uuid4()
        self.user_id = uuid.uuid4()
        self.project_id = uuid.uuid4()
        self.repository = InMemoryTimeEntryRepository()

    def store(self, week, day, hours, note=None):
        return self.repository._insert(TimeEntry(
            tenant_id=self.tenant_id,
            user_id=self.user_id,
            project_id=self.project_id,
            week_start_date=week,
            day_of_week=day,
            hours=hours,
            note=note
        ))

    async def copy(self, **options):
        use_case = CopyWeekUseCase(self.repository).set_current_user(self.user_id, self.tenant_id, ["member"])
        return await use_case.execute(CopyWeekRequestDTO(from_week_start=FROM_WEEK, to_week_start=TO_WEEK, **options))

    def target_rows(self):
        return sorted(
            (row for row in self.repository.rows.values() if row.week_start_date == TO_WEEK),
            key=lambda row: row.day_of_week
        )

    @pytest.mark.asyncio
    async def test_copy_into_empty_week_without_notes(self):
        self.store(FROM_WEEK, 1, 8, note="sprint planning")
        self.store(FROM_WEEK, 2, 6)

        result = await self.copy()

        assert result.data.copied_count == 2
        assert result.data.skipped_count == 0
        assert [(row.day_of_week, float(row.hours), row.note) for row in self.target_rows()] == [
            (1, 8.0, None),
            (2, 6.0, None),
        ]

    @pytest.mark.asyncio
    async def test_copy_notes(self):
        self.store(FROM_WEEK, 1, 8, note="sprint planning")

        await self.copy(copy_notes=True)

        assert self.target_rows()[0].note == "sprint planning"

    @pytest.mark.asyncio
    async def test_existing_entries_are_skipped(self):
        self.store(FROM_WEEK, 1, 8)
        self.store(FROM_WEEK, 2, 6)
        self.store(TO_WEEK, 1, 3)

        result = await self.copy()

        assert result.data.copied_count == 1
        assert result.data.skipped_count == 1
        assert result.data.skipped[0].reason == "Entry already exists"
        assert float(self.target_rows()[0].hours) == 3.0

    @pytest.mark.asyncio
    async def test_rerun_skips_everything_already_copied(self):
        self.store(FROM_WEEK, 1, 8)
        self.store(FROM_WEEK, 2, 6)
        self.store(FROM_WEEK, 3, 4)
        await self.copy()

        result = await self.copy()

        assert (result.data.copied_count, result.data.skipped_count) == (0, 3)
        assert [float(row.hours) for row in self.target_rows()] == [8.0, 6.0, 4.0]
        assert len(self.repository.rows) == 6

    @pytest.mark.asyncio
    async def test_overwrite_existing(self):
        self.store(FROM_WEEK, 1, 8)
        self.store(FROM_WEEK, 2, 6)
        self.store(TO_WEEK, 1, 3, note="old")

        result = await self.copy(overwrite_existing=True)

        assert result.data.copied_count == 1
        assert result.data.overwritten_count == 1
        assert len(result.data.entries) == 2
        first = self.target_rows()[0]
        assert float(first.hours) == 8.0
        assert first.note is None

    @pytest.mark.asyncio
    async def test_empty_source_week(self):
        result = await self.copy()

        assert result.success is True
        assert result.data.copied_count == 0
        assert result.data.entries == []

    @pytest.mark.asyncio
    async def test_member_cannot_copy_other_user(self):
        use_case = CopyWeekUseCase(self.repository).set_current_user(uuid.uuid4(), self.tenant_id, ["member"])

        result = await use_case.execute(CopyWeekRequestDTO(
            user_id=self.user_id, from_week_start=FROM_WEEK, to_week_start=TO_WEEK
        ))

        assert result.error_code == "FORBIDDEN"


class TestDescribeFailure:

    def test_domain_message(self):
        assert describe_failure(BusinessRuleViolation("Nope")) == "Nope"

    def test_plain_exception(self):
        assert describe_failure(RuntimeError("boom")) == "boom"

    def test_empty_exception(self):
        assert describe_failure(RuntimeError()) == "Unknown error"
