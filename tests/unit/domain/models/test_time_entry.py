"""
Unit tests for TimeEntry domain model.
"""

import pytest
import uuid
from datetime import date
from decimal import Decimal

from timeledger.domain.models.time_entry import TimeEntry
from timeledger.domain.models.base import ValidationError


class TestTimeEntry:
    """Test cases for TimeEntry entity."""

    def setup_method(self):
        """Set up test fixtures."""
        self.tenant_id = uuid.uuid4()
        self.user_id = uuid.uuid4()
        self.project_id = uuid.uuid4()
        self.week = date(2025, 1, 6)

    def make_entry(self, **overrides):
        values = {
            "tenant_id": self.tenant_id,
            "user_id": self.user_id,
            "project_id": self.project_id,
            "week_start_date": self.week,
            "day_of_week": 1,
            "hours": 8,
        }
        values.update(overrides)
        return TimeEntry(**values)

    def test_create_entry(self):
        entry = self.make_entry(note="Planning")

        assert entry.hours == Decimal("8")
        assert entry.note == "Planning"
        assert entry.task_id is None
        assert entry.is_new

    def test_hours_stored_as_decimal_without_float_noise(self):
        entry = self.make_entry(hours=0.1)

        assert entry.hours == Decimal("0.1")

    def test_entry_date_is_offset_from_week_start(self):
        """Day 1 of the week starting 2025-01-06 is 2025-01-07."""
        entry = self.make_entry(day_of_week=1)

        assert entry.entry_date == date(2025, 1, 7)

    @pytest.mark.parametrize("day", [-1, 7])
    def test_day_of_week_out_of_range(self, day):
        with pytest.raises(ValidationError, match="Day of week must be between 0 and 6"):
            self.make_entry(day_of_week=day)

    def test_negative_hours_rejected(self):
        with pytest.raises(ValidationError, match="Hours cannot be negative"):
            self.make_entry(hours=-1)

    def test_hours_above_24_rejected(self):
        with pytest.raises(ValidationError, match="Hours cannot exceed 24"):
            self.make_entry(hours=Decimal("24.01"))

    def test_boundary_hours_accepted(self):
        assert self.make_entry(hours=0).hours == Decimal("0")
        assert self.make_entry(hours=24).hours == Decimal("24")

    def test_project_required(self):
        with pytest.raises(ValidationError, match="Project ID is required"):
            self.make_entry(project_id=None)

    def test_note_too_long(self):
        with pytest.raises(ValidationError, match="Note too long"):
            self.make_entry(note="x" * 1001)

    def test_key(self):
        task_id = uuid.uuid4()
        entry = self.make_entry(task_id=task_id, day_of_week=3)

        assert entry.key == (self.tenant_id, self.user_id, self.project_id, task_id, self.week, 3)

    def test_update_hours_keeps_note(self):
        entry = self.make_entry(note="Keep me")

        entry.update(hours=4)

        assert entry.hours == Decimal("4")
        assert entry.note == "Keep me"

    def test_update_can_clear_note(self):
        entry = self.make_entry(note="Drop me")

        entry.update(note=None, clear_note=True)

        assert entry.note is None
        assert entry.hours == Decimal("8")

    def test_update_validates(self):
        entry = self.make_entry()

        with pytest.raises(ValidationError):
            entry.update(hours=25)

    def test_copy_to_week_without_note(self):
        entry = self.make_entry(note="Secret", task_id=uuid.uuid4())
        target_week = date(2025, 1, 13)

        copy = entry.copy_to_week(target_week, copy_note=False)

        assert copy.id is None
        assert copy.week_start_date == target_week
        assert copy.day_of_week == entry.day_of_week
        assert copy.task_id == entry.task_id
        assert copy.hours == entry.hours
        assert copy.note is None

    def test_copy_to_week_with_note(self):
        entry = self.make_entry(note="Carry over")

        copy = entry.copy_to_week(date(2025, 1, 13), copy_note=True)

        assert copy.note == "Carry over"
