"""
TimeEntry domain model.
One day's hours logged by one user against a project (and optionally a task)
inside a calendar week.
"""

from datetime import date
from typing import Optional, Tuple
import uuid

from .base import BaseEntity, ValidationError
from .value_objects import Week, Number, to_decimal, MAX_HOURS_PER_ENTRY, DAYS_IN_WEEK


MAX_NOTE_LENGTH = 1000

EntryKey = Tuple[uuid.UUID, uuid.UUID, uuid.UUID, Optional[uuid.UUID], date, int]


class TimeEntry(BaseEntity):
    """
    TimeEntry entity.
    Entries are keyed by (tenant, user, project, task, week start, day of week);
    their owning timesheet is resolved by matching tenant, user and week.
    """

    def __init__(
        self,
        tenant_id: uuid.UUID,
        user_id: uuid.UUID,
        project_id: uuid.UUID,
        week_start_date: date,
        day_of_week: int,
        hours: Number,
        task_id: Optional[uuid.UUID] = None,
        note: Optional[str] = None,
        **kwargs
    ):
        super().__init__(**kwargs)

        self.tenant_id = tenant_id
        self.user_id = user_id
        self.project_id = project_id
        self.task_id = task_id

        # Position inside the week, Sunday=0
        self.week_start_date = week_start_date
        self.day_of_week = day_of_week

        self.hours = to_decimal(hours)
        self.note = note

        self.validate()

    def validate(self) -> None:
        """Validate time entry state."""
        if not self.tenant_id:
            raise ValidationError("Tenant ID is required", "tenant_id")

        if not self.user_id:
            raise ValidationError("User ID is required", "user_id")

        if not self.project_id:
            raise ValidationError("Project ID is required", "project_id")

        if not isinstance(self.day_of_week, int) or not 0 <= self.day_of_week < DAYS_IN_WEEK:
            raise ValidationError("Day of week must be between 0 and 6", "day_of_week")

        if self.hours < 0:
            raise ValidationError("Hours cannot be negative", "hours")

        if self.hours > MAX_HOURS_PER_ENTRY:
            raise ValidationError("Hours cannot exceed 24", "hours")

        if self.note and len(self.note) > MAX_NOTE_LENGTH:
            raise ValidationError(f"Note too long (max {MAX_NOTE_LENGTH} characters)", "note")

    @property
    def key(self) -> EntryKey:
        """Uniqueness key of the entry."""
        return (
            self.tenant_id,
            self.user_id,
            self.project_id,
            self.task_id,
            self.week_start_date,
            self.day_of_week,
        )

    @property
    def week(self) -> Week:
        return Week(self.week_start_date)

    @property
    def entry_date(self) -> date:
        """Calendar date the hours were worked on."""
        return self.week.date_for(self.day_of_week)

    @property
    def hours_float(self) -> float:
        return float(self.hours)

    def update(self, hours: Optional[Number] = None, note: Optional[str] = None, clear_note: bool = False) -> None:
        """Change hours and/or note in place."""
        if hours is not None:
            self.hours = to_decimal(hours)
        if note is not None or clear_note:
            self.note = note
        self.validate()
        self.mark_as_updated()

    def copy_to_week(self, week_start_date: date, copy_note: bool) -> "TimeEntry":
        """New unsaved entry with the same project, task and day in another week."""
        return TimeEntry(
            tenant_id=self.tenant_id,
            user_id=self.user_id,
            project_id=self.project_id,
            task_id=self.task_id,
            week_start_date=week_start_date,
            day_of_week=self.day_of_week,
            hours=self.hours,
            note=self.note if copy_note else None,
        )

    def __repr__(self) -> str:
        return (
            f"TimeEntry(id={self.id}, user_id={self.user_id}, project_id={self.project_id}, "
            f"week={self.week_start_date}, day={self.day_of_week}, hours={self.hours})"
        )
