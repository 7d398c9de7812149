"""
Time entry mapper for converting between domain entities and database models.
"""

import uuid

from timeledger.domain.models.time_entry import TimeEntry
from timeledger.infrastructure.db.models import TimeEntryModel


class TimeEntryMapper:
    """Maps between TimeEntry domain entity and TimeEntryModel database model."""

    def domain_to_model(self, time_entry: TimeEntry) -> TimeEntryModel:
        """Convert TimeEntry domain entity to TimeEntryModel."""
        if time_entry.id is None:
            time_entry.id = uuid.uuid4()
        return TimeEntryModel(
            id=time_entry.id,
            tenant_id=time_entry.tenant_id,
            user_id=time_entry.user_id,
            project_id=time_entry.project_id,
            task_id=time_entry.task_id,
            week_start_date=time_entry.week_start_date,
            day_of_week=time_entry.day_of_week,
            hours=time_entry.hours,
            note=time_entry.note,
            created_at=time_entry.created_at,
            updated_at=time_entry.updated_at
        )

    def update_model(self, model: TimeEntryModel, time_entry: TimeEntry) -> None:
        """Copy the mutable fields of an entry onto its row."""
        model.hours = time_entry.hours
        model.note = time_entry.note
        model.updated_at = time_entry.updated_at

    def model_to_domain(self, model: TimeEntryModel) -> TimeEntry:
        """Convert TimeEntryModel to TimeEntry domain entity."""
        return TimeEntry(
            id=model.id,
            tenant_id=model.tenant_id,
            user_id=model.user_id,
            project_id=model.project_id,
            task_id=model.task_id,
            week_start_date=model.week_start_date,
            day_of_week=model.day_of_week,
            hours=model.hours,
            note=model.note,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
