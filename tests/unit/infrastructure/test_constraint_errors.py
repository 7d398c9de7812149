"""
Unit tests for constraint violation translation.
"""

import pytest
import uuid
from datetime import date

from sqlalchemy.exc import IntegrityError

from timeledger.domain.models.base import DuplicateEntityError, ValidationError
from timeledger.infrastructure.db.constraint_errors import constraint_name, translate_integrity_error


class DriverError(Exception):
    """Stands in for a DBAPI error carrying a constraint name."""

    def __init__(self, message, constraint_name=None):
        super().__init__(message)
        self.constraint_name = constraint_name


def integrity_error(orig):
    return IntegrityError("INSERT INTO time_entries ...", {}, orig)


class TestConstraintName:

    def test_attribute_on_driver_error(self):
        error = integrity_error(DriverError("duplicate key", constraint_name="uq_time_entries_key"))

        assert constraint_name(error) == "uq_time_entries_key"

    def test_attribute_on_cause(self):
        orig = Exception("wrapped")
        orig.__cause__ = DriverError("fk violation", constraint_name="fk_time_entries_task")

        assert constraint_name(integrity_error(orig)) == "fk_time_entries_task"

    def test_name_in_message(self):
        error = integrity_error(Exception('violates check constraint "ck_time_entries_hours"'))

        assert constraint_name(error) == "ck_time_entries_hours"

    def test_sqlite_unique_message(self):
        error = integrity_error(Exception("UNIQUE constraint failed: timesheets.tenant_id, timesheets.user_id"))

        assert constraint_name(error) == "uq_timesheets_tenant_user_week"

    def test_unknown(self):
        assert constraint_name(integrity_error(Exception("NOT NULL constraint failed"))) is None


class TestTranslateIntegrityError:

    def test_duplicate_entry(self):
        error = integrity_error(DriverError("dup", constraint_name="uq_time_entries_key"))

        translated = translate_integrity_error(error, {"day_of_week": 2})

        assert isinstance(translated, DuplicateEntityError)
        assert translated.message == (
            "Time entry already exists for this user, project, task, week, and day combination"
        )

    def test_missing_project(self):
        project_id = uuid.uuid4()
        error = integrity_error(DriverError("fk", constraint_name="fk_time_entries_project"))

        translated = translate_integrity_error(error, {"project_id": project_id})

        assert isinstance(translated, ValidationError)
        assert translated.message == f"Project with ID {project_id} not found"
        assert translated.field == "project_id"

    def test_duplicate_timesheet(self):
        user_id = uuid.uuid4()
        error = integrity_error(DriverError("dup", constraint_name="uq_timesheets_tenant_user_week"))

        translated = translate_integrity_error(error, {"user_id": user_id, "week_start_date": date(2025, 1, 6)})

        assert translated.code == "DUPLICATE_ENTITY"
        assert translated.message == f"Timesheet already exists for user {user_id} and week 2025-01-06"

    def test_unmapped_constraint_is_reraised(self):
        error = integrity_error(Exception("NOT NULL constraint failed: time_entries.hours"))

        with pytest.raises(IntegrityError):
            translate_integrity_error(error)
