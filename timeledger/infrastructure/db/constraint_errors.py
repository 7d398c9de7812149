"""
Translation of storage constraint violations into domain errors.
Every constraint the schema names is listed once in CONSTRAINT_ERRORS.
"""

import re
from typing import Any, Callable, Dict, Mapping, Optional

from sqlalchemy.exc import IntegrityError

from timeledger.domain.models.base import DomainException, DuplicateEntityError, ValidationError


ErrorFactory = Callable[[Mapping[str, Any]], DomainException]

CONSTRAINT_ERRORS: Dict[str, ErrorFactory] = {
    "uq_time_entries_key": lambda ctx: DuplicateEntityError(
        "TimeEntry", "key", ctx.get("day_of_week"),
        message="Time entry already exists for this user, project, task, week, and day combination"
    ),
    "fk_time_entries_project": lambda ctx: ValidationError(
        f"Project with ID {ctx.get('project_id')} not found", "project_id"
    ),
    "fk_time_entries_task": lambda ctx: ValidationError(
        f"Task with ID {ctx.get('task_id')} not found", "task_id"
    ),
    "ck_time_entries_day_of_week": lambda ctx: ValidationError(
        "day_of_week must be between 0 and 6", "day_of_week"
    ),
    "ck_time_entries_hours": lambda ctx: ValidationError("hours must be >= 0", "hours"),
    "uq_timesheets_tenant_user_week": lambda ctx: DuplicateEntityError(
        "Timesheet", "week_start_date", ctx.get("week_start_date"),
        message=f"Timesheet already exists for user {ctx.get('user_id')} and week {ctx.get('week_start_date')}"
    ),
}

# Drivers that report unique violations by table instead of constraint name (SQLite)
UNIQUE_BY_TABLE = {
    "time_entries": "uq_time_entries_key",
    "timesheets": "uq_timesheets_tenant_user_week",
}

_UNIQUE_FAILED = re.compile(r"UNIQUE constraint failed: (\w+)\.")


def constraint_name(exc: IntegrityError) -> Optional[str]:
    """Name of the violated constraint, as far as the driver reveals it."""
    orig = exc.orig
    for source in (orig, getattr(orig, "__cause__", None), getattr(orig, "diag", None)):
        name = getattr(source, "constraint_name", None)
        if name:
            return name

    message = str(orig)
    for name in CONSTRAINT_ERRORS:
        if name in message:
            return name

    match = _UNIQUE_FAILED.search(message)
    if match:
        return UNIQUE_BY_TABLE.get(match.group(1))
    return None


def translate_integrity_error(exc: IntegrityError, context: Optional[Mapping[str, Any]] = None) -> DomainException:
    """
    Domain error for a constraint violation.
    Re-raises ``exc`` unchanged when the constraint is not in the table.
    """
    factory = CONSTRAINT_ERRORS.get(constraint_name(exc) or "")
    if factory is None:
        raise exc
    return factory(context or {})
