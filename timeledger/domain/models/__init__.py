"""
Domain models for the timesheet system.
This module exports all domain entities and value objects.
"""

# Base classes
from .base import (
    BaseEntity,
    DomainEvent,
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    AccessDeniedError,
    TimesheetLockedError,
    EntityNotFoundError,
    DuplicateEntityError,
    ValueObject
)

# Value Objects
from .value_objects import (
    Week,
    TimesheetPolicy,
    round_hours,
    to_decimal,
    js_weekday,
    DAYS_IN_WEEK
)

# Domain entities
from .time_entry import TimeEntry, EntryKey
from .timesheet import (
    Timesheet,
    TimesheetStatus,
    TimesheetStatusChangedEvent,
    EDITABLE_STATUSES
)

__all__ = [
    "BaseEntity",
    "DomainEvent",
    "DomainException",
    "ValidationError",
    "BusinessRuleViolation",
    "AccessDeniedError",
    "TimesheetLockedError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "ValueObject",
    "Week",
    "TimesheetPolicy",
    "round_hours",
    "to_decimal",
    "js_weekday",
    "DAYS_IN_WEEK",
    "TimeEntry",
    "EntryKey",
    "Timesheet",
    "TimesheetStatus",
    "TimesheetStatusChangedEvent",
    "EDITABLE_STATUSES",
]
