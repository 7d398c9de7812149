"""
Domain services.
Business logic that does not belong to a single entity.
"""

from .editability_guard import EditabilityGuard
from .timesheet_validation_service import TimesheetValidationService

__all__ = [
    "EditabilityGuard",
    "TimesheetValidationService",
]
