"""Editability guard for time entry mutations."""

from datetime import date
import logging
import uuid

from timeledger.domain.models.base import TimesheetLockedError
from timeledger.domain.repositories.timesheet_repository import TimesheetRepository


logger = logging.getLogger(__name__)


class EditabilityGuard:
    """
    Decides whether a user's week is open for entry changes.
    A week without a timesheet row counts as an implicit draft.
    """

    def __init__(self, timesheet_repository: TimesheetRepository):
        self.timesheet_repository = timesheet_repository

    async def check_editable(self, tenant_id: uuid.UUID, user_id: uuid.UUID, week_start_date: date) -> None:
        """Raise TimesheetLockedError unless entries of the week may be mutated."""
        timesheet = await self.timesheet_repository.find_by_user_week(tenant_id, user_id, week_start_date)
        if timesheet is None or timesheet.is_editable:
            return

        logger.info(
            "Blocked entry change for user %s week %s: timesheet is %s",
            user_id, week_start_date, timesheet.status.value
        )
        raise TimesheetLockedError(timesheet.status)
