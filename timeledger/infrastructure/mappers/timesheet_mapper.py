"""
Timesheet mapper for converting between domain entities and database models.
"""

import uuid

from timeledger.domain.models.timesheet import Timesheet, TimesheetStatus
from timeledger.infrastructure.db.models import TimesheetModel


class TimesheetMapper:
    """Maps between Timesheet domain entity and TimesheetModel database model."""

    def domain_to_model(self, timesheet: Timesheet) -> TimesheetModel:
        if timesheet.id is None:
            timesheet.id = uuid.uuid4()
        model = TimesheetModel(
            id=timesheet.id,
            tenant_id=timesheet.tenant_id,
            user_id=timesheet.user_id,
            week_start_date=timesheet.week_start_date,
            created_at=timesheet.created_at
        )
        self.update_model(model, timesheet)
        return model

    def update_model(self, model: TimesheetModel, timesheet: Timesheet) -> None:
        """Copy status and workflow fields onto the row."""
        model.status = timesheet.status
        model.submitted_at = timesheet.submitted_at
        model.submitted_by_user_id = timesheet.submitted_by_user_id
        model.reviewed_at = timesheet.reviewed_at
        model.reviewed_by_user_id = timesheet.reviewed_by_user_id
        model.review_note = timesheet.review_note
        model.updated_at = timesheet.updated_at

    def model_to_domain(self, model: TimesheetModel) -> Timesheet:
        return Timesheet(
            id=model.id,
            tenant_id=model.tenant_id,
            user_id=model.user_id,
            week_start_date=model.week_start_date,
            status=TimesheetStatus(model.status) if model.status else TimesheetStatus.DRAFT,
            submitted_at=model.submitted_at,
            submitted_by_user_id=model.submitted_by_user_id,
            reviewed_at=model.reviewed_at,
            reviewed_by_user_id=model.reviewed_by_user_id,
            review_note=model.review_note,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
