"""
Timesheet domain model.
The weekly approval envelope for one user's time entries.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional
import uuid

from .base import (
    BaseEntity,
    DomainEvent,
    ValidationError,
    BusinessRuleViolation,
    AccessDeniedError,
    utcnow
)
from .value_objects import Week


class TimesheetStatus(str, Enum):
    """Timesheet approval status."""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


EDITABLE_STATUSES = (TimesheetStatus.DRAFT, TimesheetStatus.REJECTED)


# Domain Events

class TimesheetStatusChangedEvent(DomainEvent):
    """Event raised on every timesheet lifecycle transition."""

    def __init__(
        self,
        action: str,
        timesheet_id: Optional[uuid.UUID],
        tenant_id: uuid.UUID,
        user_id: uuid.UUID,
        week_start_date: date,
        actor_id: uuid.UUID,
        previous_status: Optional[TimesheetStatus],
        status: Optional[TimesheetStatus]
    ):
        super().__init__()
        self.action = action
        self.timesheet_id = timesheet_id
        self.tenant_id = tenant_id
        self.user_id = user_id
        self.week_start_date = week_start_date
        self.actor_id = actor_id
        self.previous_status = previous_status
        self.status = status

    @property
    def event_name(self) -> str:
        return f"timesheet.{self.action}"


class Timesheet(BaseEntity):
    """
    Timesheet aggregate.
    Unique per (tenant, user, week start). Entries are not children of this
    object; they are associated by matching the same key.
    """

    def __init__(
        self,
        tenant_id: uuid.UUID,
        user_id: uuid.UUID,
        week_start_date: date,
        status: TimesheetStatus = TimesheetStatus.DRAFT,
        submitted_at: Optional[datetime] = None,
        submitted_by_user_id: Optional[uuid.UUID] = None,
        reviewed_at: Optional[datetime] = None,
        reviewed_by_user_id: Optional[uuid.UUID] = None,
        review_note: Optional[str] = None,
        **kwargs
    ):
        super().__init__(**kwargs)

        self.tenant_id = tenant_id
        self.user_id = user_id
        self.week_start_date = week_start_date
        self.status = TimesheetStatus(status)

        # Submission
        self.submitted_at = submitted_at
        self.submitted_by_user_id = submitted_by_user_id

        # Review
        self.reviewed_at = reviewed_at
        self.reviewed_by_user_id = reviewed_by_user_id
        self.review_note = review_note

        self.validate()

    @classmethod
    def open(cls, tenant_id: uuid.UUID, user_id: uuid.UUID, week_start_date: date, actor_id: Optional[uuid.UUID] = None) -> "Timesheet":
        """Create a new draft timesheet for a week."""
        timesheet = cls(tenant_id=tenant_id, user_id=user_id, week_start_date=week_start_date)
        timesheet._record("created", actor_id or user_id, None)
        return timesheet

    def validate(self) -> None:
        if not self.tenant_id:
            raise ValidationError("Tenant ID is required", "tenant_id")
        if not self.user_id:
            raise ValidationError("User ID is required", "user_id")
        if not isinstance(self.week_start_date, date):
            raise ValidationError("Week start date is required", "week_start_date")

    @property
    def week(self) -> Week:
        return Week(self.week_start_date)

    @property
    def is_editable(self) -> bool:
        """Whether entries of this week may be created, changed or deleted."""
        return self.status in EDITABLE_STATUSES

    @property
    def is_reviewed(self) -> bool:
        return self.reviewed_at is not None

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.user_id == user_id

    # State transitions

    def submit(self, requester_id: uuid.UUID) -> None:
        """draft -> submitted, owner only."""
        if self.status != TimesheetStatus.DRAFT:
            raise BusinessRuleViolation(
                f"Timesheet cannot be submitted. Current status: {self.status.value}"
            )
        if not self.is_owned_by(requester_id):
            raise AccessDeniedError("You can only submit your own timesheets")

        previous = self.status
        self.status = TimesheetStatus.SUBMITTED
        self.submitted_at = utcnow()
        self.submitted_by_user_id = requester_id
        self.mark_as_updated()
        self._record("submitted", requester_id, previous)

    def approve(self, reviewer_id: uuid.UUID, note: Optional[str] = None) -> None:
        """submitted -> approved."""
        if self.status != TimesheetStatus.SUBMITTED:
            raise BusinessRuleViolation(
                f"Timesheet cannot be approved. Current status: {self.status.value}"
            )

        previous = self.status
        self.status = TimesheetStatus.APPROVED
        self._mark_reviewed(reviewer_id, note)
        self._record("approved", reviewer_id, previous)

    def reject(self, reviewer_id: uuid.UUID, note: Optional[str]) -> None:
        """submitted -> rejected, a review note is mandatory."""
        if self.status != TimesheetStatus.SUBMITTED:
            raise BusinessRuleViolation(
                f"Timesheet cannot be rejected. Current status: {self.status.value}"
            )
        if not note or not note.strip():
            raise BusinessRuleViolation("Review note is required when rejecting a timesheet")

        previous = self.status
        self.status = TimesheetStatus.REJECTED
        self._mark_reviewed(reviewer_id, note)
        self._record("rejected", reviewer_id, previous)

    def recall(self, requester_id: uuid.UUID) -> TimesheetStatus:
        """
        submitted -> draft, owner only and only before a reviewer acted.
        Returns the status the timesheet had before the recall.
        """
        if self.status != TimesheetStatus.SUBMITTED:
            raise BusinessRuleViolation(
                f"Cannot recall timesheet. Current status: {self.status.value}. "
                "Only submitted timesheets can be recalled."
            )
        if self.is_reviewed:
            raise BusinessRuleViolation("Cannot recall timesheet that has already been reviewed")
        if not self.is_owned_by(requester_id):
            raise AccessDeniedError("You can only recall your own timesheets")

        previous = self.status
        self.status = TimesheetStatus.DRAFT
        self.submitted_at = None
        self.submitted_by_user_id = None
        self.mark_as_updated()
        self._record("recalled", requester_id, previous)
        return previous

    def ensure_deletable(self, requester_id: uuid.UUID) -> None:
        """Only the owner may delete, and only while draft."""
        if self.status != TimesheetStatus.DRAFT:
            raise BusinessRuleViolation("Only draft timesheets can be deleted")
        if not self.is_owned_by(requester_id):
            raise AccessDeniedError("You can only delete your own draft timesheets")
        self._record("deleted", requester_id, self.status, status=None)

    def _mark_reviewed(self, reviewer_id: uuid.UUID, note: Optional[str]) -> None:
        self.reviewed_at = utcnow()
        self.reviewed_by_user_id = reviewer_id
        self.review_note = note
        self.mark_as_updated()

    def _record(self, action: str, actor_id: uuid.UUID, previous: Optional[TimesheetStatus], **overrides) -> None:
        self.add_event(TimesheetStatusChangedEvent(
            action=action,
            timesheet_id=self.id,
            tenant_id=self.tenant_id,
            user_id=self.user_id,
            week_start_date=self.week_start_date,
            actor_id=actor_id,
            previous_status=previous,
            status=overrides.get("status", self.status)
        ))

    def __repr__(self) -> str:
        return (
            f"Timesheet(id={self.id}, user_id={self.user_id}, "
            f"week={self.week_start_date}, status={self.status.value})"
        )
