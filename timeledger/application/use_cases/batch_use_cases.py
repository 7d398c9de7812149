"""
Batch time entry use cases.
Bulk sync and week copy apply items one at a time and report per-item
outcomes; a failing item never aborts the rest of the batch.
"""

from typing import Optional
import logging
import uuid

from timeledger.application.use_cases.base_use_case import AuthorizedUseCase, CommandUseCase, BulkUseCase
from timeledger.application.dto.time_entry_dto import (
    BulkTimeEntryRequestDTO,
    BulkSyncResponseDTO,
    BulkSyncErrorDTO,
    BulkSyncSummaryDTO,
    CopyWeekRequestDTO,
    CopyWeekResponseDTO,
    CopySkipDTO,
    TimeEntryResponseDTO
)
from timeledger.domain.models.time_entry import TimeEntry
from timeledger.domain.repositories.time_entry_repository import TimeEntryRepository
from timeledger.domain.repositories.project_repository import MembershipChecker


logger = logging.getLogger(__name__)


def describe_failure(exc: Exception) -> str:
    """Human readable reason recorded for a failed batch item."""
    return getattr(exc, "message", None) or str(exc) or "Unknown error"


class _TargetUserMixin:
    """Batch requests may name another user; only reviewers may do so."""

    def _target_user(self, requested: Optional[uuid.UUID]) -> uuid.UUID:
        user_id = requested or self.current_user_id
        self._require_owner_or_reviewer(user_id, "You can only change your own time entries")
        return user_id


class BulkSyncTimeEntriesUseCase(_TargetUserMixin, AuthorizedUseCase, BulkUseCase[BulkTimeEntryRequestDTO, BulkSyncResponseDTO]):
    """
    Upsert a week's worth of entries for one user.
    Each item is checked for project membership and then written with an
    atomic insert-or-update on the entry key, so replaying the same request
    updates rows instead of duplicating them. Timesheet status is not checked.
    """

    def __init__(
        self,
        time_entry_repository: TimeEntryRepository,
        membership_checker: MembershipChecker,
        max_batch_size: int = 200
    ):
        super().__init__()
        self.time_entry_repository = time_entry_repository
        self.membership_checker = membership_checker
        self.max_batch_size = max_batch_size

    async def _execute_command_logic(self, request: BulkTimeEntryRequestDTO) -> BulkSyncResponseDTO:
        tenant_id = self.current_tenant_id
        user_id = self._target_user(request.user_id)

        created, updated, errors = [], [], []

        for item in request.entries:
            if not await self.membership_checker.is_member(tenant_id, user_id, item.project_id):
                errors.append(BulkSyncErrorDTO(
                    day_of_week=item.day_of_week,
                    project_id=item.project_id,
                    error=f"User is not a member of project {item.project_id}"
                ))
                continue

            try:
                entry, was_created = await self.time_entry_repository.upsert(TimeEntry(
                    tenant_id=tenant_id,
                    user_id=user_id,
                    project_id=item.project_id,
                    task_id=item.task_id,
                    week_start_date=request.week_start_date,
                    day_of_week=item.day_of_week,
                    hours=item.hours,
                    note=item.note
                ), replace_note="note" in item.model_fields_set)
            except Exception as exc:
                logger.warning(
                    "Bulk sync item failed for user %s project %s day %s: %s",
                    user_id, item.project_id, item.day_of_week, exc,
                    exc_info=not hasattr(exc, "code")
                )
                errors.append(BulkSyncErrorDTO(
                    day_of_week=item.day_of_week,
                    project_id=item.project_id,
                    error=describe_failure(exc)
                ))
                continue

            (created if was_created else updated).append(TimeEntryResponseDTO.from_domain(entry))

        summary = BulkSyncSummaryDTO(
            created_count=len(created),
            updated_count=len(updated),
            error_count=len(errors),
            total_requested=len(request.entries)
        )
        logger.info(
            "Bulk sync for user %s week %s: %s created, %s updated, %s errors of %s",
            user_id, request.week_start_date, summary.created_count, summary.updated_count,
            summary.error_count, summary.total_requested
        )
        return BulkSyncResponseDTO(created=created, updated=updated, errors=errors, summary=summary)


class CopyWeekUseCase(_TargetUserMixin, AuthorizedUseCase, CommandUseCase[CopyWeekRequestDTO, CopyWeekResponseDTO]):
    """
    Replicate one week's entries into another week of the same user.
    Hours are always copied; notes only with ``copy_notes``. Existing target
    entries are skipped unless ``overwrite_existing`` is set.
    """

    def __init__(self, time_entry_repository: TimeEntryRepository):
        super().__init__()
        self.time_entry_repository = time_entry_repository

    async def _execute_command_logic(self, request: CopyWeekRequestDTO) -> CopyWeekResponseDTO:
        tenant_id = self.current_tenant_id
        user_id = self._target_user(request.user_id)

        sources = await self.time_entry_repository.find_by_week(user_id, request.from_week_start, tenant_id=tenant_id)
        if not sources:
            return CopyWeekResponseDTO()

        copied, skipped = [], []
        overwritten_count = 0

        for source in sources:
            try:
                existing = await self.time_entry_repository.find_by_key(
                    tenant_id, user_id, source.project_id, source.task_id,
                    request.to_week_start, source.day_of_week
                )

                if existing is not None and not request.overwrite_existing:
                    skipped.append(CopySkipDTO(
                        day_of_week=source.day_of_week,
                        project_id=source.project_id,
                        reason="Entry already exists"
                    ))
                    continue

                if existing is not None:
                    existing.update(
                        hours=source.hours,
                        note=source.note if request.copy_notes else None,
                        clear_note=True
                    )
                    stored = await self.time_entry_repository.update(existing)
                    overwritten_count += 1
                else:
                    stored = await self.time_entry_repository.add(
                        source.copy_to_week(request.to_week_start, copy_note=request.copy_notes)
                    )
            except Exception as exc:
                logger.warning(
                    "Copy of entry %s to week %s failed: %s", source.id, request.to_week_start, exc,
                    exc_info=not hasattr(exc, "code")
                )
                skipped.append(CopySkipDTO(
                    day_of_week=source.day_of_week,
                    project_id=source.project_id,
                    reason=describe_failure(exc)
                ))
                continue

            copied.append(TimeEntryResponseDTO.from_domain(stored))

        logger.info(
            "Copied week %s to %s for user %s: %s new, %s overwritten, %s skipped",
            request.from_week_start, request.to_week_start, user_id,
            len(copied) - overwritten_count, overwritten_count, len(skipped)
        )
        return CopyWeekResponseDTO(
            copied_count=len(copied) - overwritten_count,
            skipped_count=len(skipped),
            overwritten_count=overwritten_count,
            entries=copied,
            skipped=skipped
        )
