"""
FastAPI dependency providers wiring repositories and services per request.
"""

from typing import Annotated, TypeVar

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from timeledger.config import Settings, get_settings
from timeledger.application.use_cases.base_use_case import AuthorizedUseCase
from timeledger.domain.repositories import (
    TimeEntryRepository,
    TimesheetRepository,
    MembershipChecker,
    ProjectCatalog,
    TeamDirectory,
    TimesheetPolicyRepository
)
from timeledger.domain.services import EditabilityGuard, TimesheetValidationService
from timeledger.infrastructure.auth.dependencies import CurrentUser, get_current_user
from timeledger.infrastructure.db.database import get_db
from timeledger.infrastructure.repositories import (
    SQLAlchemyTimeEntryRepository,
    SQLAlchemyTimesheetRepository,
    SQLAlchemyProjectRepository,
    SQLAlchemyTeamDirectory,
    SQLAlchemyTimesheetPolicyRepository
)


U = TypeVar("U", bound=AuthorizedUseCase)


def get_time_entry_repository(session: Annotated[AsyncSession, Depends(get_db)]) -> TimeEntryRepository:
    return SQLAlchemyTimeEntryRepository(session)


def get_timesheet_repository(session: Annotated[AsyncSession, Depends(get_db)]) -> TimesheetRepository:
    return SQLAlchemyTimesheetRepository(session)


def get_membership_checker(session: Annotated[AsyncSession, Depends(get_db)]) -> MembershipChecker:
    return SQLAlchemyProjectRepository(session)


def get_project_catalog(session: Annotated[AsyncSession, Depends(get_db)]) -> ProjectCatalog:
    return SQLAlchemyProjectRepository(session)


def get_team_directory(session: Annotated[AsyncSession, Depends(get_db)]) -> TeamDirectory:
    return SQLAlchemyTeamDirectory(session)


def get_policy_repository(session: Annotated[AsyncSession, Depends(get_db)]) -> TimesheetPolicyRepository:
    return SQLAlchemyTimesheetPolicyRepository(session)


def get_editability_guard(
    timesheet_repository: Annotated[TimesheetRepository, Depends(get_timesheet_repository)]
) -> EditabilityGuard:
    return EditabilityGuard(timesheet_repository)


def get_validation_service(settings: Annotated[Settings, Depends(get_settings)]) -> TimesheetValidationService:
    return TimesheetValidationService(expected_weekly_hours=settings.expected_weekly_hours)


def act_as(use_case: U, user: CurrentUser, settings: Settings) -> U:
    """Bind the caller's identity and the configured reviewer roles to a use case."""
    use_case.reviewer_roles = tuple(settings.reviewer_roles)
    return use_case.set_current_user(user.user_id, user.tenant_id, user.roles)


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
TimeEntryRepositoryDep = Annotated[TimeEntryRepository, Depends(get_time_entry_repository)]
TimesheetRepositoryDep = Annotated[TimesheetRepository, Depends(get_timesheet_repository)]
MembershipCheckerDep = Annotated[MembershipChecker, Depends(get_membership_checker)]
ProjectCatalogDep = Annotated[ProjectCatalog, Depends(get_project_catalog)]
TeamDirectoryDep = Annotated[TeamDirectory, Depends(get_team_directory)]
PolicyRepositoryDep = Annotated[TimesheetPolicyRepository, Depends(get_policy_repository)]
EditabilityGuardDep = Annotated[EditabilityGuard, Depends(get_editability_guard)]
ValidationServiceDep = Annotated[TimesheetValidationService, Depends(get_validation_service)]
