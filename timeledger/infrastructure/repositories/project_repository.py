"""
Read-only adapters onto the project and user tables of other subsystems.
"""

from typing import Dict, Iterable, List
import uuid

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from timeledger.domain.repositories.project_repository import (
    MembershipChecker,
    ProjectCatalog,
    ProjectInfo,
    TeamDirectory
)
from timeledger.infrastructure.db.models import ProjectModel, ProjectMemberModel, ProfileModel, TaskModel


class SQLAlchemyProjectRepository(MembershipChecker, ProjectCatalog):
    """Membership checks and name lookups on the mirrored project tables."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def is_member(self, tenant_id: uuid.UUID, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
        member_id = (await self.session.execute(
            select(ProjectMemberModel.id).where(
                and_(
                    ProjectMemberModel.tenant_id == tenant_id,
                    ProjectMemberModel.project_id == project_id,
                    ProjectMemberModel.user_id == user_id
                )
            ).limit(1)
        )).scalar_one_or_none()
        return member_id is not None

    async def get_projects(self, project_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, ProjectInfo]:
        ids = list(project_ids)
        if not ids:
            return {}

        rows = (await self.session.execute(
            select(ProjectModel.id, ProjectModel.name, ProjectModel.code).where(ProjectModel.id.in_(ids))
        )).all()
        return {row.id: ProjectInfo(id=row.id, name=row.name, code=row.code) for row in rows}

    async def get_task_names(self, task_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, str]:
        ids = list(task_ids)
        if not ids:
            return {}

        rows = (await self.session.execute(
            select(TaskModel.id, TaskModel.name).where(TaskModel.id.in_(ids))
        )).all()
        return {row.id: row.name for row in rows}


class SQLAlchemyTeamDirectory(TeamDirectory):
    """Reporting lines read from the profiles mirror."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def direct_reports(self, tenant_id: uuid.UUID, manager_id: uuid.UUID) -> List[uuid.UUID]:
        rows = (await self.session.execute(
            select(ProfileModel.user_id).where(
                and_(
                    ProfileModel.tenant_id == tenant_id,
                    ProfileModel.manager_user_id == manager_id
                )
            )
        )).scalars().all()
        return list(rows)
