"""
Read-only ports onto the project-management subsystem.
Projects, tasks and memberships are owned elsewhere; this core only consults them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
import uuid


@dataclass(frozen=True)
class ProjectInfo:
    """Display data of a project."""

    id: uuid.UUID
    name: str
    code: Optional[str] = None


class MembershipChecker(ABC):
    """Answers whether a user may log time against a project."""

    @abstractmethod
    async def is_member(self, tenant_id: uuid.UUID, user_id: uuid.UUID, project_id: uuid.UUID) -> bool:
        pass


class ProjectCatalog(ABC):
    """Name lookups used to decorate entry listings."""

    @abstractmethod
    async def get_projects(self, project_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, ProjectInfo]:
        """Known projects among ``project_ids``; unknown ids are absent from the result."""
        pass

    @abstractmethod
    async def get_task_names(self, task_ids: Iterable[uuid.UUID]) -> Dict[uuid.UUID, str]:
        pass


class TeamDirectory(ABC):
    """Reporting lines from the user-management subsystem."""

    @abstractmethod
    async def direct_reports(self, tenant_id: uuid.UUID, manager_id: uuid.UUID) -> List[uuid.UUID]:
        """Users whose manager is ``manager_id``."""
        pass
