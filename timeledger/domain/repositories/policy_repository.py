"""Timesheet policy lookup port."""

from abc import ABC, abstractmethod
from typing import Optional
import uuid

from timeledger.domain.models.value_objects import TimesheetPolicy


class TimesheetPolicyRepository(ABC):
    """Per-tenant policy owned by the tenant configuration subsystem."""

    @abstractmethod
    async def find_by_tenant(self, tenant_id: uuid.UUID) -> Optional[TimesheetPolicy]:
        """Policy of the tenant, or None when it never configured one."""
        pass
