"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypeVar, Generic, List, Sequence
from dataclasses import dataclass
from datetime import datetime
import logging
import uuid

from timeledger.domain.models.base import DomainEvent, DomainException, ValidationError, AccessDeniedError


logger = logging.getLogger(__name__)

DEFAULT_REVIEWER_ROLES = ("manager", "admin")

T = TypeVar('T')
R = TypeVar('R')


@dataclass
class UseCaseResult(Generic[T]):
    """Result wrapper for use case operations."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> "UseCaseResult[T]":
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_result(
        cls,
        error: str,
        error_code: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        """Create an error result."""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata
        )

    @classmethod
    def from_exception(cls, exc: DomainException) -> "UseCaseResult[T]":
        """Create error result from a domain exception."""
        return cls.error_result(exc.message, exc.code)


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.
    Domain exceptions become failed results; anything else propagates.
    """

    def __init__(self):
        self.execution_start: Optional[datetime] = None
        self.execution_end: Optional[datetime] = None

    async def execute(self, request: T) -> UseCaseResult[R]:
        """
        Execute the use case with proper error handling and logging.
        """
        self.execution_start = datetime.utcnow()

        try:
            await self._validate_request(request)
            result = await self._execute_business_logic(request)

            self.execution_end = datetime.utcnow()
            execution_time = (self.execution_end - self.execution_start).total_seconds()

            return UseCaseResult.success_result(
                result,
                metadata={
                    "execution_time_seconds": execution_time,
                    "executed_at": self.execution_end.isoformat()
                }
            )

        except DomainException as exc:
            self.execution_end = datetime.utcnow()
            execution_time = (self.execution_end - self.execution_start).total_seconds()
            logger.debug("%s failed: %s (%s)", type(self).__name__, exc.message, exc.code)

            error_result = UseCaseResult.from_exception(exc)
            error_result.metadata = {
                "execution_time_seconds": execution_time,
                "failed_at": self.execution_end.isoformat(),
                "exception_type": type(exc).__name__
            }

            return error_result

    async def _validate_request(self, request: T) -> None:
        """
        Validate the request. Override in subclasses if needed.
        """
        pass

    @abstractmethod
    async def _execute_business_logic(self, request: T) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    """
    pass


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    Publishes the domain events collected while the command ran.
    """

    def __init__(self):
        super().__init__()
        self.events: List[DomainEvent] = []

    async def _execute_business_logic(self, request: T) -> R:
        """
        Execute command, then publish its events.
        """
        result = await self._execute_command_logic(request)
        await self._publish_events()
        return result

    @abstractmethod
    async def _execute_command_logic(self, request: T) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass

    def _collect(self, entity: Any) -> None:
        """Move pending events from an entity into this command."""
        for event in entity.pull_events():
            # raised before the first flush
            if getattr(event, "timesheet_id", False) is None:
                event.timesheet_id = entity.id
            self.events.append(event)

    async def _publish_events(self) -> None:
        """Publish collected domain events to the audit log."""
        for event in self.events:
            logger.info("Domain event %s: %s", event.event_name, event.to_dict()["data"])

        self.events.clear()


class BulkUseCase(CommandUseCase[T, R]):
    """
    Base class for bulk operations.
    """

    def __init__(self, max_batch_size: int = 100):
        super().__init__()
        self.max_batch_size = max_batch_size

    async def _validate_request(self, request: T) -> None:
        """Validate bulk request."""
        await super()._validate_request(request)

        if hasattr(request, 'entries') and len(request.entries) > self.max_batch_size:
            raise ValidationError(f"Batch size cannot exceed {self.max_batch_size}")


class PaginatedQueryUseCase(QueryUseCase[T, R]):
    """
    Base class for paginated query use cases.
    """

    def __init__(self, default_page_size: int = 20, max_page_size: int = 100):
        super().__init__()
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def _validate_request(self, request: T) -> None:
        """Validate paginated request."""
        await super()._validate_request(request)

        if hasattr(request, 'page_size'):
            if request.page_size > self.max_page_size:
                raise ValidationError(f"Page size cannot exceed {self.max_page_size}")
            if request.page_size < 1:
                raise ValidationError("Page size must be positive")


class AuthorizedUseCase(BaseUseCase[T, R]):
    """
    Mixin for use cases that act on behalf of an authenticated user.
    """

    reviewer_roles: Sequence[str] = DEFAULT_REVIEWER_ROLES

    def __init__(self):
        super().__init__()
        self.current_user_id: Optional[uuid.UUID] = None
        self.current_tenant_id: Optional[uuid.UUID] = None
        self.current_user_roles: List[str] = []

    def set_current_user(self, user_id: uuid.UUID, tenant_id: uuid.UUID, roles: Optional[List[str]] = None):
        """Set the current user context."""
        self.current_user_id = user_id
        self.current_tenant_id = tenant_id
        self.current_user_roles = list(roles or [])
        return self

    async def _validate_request(self, request: T) -> None:
        """Validate request with authorization check."""
        await super()._validate_request(request)

        if not self.current_user_id or not self.current_tenant_id:
            raise ValidationError("User authentication required")

        await self._check_authorization(request)

    async def _check_authorization(self, request: T) -> None:
        """Check if the current user is authorized. Override in subclasses."""
        pass

    @property
    def is_reviewer(self) -> bool:
        """Whether the caller may review other users' timesheets."""
        return bool(set(self.reviewer_roles) & set(self.current_user_roles))

    def _require_owner_or_reviewer(self, owner_id: uuid.UUID, message: str) -> None:
        """Check if user owns the resource or holds a reviewer role."""
        if self.current_user_id != owner_id and not self.is_reviewer:
            raise AccessDeniedError(message)

    def _require_reviewer(self) -> None:
        """Check if user holds a reviewer role."""
        if not self.is_reviewer:
            raise AccessDeniedError(f"Requires one of the roles: {', '.join(self.reviewer_roles)}")
