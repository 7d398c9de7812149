"""
Unit tests for the use case base classes.
"""

import pytest
import uuid

from timeledger.application.use_cases.base_use_case import (
    UseCaseResult,
    AuthorizedUseCase,
    CommandUseCase,
    QueryUseCase,
    PaginatedQueryUseCase
)
from timeledger.domain.models.base import BusinessRuleViolation, EntityNotFoundError


class TestUseCaseResult:
    """Test cases for UseCaseResult."""

    def test_success_result(self):
        result = UseCaseResult.success_result({"id": 1, "hours": 8.0})

        assert result.success is True
        assert result.data == {"id": 1, "hours": 8.0}
        assert result.error is None
        assert result.error_code is None

    def test_error_result(self):
        result = UseCaseResult.error_result("Something went wrong", "TEST_ERROR")

        assert result.success is False
        assert result.data is None
        assert result.error == "Something went wrong"
        assert result.error_code == "TEST_ERROR"

    def test_error_result_with_metadata(self):
        metadata = {"attempt": 1}
        result = UseCaseResult.error_result("Error", "ERR_001", metadata)

        assert result.metadata == metadata

    def test_from_exception(self):
        result = UseCaseResult.from_exception(EntityNotFoundError("Timesheet", 42))

        assert result.success is False
        assert result.error == "Timesheet with id 42 not found"
        assert result.error_code == "ENTITY_NOT_FOUND"


class EchoQuery(QueryUseCase[str, str]):

    def __init__(self, failure=None):
        super().__init__()
        self.failure = failure

    async def _execute_business_logic(self, request: str) -> str:
        if self.failure is not None:
            raise self.failure
        return request.upper()


class OwnerOnlyQuery(AuthorizedUseCase, QueryUseCase[uuid.UUID, str]):

    async def _check_authorization(self, request: uuid.UUID) -> None:
        self._require_owner_or_reviewer(request, "Not yours")

    async def _execute_business_logic(self, request: uuid.UUID) -> str:
        return "ok"


class ReviewerCommand(AuthorizedUseCase, CommandUseCase[None, str]):

    async def _check_authorization(self, request) -> None:
        self._require_reviewer()

    async def _execute_command_logic(self, request) -> str:
        return "reviewed"


class PageQuery(PaginatedQueryUseCase):

    async def _execute_business_logic(self, request):
        return request.page_size


class PageRequest:

    def __init__(self, page_size):
        self.page_size = page_size


class TestBaseUseCase:
    """Domain errors become failed results, anything else propagates."""

    @pytest.mark.asyncio
    async def test_success_carries_metadata(self):
        result = await EchoQuery().execute("week")

        assert result.success is True
        assert result.data == "WEEK"
        assert "execution_time_seconds" in result.metadata

    @pytest.mark.asyncio
    async def test_domain_exception_becomes_result(self):
        result = await EchoQuery(BusinessRuleViolation("Only draft timesheets can be submitted")).execute("x")

        assert result.success is False
        assert result.error == "Only draft timesheets can be submitted"
        assert result.error_code == "BUSINESS_RULE_VIOLATION"
        assert result.metadata["exception_type"] == "BusinessRuleViolation"

    @pytest.mark.asyncio
    async def test_unexpected_exception_propagates(self):
        with pytest.raises(RuntimeError, match="database is gone"):
            await EchoQuery(RuntimeError("database is gone")).execute("x")


class TestAuthorizedUseCase:

    def setup_method(self):
        self.user_id = uuid.uuid4()
        self.tenant_id = uuid.uuid4()

    @pytest.mark.asyncio
    async def test_requires_authenticated_user(self):
        result = await OwnerOnlyQuery().execute(self.user_id)

        assert result.success is False
        assert result.error == "User authentication required"

    @pytest.mark.asyncio
    async def test_owner_allowed(self):
        use_case = OwnerOnlyQuery().set_current_user(self.user_id, self.tenant_id)

        result = await use_case.execute(self.user_id)

        assert result.success is True

    @pytest.mark.asyncio
    async def test_other_user_denied(self):
        use_case = OwnerOnlyQuery().set_current_user(self.user_id, self.tenant_id, ["member"])

        result = await use_case.execute(uuid.uuid4())

        assert result.success is False
        assert result.error == "Not yours"
        assert result.error_code == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_reviewer_may_access_others(self):
        use_case = OwnerOnlyQuery().set_current_user(self.user_id, self.tenant_id, ["manager"])

        result = await use_case.execute(uuid.uuid4())

        assert result.success is True

    @pytest.mark.asyncio
    async def test_reviewer_roles_are_configurable(self):
        use_case = ReviewerCommand().set_current_user(self.user_id, self.tenant_id, ["lead"])
        use_case.reviewer_roles = ("lead",)

        result = await use_case.execute(None)

        assert result.success is True
        assert result.data == "reviewed"

    @pytest.mark.asyncio
    async def test_non_reviewer_denied(self):
        use_case = ReviewerCommand().set_current_user(self.user_id, self.tenant_id, ["member"])

        result = await use_case.execute(None)

        assert result.success is False
        assert result.error == "Requires one of the roles: manager, admin"


class TestPaginatedQueryUseCase:

    @pytest.mark.asyncio
    async def test_page_size_limit(self):
        result = await PageQuery(max_page_size=50).execute(PageRequest(51))

        assert result.success is False
        assert result.error == "Page size cannot exceed 50"

    @pytest.mark.asyncio
    async def test_page_size_positive(self):
        result = await PageQuery().execute(PageRequest(0))

        assert result.error == "Page size must be positive"
