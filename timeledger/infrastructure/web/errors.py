"""
Translation of use case results and domain errors into HTTP responses.
"""

from typing import Any, Dict, Type, TypeVar

from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError as PydanticValidationError

from timeledger.application.use_cases.base_use_case import UseCaseResult


ERROR_STATUS: Dict[str, int] = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "BUSINESS_RULE_VIOLATION": status.HTTP_400_BAD_REQUEST,
    "ENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "DUPLICATE_ENTITY": status.HTTP_409_CONFLICT,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "TIMESHEET_LOCKED": status.HTTP_403_FORBIDDEN,
}

M = TypeVar("M", bound=BaseModel)


def status_for(error_code: str) -> int:
    return ERROR_STATUS.get(error_code, status.HTTP_400_BAD_REQUEST)


def unwrap(result: UseCaseResult) -> Any:
    """Return the data of a successful result or raise the matching HTTPException."""
    if result.success:
        return result.data

    raise HTTPException(
        status_code=status_for(result.error_code),
        detail={"error": result.error_code, "message": result.error}
    )


def build_request(dto_class: Type[M], **values: Any) -> M:
    """Build a request DTO from query parameters, reporting failures as 422."""
    try:
        return dto_class(**values)
    except PydanticValidationError as exc:
        raise RequestValidationError(exc.errors())
