"""
Authentication dependencies for FastAPI.
"""

from dataclasses import dataclass, field
from typing import Annotated, List
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from timeledger.infrastructure.auth.jwt_handler import JWTHandler
from timeledger.domain.models.base import ValidationError


# Security scheme
security = HTTPBearer()


@dataclass(frozen=True)
class CurrentUser:
    """Identity of the caller as asserted by the bearer token."""

    user_id: uuid.UUID
    tenant_id: uuid.UUID
    roles: List[str] = field(default_factory=list)


def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    return JWTHandler()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> CurrentUser:
    """
    FastAPI dependency to get the current authenticated user.

    Raises:
        HTTPException: 401 if the token is missing, invalid or malformed
    """
    try:
        payload = jwt_handler.verify_token(credentials.credentials)
        return CurrentUser(
            user_id=uuid.UUID(str(payload['sub'])),
            tenant_id=uuid.UUID(str(payload.get('tenant_id') or payload.get('company_id'))),
            roles=jwt_handler.roles_of(payload)
        )
    except (ValidationError, ValueError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=getattr(e, "message", str(e)),
            headers={"WWW-Authenticate": "Bearer"},
        )
