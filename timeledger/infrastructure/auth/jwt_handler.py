"""
JWT token handler.
Tokens are issued by the identity service; this side only verifies them
and extracts the caller's user, tenant and roles.
"""

from typing import Any, Dict, Optional
import jwt

from timeledger.config import Settings, get_settings
from timeledger.domain.models.base import ValidationError


class JWTHandler:
    """Handles JWT token validation and claim extraction."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.jwt_secret = self.settings.jwt_secret_key
        self.jwt_algorithm = self.settings.jwt_algorithm

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Raises:
            ValidationError: If token is invalid, expired or lacks the identity claims
        """
        if token.startswith('Bearer '):
            token = token[7:]

        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"verify_aud": False, "require": ["sub"]}
            )
        except jwt.ExpiredSignatureError:
            raise ValidationError("Token has expired")
        except jwt.PyJWTError as e:
            raise ValidationError(f"Invalid JWT token: {str(e)}")

        if not (payload.get('tenant_id') or payload.get('company_id')):
            raise ValidationError("Token missing tenant (tenant_id claim)")

        return payload

    @staticmethod
    def roles_of(payload: Dict[str, Any]) -> list:
        """Roles from a ``roles`` list claim or a single ``role`` claim."""
        roles = payload.get('roles')
        if isinstance(roles, str):
            return [roles]
        if roles:
            return list(roles)
        return [payload['role']] if payload.get('role') else []
