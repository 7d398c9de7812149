"""
Authentication infrastructure module.
Handles JWT validation and extraction of the caller's identity.
"""

from .jwt_handler import JWTHandler
from .dependencies import CurrentUser, get_current_user, get_jwt_handler

__all__ = [
    "JWTHandler",
    "CurrentUser",
    "get_current_user",
    "get_jwt_handler",
]
