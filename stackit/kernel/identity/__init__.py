"""
Identity Core - Authentication and user management.
"""

from stackit.kernel.identity.password import PasswordHasher, verify_password, hash_password
from stackit.kernel.identity.jwt import (
    JWTManager,
    AccessTokenPayload,
    TokenResponseData,
)
from stackit.kernel.identity.identity_service import IdentityService

__all__ = [
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "JWTManager",
    "AccessTokenPayload",
    "TokenResponseData",
    "IdentityService",
]
