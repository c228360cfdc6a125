"""Keygate Auth - Generic authentication infrastructure.

This package provides authentication infrastructure that is independent
of the identity domain. It handles:
- Password hashing (bcrypt) on a bounded worker pool
- Signed token issuance and verification (session, email verification,
  password reset)

Architecture:
    keygate_auth/
    ├── services/           # Pure logic (password hashing, JWT)
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from keygate_auth import PasswordHashingService, JWTService
"""

from keygate_auth.exceptions import AuthError, InvalidTokenError
from keygate_auth.schemas import TokenPayload, TokenType
from keygate_auth.services import JWTService, PasswordHashingService

__all__ = [
    # Services
    "PasswordHashingService",
    "JWTService",
    # Schemas
    "TokenPayload",
    "TokenType",
    # Exceptions
    "AuthError",
    "InvalidTokenError",
]
