# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy repository implementations for identity management."""

from keygate_identity.infrastructure.persistence.sqlalchemy.repositories.user_repository import (
    UserRepositorySQLAlchemy,
)
from keygate_identity.infrastructure.persistence.sqlalchemy.repositories.verification_token_repository import (
    VerificationTokenRepositorySQLAlchemy,
)

__all__ = [
    "UserRepositorySQLAlchemy",
    "VerificationTokenRepositorySQLAlchemy",
]
