# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy models for identity management."""

from keygate_identity.infrastructure.persistence.sqlalchemy.models.user_model import (
    UserModel,
)
from keygate_identity.infrastructure.persistence.sqlalchemy.models.verification_token_model import (
    VerificationTokenModel,
)

__all__ = [
    "UserModel",
    "VerificationTokenModel",
]
