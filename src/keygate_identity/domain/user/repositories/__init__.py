"""User domain repository interfaces."""

from keygate_identity.domain.user.repositories.user_repository import UserRepository
from keygate_identity.domain.user.repositories.verification_token_repository import (
    VerificationTokenRepository,
)

__all__ = ["UserRepository", "VerificationTokenRepository"]
