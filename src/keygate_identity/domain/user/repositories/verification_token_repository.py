"""Verification token repository interface."""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from keygate_identity.domain.user.entities import VerificationToken


class VerificationTokenRepository(ABC):
    """Repository interface for email verification tokens."""

    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[VerificationToken]:
        """Find a token record by its token string."""

    @abstractmethod
    async def list_for_user(self, user_id: UUID) -> list[VerificationToken]:
        """List a user's tokens ordered by creation time, oldest first."""

    @abstractmethod
    async def save(self, token: VerificationToken) -> None:
        """Persist a new token record."""

    @abstractmethod
    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Delete every token of a user.

        Returns
        -------
        Number of tokens deleted
        """
