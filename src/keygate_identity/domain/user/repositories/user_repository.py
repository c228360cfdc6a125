"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from keygate_identity.domain.user.aggregates.user import User


class UserRepository(ABC):
    """Repository interface for User aggregates.

    Users are always returned with their verification tokens freshly
    loaded from the store, oldest first.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        """Find a user by their ID."""

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]:
        """Find a user by username, ignoring case."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by email address, ignoring case."""

    @abstractmethod
    async def exists_by_username_or_email(self, username: str, email: str) -> bool:
        """Check if a user exists with the given username or email (ignoring case)."""

    @abstractmethod
    async def save(self, user: User) -> None:
        """Save or update a user together with newly attached verification tokens.

        Raises
        ------
        UserAlreadyExistsError
            If the username or email collides with another user
        """

    @abstractmethod
    async def mark_email_verified(self, user_id: UUID) -> bool:
        """Flip email_verified from False to True.

        Returns True only for the caller whose write performed the
        transition; False if the user was already verified or missing.
        """

    @abstractmethod
    async def delete(self, user_id: UUID) -> None:
        """Delete a user by ID (verification tokens go with it)."""
