"""Unit of work interface.

One unit of work is opened per request. It hands out repositories that
share a single transaction, and the application services decide when
that transaction commits or rolls back.
"""

from abc import ABC, abstractmethod

from keygate_identity.domain.user import UserRepository, VerificationTokenRepository


class UnitOfWork(ABC):
    """Transaction boundary around the identity repositories."""

    @property
    @abstractmethod
    def users(self) -> UserRepository:
        """User repository bound to this unit of work."""

    @property
    @abstractmethod
    def verification_tokens(self) -> VerificationTokenRepository:
        """Verification token repository bound to this unit of work."""

    @abstractmethod
    async def commit(self) -> None:
        """Commit all pending writes."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard all pending writes."""
