"""SQLAlchemy unit of work bound to one AsyncSession."""

from sqlalchemy.ext.asyncio import AsyncSession

from keygate_identity.application.unit_of_work import UnitOfWork
from keygate_identity.infrastructure.persistence.sqlalchemy.repositories import (
    UserRepositorySQLAlchemy,
    VerificationTokenRepositorySQLAlchemy,
)


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Hands out repositories sharing one session and its transaction."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._verification_tokens = VerificationTokenRepositorySQLAlchemy(session)
        self._users = UserRepositorySQLAlchemy(
            session,
            token_repository=self._verification_tokens,
        )

    @property
    def session(self) -> AsyncSession:
        return self._session

    @property
    def users(self) -> UserRepositorySQLAlchemy:
        return self._users

    @property
    def verification_tokens(self) -> VerificationTokenRepositorySQLAlchemy:
        return self._verification_tokens

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
