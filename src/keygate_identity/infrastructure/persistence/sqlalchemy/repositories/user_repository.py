"""SQLAlchemy implementation of UserRepository."""

import logging
from uuid import UUID

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from keygate_identity.domain.shared.time import ensure_tz_aware, utc_now
from keygate_identity.domain.user import User, UserRepository
from keygate_identity.exceptions import UserAlreadyExistsError
from keygate_identity.infrastructure.persistence.sqlalchemy.models import UserModel
from keygate_identity.infrastructure.persistence.sqlalchemy.models.user_model import (
    EMAIL_UNIQUE_INDEX,
    USERNAME_UNIQUE_INDEX,
)
from keygate_identity.infrastructure.persistence.sqlalchemy.repositories.verification_token_repository import (  # noqa: E501
    VerificationTokenRepositorySQLAlchemy,
)

logger = logging.getLogger(__name__)


class UserRepositorySQLAlchemy(UserRepository):
    """SQLAlchemy implementation of the UserRepository interface."""

    def __init__(
        self,
        session: AsyncSession,
        token_repository: VerificationTokenRepositorySQLAlchemy | None = None,
    ) -> None:
        self._session = session
        self._token_repo = token_repository or VerificationTokenRepositorySQLAlchemy(
            session,
        )

    async def find_by_id(self, user_id: UUID) -> User | None:
        model = await self._find_model_by_id(user_id)
        if model is None:
            return None
        return await self._map_to_domain(model)

    async def find_by_username(self, username: str) -> User | None:
        stmt = select(UserModel).where(
            func.lower(UserModel.username) == username.strip().lower(),
        )
        return await self._find_one(stmt)

    async def find_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(
            func.lower(UserModel.email) == email.strip().lower(),
        )
        return await self._find_one(stmt)

    async def exists_by_username_or_email(self, username: str, email: str) -> bool:
        stmt = (
            select(UserModel.id)
            .where(
                or_(
                    func.lower(UserModel.username) == username.strip().lower(),
                    func.lower(UserModel.email) == email.strip().lower(),
                ),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def save(self, user: User) -> None:
        existing = await self._find_model_by_id(user.id)

        try:
            if existing:
                self._update_model(existing, user)
                logger.debug("Updated user: %s", user.id)
            else:
                self._session.add(self._map_to_model(user))
                logger.info("Created user: %s (username: %s)", user.id, user.username)

            # Parent row must be flushed before its tokens
            await self._session.flush()
            await self._token_repo.add_missing(list(user.verification_tokens))
            await self._session.flush()
        except IntegrityError as e:
            message = str(e.orig) if e.orig is not None else str(e)
            if USERNAME_UNIQUE_INDEX in message or EMAIL_UNIQUE_INDEX in message:
                raise UserAlreadyExistsError from e
            raise

    async def mark_email_verified(self, user_id: UUID) -> bool:
        stmt = (
            update(UserModel)
            .where(
                UserModel.id == user_id,
                UserModel.email_verified.is_(False),
            )
            .values(email_verified=True, updated_at=utc_now())
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount == 1  # type: ignore[attr-defined]

    async def delete(self, user_id: UUID) -> None:
        model = await self._find_model_by_id(user_id)

        if model:
            await self._token_repo.delete_all_for_user(user_id)
            await self._session.delete(model)
            await self._session.flush()
            logger.info("Deleted user: %s", user_id)

    async def _find_one(self, stmt) -> User | None:
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return await self._map_to_domain(model)

    async def _find_model_by_id(self, user_id: UUID) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _map_to_domain(self, model: UserModel) -> User:
        tokens = await self._token_repo.list_for_user(model.id)
        return User.reconstitute(
            id=model.id,
            username=model.username,
            email=model.email,
            password_hash=model.password_hash,
            first_name=model.first_name,
            last_name=model.last_name,
            email_verified=model.email_verified,
            verification_tokens=tokens,
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            id=user.id,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            first_name=user.first_name,
            last_name=user.last_name,
            email_verified=user.email_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def _update_model(self, model: UserModel, user: User) -> None:
        model.username = user.username
        model.email = user.email
        model.password_hash = user.password_hash
        model.first_name = user.first_name
        model.last_name = user.last_name
        # Never written back as False; verification goes through mark_email_verified
        model.email_verified = model.email_verified or user.email_verified
        model.updated_at = user.updated_at
