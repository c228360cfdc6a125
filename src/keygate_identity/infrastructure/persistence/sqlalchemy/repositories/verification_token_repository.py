"""SQLAlchemy implementation of VerificationTokenRepository."""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from keygate_identity.domain.shared.time import ensure_tz_aware
from keygate_identity.domain.user import (
    VerificationToken,
    VerificationTokenRepository,
)
from keygate_identity.infrastructure.persistence.sqlalchemy.models import (
    VerificationTokenModel,
)

logger = logging.getLogger(__name__)


class VerificationTokenRepositorySQLAlchemy(VerificationTokenRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_token(self, token: str) -> VerificationToken | None:
        stmt = select(VerificationTokenModel).where(
            VerificationTokenModel.token == token,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_domain(model)

    async def list_for_user(self, user_id: UUID) -> list[VerificationToken]:
        stmt = (
            select(VerificationTokenModel)
            .where(VerificationTokenModel.user_id == user_id)
            .order_by(VerificationTokenModel.created_at)
        )
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def save(self, token: VerificationToken) -> None:
        self._session.add(self._to_model(token))
        await self._session.flush()
        logger.debug("Created verification token for user: %s", token.user_id)

    async def add_missing(self, tokens: list[VerificationToken]) -> None:
        """Stage tokens whose ids are not stored yet (no flush)."""
        if not tokens:
            return
        stmt = select(VerificationTokenModel.id).where(
            VerificationTokenModel.id.in_([t.id for t in tokens]),
        )
        result = await self._session.execute(stmt)
        existing = set(result.scalars().all())
        for token in tokens:
            if token.id not in existing:
                self._session.add(self._to_model(token))

    async def delete_all_for_user(self, user_id: UUID) -> int:
        stmt = delete(VerificationTokenModel).where(
            VerificationTokenModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        await self._session.flush()
        return result.rowcount  # type: ignore[attr-defined]

    def _to_domain(self, model: VerificationTokenModel) -> VerificationToken:
        return VerificationToken(
            id=model.id,
            user_id=model.user_id,
            token=model.token,
            created_at=ensure_tz_aware(model.created_at),
        )

    def _to_model(self, token: VerificationToken) -> VerificationTokenModel:
        return VerificationTokenModel(
            id=token.id,
            user_id=token.user_id,
            token=token.token,
            created_at=token.created_at,
        )
