"""Creation, resend policy and consumption of email verification tokens."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

from keygate_identity.domain.shared.time import ensure_tz_aware, utc_now
from keygate_identity.domain.user import User, VerificationToken

if TYPE_CHECKING:
    from keygate_auth import JWTService
    from keygate_identity.domain.user import (
        UserRepository,
        VerificationTokenRepository,
    )

logger = logging.getLogger(__name__)


class VerificationTokenManager:
    """Governs email verification tokens for a user.

    The resend cooldown is the only throttle on verification emails: a
    new token is issued on login only when the user has none, or when
    the most recent one is at least ``resend_cooldown`` old.
    """

    DEFAULT_RESEND_COOLDOWN = timedelta(hours=1)

    def __init__(
        self,
        jwt_service: JWTService,
        user_repository: UserRepository,
        token_repository: VerificationTokenRepository,
        resend_cooldown: timedelta = DEFAULT_RESEND_COOLDOWN,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._jwt_service = jwt_service
        self._user_repo = user_repository
        self._token_repo = token_repository
        self._resend_cooldown = resend_cooldown
        self._clock = clock

    def create_and_attach(self, user: User) -> VerificationToken:
        """Issue a token and append it to the user's tokens.

        Nothing is persisted here; saving the user (or the token) is up
        to the caller.
        """
        token = VerificationToken(
            user_id=user.id,
            token=self._jwt_service.issue_verification_token(user.id),
            created_at=self._clock(),
        )
        user.add_verification_token(token)
        return token

    def should_resend(self, user: User) -> bool:
        latest = user.latest_verification_token
        if latest is None:
            return True
        age = self._clock() - ensure_tz_aware(latest.created_at)
        return age >= self._resend_cooldown

    async def consume(self, token: str) -> bool:
        """Verify the user owning ``token`` and revoke all of their tokens.

        Returns False when the token is unknown or its user is already
        verified. Must run inside a single unit of work.
        """
        record = await self._token_repo.find_by_token(token)
        if record is None:
            logger.debug("Verification attempted with unknown token")
            return False

        user = await self._user_repo.find_by_id(record.user_id)
        if user is None or user.email_verified:
            logger.debug("Verification token for already verified user")
            return False

        # Conditional write; a concurrent consumer that lost the race gets False
        if not await self._user_repo.mark_email_verified(user.id):
            logger.debug("User %s was verified concurrently", user.id)
            return False
        user.mark_email_verified()

        deleted = await self._token_repo.delete_all_for_user(user.id)
        user.clear_verification_tokens()

        logger.info(
            "Email verified for user %s (%d tokens revoked)",
            user.id,
            deleted,
        )
        return True
