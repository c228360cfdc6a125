"""Authentication service for registration, login and account recovery."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator
from uuid import UUID

from keygate_auth import InvalidTokenError, TokenType
from keygate_identity.domain.user import User, VerificationToken
from keygate_identity.exceptions import (
    EmailNotFoundError,
    UserAlreadyExistsError,
    UserNotVerifiedError,
)
from keygate_identity.validation import ValidationError

if TYPE_CHECKING:
    from keygate_auth import JWTService, PasswordHashingService
    from keygate_identity.application.services.verification_token_manager import (
        VerificationTokenManager,
    )
    from keygate_identity.application.unit_of_work import UnitOfWork
    from keygate_identity.infrastructure.email import EmailService

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Application service for the user identity lifecycle.

    Orchestrates keygate_auth infrastructure (password hashing, signed
    tokens) with the User domain, the verification token manager and the
    email gateway to provide:
    - Registration with email verification
    - Login gated on a verified email
    - Email verification
    - Forgot/reset password
    - Ownership checks and session token authentication

    Every write runs inside the unit of work and is rolled back if any
    later step, including sending an email, fails.
    """

    def __init__(  # noqa: PLR0913
        self,
        unit_of_work: UnitOfWork,
        password_service: PasswordHashingService,
        jwt_service: JWTService,
        verification_manager: VerificationTokenManager,
        email_service: EmailService,
        frontend_base_url: str,
    ):
        self._uow = unit_of_work
        self._password_service = password_service
        self._jwt_service = jwt_service
        self._verification_manager = verification_manager
        self._email_service = email_service
        self._frontend_base_url = frontend_base_url.rstrip("/")

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[None]:
        try:
            yield
            await self._uow.commit()
        except Exception:
            await self._uow.rollback()
            raise

    async def _send_verification_email(
        self,
        user: User,
        token: VerificationToken,
    ) -> None:
        link = f"{self._frontend_base_url}/auth/verify?token={token.token}"
        await asyncio.to_thread(
            self._email_service.send_verification_email,
            to_email=user.email,
            verification_link=link,
        )

    async def register(  # noqa: PLR0913
        self,
        username: str,
        email: str,
        first_name: str,
        last_name: str,
        password: str,
        confirm_password: str | None = None,
    ) -> User:
        if confirm_password is not None and confirm_password != password:
            raise ValidationError({"confirm_password": "Passwords do not match"})

        users = self._uow.users
        if await users.exists_by_username_or_email(username, email):
            raise UserAlreadyExistsError

        password_hash = await self._password_service.hash_async(password)
        user = User.create(
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
        )
        token = self._verification_manager.create_and_attach(user)

        async with self._transaction():
            # The unique indexes are the final authority if a concurrent
            # registration slipped past the existence check above
            await users.save(user)
            await self._send_verification_email(user, token)

        logger.info("User registered: %s", user.username)
        return user

    async def login(self, username: str, password: str) -> str | None:
        """Return a session token, or None for unknown user or wrong password.

        Raises
        ------
        UserNotVerifiedError
            If the credentials are valid but the email is not verified
        EmailFailureError
            If a verification email had to be resent and could not be sent
        """
        user = await self._uow.users.find_by_username(username)
        if user is None:
            logger.debug("Login attempt for unknown username")
            return None

        if not await self._password_service.verify_async(
            password,
            user.password_hash,
        ):
            logger.debug("Login attempt with wrong password for %s", user.id)
            return None

        if user.email_verified:
            logger.info("User logged in: %s", user.username)
            return self._jwt_service.issue_session_token(user.id, user.username)

        resend = self._verification_manager.should_resend(user)
        if resend:
            async with self._transaction():
                token = self._verification_manager.create_and_attach(user)
                await self._uow.verification_tokens.save(token)
                await self._send_verification_email(user, token)
            logger.info("Verification email resent to user %s", user.id)

        raise UserNotVerifiedError(resend_attempted=resend)

    async def verify(self, token: str) -> bool:
        async with self._transaction():
            return await self._verification_manager.consume(token)

    async def forgot_password(self, email: str) -> None:
        """Email a password reset link.

        No state is stored; the signed token alone proves email ownership.
        """
        user = await self._uow.users.find_by_email(email)
        if user is None:
            raise EmailNotFoundError

        token = self._jwt_service.issue_password_reset_token(user.email)
        link = f"{self._frontend_base_url}/auth/reset?token={token}"
        await asyncio.to_thread(
            self._email_service.send_password_reset_email,
            to_email=user.email,
            reset_link=link,
        )
        logger.info("Password reset email sent to user %s", user.id)

    async def reset_password(self, reset_token: str, new_password: str) -> None:
        """Set a new password for the email the reset token was issued to.

        A valid token for an account that no longer exists is a no-op.

        Raises
        ------
        InvalidTokenError
            If the token is malformed, expired or not a reset token
        """
        email = self._jwt_service.parse_password_reset_subject(reset_token)

        user = await self._uow.users.find_by_email(email)
        if user is None:
            logger.debug("Password reset for email with no account")
            return

        new_hash = await self._password_service.hash_async(new_password)
        async with self._transaction():
            user.change_password_hash(new_hash)
            await self._uow.users.save(user)

        logger.info("Password reset completed for user: %s", user.id)

    def user_has_permission_to_user(self, user: User, user_id: UUID) -> bool:
        return user.id == user_id

    async def authenticate(self, session_token: str) -> User | None:
        """Resolve the user a session token was issued to.

        Returns None if the user no longer exists.

        Raises
        ------
        InvalidTokenError
            If the token is malformed, expired or not a session token
        """
        payload = self._jwt_service.verify_token(
            session_token,
            expected_type=TokenType.SESSION,
        )
        try:
            user_id = UUID(payload.subject)
        except ValueError as e:
            msg = "Session token subject is not a user id"
            raise InvalidTokenError(msg) from e

        return await self._uow.users.find_by_id(user_id)
