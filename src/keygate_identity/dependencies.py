"""Composition root for keygate_identity.

Process-wide objects (engine, session maker, password hashing pool, token
issuer, email gateway) are built once from settings and cached. Per-request
objects (unit of work, token manager, authentication service) are built by
``IdentityServiceFactory`` around one database session.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from functools import lru_cache
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from keygate_auth import JWTService, PasswordHashingService
from keygate_config.settings import Settings, get_settings
from keygate_identity.application.services import (
    AuthenticationService,
    VerificationTokenManager,
)
from keygate_identity.infrastructure.email import EmailService
from keygate_identity.infrastructure.persistence.sqlalchemy import (
    SQLAlchemyUnitOfWork,
)

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Database Engine & Session (Singleton)
# -----------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """
    Get the shared async database engine (singleton).

    Returns
    -------
    AsyncEngine instance
    """
    return create_async_engine(
        get_settings().database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get the shared async session maker (singleton)."""
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


# -----------------------------------------------------------------------------
# Process-wide services
# -----------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_password_service() -> PasswordHashingService:
    settings = get_settings()
    return PasswordHashingService(
        rounds=settings.password_hash_rounds,
        max_workers=settings.password_hash_workers,
    )


@lru_cache(maxsize=1)
def get_jwt_service() -> JWTService:
    settings = get_settings()
    return JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        session_token_expire_minutes=settings.jwt_session_token_expire_minutes,
        verification_token_expire_hours=settings.jwt_verification_token_expire_hours,
        password_reset_token_expire_minutes=(
            settings.jwt_password_reset_token_expire_minutes
        ),
    )


@lru_cache(maxsize=1)
def get_email_service() -> EmailService:
    return EmailService(get_settings())


def clear_dependency_caches() -> None:
    """Forget all cached singletons (useful for tests)."""
    for cached in (
        get_engine,
        get_session_maker,
        get_password_service,
        get_jwt_service,
        get_email_service,
    ):
        cached.cache_clear()


# -----------------------------------------------------------------------------
# Per-request services
# -----------------------------------------------------------------------------


class IdentityServiceFactory:
    """Builds the per-request identity services around one session.

    Collaborators default to the cached process-wide instances and can be
    overridden, which is how tests inject fakes.
    """

    def __init__(  # noqa: PLR0913
        self,
        session: AsyncSession,
        settings: Settings | None = None,
        password_service: PasswordHashingService | None = None,
        jwt_service: JWTService | None = None,
        email_service: EmailService | None = None,
    ):
        self._session = session
        self._settings = settings or get_settings()
        self._password_service = password_service or get_password_service()
        self._jwt_service = jwt_service or get_jwt_service()
        self._email_service = email_service or get_email_service()
        self._unit_of_work: SQLAlchemyUnitOfWork | None = None

    def unit_of_work(self) -> SQLAlchemyUnitOfWork:
        if self._unit_of_work is None:
            self._unit_of_work = SQLAlchemyUnitOfWork(self._session)
        return self._unit_of_work

    def verification_token_manager(self) -> VerificationTokenManager:
        uow = self.unit_of_work()
        return VerificationTokenManager(
            jwt_service=self._jwt_service,
            user_repository=uow.users,
            token_repository=uow.verification_tokens,
            resend_cooldown=timedelta(
                minutes=self._settings.verification_resend_cooldown_minutes,
            ),
        )

    def authentication_service(self) -> AuthenticationService:
        return AuthenticationService(
            unit_of_work=self.unit_of_work(),
            password_service=self._password_service,
            jwt_service=self._jwt_service,
            verification_manager=self.verification_token_manager(),
            email_service=self._email_service,
            frontend_base_url=self._settings.frontend_base_url,
        )


@asynccontextmanager
async def authentication_service_scope() -> AsyncIterator[AuthenticationService]:
    """Open a session and yield an AuthenticationService bound to it."""
    async with get_session_maker()() as session:
        yield IdentityServiceFactory(session).authentication_service()
