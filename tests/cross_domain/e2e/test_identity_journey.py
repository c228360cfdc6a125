"""End-to-end identity journeys through the composition root.

Each call opens its own session, the way each request would, so every
step sees only what earlier steps committed.
"""

from unittest.mock import Mock
from urllib.parse import parse_qs, urlparse

import pytest

from keygate_auth import JWTService, PasswordHashingService
from keygate_config.settings import Settings
from keygate_identity.dependencies import IdentityServiceFactory
from keygate_identity.exceptions import (
    EmailFailureError,
    InvalidTokenError,
    UserAlreadyExistsError,
    UserNotVerifiedError,
)
from keygate_identity.infrastructure.email import EmailService

SECRET = "journey-secret-key-0123456789-0123456789"
FRONTEND_URL = "https://app.example.com"


def _token_from_link(link: str) -> str:
    return parse_qs(urlparse(link).query)["token"][0]


class IdentityJourney:
    """Drives AuthenticationService with one session per call."""

    def __init__(self, session_maker, cooldown_minutes: int = 60):
        self.session_maker = session_maker
        self.settings = Settings(
            jwt_secret_key=SECRET,
            frontend_base_url=FRONTEND_URL,
            verification_resend_cooldown_minutes=cooldown_minutes,
        )
        self.jwt_service = JWTService(secret_key=SECRET)
        self.password_service = PasswordHashingService(rounds=4, max_workers=2)
        self.email_service = Mock(spec=EmailService)

    async def call(self, method: str, *args, **kwargs):
        async with self.session_maker() as session:
            service = IdentityServiceFactory(
                session,
                settings=self.settings,
                password_service=self.password_service,
                jwt_service=self.jwt_service,
                email_service=self.email_service,
            ).authentication_service()
            return await getattr(service, method)(*args, **kwargs)

    async def register_alice(self, **overrides):
        fields = {
            "username": "alice",
            "email": "alice@x.com",
            "first_name": "Alice",
            "last_name": "Liddell",
            "password": "Passw0rd!",
        }
        fields.update(overrides)
        return await self.call("register", **fields)

    def verification_links(self) -> list[str]:
        return [
            c.kwargs["verification_link"]
            for c in self.email_service.send_verification_email.call_args_list
        ]

    def close(self) -> None:
        self.password_service.shutdown()


@pytest.fixture
def journey(sqlite_session_maker):
    journey = IdentityJourney(sqlite_session_maker)
    yield journey
    journey.close()


@pytest.fixture
def no_cooldown_journey(sqlite_session_maker):
    journey = IdentityJourney(sqlite_session_maker, cooldown_minutes=0)
    yield journey
    journey.close()


class TestRegistrationToLogin:
    """The main path from sign up to an authenticated session."""

    @pytest.mark.asyncio
    async def test_full_journey(self, journey):
        """Register, get blocked, verify, log in, authenticate."""
        user = await journey.register_alice()
        assert len(journey.verification_links()) == 1
        token = _token_from_link(journey.verification_links()[0])

        # Token is still fresh, so no second email
        with pytest.raises(UserNotVerifiedError) as exc_info:
            await journey.call("login", "alice", "Passw0rd!")
        assert exc_info.value.resend_attempted is False
        assert len(journey.verification_links()) == 1

        assert await journey.call("verify", token) is True
        assert await journey.call("verify", token) is False

        session_token = await journey.call("login", "alice", "Passw0rd!")
        assert session_token is not None

        authenticated = await journey.call("authenticate", session_token)
        assert authenticated is not None
        assert authenticated.id == user.id
        assert authenticated.email_verified is True
        assert authenticated.verification_tokens == ()

    @pytest.mark.asyncio
    async def test_login_with_wrong_password_returns_none(self, journey):
        """Wrong credentials neither log in nor send email."""
        await journey.register_alice()

        assert await journey.call("login", "alice", "Wr0ngpass") is None
        assert await journey.call("login", "nobody", "Passw0rd!") is None
        assert len(journey.verification_links()) == 1

    @pytest.mark.asyncio
    async def test_login_is_case_insensitive_on_username(self, journey):
        """A verified user can log in with any casing of the username."""
        await journey.register_alice()
        await journey.call("verify", _token_from_link(journey.verification_links()[0]))

        assert await journey.call("login", "ALICE", "Passw0rd!") is not None


class TestUsernameWhitespace:
    """Usernames typed with surrounding spaces."""

    @pytest.mark.asyncio
    async def test_padded_username_can_log_in(self, journey):
        """A username registered with spaces logs in with or without them."""
        user = await journey.register_alice(username="bob ", email="bob@x.com")
        assert user.username == "bob"
        await journey.call("verify", _token_from_link(journey.verification_links()[0]))

        assert await journey.call("login", "bob ", "Passw0rd!") is not None
        assert await journey.call("login", "bob", "Passw0rd!") is not None

    @pytest.mark.asyncio
    async def test_padded_variant_is_a_duplicate(self, journey):
        """A padded username collides with its trimmed form."""
        await journey.register_alice(username="bob", email="bob@x.com")

        with pytest.raises(UserAlreadyExistsError):
            await journey.register_alice(username=" bob ", email="other@x.com")


class TestRegistrationFailures:
    """Registration paths that must leave no trace."""

    @pytest.mark.asyncio
    async def test_duplicate_registration_in_other_case(self, journey):
        """Username and email are unique ignoring case."""
        await journey.register_alice()

        with pytest.raises(UserAlreadyExistsError):
            await journey.register_alice(username="ALICE", email="other@x.com")
        with pytest.raises(UserAlreadyExistsError):
            await journey.register_alice(username="alice2", email="Alice@X.com")

    @pytest.mark.asyncio
    async def test_email_failure_leaves_no_user(self, journey):
        """A failed verification email rolls back the registration."""
        journey.email_service.send_verification_email.side_effect = EmailFailureError()

        with pytest.raises(EmailFailureError):
            await journey.register_alice()

        journey.email_service.send_verification_email.side_effect = None
        user = await journey.register_alice()
        assert user.username == "alice"


class TestVerificationResend:
    """Resends once the cooldown has elapsed."""

    @pytest.mark.asyncio
    async def test_resend_then_any_token_verifies_and_revokes_the_rest(
        self,
        no_cooldown_journey,
    ):
        """Consuming one of two tokens invalidates the other."""
        journey = no_cooldown_journey
        await journey.register_alice()

        with pytest.raises(UserNotVerifiedError) as exc_info:
            await journey.call("login", "alice", "Passw0rd!")
        assert exc_info.value.resend_attempted is True

        first, second = (_token_from_link(link) for link in journey.verification_links())
        assert first != second

        assert await journey.call("verify", second) is True
        assert await journey.call("verify", first) is False


class TestPasswordReset:
    """Forgot and reset password."""

    @pytest.mark.asyncio
    async def test_reset_replaces_password(self, journey):
        """After a reset only the new password works."""
        await journey.register_alice()
        await journey.call("verify", _token_from_link(journey.verification_links()[0]))

        await journey.call("forgot_password", "ALICE@x.com")
        link = journey.email_service.send_password_reset_email.call_args.kwargs[
            "reset_link"
        ]
        await journey.call("reset_password", _token_from_link(link), "N3wPassword")

        assert await journey.call("login", "alice", "Passw0rd!") is None
        assert await journey.call("login", "alice", "N3wPassword") is not None

    @pytest.mark.asyncio
    async def test_session_token_cannot_reset_password(self, journey):
        """Only a reset token authorizes a reset."""
        await journey.register_alice()
        await journey.call("verify", _token_from_link(journey.verification_links()[0]))
        session_token = await journey.call("login", "alice", "Passw0rd!")

        with pytest.raises(InvalidTokenError):
            await journey.call("reset_password", session_token, "N3wPassword")
