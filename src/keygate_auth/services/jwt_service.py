"""JWT token service.

Issues and verifies the three signed token kinds used by keygate:
session tokens, email verification tokens and password reset tokens.
"""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID, uuid4

import jwt

from keygate_auth.exceptions import InvalidTokenError
from keygate_auth.schemas import TokenPayload, TokenType


class JWTService:
    """Service for JWT token creation and verification.

    Every token carries a ``type`` claim so that a token of one kind is
    never accepted where another kind is expected. The service holds no
    per-token state: a token is trusted if and only if its signature,
    type and expiry check out.

    Examples
    --------
    >>> service = JWTService(secret_key="your-secret-key")
    >>> token = service.issue_password_reset_token("user@example.com")
    >>> service.parse_password_reset_subject(token)
    'user@example.com'
    """

    DEFAULT_SESSION_EXPIRE_MINUTES = 60
    DEFAULT_PASSWORD_RESET_EXPIRE_MINUTES = 15
    ALGORITHM = "HS256"

    def __init__(
        self,
        secret_key: str,
        session_token_expire_minutes: int = DEFAULT_SESSION_EXPIRE_MINUTES,
        verification_token_expire_hours: int | None = None,
        password_reset_token_expire_minutes: int = (
            DEFAULT_PASSWORD_RESET_EXPIRE_MINUTES
        ),
    ):
        """Initialize the JWT service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        session_token_expire_minutes
            Minutes until a session token expires (default 60)
        verification_token_expire_hours
            Hours until an email verification token expires. ``None``
            (default) issues verification tokens without an ``exp`` claim;
            they stay valid until consumed or deleted.
        password_reset_token_expire_minutes
            Minutes until a password reset token expires (default 15)
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._session_expire = timedelta(minutes=session_token_expire_minutes)
        self._verification_expire = (
            timedelta(hours=verification_token_expire_hours)
            if verification_token_expire_hours is not None
            else None
        )
        self._password_reset_expire = timedelta(
            minutes=password_reset_token_expire_minutes,
        )

    def issue_session_token(
        self,
        user_id: UUID,
        username: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived session token.

        Parameters
        ----------
        user_id
            The user's unique identifier (``sub`` claim)
        username
            The user's username
        expires_delta
            Custom expiration time (optional)

        Returns
        -------
        The encoded JWT token string
        """
        return self._create_token(
            subject=str(user_id),
            token_type=TokenType.SESSION,
            expires_delta=expires_delta or self._session_expire,
            extra_claims={"username": username},
        )

    def issue_verification_token(
        self,
        user_id: UUID,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create an email verification token for a user.

        Each call yields a distinct token string, even within the same
        second, because a random ``jti`` claim is included.
        """
        return self._create_token(
            subject=str(user_id),
            token_type=TokenType.EMAIL_VERIFICATION,
            expires_delta=expires_delta or self._verification_expire,
            unique=True,
        )

    def issue_password_reset_token(
        self,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Create a short-lived password reset token for an email address."""
        return self._create_token(
            subject=email,
            token_type=TokenType.PASSWORD_RESET,
            expires_delta=expires_delta or self._password_reset_expire,
        )

    def parse_password_reset_subject(self, token: str) -> str:
        """Return the email address a password reset token was issued for.

        Raises
        ------
        InvalidTokenError
            If the token is invalid, expired, malformed or not a
            password reset token
        """
        payload = self.verify_token(token, expected_type=TokenType.PASSWORD_RESET)
        return payload.subject

    def verify_token(
        self,
        token: str,
        expected_type: TokenType | None = None,
    ) -> TokenPayload:
        """Verify and decode a JWT token.

        Parameters
        ----------
        token
            The JWT token string to verify
        expected_type
            If given, the token's ``type`` claim must match it

        Returns
        -------
        TokenPayload containing the decoded data

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, malformed or of the wrong type
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "type", "iat"]},
            )

            token_type = TokenType(payload["type"])
            exp = (
                datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
                if "exp" in payload
                else None
            )
            decoded = TokenPayload(
                subject=payload["sub"],
                token_type=token_type,
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                exp=exp,
                username=payload.get("username"),
            )

        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, ValueError, TypeError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e

        if expected_type is not None and decoded.token_type != expected_type:
            msg = f"Expected a {expected_type.value} token"
            raise InvalidTokenError(msg)

        return decoded

    def _create_token(
        self,
        subject: str,
        token_type: TokenType,
        expires_delta: timedelta | None,
        extra_claims: dict[str, Any] | None = None,
        unique: bool = False,
    ) -> str:
        """Create a signed token with the given parameters.

        A ``None`` expires_delta produces a token without ``exp``.
        """
        now = datetime.now(tz=timezone.utc)

        payload: dict[str, Any] = {
            "sub": subject,
            "type": token_type.value,
            "iat": now,
        }
        if expires_delta is not None:
            payload["exp"] = now + expires_delta
        if unique:
            payload["jti"] = uuid4().hex
        if extra_claims:
            payload.update(extra_claims)

        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)
