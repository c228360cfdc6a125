"""Auth schemas and data structures.

These are simple data classes used for transferring token
data between components.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TokenType(str, Enum):
    """The kind of a signed token, carried in its ``type`` claim."""

    SESSION = "session"
    EMAIL_VERIFICATION = "email_verification"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True)
class TokenPayload:
    """Decoded token payload.

    This represents the data extracted from a verified token.

    Attributes
    ----------
    subject
        The ``sub`` claim: a user id for session and verification
        tokens, an email address for password reset tokens
    token_type
        Which of the three token kinds this is
    issued_at
        When the token was signed
    exp
        Token expiration timestamp, ``None`` for tokens without expiry
    username
        The username claim, present on session tokens only
    """

    subject: str
    token_type: TokenType
    issued_at: datetime
    exp: datetime | None = None
    username: str | None = None

    def is_expired(self) -> bool:
        """Check if the token has expired."""
        if self.exp is None:
            return False
        return datetime.now(tz=self.exp.tzinfo) > self.exp

    def is_session_token(self) -> bool:
        return self.token_type == TokenType.SESSION

    def is_verification_token(self) -> bool:
        return self.token_type == TokenType.EMAIL_VERIFICATION
