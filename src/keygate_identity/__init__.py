"""keygate_identity - user registration, email verification and login.

Ties the keygate_auth primitives (password hashing, signed tokens) to the
User domain, its persistence and the email gateway.
"""

from keygate_identity.exceptions import (
    AuthError,
    EmailFailureError,
    EmailNotFoundError,
    InvalidTokenError,
    UserAlreadyExistsError,
    UserNotVerifiedError,
)

__all__ = [
    "AuthError",
    "EmailFailureError",
    "EmailNotFoundError",
    "InvalidTokenError",
    "UserAlreadyExistsError",
    "UserNotVerifiedError",
]
