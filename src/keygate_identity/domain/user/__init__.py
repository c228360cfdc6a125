"""User domain manages user identity and email verification state.

This domain handles:
- User aggregate (id, username, email, password hash, names, verified flag)
- Verification tokens owned by a user
- Repository interfaces for both
"""

from keygate_identity.domain.user.aggregates import User
from keygate_identity.domain.user.entities import VerificationToken
from keygate_identity.domain.user.exceptions import InvalidEmailError
from keygate_identity.domain.user.repositories import (
    UserRepository,
    VerificationTokenRepository,
)
from keygate_identity.domain.user.value_objects import Email

__all__ = [
    "Email",
    "InvalidEmailError",
    "User",
    "UserRepository",
    "VerificationToken",
    "VerificationTokenRepository",
]
