"""User domain entities."""

from keygate_identity.domain.user.entities.verification_token import (
    VerificationToken,
)

__all__ = ["VerificationToken"]
