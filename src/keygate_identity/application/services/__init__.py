"""Application services for identity management."""

from keygate_identity.application.services.authentication_service import (
    AuthenticationService,
)
from keygate_identity.application.services.verification_token_manager import (
    VerificationTokenManager,
)

__all__ = ["AuthenticationService", "VerificationTokenManager"]
