"""Identity and authentication exceptions.

These exceptions are raised by the keygate_identity package and should be
caught and mapped to responses by the transport layer.
"""

from keygate_auth.exceptions import AuthError, InvalidTokenError

__all__ = [
    "AuthError",
    "EmailFailureError",
    "EmailNotFoundError",
    "InvalidTokenError",
    "UserAlreadyExistsError",
    "UserNotVerifiedError",
]


class UserAlreadyExistsError(AuthError):
    """Raised when registering a username or email that is already taken."""

    def __init__(
        self,
        message: str = "A user with this username or email already exists",
    ):
        super().__init__(message)


class EmailNotFoundError(AuthError):
    """Raised when a password reset is requested for an unknown email."""

    def __init__(self, message: str = "No user is registered with this email"):
        super().__init__(message)


class UserNotVerifiedError(AuthError):
    """Raised when a user with valid credentials has not verified their email.

    ``resend_attempted`` tells the caller whether a fresh verification
    email was just sent, or whether the previous one is still within the
    resend cooldown.
    """

    def __init__(
        self,
        resend_attempted: bool,
        message: str = "Email address has not been verified",
    ):
        self.resend_attempted = resend_attempted
        super().__init__(message)


class EmailFailureError(AuthError):
    """Raised when an email could not be delivered."""

    def __init__(self, message: str = "Failed to send email"):
        super().__init__(message)
