"""Authentication exceptions.

These exceptions are raised by the keygate_auth package and should be
caught and handled by the application layer (AuthenticationService).
"""


class AuthError(Exception):
    """Base exception for all authentication errors."""

    def __init__(self, message: str = "Authentication error"):
        self.message = message
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Raised when a signed token is invalid, expired, malformed or of the wrong kind."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)
