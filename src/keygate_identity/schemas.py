"""Request and response shapes exchanged with the transport layer.

These are simple data classes. Requests are validated with the rules in
keygate_identity.validation before they reach AuthenticationService.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RegistrationRequest:
    """The information required to register a user."""

    username: str
    email: str
    password: str
    confirm_password: str
    first_name: str
    last_name: str


@dataclass(frozen=True)
class LoginRequest:
    username: str
    password: str


@dataclass(frozen=True)
class VerifyRequest:
    token: str


@dataclass(frozen=True)
class ForgotPasswordRequest:
    email: str


@dataclass(frozen=True)
class PasswordResetRequest:
    """A new password together with the reset token that authorizes it."""

    token: str
    password: str
