"""Request validation rules.

Rules are plain data: each request field maps to an ordered list of
``(predicate, message)`` pairs. The first failing rule of a field
produces that field's error; all fields are checked before raising.
"""

from __future__ import annotations

import re
from dataclasses import asdict
from typing import Any, Callable, Mapping, Sequence

from keygate_identity.domain.user.value_objects import EMAIL_PATTERN
from keygate_identity.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    PasswordResetRequest,
    RegistrationRequest,
    VerifyRequest,
)

Predicate = Callable[[Any], bool]
Rule = tuple[Predicate, str]
Rules = Mapping[str, Sequence[Rule]]

# At least one letter and one digit; bcrypt ignores input past 72 bytes
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_BYTES = 72
_HAS_LETTER = re.compile(r"[A-Za-z]")
_HAS_DIGIT = re.compile(r"\d")


class ValidationError(ValueError):
    """Raised when a request fails validation.

    ``errors`` maps each failing field to a message.
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        detail = "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        super().__init__(f"Invalid request: {detail}")


def not_blank(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def length_between(minimum: int, maximum: int) -> Predicate:
    def check(value: Any) -> bool:
        return isinstance(value, str) and minimum <= len(value) <= maximum

    return check


def min_length(minimum: int) -> Predicate:
    def check(value: Any) -> bool:
        return isinstance(value, str) and len(value) >= minimum

    return check


def matches(pattern: re.Pattern[str]) -> Predicate:
    def check(value: Any) -> bool:
        return isinstance(value, str) and pattern.search(value) is not None

    return check


def max_utf8_bytes(maximum: int) -> Predicate:
    def check(value: Any) -> bool:
        return isinstance(value, str) and len(value.encode("utf-8")) <= maximum

    return check


NOT_BLANK: Rule = (not_blank, "must not be blank")

PASSWORD_RULES: list[Rule] = [
    NOT_BLANK,
    (
        min_length(PASSWORD_MIN_LENGTH),
        f"must be at least {PASSWORD_MIN_LENGTH} characters",
    ),
    (max_utf8_bytes(PASSWORD_MAX_BYTES), f"must be at most {PASSWORD_MAX_BYTES} bytes"),
    (matches(_HAS_LETTER), "must contain a letter"),
    (matches(_HAS_DIGIT), "must contain a digit"),
]

EMAIL_RULES: list[Rule] = [
    NOT_BLANK,
    (lambda v: EMAIL_PATTERN.match(v.strip().lower()) is not None, "must be a valid email"),
]

REGISTRATION_RULES: Rules = {
    "username": [
        NOT_BLANK,
        (length_between(3, 255), "must be between 3 and 255 characters"),
    ],
    "email": EMAIL_RULES,
    "password": PASSWORD_RULES,
    "confirm_password": [NOT_BLANK],
    "first_name": [NOT_BLANK],
    "last_name": [NOT_BLANK],
}

LOGIN_RULES: Rules = {
    "username": [NOT_BLANK],
    "password": [NOT_BLANK],
}

VERIFY_RULES: Rules = {
    "token": [NOT_BLANK],
}

FORGOT_PASSWORD_RULES: Rules = {
    "email": EMAIL_RULES,
}

PASSWORD_RESET_RULES: Rules = {
    "token": [NOT_BLANK],
    "password": PASSWORD_RULES,
}


def collect_errors(data: Mapping[str, Any], rules: Rules) -> dict[str, str]:
    """Apply ``rules`` to ``data`` and return field errors (empty if valid)."""
    errors: dict[str, str] = {}
    for field, field_rules in rules.items():
        value = data.get(field)
        for predicate, message in field_rules:
            if not predicate(value):
                errors[field] = message
                break
    return errors


def validate(data: Mapping[str, Any], rules: Rules) -> None:
    errors = collect_errors(data, rules)
    if errors:
        raise ValidationError(errors)


def validate_registration(request: RegistrationRequest) -> None:
    data = asdict(request)
    errors = collect_errors(data, REGISTRATION_RULES)
    if "confirm_password" not in errors and request.confirm_password != request.password:
        errors["confirm_password"] = "must match password"
    if errors:
        raise ValidationError(errors)


def validate_login(request: LoginRequest) -> None:
    validate(asdict(request), LOGIN_RULES)


def validate_verify(request: VerifyRequest) -> None:
    validate(asdict(request), VERIFY_RULES)


def validate_forgot_password(request: ForgotPasswordRequest) -> None:
    validate(asdict(request), FORGOT_PASSWORD_RULES)


def validate_password_reset(request: PasswordResetRequest) -> None:
    validate(asdict(request), PASSWORD_RESET_RULES)
