"""User aggregate for identity concerns."""

from datetime import datetime
from typing import Iterable, Optional, Union
from uuid import UUID, uuid4

from keygate_identity.domain.shared.time import utc_now
from keygate_identity.domain.user.entities import VerificationToken
from keygate_identity.domain.user.value_objects import Email


class User:
    """
    User aggregate root.

    Owns the user's verification tokens, ordered oldest first, so the
    most recently issued token is the last one. The ``email_verified``
    flag only ever moves from False to True. Usernames are stored without
    surrounding whitespace, the same form lookups compare against.
    """

    def __init__(  # noqa: PLR0913
        self,
        username: str,
        email: Union[str, Email],
        password_hash: str,
        first_name: str,
        last_name: str,
        email_verified: bool = False,
        verification_tokens: Optional[Iterable[VerificationToken]] = None,
        id: UUID | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self._id = id or uuid4()
        self._username = username.strip()
        self._email = email if isinstance(email, Email) else Email(email)
        self._password_hash = password_hash
        self._first_name = first_name
        self._last_name = last_name
        self._email_verified = email_verified
        self._verification_tokens = list(verification_tokens or [])
        self._created_at = created_at or utc_now()
        self._updated_at = updated_at or utc_now()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def username(self) -> str:
        return self._username

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def email_verified(self) -> bool:
        return self._email_verified

    @property
    def verification_tokens(self) -> tuple[VerificationToken, ...]:
        return tuple(self._verification_tokens)

    @property
    def latest_verification_token(self) -> VerificationToken | None:
        if not self._verification_tokens:
            return None
        return self._verification_tokens[-1]

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def add_verification_token(self, token: VerificationToken) -> None:
        if token.user_id != self._id:
            msg = "Verification token belongs to a different user"
            raise ValueError(msg)
        self._verification_tokens.append(token)

    def clear_verification_tokens(self) -> None:
        self._verification_tokens.clear()

    def mark_email_verified(self) -> None:
        if self._email_verified:
            return
        self._email_verified = True
        self._updated_at = utc_now()

    def change_password_hash(self, password_hash: str) -> None:
        self._password_hash = password_hash
        self._updated_at = utc_now()

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        username: str,
        email: Union[str, Email],
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> "User":
        return cls(
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        username: str,
        email: Union[str, Email],
        password_hash: str,
        first_name: str,
        last_name: str,
        email_verified: bool,
        verification_tokens: Iterable[VerificationToken],
        created_at: datetime,
        updated_at: datetime,
    ) -> "User":
        return cls(
            id=id,
            username=username,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            email_verified=email_verified,
            verification_tokens=verification_tokens,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"User(id={self._id}, username={self._username})"
