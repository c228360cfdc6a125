"""Email verification token entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from keygate_identity.domain.shared.time import utc_now


@dataclass(frozen=True)
class VerificationToken:
    """A verification token that was emailed to a user.

    The token string is itself a signed credential; this record exists
    for resend bookkeeping and so that consuming one token can revoke
    every other token of the same user.
    """

    user_id: UUID
    token: str
    created_at: datetime = field(default_factory=utc_now)
    id: UUID = field(default_factory=uuid4)
