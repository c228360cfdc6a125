"""SQLAlchemy model for email verification tokens."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from keygate_identity.domain.shared.time import utc_now
from keygate_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase


class VerificationTokenModel(IdentityBase):
    """SQLAlchemy model for a verification token sent to a user's email."""

    __tablename__ = "verification_tokens"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    token: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<VerificationTokenModel(id={self.id}, user_id={self.user_id})>"
