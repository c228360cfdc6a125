"""SQLAlchemy model for User aggregate."""

from uuid import UUID

from sqlalchemy import Boolean, Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from keygate_identity.infrastructure.persistence.sqlalchemy.base import (
    IdentityBase,
    TimestampMixin,
)

USERNAME_UNIQUE_INDEX = "uq_users_username_lower"
EMAIL_UNIQUE_INDEX = "uq_users_email_lower"


class UserModel(IdentityBase, TimestampMixin):
    """SQLAlchemy model for persisting User aggregates.

    Username and email are unique ignoring case, enforced by functional
    indexes on lower(username) and lower(email).
    """

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email_verified: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, username={self.username})>"


Index(USERNAME_UNIQUE_INDEX, func.lower(UserModel.__table__.c.username), unique=True)
Index(EMAIL_UNIQUE_INDEX, func.lower(UserModel.__table__.c.email), unique=True)
