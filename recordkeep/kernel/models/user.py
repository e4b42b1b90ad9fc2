"""
User model for identity management.
"""

import uuid
from enum import Enum
from typing import List

from sqlalchemy import ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from recordkeep.kernel.models.base import Base, TimestampMixin, generate_uuid


class TokenAccess(str, Enum):
    """Token classes a user may hold."""
    AUTH = "auth"


class UserToken(Base):
    """
    One live bearer token of a user.

    Rows are only ever inserted or deleted, never rewritten, so two sessions
    of the same user can add and revoke tokens without clobbering each other.
    The autoincrement id preserves issue order.
    """

    __tablename__ = "user_tokens"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    access: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    token: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<UserToken {self.access} user={self.user_id}>"


class User(Base, TimestampMixin):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=generate_uuid,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    tokens: Mapped[List[UserToken]] = relationship(
        UserToken,
        order_by=UserToken.id,
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
