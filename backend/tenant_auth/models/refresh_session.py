"""Persisted refresh session: one row per live refresh token."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tenant_auth.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class RefreshSession(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Server-side record backing a refresh token.

    The token embeds ``id``. A row is deleted when its token is rotated or
    revoked; rows are never updated.

    Fields
    ------
    user_id : int
        Owner. Rows go away with the user (``ON DELETE CASCADE``).
    expires_at : datetime
        Absolute expiry (creation + refresh lifetime).
    """

    __tablename__ = "refresh_sessions"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship(back_populates="refresh_sessions")

    __table_args__ = (Index("ix_refresh_sessions_user_id", "user_id"),)
