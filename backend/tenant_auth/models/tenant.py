"""Tenant (restaurant / organisation) model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from tenant_auth.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Tenant(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Organisation that users (typically managers) belong to.

    Fields
    ------
    name : str
        Display name (max 100 chars).
    address : str
        Postal address (max 255 chars).
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False)

    users: Mapped[list[User]] = relationship(back_populates="tenant", passive_deletes=True)

    @validates("name", "address")
    def _strip_required(self, key: str, value: str) -> str:
        """Trim and require non-blank text."""
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Tenant {key} is required.")
        return value.strip()
