"""User model: credentials, role and tenant membership."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import bcrypt
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from tenant_auth.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin
from .role import Role

if TYPE_CHECKING:
    from .refresh_session import RefreshSession
    from .tenant import Tenant

BCRYPT_ROUNDS = 10
# bcrypt only reads this many bytes of the encoded password
MAX_PASSWORD_BYTES = 72


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity.

    Fields
    ------
    first_name, last_name : str
        Display names.
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    password_hash : str
        bcrypt hash (``$2b$``, 60 chars). Write-only setter via ``password``.
    role : Role
        ``admin``, ``manager`` or ``customer``.
    tenant_id : int | None
        Tenant the user belongs to, if any.
    created_at, updated_at : datetime
        Timestamps (from mixin).
    """

    __tablename__ = "users"

    # Columns
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(60), nullable=False)
    role: Mapped[Role] = mapped_column(
        SAEnum(
            Role,
            name="user_role",
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
            validate_strings=True,
        ),
        nullable=False,
        default=Role.CUSTOMER,
    )
    tenant_id: Mapped[int | None] = mapped_column(
        ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True
    )

    tenant: Mapped[Tenant | None] = relationship(back_populates="users")
    refresh_sessions: Mapped[list[RefreshSession]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    # Constraints & indexes
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_role", "role"),
        Index("ix_users_tenant_id", "tenant_id"),
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        """
        Hash and set the password with bcrypt.

        :param raw: Plain text password to hash.
        :type raw: str
        :raises ValueError: If empty or longer than ``MAX_PASSWORD_BYTES`` in UTF-8.
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        encoded = raw.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password exceeds {MAX_PASSWORD_BYTES} bytes in UTF-8.")
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS, prefix=b"2b")
        self.password_hash = bcrypt.hashpw(encoded, salt).decode("ascii")

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.password_hash or not isinstance(raw, str):
            return False
        encoded = raw.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, self.password_hash.encode("ascii"))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :param key: Field name (``email``).
        :type key: str
        :param value: Email to normalize.
        :type value: str
        :returns: Normalized email (lowercased/trimmed).
        :rtype: str
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("first_name", "last_name")
    def _strip_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} is required.")
        return value.strip()

    @validates("role")
    def _coerce_role(self, key: str, value: Role | str) -> Role:
        return Role.from_wire(value)
