"""Persistence for :class:`User` rows."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from tenant_auth.models.user import User
from tenant_auth.repositories.base import BaseRepository


def _normalize(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Lookups by email plus credential checking. No token or session logic."""

    model = User

    def _sortable_fields(self):
        return {
            "id": User.id,
            "email": User.email,
            "first_name": User.first_name,
            "last_name": User.last_name,
            "created_at": User.created_at,
        }

    def _filterable_fields(self):
        return {"email": User.email, "role": User.role, "tenant_id": User.tenant_id}

    def get_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup; emails are stored normalized."""
        found = self.session.scalars(select(User).where(User.email == _normalize(email))).first()
        return cast(User | None, found)

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == _normalize(email)).limit(1)
        return self.session.execute(stmt).first() is not None

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user whose email and password both match, else ``None``.

        The two failure cases are indistinguishable to the caller.
        """
        user = self.get_by_email(email)
        if user is not None and user.verify_password(password):
            return user
        return None
