"""Closed set of roles a user can hold."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role; the value is the wire representation used in tokens and JSON."""

    ADMIN = "admin"
    MANAGER = "manager"
    CUSTOMER = "customer"

    @classmethod
    def from_wire(cls, value: object) -> Role:
        """
        Parse a raw role string.

        :param value: Value taken from a token claim or request payload.
        :returns: Matching :class:`Role`.
        :raises ValueError: If ``value`` is not one of the known roles.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Unknown role: {value!r}")
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown role: {value!r}") from None

    def __str__(self) -> str:
        return self.value
