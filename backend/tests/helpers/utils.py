"""Assertion helpers shared by the unit tests."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


@contextmanager
def not_raises(exception: type[BaseException]) -> Iterator[None]:
    """Fail the test, instead of erroring, if ``exception`` escapes the block."""
    try:
        yield
    except exception as exc:  # pragma: no cover
        raise AssertionError(f"Unexpected {type(exc).__name__}: {exc}") from exc
