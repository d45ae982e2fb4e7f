"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .users import users_cli


def init_app(app: Flask) -> None:
    """Register application-specific CLI command groups.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry will receive the
        ``users`` group. The ``keys`` group is exposed through the
        ``flask.commands`` entry point instead.
    """
    app.cli.add_command(users_cli)
