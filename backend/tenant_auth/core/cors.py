"""Cross-origin policy for browser clients."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS


def init_app(app: Flask) -> None:
    """Apply ``CORS_ORIGINS`` to every route under ``API_BASE_PREFIX``.

    The auth cookies only travel on credentialed requests, which browsers
    refuse for a wildcard origin. A blank or ``"*"`` setting therefore opens
    the API to any origin without credentials; an explicit comma-separated
    list enables them.
    """
    allowed = [item.strip() for item in app.config.get("CORS_ORIGINS", "").split(",")]
    allowed = [item for item in allowed if item]
    open_policy = not allowed or allowed == ["*"]
    prefix = app.config.get("API_BASE_PREFIX", "").rstrip("/")

    CORS(
        app,
        resources={rf"{prefix}/*": {"origins": "*" if open_policy else allowed}},
        supports_credentials=not open_policy,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
