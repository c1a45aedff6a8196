"""CORS policy for the API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

# Login, register and refresh hand the access token back in this header
EXPOSED_HEADERS = ["Authorization", "X-Request-ID"]


def parse_origins(raw: str | None) -> list[str]:
    return [o.strip() for o in (raw or "").split(",") if o.strip()]


def init_app(app: Flask) -> None:
    """Configure CORS for ``/api/*`` from ``CORS_ORIGINS`` and ``CORS_MAX_AGE``.

    A blank or ``"*"`` origin list allows any origin without credentials.
    """
    origins = parse_origins(app.config.get("CORS_ORIGINS"))
    wildcard = not origins or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        expose_headers=EXPOSED_HEADERS,
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
