from __future__ import annotations

from typing import Any

from ats_optimizer.core.config import settings


def cors_allowed_origins() -> list[str]:
    origins: list[str] = []
    for origin in settings.cors_allowed_origins:
        cleaned = origin.strip().rstrip("/")
        if cleaned and cleaned not in origins:
            origins.append(cleaned)
    return origins


def cors_options() -> dict[str, Any]:
    """Keyword arguments for ``CORSMiddleware``.

    A wildcard origin cannot be combined with credentials, so credentials are
    only allowed for an explicit allow-list.
    """
    origins = cors_allowed_origins()
    return {
        "allow_origins": origins,
        "allow_credentials": "*" not in origins,
        "allow_methods": ["GET", "POST", "OPTIONS"],
        "allow_headers": ["Content-Type", "X-API-Key"],
    }
