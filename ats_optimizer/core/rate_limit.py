from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ats_optimizer.core.config import settings


def client_key(request: Request) -> str:
    # Authenticated and anonymous traffic from one address are counted separately.
    address = get_remote_address(request)
    if settings.api_key and request.headers.get("x-api-key") == settings.api_key:
        return f"key:{address}"
    return address


limiter = Limiter(key_func=client_key, enabled=settings.rate_limit_enabled)


def rate_limit(limit: str | None = None):
    """Per-client limit for scan and upload endpoints, ``RATE_LIMIT`` by default."""
    if settings.rate_limit_enabled:
        return limiter.limit(limit or settings.rate_limit)

    def decorator(func):
        return func

    return decorator
