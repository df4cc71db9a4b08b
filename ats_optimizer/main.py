import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from ats_optimizer.api.v1.health import router as health_router
from ats_optimizer.api.v1.documents import router as documents_router
from ats_optimizer.api.v1.scan import router as scan_router
from ats_optimizer.core.cors import cors_options
from ats_optimizer.core.rate_limit import limiter
from ats_optimizer.core.config import settings
from ats_optimizer.core.lifespan import lifespan

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="ATS Resume Optimizer API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    **cors_options(),
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(documents_router, prefix="/v1", tags=["Documents"])
app.include_router(scan_router, prefix="/v1", tags=["Scan"])
