from contextlib import asynccontextmanager
import logging

from ats_optimizer.core.config import settings, validate_settings
from ats_optimizer.core.config.scoring import validate_scoring_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    validate_settings(settings)
    validate_scoring_config()
    logger.info(
        "startup provider=%s model=%s rate_limit=%s",
        settings.ai_provider,
        settings.ai_model,
        settings.rate_limit if settings.rate_limit_enabled else "off",
    )
    yield
