from ats_optimizer.ai.config import load_ai_config
from ats_optimizer.ai.types import AIClient
from ats_optimizer.core.config import settings

from ats_optimizer.ai.providers.openai_provider import OpenAIProvider
from ats_optimizer.ai.providers.gemini_provider import GeminiProvider


def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            api_key=settings.openai_api_key or "",
            base_url=settings.openai_base_url,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            temperature=cfg.temperature,
        )

    if cfg.provider == "gemini":
        return GeminiProvider(
            model=cfg.model,
            api_key=settings.gemini_api_key or "",
            temperature=cfg.temperature,
            timeout_s=cfg.timeout_s,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
