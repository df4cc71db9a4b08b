from dataclasses import dataclass

from ats_optimizer.core.config import settings


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    temperature: float
    timeout_s: float
    max_retries: int


def load_ai_config() -> AIConfig:
    return AIConfig(
        provider=settings.ai_provider,
        model=settings.ai_model,
        temperature=settings.llm_temperature,
        timeout_s=settings.llm_timeout_s,
        max_retries=settings.llm_max_retries,
    )
