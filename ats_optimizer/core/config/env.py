from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

SUPPORTED_PROVIDERS = ("gemini", "openai")


class ConfigurationError(RuntimeError):
    """Raised once at startup when the environment cannot run the service."""


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


def looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return (
        lower.startswith("your_")
        or lower.startswith("replace_")
        or lower in {"changeme", "todo", "missing_api_key"}
    )


@dataclass(frozen=True)
class Settings:
    ai_provider: str
    ai_model: str
    openai_api_key: str | None
    openai_base_url: str | None
    gemini_api_key: str | None
    llm_timeout_s: float
    llm_max_retries: int
    llm_temperature: float
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    max_upload_bytes: int

    def provider_api_key(self) -> str | None:
        if self.ai_provider == "openai":
            return self.openai_api_key
        if self.ai_provider == "gemini":
            return self.gemini_api_key
        return None


def load_settings() -> Settings:
    return Settings(
        ai_provider=(_get_env("AI_PROVIDER", "gemini") or "gemini").strip().lower(),
        ai_model=(_get_env("AI_MODEL", "gemini-2.5-flash") or "gemini-2.5-flash").strip(),
        openai_api_key=_get_env("OPENAI_API_KEY"),
        openai_base_url=_get_env("OPENAI_BASE_URL"),
        gemini_api_key=_get_env("GEMINI_API_KEY"),
        llm_timeout_s=_get_env_float("LLM_TIMEOUT_S", 60.0),
        llm_max_retries=_get_env_int("LLM_MAX_RETRIES", 2),
        llm_temperature=_get_env_float("LLM_TEMPERATURE", 0.0),
        api_key=_get_env("API_KEY"),
        rate_limit=_get_env("RATE_LIMIT", "20/minute") or "20/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        log_level=(_get_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:5173",
                "http://127.0.0.1:5173",
                "http://localhost:3000",
            ],
        ),
        max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 5 * 1024 * 1024),
    )


settings = load_settings()


def validate_settings(cfg: Settings) -> None:
    """Fail fast on configuration the service cannot run with.

    Called once from the application lifespan, so a missing model credential
    stops the process instead of surfacing on the first scan.
    """
    if cfg.ai_provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(
            f"AI_PROVIDER must be one of: {', '.join(SUPPORTED_PROVIDERS)} (got '{cfg.ai_provider}')."
        )

    key_name = f"{cfg.ai_provider.upper()}_API_KEY"
    key = (cfg.provider_api_key() or "").strip()
    if not key:
        raise ConfigurationError(f"{key_name} is required when AI_PROVIDER={cfg.ai_provider}.")
    if looks_like_placeholder(key):
        raise ConfigurationError(f"{key_name} looks like a placeholder value; set a real key.")

    if not cfg.ai_model:
        raise ConfigurationError("AI_MODEL must not be empty.")
    if cfg.max_upload_bytes <= 0:
        raise ConfigurationError("MAX_UPLOAD_BYTES must be positive.")
