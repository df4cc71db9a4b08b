from __future__ import annotations

import secrets

from fastapi import HTTPException, status

from ats_optimizer.core.config import settings
from ats_optimizer.schemas.report import Language

_AUTH_ERROR_MESSAGES: dict[str, str] = {
    "en": "Please provide a valid API key to run a scan.",
    "pt": "Por favor, forneça uma chave de API válida para executar uma análise.",
    "es": "Por favor, proporciona una clave API válida para ejecutar un análisis.",
}


def check_api_key(x_api_key: str | None, language: Language = "en") -> None:
    """Reject scans without the shared key. No-op when ``API_KEY`` is unset."""
    expected = settings.api_key
    if not expected:
        return
    if x_api_key is None or not secrets.compare_digest(x_api_key.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_AUTH_ERROR_MESSAGES.get(language, _AUTH_ERROR_MESSAGES["en"]),
        )
