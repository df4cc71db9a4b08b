from __future__ import annotations

from typing import Any, Mapping, Sequence

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ats_optimizer.ai.types import AIProviderError, ChatMessage

_AUTH_STATUS_CODES = frozenset({401, 403})


def _is_auth_failure(exc: genai_errors.APIError) -> bool:
    if exc.code in _AUTH_STATUS_CODES:
        return True
    # An invalid key comes back as 400 INVALID_ARGUMENT with API_KEY_INVALID.
    text = str(exc)
    return "API_KEY" in text or "API key" in text


class GeminiProvider:
    provider = "gemini"

    def __init__(self, model: str, api_key: str, temperature: float = 0.0, timeout_s: float = 60.0):
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("GEMINI_API_KEY is missing")

        self.model = model
        self._temperature = temperature
        self._client = genai.Client(
            api_key=key,
            http_options=types.HttpOptions(timeout=int(timeout_s * 1000)),
        )

    async def generate_json(
        self,
        messages: Sequence[ChatMessage],
        *,
        response_schema: Mapping[str, Any] | None = None,
    ) -> str:
        system = "\n\n".join(m.content for m in messages if m.role == "system")
        contents = [
            types.Content(
                role="model" if m.role == "assistant" else "user",
                parts=[types.Part(text=m.content)],
            )
            for m in messages
            if m.role != "system"
        ]
        config = types.GenerateContentConfig(
            system_instruction=system or None,
            temperature=self._temperature,
            response_mime_type="application/json",
            response_schema=dict(response_schema) if response_schema is not None else None,
        )

        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as exc:
            raise AIProviderError(str(exc), auth_failed=_is_auth_failure(exc)) from exc
        except httpx.HTTPError as exc:
            raise AIProviderError(f"Gemini request failed: {exc}") from exc

        text = response.text
        if not text:
            raise AIProviderError("Gemini returned no usable text (empty or blocked candidate).")
        return text
