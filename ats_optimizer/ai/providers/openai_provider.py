from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

import openai
from openai import AsyncOpenAI

from ats_optimizer.ai.types import AIProviderError, ChatMessage

logger = logging.getLogger(__name__)


class OpenAIProvider:
    provider = "openai"

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 2,
        temperature: float = 0.0,
    ):
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("OPENAI_API_KEY is missing")

        self.model = model
        self._temperature = temperature
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    async def generate_json(
        self,
        messages: Sequence[ChatMessage],
        *,
        response_schema: Mapping[str, Any] | None = None,
    ) -> str:
        # json_object mode does not take a schema; the system prompt carries the structure.
        _ = response_schema
        payload = [{"role": m.role, "content": m.content} for m in messages]
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=payload,
                temperature=self._temperature,
                response_format={"type": "json_object"},
            )
        except openai.AuthenticationError as exc:
            raise AIProviderError(str(exc), auth_failed=True) from exc
        except openai.OpenAIError as exc:
            raise AIProviderError(str(exc)) from exc

        content = response.choices[0].message.content if response.choices else ""
        return content or ""
