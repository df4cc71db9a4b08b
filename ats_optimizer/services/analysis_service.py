from __future__ import annotations

import logging
import re
import time

from pydantic import ValidationError

from ats_optimizer.ai.factory import get_ai_client
from ats_optimizer.ai.types import AIClient, AIProviderError
from ats_optimizer.schemas.report import AnalysisResult, Language
from ats_optimizer.services.prompts import RESPONSE_SCHEMA, build_analysis_messages

logger = logging.getLogger(__name__)

ERROR_PREFIX = "An error occurred while processing your request. Details: "
INVALID_RESPONSE_MESSAGE = "The model returned an invalid analysis structure. Please try again."
INVALID_API_KEY_MESSAGE = "Invalid API Key provided."

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class AnalysisError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _CODE_FENCE.match(stripped)
    return match.group(1) if match else stripped


def parse_analysis_payload(raw: str) -> AnalysisResult:
    text = _strip_code_fence(raw or "")
    if not text:
        raise AnalysisError(ERROR_PREFIX + INVALID_RESPONSE_MESSAGE, code="invalid_response")
    try:
        return AnalysisResult.model_validate_json(text)
    except ValidationError as exc:
        logger.warning("analysis_payload_invalid errors=%s", exc.error_count())
        raise AnalysisError(ERROR_PREFIX + INVALID_RESPONSE_MESSAGE, code="invalid_response") from exc


async def analyze_resume(
    job_description: str,
    resume_text: str,
    language: Language,
    *,
    client: AIClient | None = None,
) -> AnalysisResult:
    ai = client or get_ai_client()
    messages = build_analysis_messages(job_description, resume_text, language)
    started = time.perf_counter()
    status = "error"
    try:
        raw = await ai.generate_json(messages, response_schema=RESPONSE_SCHEMA)
        result = parse_analysis_payload(raw)
        status = "success"
        return result
    except AnalysisError as exc:
        status = exc.code
        raise
    except AIProviderError as exc:
        logger.warning("analysis_provider_failed provider=%s model=%s: %s", ai.provider, ai.model, exc)
        if exc.auth_failed:
            status = "invalid_api_key"
            raise AnalysisError(ERROR_PREFIX + INVALID_API_KEY_MESSAGE, code="invalid_api_key") from exc
        status = "llm_unavailable"
        raise AnalysisError(ERROR_PREFIX + str(exc), code="llm_unavailable") from exc
    finally:
        logger.info(
            "analysis_run provider=%s model=%s language=%s status=%s latency_ms=%s",
            ai.provider,
            ai.model,
            language,
            status,
            int((time.perf_counter() - started) * 1000),
        )
