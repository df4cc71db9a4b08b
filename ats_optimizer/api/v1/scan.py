import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, Header, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from ats_optimizer.core.rate_limit import rate_limit
from ats_optimizer.core.security import check_api_key
from ats_optimizer.schemas.scan import ProgressEvent, ScanRequest, ScanResponse, ScoreRequest, ScoreResponse
from ats_optimizer.services.analysis_service import AnalysisError
from ats_optimizer.services.scan_service import run_scan, score_report

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_STATUS = {
    "invalid_response": status.HTTP_502_BAD_GATEWAY,
    "invalid_api_key": status.HTTP_503_SERVICE_UNAVAILABLE,
    "llm_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _analysis_status(exc: AnalysisError) -> int:
    return _ERROR_STATUS.get(exc.code, status.HTTP_503_SERVICE_UNAVAILABLE)


def _sse_event(event: str, payload: dict[str, Any]) -> str:
    data = json.dumps(payload, ensure_ascii=False)
    return f"event: {event}\ndata: {data}\n\n"


@router.post("/scan", response_model=ScanResponse)
@rate_limit()
async def scan(
    request: Request,
    payload: ScanRequest,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
):
    _ = request
    check_api_key(x_api_key, payload.language)
    try:
        return await run_scan(payload)
    except AnalysisError as exc:
        raise HTTPException(status_code=_analysis_status(exc), detail=str(exc)) from exc


@router.post("/scan/stream")
@rate_limit()
async def scan_stream(
    request: Request,
    payload: ScanRequest,
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
):
    check_api_key(x_api_key, payload.language)

    async def event_stream():
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

        def push_progress(event: ProgressEvent) -> None:
            queue.put_nowait({"kind": "progress", "payload": event.model_dump(mode="json")})

        async def worker() -> None:
            try:
                result = await run_scan(payload, progress_callback=push_progress)
                queue.put_nowait({"kind": "result", "payload": result.model_dump(mode="json", by_alias=True)})
            except AnalysisError as exc:
                queue.put_nowait(
                    {"kind": "error", "payload": {"message": str(exc), "status": _analysis_status(exc)}}
                )
            except Exception as exc:  # pragma: no cover - guard rail
                logger.exception("scan_stream_failed")
                queue.put_nowait(
                    {
                        "kind": "error",
                        "payload": {"message": str(exc), "status": status.HTTP_500_INTERNAL_SERVER_ERROR},
                    }
                )
            finally:
                queue.put_nowait({"kind": "done", "payload": {}})

        task = asyncio.create_task(worker())

        try:
            yield _sse_event("connected", {"ok": True})
            while True:
                if await request.is_disconnected():
                    break
                event = await queue.get()
                kind = event.get("kind")
                if kind == "done":
                    break
                yield _sse_event(kind, event.get("payload", {}))
        finally:
            if not task.done():
                task.cancel()

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/score", response_model=ScoreResponse)
async def score(payload: ScoreRequest):
    return score_report(payload.report, payload.optimized_resume)
