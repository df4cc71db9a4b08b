from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status

from ats_optimizer.core.config import settings
from ats_optimizer.core.rate_limit import rate_limit
from ats_optimizer.parsing.models import ExtractTextResponse
from ats_optimizer.parsing.parse import extract_text_from_file
from ats_optimizer.services.file_security import UploadTooLargeError, enforce_upload_size

router = APIRouter()


@router.post("/extract-text", response_model=ExtractTextResponse)
@rate_limit()
async def extract_text(request: Request, file: UploadFile = File(...)):
    _ = request
    filename = file.filename or "uploaded-file"

    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        try:
            enforce_upload_size(total, settings.max_upload_bytes)
        except UploadTooLargeError as exc:
            raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc)) from exc
        chunks.append(chunk)
    payload = b"".join(chunks)

    try:
        return extract_text_from_file(filename=filename, content=payload, content_type=file.content_type)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
