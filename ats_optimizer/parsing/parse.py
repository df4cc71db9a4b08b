from __future__ import annotations

import logging
from io import BytesIO
from typing import Any

from pypdf import PdfReader

from ats_optimizer.services.file_security import (
    UNSUPPORTED_FILE_MESSAGE,
    resolve_extension,
    validate_upload_signature,
)

from .models import DocumentParseError, ExtractTextResponse, UnsupportedFileError

logger = logging.getLogger(__name__)

UNREADABLE_FILE_MESSAGE = (
    "Could not read text from file. Please ensure it is text-based or paste the content directly."
)
UTF16_BOMS = (b"\xff\xfe", b"\xfe\xff")


def _text_encodings(content: bytes) -> tuple[str, ...]:
    # utf-16 needs a BOM: any even-length payload decodes as utf-16 without error.
    if content.startswith(UTF16_BOMS):
        return ("utf-16", "latin-1")
    return ("utf-8", "latin-1")


def _parse_txt(content: bytes) -> tuple[str, dict[str, Any]]:
    for encoding in _text_encodings(content):
        try:
            text = content.decode(encoding)
        except UnicodeDecodeError:
            continue
        if encoding == "utf-8":
            text = text.lstrip("\ufeff")
        return text, {"encoding": encoding}
    raise DocumentParseError(UNREADABLE_FILE_MESSAGE)


def _parse_pdf(content: bytes) -> tuple[str, dict[str, Any]]:
    try:
        reader = PdfReader(BytesIO(content))
        page_chunks: list[str] = []
        for page in reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                page_chunks.append(page_text)
        page_count = len(reader.pages)
    except Exception as exc:
        logger.warning("pdf_extract_failed: %s", exc)
        raise DocumentParseError(UNREADABLE_FILE_MESSAGE) from exc

    if not page_chunks:
        raise DocumentParseError(UNREADABLE_FILE_MESSAGE)
    return "\n\n".join(page_chunks), {"pages": page_count}


def extract_text_from_file(filename: str, content: bytes, content_type: str | None = None) -> ExtractTextResponse:
    ext = resolve_extension(filename, content_type)
    validate_upload_signature(extension=ext, content=content)

    if ext == "txt":
        source_type = "text"
        text, details = _parse_txt(content)
    elif ext == "pdf":
        source_type = "pdf"
        text, details = _parse_pdf(content)
    else:
        raise UnsupportedFileError(UNSUPPORTED_FILE_MESSAGE)

    details["extension"] = ext
    logger.info("extract_text file_type=%s characters=%s", ext, len(text))
    return ExtractTextResponse(
        filename=filename or f"resume.{ext}",
        source_type=source_type,
        text=text,
        characters=len(text),
        details=details,
    )
