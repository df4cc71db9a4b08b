from __future__ import annotations

from ats_optimizer.parsing.models import UnsupportedFileError

ALLOWED_EXTENSIONS = frozenset({"txt", "pdf"})

RESUME_CONTENT_TYPE_EXTENSION_HINTS = {
    "application/pdf": "pdf",
    "text/plain": "txt",
}

PDF_MAGIC = b"%PDF-"
UNSUPPORTED_FILE_MESSAGE = "Unsupported file type. Please upload a .txt or .pdf file."


class UploadTooLargeError(ValueError):
    def __init__(self, max_bytes: int):
        super().__init__(f"File too large. Maximum allowed size is {max_bytes // (1024 * 1024)} MB.")
        self.max_bytes = max_bytes


def extension_from_filename(filename: str) -> str:
    name = (filename or "").strip()
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


def resolve_extension(filename: str, content_type: str | None = None) -> str:
    ext = extension_from_filename(filename)
    if ext:
        return ext
    hint = (content_type or "").split(";")[0].strip().lower()
    return RESUME_CONTENT_TYPE_EXTENSION_HINTS.get(hint, "")


def _is_probably_text_payload(content: bytes) -> bool:
    if not content:
        return False
    sample = content[:4096]
    if b"\x00" in sample:
        # utf-16 text carries a BOM; anything else with NUL bytes is binary.
        return sample.startswith((b"\xff\xfe", b"\xfe\xff"))
    printable = 0
    for byte in sample:
        if byte in (9, 10, 13) or byte >= 32 and byte != 127:
            printable += 1
    return (printable / len(sample)) >= 0.75


def validate_upload_signature(*, extension: str, content: bytes) -> None:
    if extension not in ALLOWED_EXTENSIONS:
        raise UnsupportedFileError(UNSUPPORTED_FILE_MESSAGE)

    if extension == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise UnsupportedFileError("File signature does not match .pdf content.")
        return

    if not _is_probably_text_payload(content):
        raise UnsupportedFileError("File signature does not match .txt text content.")


def enforce_upload_size(size: int, max_bytes: int) -> None:
    if size > max_bytes:
        raise UploadTooLargeError(max_bytes)
