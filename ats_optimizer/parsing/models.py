from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

SourceType = Literal["text", "pdf"]


class UnsupportedFileError(ValueError):
    pass


class DocumentParseError(ValueError):
    pass


class ExtractTextResponse(BaseModel):
    filename: str
    source_type: SourceType
    text: str
    characters: int = Field(ge=0)
    details: dict[str, Any] = Field(default_factory=dict)
