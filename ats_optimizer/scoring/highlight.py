from __future__ import annotations

import re
from typing import Iterable

from pydantic import BaseModel

from ats_optimizer.schemas.report import Report


class TextSegment(BaseModel):
    text: str
    highlighted: bool = False


def _unique_keywords(keywords: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    unique: list[str] = []
    for keyword in keywords:
        if not keyword or not keyword.strip():
            continue
        key = keyword.casefold()
        if key in seen:
            continue
        seen.add(key)
        unique.append(keyword)
    return unique


def keyword_pattern(keywords: Iterable[str]) -> re.Pattern[str] | None:
    unique = _unique_keywords(keywords)
    if not unique:
        return None
    alternation = "|".join(re.escape(keyword) for keyword in unique)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


def report_keywords(report: Report) -> list[str]:
    return [entry.skill for entry in report.hard_skills.skills] + [
        entry.skill for entry in report.soft_skills.skills
    ]


def highlight_keywords(text: str, keywords: Iterable[str]) -> list[TextSegment]:
    """Split ``text`` into plain and highlighted segments.

    Joining the ``text`` of every returned segment gives back the input.
    """
    pattern = keyword_pattern(keywords)
    if pattern is None or not text:
        return [TextSegment(text=text)]

    segments: list[TextSegment] = []
    cursor = 0
    for match in pattern.finditer(text):
        start, end = match.span()
        if start == end:
            continue
        if start > cursor:
            segments.append(TextSegment(text=text[cursor:start]))
        segments.append(TextSegment(text=match.group(0), highlighted=True))
        cursor = end
    if cursor < len(text):
        segments.append(TextSegment(text=text[cursor:]))
    return segments or [TextSegment(text=text)]
