from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ats_optimizer.schemas.report import Language, Report
from ats_optimizer.scoring.highlight import TextSegment

MAX_INPUT_CHARS = 50000
MISSING_INPUT_MESSAGE = "Please provide both a resume and a job description."

ScoreColor = Literal["green", "yellow", "red"]
SectionId = Literal["searchability", "hard-skills", "soft-skills", "recruiter-tips"]


class ScanRequest(BaseModel):
    job_description: str = Field(max_length=MAX_INPUT_CHARS)
    resume_text: str = Field(max_length=MAX_INPUT_CHARS)
    language: Language = "en"

    @field_validator("job_description", "resume_text")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError(MISSING_INPUT_MESSAGE)
        return value


class ScoreRequest(BaseModel):
    report: Report
    optimized_resume: str = ""


class SectionSummary(BaseModel):
    id: SectionId
    name: str
    issues: int


class SectionRatios(BaseModel):
    searchability: float = Field(ge=0.0, le=1.0)
    hard_skills: float = Field(ge=0.0, le=1.0)
    soft_skills: float = Field(ge=0.0, le=1.0)
    recruiter_tips: float = Field(ge=0.0, le=1.0)


class ScoreResponse(BaseModel):
    original_score: int = Field(ge=0, le=100)
    optimized_score: int = Field(ge=0, le=100)
    original_color: ScoreColor
    optimized_color: ScoreColor
    section_ratios: SectionRatios
    optimized_section_ratios: SectionRatios
    sections: list[SectionSummary]
    highlighted_resume: list[TextSegment]


class ScanResponse(ScoreResponse):
    report: Report
    optimized_resume: str
    original_resume: str
    language: Language
    generated_at: datetime


class ProgressEvent(BaseModel):
    stage: Literal["parsing", "analyzing", "scoring", "complete"]
    message: str
    progress: int = Field(ge=0, le=100)
