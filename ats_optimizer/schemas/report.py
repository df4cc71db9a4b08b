from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Language = Literal["en", "pt", "es"]
SearchabilityStatus = Literal["pass", "fail", "info"]
RecruiterStatus = Literal["pass", "warning", "info"]

NOT_FOUND = -1


class ReportModel(BaseModel):
    """Base for the analysis contract: camelCase on the wire, immutable in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class SkillEntry(ReportModel):
    skill: str
    # -1 means the skill does not appear in the resume at all.
    resume_count: int
    jd_count: int

    @property
    def in_resume(self) -> bool:
        return self.resume_count >= 0


class SearchabilityTip(ReportModel):
    name: str
    status: SearchabilityStatus
    message: str


class RecruiterTip(ReportModel):
    name: str
    status: RecruiterStatus
    message: str


class SearchabilitySection(ReportModel):
    issues: int
    tips: tuple[SearchabilityTip, ...]


class SkillSection(ReportModel):
    issues: int
    skills: tuple[SkillEntry, ...]


class RecruiterTipsSection(ReportModel):
    issues: int
    tips: tuple[RecruiterTip, ...]


class Report(ReportModel):
    searchability: SearchabilitySection
    hard_skills: SkillSection
    soft_skills: SkillSection
    recruiter_tips: RecruiterTipsSection


class AnalysisResult(ReportModel):
    report: Report
    optimized_resume: str
