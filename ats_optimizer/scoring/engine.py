"""Match scores for an analysis report.

A report is scored section by section: tip sections count tips that pass (or
are informational), skill sections count skills present in the resume. Each
section ratio is weighted and the weighted sum is turned into a whole
percentage with round-half-up.

All arithmetic is done on ``Fraction`` values, so a score that lands exactly
on ``.5`` always rounds up regardless of the weights' binary representation.
"""

from __future__ import annotations

import math
import re
from fractions import Fraction
from typing import Iterable, Literal

from ats_optimizer.core.config.scoring import color_thresholds, scoring_weights
from ats_optimizer.schemas.report import (
    RecruiterTip,
    RecruiterTipsSection,
    Report,
    SearchabilitySection,
    SearchabilityTip,
    SkillEntry,
    SkillSection,
)

ScoreColor = Literal["green", "yellow", "red"]

_PASSING_STATUSES = frozenset({"pass", "info"})
_FOUND = 1


def _ratio(hits: int, total: int) -> Fraction:
    if total <= 0:
        return Fraction(1)
    return Fraction(hits, total)


def _tip_ratio(tips: Iterable[SearchabilityTip | RecruiterTip]) -> Fraction:
    tips = tuple(tips)
    passed = sum(1 for tip in tips if tip.status in _PASSING_STATUSES)
    return _ratio(passed, len(tips))


def _skill_ratio(skills: Iterable[SkillEntry]) -> Fraction:
    skills = tuple(skills)
    found = sum(1 for entry in skills if entry.in_resume)
    return _ratio(found, len(skills))


def section_ratios(report: Report) -> dict[str, Fraction]:
    return {
        "searchability": _tip_ratio(report.searchability.tips),
        "hard_skills": _skill_ratio(report.hard_skills.skills),
        "soft_skills": _skill_ratio(report.soft_skills.skills),
        "recruiter_tips": _tip_ratio(report.recruiter_tips.tips),
    }


def round_half_up(value: Fraction) -> int:
    return math.floor(value + Fraction(1, 2))


def compute_score(report: Report) -> int:
    weights = scoring_weights()
    ratios = section_ratios(report)
    total = sum((ratios[key] * weights[key] for key in weights), Fraction(0))
    return max(0, min(100, round_half_up(total * 100)))


def skill_pattern(skill: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(skill)}\b", re.IGNORECASE)


def skill_in_text(skill: str, text: str) -> bool:
    if not skill.strip():
        return False
    return skill_pattern(skill).search(text) is not None


def _rescan_skills(section: SkillSection, text: str) -> SkillSection:
    skills = []
    for entry in section.skills:
        resume_count = entry.resume_count
        if not entry.in_resume and skill_in_text(entry.skill, text):
            resume_count = _FOUND
        skills.append(SkillEntry(skill=entry.skill, resume_count=resume_count, jd_count=entry.jd_count))
    return SkillSection(issues=section.issues, skills=tuple(skills))


def optimized_report(report: Report, optimized_resume: str) -> Report:
    """Build the report as it would read for the rewritten resume.

    Missing skills that now appear in ``optimized_resume`` count as found, and
    every searchability and recruiter tip is assumed resolved. ``report`` is
    left untouched; the result is a new value.
    """
    searchability = SearchabilitySection(
        issues=report.searchability.issues,
        tips=tuple(
            SearchabilityTip(name=tip.name, status="pass", message=tip.message)
            for tip in report.searchability.tips
        ),
    )
    recruiter_tips = RecruiterTipsSection(
        issues=report.recruiter_tips.issues,
        tips=tuple(
            RecruiterTip(name=tip.name, status="pass", message=tip.message)
            for tip in report.recruiter_tips.tips
        ),
    )
    return Report(
        searchability=searchability,
        hard_skills=_rescan_skills(report.hard_skills, optimized_resume),
        soft_skills=_rescan_skills(report.soft_skills, optimized_resume),
        recruiter_tips=recruiter_tips,
    )


def compute_optimized_score(report: Report, optimized_resume: str) -> int:
    return compute_score(optimized_report(report, optimized_resume))


def score_color(score: int) -> ScoreColor:
    green_min, yellow_min = color_thresholds()
    if score >= green_min:
        return "green"
    if score >= yellow_min:
        return "yellow"
    return "red"
