from __future__ import annotations

import logging
from datetime import datetime, timezone
from fractions import Fraction
from typing import Callable

from ats_optimizer.ai.types import AIClient
from ats_optimizer.schemas.report import Report
from ats_optimizer.schemas.scan import (
    ProgressEvent,
    ScanRequest,
    ScanResponse,
    ScoreResponse,
    SectionRatios,
    SectionSummary,
)
from ats_optimizer.scoring import (
    compute_score,
    highlight_keywords,
    optimized_report,
    report_keywords,
    score_color,
    section_ratios,
)
from ats_optimizer.services.analysis_service import analyze_resume

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]

PROGRESS_STAGES: dict[str, tuple[str, int]] = {
    "parsing": ("Parsing resume text...", 5),
    "analyzing": ("Analyzing job description...", 15),
    "scoring": ("Scoring your report...", 90),
    "complete": ("Complete!", 100),
}


def _emit(callback: ProgressCallback | None, stage: str) -> None:
    if callback is None:
        return
    message, progress = PROGRESS_STAGES[stage]
    callback(ProgressEvent(stage=stage, message=message, progress=progress))


def _ratios_model(ratios: dict[str, Fraction]) -> SectionRatios:
    return SectionRatios(**{key: round(float(value), 4) for key, value in ratios.items()})


def section_summaries(report: Report) -> list[SectionSummary]:
    return [
        SectionSummary(id="searchability", name="Searchability", issues=report.searchability.issues),
        SectionSummary(id="hard-skills", name="Hard Skills", issues=report.hard_skills.issues),
        SectionSummary(id="soft-skills", name="Soft Skills", issues=report.soft_skills.issues),
        SectionSummary(id="recruiter-tips", name="Recruiter Tips", issues=report.recruiter_tips.issues),
    ]


def score_report(report: Report, optimized_resume: str) -> ScoreResponse:
    improved = optimized_report(report, optimized_resume)
    original_score = compute_score(report)
    optimized_score = compute_score(improved)
    return ScoreResponse(
        original_score=original_score,
        optimized_score=optimized_score,
        original_color=score_color(original_score),
        optimized_color=score_color(optimized_score),
        section_ratios=_ratios_model(section_ratios(report)),
        optimized_section_ratios=_ratios_model(section_ratios(improved)),
        sections=section_summaries(report),
        highlighted_resume=highlight_keywords(optimized_resume, report_keywords(report)),
    )


async def run_scan(
    request: ScanRequest,
    *,
    client: AIClient | None = None,
    progress_callback: ProgressCallback | None = None,
) -> ScanResponse:
    _emit(progress_callback, "parsing")
    resume_text = request.resume_text.strip()
    job_description = request.job_description.strip()

    _emit(progress_callback, "analyzing")
    result = await analyze_resume(job_description, resume_text, request.language, client=client)

    _emit(progress_callback, "scoring")
    scores = score_report(result.report, result.optimized_resume)
    logger.info(
        "scan_scored language=%s original=%s optimized=%s hard_skills=%s soft_skills=%s",
        request.language,
        scores.original_score,
        scores.optimized_score,
        len(result.report.hard_skills.skills),
        len(result.report.soft_skills.skills),
    )

    response = ScanResponse(
        **scores.model_dump(),
        report=result.report,
        optimized_resume=result.optimized_resume,
        original_resume=request.resume_text,
        language=request.language,
        generated_at=datetime.now(timezone.utc),
    )
    _emit(progress_callback, "complete")
    return response
