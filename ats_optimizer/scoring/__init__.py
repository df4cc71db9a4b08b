from .engine import (
    compute_optimized_score,
    compute_score,
    optimized_report,
    score_color,
    section_ratios,
)
from .highlight import TextSegment, highlight_keywords, report_keywords

__all__ = [
    "TextSegment",
    "compute_optimized_score",
    "compute_score",
    "highlight_keywords",
    "optimized_report",
    "report_keywords",
    "score_color",
    "section_ratios",
]
