import json
import sys
import unittest
from fractions import Fraction
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_optimizer.core.config.scoring import scoring_weights  # noqa: E402
from ats_optimizer.schemas.report import (  # noqa: E402
    AnalysisResult,
    RecruiterTip,
    RecruiterTipsSection,
    Report,
    SearchabilitySection,
    SearchabilityTip,
    SkillEntry,
    SkillSection,
)
from ats_optimizer.scoring import (  # noqa: E402
    compute_optimized_score,
    compute_score,
    optimized_report,
    score_color,
    section_ratios,
)
from ats_optimizer.scoring.engine import round_half_up, skill_in_text  # noqa: E402

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "analysis_result.json"


def make_report(searchability=(), hard=(), soft=(), recruiter=()) -> Report:
    return Report(
        searchability=SearchabilitySection(
            issues=0,
            tips=tuple(SearchabilityTip(name=f"s{i}", status=s, message="") for i, s in enumerate(searchability)),
        ),
        hard_skills=SkillSection(
            issues=0,
            skills=tuple(SkillEntry(skill=name, resume_count=count, jd_count=1) for name, count in hard),
        ),
        soft_skills=SkillSection(
            issues=0,
            skills=tuple(SkillEntry(skill=name, resume_count=count, jd_count=1) for name, count in soft),
        ),
        recruiter_tips=RecruiterTipsSection(
            issues=0,
            tips=tuple(RecruiterTip(name=f"r{i}", status=s, message="") for i, s in enumerate(recruiter)),
        ),
    )


def load_fixture() -> AnalysisResult:
    return AnalysisResult.model_validate(json.loads(FIXTURE.read_text(encoding="utf-8")))


class ComputeScoreTests(unittest.TestCase):
    def test_weights_sum_to_exactly_one(self):
        weights = scoring_weights()
        self.assertEqual(weights["searchability"], Fraction(3, 10))
        self.assertEqual(weights["hard_skills"], Fraction(45, 100))
        self.assertEqual(weights["soft_skills"], Fraction(1, 10))
        self.assertEqual(weights["recruiter_tips"], Fraction(15, 100))
        self.assertEqual(sum(weights.values()), 1)

    def test_empty_report_gets_full_credit(self):
        self.assertEqual(compute_score(make_report()), 100)

    def test_fully_passing_report_scores_100(self):
        report = make_report(
            searchability=["pass", "info", "pass"],
            hard=[("Python", 2), ("SQL", 0)],
            soft=[("Teamwork", 1)],
            recruiter=["pass", "info"],
        )
        self.assertEqual(compute_score(report), 100)

    def test_fully_failing_report_scores_0(self):
        report = make_report(
            searchability=["fail", "fail"],
            hard=[("Python", -1)],
            soft=[("Teamwork", -1), ("Leadership", -1)],
            recruiter=["warning"],
        )
        self.assertEqual(compute_score(report), 0)

    def test_zero_count_is_present_not_missing(self):
        report = make_report(hard=[("Python", 0)])
        self.assertEqual(section_ratios(report)["hard_skills"], 1)

    def test_half_way_score_rounds_up(self):
        # 0.30 + 0.5 * 0.45 + 0.10 + 0.15 = 0.775 -> 77.5 -> 78
        report = make_report(hard=[("Python", -1), ("SQL", 2)])
        self.assertEqual(section_ratios(report)["hard_skills"], Fraction(1, 2))
        self.assertEqual(compute_score(report), 78)

    def test_round_half_up_boundaries(self):
        self.assertEqual(round_half_up(Fraction(745, 10)), 75)
        self.assertEqual(round_half_up(Fraction(7449, 100)), 74)
        self.assertEqual(round_half_up(Fraction(0)), 0)

    def test_fixture_report_score(self):
        # 0.3 * 3/4 + 0.45 * 2/4 + 0.1 * 1/2 + 0.15 * 1/2 = 0.575 -> 58
        result = load_fixture()
        self.assertEqual(compute_score(result.report), 58)

    def test_malformed_negative_count_counts_as_missing(self):
        report = make_report(hard=[("Python", -7), ("SQL", 1)])
        self.assertEqual(section_ratios(report)["hard_skills"], Fraction(1, 2))
        self.assertEqual(compute_score(report), 78)


class OptimizedScoreTests(unittest.TestCase):
    def test_missing_skill_found_in_optimized_text(self):
        report = make_report(hard=[("Python", -1), ("SQL", 2)])
        self.assertEqual(compute_optimized_score(report, "Built services in Python and SQL."), 100)

    def test_original_report_is_not_mutated(self):
        result = load_fixture()
        before = compute_score(result.report)
        dumped = result.report.model_dump()
        compute_optimized_score(result.report, result.optimized_resume)
        self.assertEqual(compute_score(result.report), before)
        self.assertEqual(result.report.model_dump(), dumped)

    def test_fixture_optimized_score(self):
        # Python and Communication are added; Java only appears inside JavaScript.
        result = load_fixture()
        improved = optimized_report(result.report, result.optimized_resume)
        counts = {entry.skill: entry.resume_count for entry in improved.hard_skills.skills}
        self.assertEqual(counts, {"Python": 1, "SQL": 2, "Java": -1, "Docker": 1})
        self.assertEqual(improved.soft_skills.skills[0].resume_count, 1)
        self.assertEqual(compute_optimized_score(result.report, result.optimized_resume), 89)

    def test_all_tips_forced_to_pass(self):
        report = make_report(searchability=["fail", "info"], recruiter=["warning"])
        improved = optimized_report(report, "")
        self.assertEqual({tip.status for tip in improved.searchability.tips}, {"pass"})
        self.assertEqual({tip.status for tip in improved.recruiter_tips.tips}, {"pass"})
        self.assertEqual(compute_optimized_score(report, ""), 100)

    def test_issue_counts_are_carried_over(self):
        result = load_fixture()
        improved = optimized_report(result.report, result.optimized_resume)
        self.assertEqual(improved.hard_skills.issues, 2)
        self.assertEqual(improved.searchability.issues, 1)

    def test_whole_word_match_only(self):
        self.assertFalse(skill_in_text("Java", "Expert in JavaScript"))
        self.assertTrue(skill_in_text("Java", "Expert in java and Go"))
        self.assertFalse(skill_in_text("SQL", "PostgreSQLite"))

    def test_skill_metacharacters_are_literal(self):
        self.assertTrue(skill_in_text("Node.js", "Shipped Node.js services"))
        self.assertFalse(skill_in_text("Node.js", "Shipped Nodexjs services"))
        self.assertTrue(skill_in_text("A+B", "Knows A+B testing"))
        self.assertFalse(skill_in_text("A+B", "Knows AAB testing"))

    def test_blank_skill_is_never_found(self):
        self.assertFalse(skill_in_text("", "any text"))
        self.assertFalse(skill_in_text("   ", "any text"))

    def test_empty_sections_do_not_divide_by_zero(self):
        self.assertEqual(compute_optimized_score(make_report(), "nothing"), 100)


class ScoreColorTests(unittest.TestCase):
    def test_thresholds(self):
        self.assertEqual(score_color(100), "green")
        self.assertEqual(score_color(90), "green")
        self.assertEqual(score_color(89), "yellow")
        self.assertEqual(score_color(75), "yellow")
        self.assertEqual(score_color(74), "red")
        self.assertEqual(score_color(0), "red")


if __name__ == "__main__":
    unittest.main()
