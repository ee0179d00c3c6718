"""Scoring engine tests — lookup tables, ramps, segment bands, partial and stale answers."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from app.constants import HELP_NEEDED_AREAS, TYPED_CATALOGS
from app.schemas.assessment_schema import AnswerRecord, Segment
from app.services.scoring_engine import (
    app_idea_points,
    compute_score,
    existing_materials_points,
    help_needed_points,
    score_breakdown,
    segment_for,
)

ALL_MATERIALS = [
    "marketing_research",
    "business_plan",
    "business_model",
    "financial_model",
    "ui_ux",
    "prd",
    "mvp_prototype",
    "pitch_deck",
    "legal",
]


def _sample_answers(**overrides):
    """A realistic, mid-range technology assessment (scores 73)."""
    data = dict(
        startup_type="technology",
        app_idea="A marketplace that matches first-time founders with vetted fractional CTOs.",
        project_stage="mvp_development",
        user_persona="validated",
        differentiation="different_problem",
        existing_materials=["business_plan", "pitch_deck", "ui_ux"],
        business_model="recurring",
        revenue_goal="5k-25k",
        build_strategy="cofounder",
        help_needed=["fundraising", "marketing"],
        investment_readiness="20k-40k",
    )
    data.update(overrides)
    return AnswerRecord(**data)


def _maximal_answers(startup_type="technology"):
    return AnswerRecord(
        startup_type=startup_type,
        app_idea="x" * 200,
        project_stage="already_live",
        user_persona="validated",
        differentiation="different_problem",
        existing_materials=list(ALL_MATERIALS),
        business_model="recurring",
        revenue_goal="25k+",
        build_strategy="cofounder",
        help_needed=[],
        investment_readiness="100k+",
    )


# ===================================================================== #
#  Totals and segments                                                    #
# ===================================================================== #

class TestComputeScore:
    def test_sample_assessment(self):
        result = compute_score(_sample_answers())
        assert result.score == 73
        assert result.segment == Segment.DESIGN_TECH

    def test_deterministic(self):
        answers = _sample_answers()
        first = compute_score(answers)
        for _ in range(5):
            assert compute_score(answers) == first

    def test_does_not_mutate_answers(self):
        answers = _sample_answers()
        before = answers.model_dump()
        compute_score(answers)
        assert answers.model_dump() == before

    def test_empty_record_scores_zero(self):
        result = compute_score(AnswerRecord())
        assert result.score == 0
        assert result.segment == Segment.FEASIBILITY
        assert all(points == 0 for points in result.breakdown.values())

    @pytest.mark.parametrize("startup_type", ["technology", "physical", "service", "combination"])
    def test_maximal_answers_score_100(self, startup_type):
        result = compute_score(_maximal_answers(startup_type))
        assert result.score == 100
        assert result.segment == Segment.INVESTORS

    def test_score_always_in_range(self):
        for answers in (AnswerRecord(), _sample_answers(), _maximal_answers()):
            assert 0 <= compute_score(answers).score <= 100

    def test_breakdown_has_every_component(self):
        breakdown = compute_score(_sample_answers()).breakdown
        assert set(breakdown) == {
            "user_persona",
            "differentiation",
            "app_idea",
            "project_stage",
            "existing_materials",
            "business_model",
            "revenue_goal",
            "build_strategy",
            "help_needed",
            "investment_readiness",
        }

    def test_breakdown_values(self):
        breakdown = compute_score(_sample_answers()).breakdown
        assert breakdown["user_persona"] == 10.0
        assert breakdown["project_stage"] == 6.0
        assert breakdown["existing_materials"] == pytest.approx(9.33)
        assert breakdown["help_needed"] == pytest.approx(4.4)
        assert breakdown["investment_readiness"] == 11.0


class TestSegmentBands:
    @pytest.mark.parametrize(
        "score, segment",
        [
            (0, Segment.FEASIBILITY),
            (25, Segment.FEASIBILITY),
            (26, Segment.BUSINESS_LOGIC),
            (50, Segment.BUSINESS_LOGIC),
            (51, Segment.DESIGN_TECH),
            (75, Segment.DESIGN_TECH),
            (76, Segment.INVESTORS),
            (100, Segment.INVESTORS),
        ],
    )
    def test_band_edges(self, score, segment):
        assert segment_for(score) == segment

    def test_segment_values_serialize_as_names(self):
        assert [s.value for s in Segment] == ["Feasibility", "BusinessLogic", "DesignTech", "Investors"]


# ===================================================================== #
#  Ramps                                                                  #
# ===================================================================== #

class TestAppIdeaRamp:
    def test_empty(self):
        assert app_idea_points("") == 0
        assert app_idea_points(None) == 0

    def test_linear_below_saturation(self):
        assert app_idea_points("a" * 25) == pytest.approx(2.0)

    def test_saturates(self):
        assert app_idea_points("a" * 50) == pytest.approx(4.0)
        assert app_idea_points("a" * 500) == pytest.approx(4.0)

    def test_whitespace_ignored(self):
        assert app_idea_points("   " + "a" * 25 + "   ") == pytest.approx(2.0)

    def test_monotonic(self):
        points = [app_idea_points("a" * n) for n in range(0, 80, 5)]
        assert points == sorted(points)


class TestExistingMaterialsRamp:
    def test_zero(self):
        assert existing_materials_points(0) == 0

    def test_saturates_at_nine(self):
        assert existing_materials_points(9) == pytest.approx(28.0)
        assert existing_materials_points(12) == pytest.approx(28.0)

    def test_duplicates_counted_once(self):
        answers = AnswerRecord(startup_type="technology", existing_materials=["legal", "legal", "prd"])
        assert score_breakdown(answers)["existing_materials"] == pytest.approx(2 / 9 * 28.0)

    def test_catalog_holds_nine_materials_for_every_type(self):
        for options in TYPED_CATALOGS["existing_materials"].values():
            assert len(options) == 9


class TestHelpNeededRamp:
    def test_unanswered_scores_zero(self):
        assert help_needed_points(None) == 0
        assert score_breakdown(AnswerRecord(startup_type="technology"))["help_needed"] == 0

    def test_answered_without_areas_scores_max(self):
        assert help_needed_points(0) == pytest.approx(6.4)

    def test_strictly_decreasing_and_never_negative(self):
        ids = [option["id"] for option in HELP_NEEDED_AREAS["technology"]]
        points = [
            score_breakdown(AnswerRecord(startup_type="technology", help_needed=ids[:n]))["help_needed"]
            for n in range(0, len(ids) + 1)
        ]
        assert points[0] == pytest.approx(6.4)
        assert points[-1] == 0
        assert all(p >= 0 for p in points)
        assert all(a > b for a, b in zip(points, points[1:]))


# ===================================================================== #
#  Partial and stale answers                                              #
# ===================================================================== #

class TestRobustness:
    def test_unknown_single_choice_id_scores_zero(self):
        answers = _sample_answers(project_stage="time_travel", investment_readiness="a_billion")
        breakdown = score_breakdown(answers)
        assert breakdown["project_stage"] == 0
        assert breakdown["investment_readiness"] == 0

    def test_unknown_multi_select_ids_ignored(self):
        answers = _sample_answers(existing_materials=["business_plan", "napkin_sketch"])
        assert score_breakdown(answers)["existing_materials"] == pytest.approx(28.0 / 9)

    def test_unlisted_options_score_zero(self):
        answers = _sample_answers(
            revenue_goal="already_creating",
            project_stage="other",
            build_strategy="other",
            user_persona="other",
            differentiation="other",
        )
        breakdown = score_breakdown(answers)
        for name in ("revenue_goal", "project_stage", "build_strategy", "user_persona", "differentiation"):
            assert breakdown[name] == 0

    def test_business_model_other_scores(self):
        assert score_breakdown(_sample_answers(business_model="other"))["business_model"] == 3.0

    def test_unknown_startup_type_uses_default_catalogs(self):
        result = compute_score(_sample_answers(startup_type="spaceship"))
        assert result.score == compute_score(_sample_answers()).score

    def test_partial_record(self):
        answers = AnswerRecord(startup_type="physical", user_persona="i_am_user")
        result = compute_score(answers)
        assert result.score == 5
        assert result.segment == Segment.FEASIBILITY

    def test_half_rounds_up(self):
        # 5.0 + 2.0 + 5.5 = 12.5
        answers = AnswerRecord(
            startup_type="technology",
            user_persona="i_am_user",
            project_stage="just_idea",
            build_strategy="outsource",
        )
        assert compute_score(answers).score == 13
