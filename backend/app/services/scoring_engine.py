"""Deterministic Investment Readiness Scoring Engine.

Converts a (possibly partial) ``AnswerRecord`` into a 0-100 readiness
score and a qualitative segment using fixed lookup tables and ramps.

Rules
-----
- NO API calls
- NO DB writes
- NEVER raises — unset, unknown or stale answers score 0
- An unanswered help-needed question scores 0; an answered one with no
  areas earns the full 6.4
- Ids are only scored when they belong to the catalog active for the
  record's startup type
- Column maxima sum to exactly 100; the total is still clamped
- Pure deterministic math
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Optional

from ..constants import (
    APP_IDEA_MAX_POINTS,
    APP_IDEA_SATURATION_CHARS,
    BUILD_STRATEGY_POINTS,
    BUSINESS_MODEL_POINTS,
    DIFFERENTIATION_POINTS,
    HELP_NEEDED_MAX_POINTS,
    HELP_NEEDED_PENALTY_PER_AREA,
    INVESTMENT_READINESS_POINTS,
    MATERIALS_MAX_POINTS,
    MATERIALS_SATURATION_COUNT,
    PROJECT_STAGE_POINTS,
    REVENUE_GOAL_POINTS,
    USER_PERSONA_POINTS,
)
from ..schemas.assessment_schema import AnswerRecord, ScoreResult, Segment
from .catalog import catalog_ids

# Upper bound (inclusive) of each segment band, in ascending order.
SEGMENT_BANDS: tuple[tuple[int, Segment], ...] = (
    (25, Segment.FEASIBILITY),
    (50, Segment.BUSINESS_LOGIC),
    (75, Segment.DESIGN_TECH),
    (100, Segment.INVESTORS),
)


def _clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Clamp *value* to [lo, hi]."""
    return max(lo, min(hi, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _lookup(
    table: Mapping[str, float],
    startup_type: Optional[str],
    field: str,
    option_id: Optional[str],
) -> float:
    if not option_id or option_id not in catalog_ids(startup_type, field):
        return 0.0
    return table.get(option_id, 0.0)


def _valid_selection_count(startup_type: Optional[str], field: str, selected: Iterable[str]) -> int:
    allowed = catalog_ids(startup_type, field)
    return len({option_id for option_id in selected or () if option_id in allowed})


# ---------------------------------------------------------------------------
# Ramps
# ---------------------------------------------------------------------------

def app_idea_points(app_idea: Optional[str]) -> float:
    """Linear ramp: 4 points at 50 characters and beyond."""
    length = len((app_idea or "").strip())
    return min(APP_IDEA_MAX_POINTS, (length / APP_IDEA_SATURATION_CHARS) * APP_IDEA_MAX_POINTS)


def existing_materials_points(count: int) -> float:
    """Linear ramp per completed material, saturating at 9 items."""
    return min(MATERIALS_MAX_POINTS, (count / MATERIALS_SATURATION_COUNT) * MATERIALS_MAX_POINTS)


def help_needed_points(count: Optional[int]) -> float:
    """Inverse ramp: every help area costs a point, floored at 0.

    ``None`` means the question was never answered and scores 0.
    """
    if count is None:
        return 0.0
    return max(0.0, HELP_NEEDED_MAX_POINTS - count * HELP_NEEDED_PENALTY_PER_AREA)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def score_breakdown(answers: AnswerRecord) -> dict[str, float]:
    """Points earned per component for *answers*."""
    startup_type = answers.startup_type

    return {
        "user_persona": _lookup(USER_PERSONA_POINTS, startup_type, "user_persona", answers.user_persona),
        "differentiation": _lookup(
            DIFFERENTIATION_POINTS, startup_type, "differentiation", answers.differentiation
        ),
        "app_idea": app_idea_points(answers.app_idea),
        "project_stage": _lookup(PROJECT_STAGE_POINTS, startup_type, "project_stage", answers.project_stage),
        "existing_materials": existing_materials_points(
            _valid_selection_count(startup_type, "existing_materials", answers.existing_materials)
        ),
        "business_model": _lookup(
            BUSINESS_MODEL_POINTS, startup_type, "business_model", answers.business_model
        ),
        "revenue_goal": _lookup(REVENUE_GOAL_POINTS, startup_type, "revenue_goal", answers.revenue_goal),
        "build_strategy": _lookup(
            BUILD_STRATEGY_POINTS, startup_type, "build_strategy", answers.build_strategy
        ),
        "help_needed": help_needed_points(
            None
            if answers.help_needed is None
            else _valid_selection_count(startup_type, "help_needed", answers.help_needed)
        ),
        "investment_readiness": _lookup(
            INVESTMENT_READINESS_POINTS,
            startup_type,
            "investment_readiness",
            answers.investment_readiness,
        ),
    }


def segment_for(score: int) -> Segment:
    """Map a 0-100 score onto its readiness segment."""
    for upper, segment in SEGMENT_BANDS:
        if score <= upper:
            return segment
    return Segment.INVESTORS


def compute_score(answers: AnswerRecord) -> ScoreResult:
    """Compute the readiness score and segment for *answers*.

    Parameters
    ----------
    answers : AnswerRecord
        Finalized or partial answers; nothing is mutated.

    Returns
    -------
    ScoreResult
        ``score`` is the clamped component sum rounded half-up,
        ``segment`` its band, ``breakdown`` the per-component points.
    """
    breakdown = score_breakdown(answers)
    score = _round_half_up(_clamp(sum(breakdown.values())))

    return ScoreResult(
        score=score,
        segment=segment_for(score),
        breakdown={name: round(points, 2) for name, points in breakdown.items()},
    )
