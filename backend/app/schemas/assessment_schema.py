from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class CatalogOption(BaseModel):
    """One selectable option of a wizard question."""

    id: str
    name: str
    note: Optional[str] = Field(default=None, description="Extra guidance shown under the option")


class Segment(str, Enum):
    """Qualitative readiness band derived from the numeric score."""

    FEASIBILITY = "Feasibility"
    BUSINESS_LOGIC = "BusinessLogic"
    DESIGN_TECH = "DesignTech"
    INVESTORS = "Investors"


class WizardStage(str, Enum):
    QUESTION = "question"
    SCORE_REVEAL = "score_reveal"
    SUBMITTED = "submitted"


class ContactInfo(BaseModel):
    """Step 12 contact block.  Every field may be blank until step 12 is validated."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = Field(
        default="",
        description="Display format while editing, +1XXXXXXXXXX once finalized",
    )
    consent: StrictBool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class AnswerRecord(BaseModel):
    """All answers collected across the wizard.

    Partial records are legal: the wizard fills one step at a time and the
    Scoring Engine treats anything unset as zero points.
    """

    startup_type: Optional[str] = None

    app_idea: str = ""

    project_stage: Optional[str] = None
    project_stage_other: str = ""

    user_persona: Optional[str] = None
    user_persona_other: str = ""

    differentiation: Optional[str] = None
    differentiation_other: str = ""

    existing_materials: List[str] = Field(default_factory=list)

    business_model: Optional[str] = None

    revenue_goal: Optional[str] = None
    current_revenue: str = ""

    build_strategy: Optional[str] = None
    build_strategy_other: str = ""

    help_needed: Optional[List[str]] = Field(
        default=None,
        description="None until the question is answered; an empty list is an answer",
    )
    help_needed_other: str = ""

    investment_readiness: Optional[str] = None

    contact: ContactInfo = Field(default_factory=ContactInfo)


class ScoreResult(BaseModel):
    """Derived ``{score, segment}`` pair.  Never persisted on its own."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(..., ge=0, le=100, description="Rounded readiness score")
    segment: Segment
    breakdown: Dict[str, float] = Field(
        default_factory=dict,
        description="Points earned per scoring component",
    )


class WizardSnapshot(BaseModel):
    """Full autosave document written on every mutation."""

    session_id: str
    answers: AnswerRecord = Field(default_factory=AnswerRecord)
    current_step: int = Field(default=1, ge=1, le=12)
    stage: WizardStage = WizardStage.QUESTION
    updated_at: Optional[datetime] = None


# ── Request / Response schemas ───────────────────────────────────────────

class StartSessionRequest(BaseModel):
    """Tracking data the client collects at mount (URL params + cookies)."""

    session_id: Optional[str] = Field(
        default=None,
        description="Resume this session when it exists; otherwise a new one is created",
    )
    form_location: Literal["top", "bottom"] = "top"
    landing_page: str = "startup-validation-landing"
    referrer: Optional[str] = None
    gclid: Optional[str] = None
    keyword: Optional[str] = None
    match_type: Optional[str] = None
    utm_source: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_medium: Optional[str] = None
    city: Optional[str] = None


AnswerValue = Union[str, bool, List[str], Dict[str, Any], None]


class SetAnswerRequest(BaseModel):
    field: str = Field(..., description="AnswerRecord field of the active step")
    value: AnswerValue = None
    auto_advance: bool = Field(
        default=False,
        description="Advance right away when a single-choice answer makes the step valid",
    )


class ToggleOptionRequest(BaseModel):
    field: Literal["existing_materials", "help_needed"]
    option_id: str


class WizardStateResponse(BaseModel):
    session_id: str
    current_step: int
    total_steps: int
    stage: WizardStage
    step_field: Optional[str] = None
    answers: AnswerRecord
    options: List[CatalogOption] = Field(
        default_factory=list,
        description="Options for the active step, worded for the chosen startup type",
    )
    score: Optional[ScoreResult] = None


class CatalogResponse(BaseModel):
    startup_type: str
    catalogs: Dict[str, List[CatalogOption]]


class SubmitResponse(BaseModel):
    success: bool
    session_id: str
    score: int
    segment: Segment
    delivery_path: Literal["primary", "fallback"]
    conversion_tracked: bool
    redirect_url: str
