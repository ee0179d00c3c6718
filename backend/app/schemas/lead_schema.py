"""Quick intake (three-step lead form) request/response schemas."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, StrictBool, field_validator

from ..constants import MIN_IDEA_LENGTH, MIN_NAME_LENGTH
from ..services.form_validation import format_phone_number, validate_phone_number

PROJECT_TYPES: list[dict[str, str]] = [
    {"id": "website", "name": "Website"},
    {"id": "mobile_app", "name": "Mobile App"},
    {"id": "saas", "name": "SaaS Product"},
    {"id": "physical_product", "name": "Physical Product"},
    {"id": "other", "name": "Other"},
]

BUDGET_RANGES: list[dict[str, str]] = [
    {"id": "<10k", "name": "<$10k"},
    {"id": "10k-25k", "name": "$10k – $25k"},
    {"id": "25k-50k", "name": "$25k – $50k"},
    {"id": "50k-100k", "name": "$50k – $100k"},
    {"id": "100k-250k", "name": "$100k – $250k"},
    {"id": "250k-500k", "name": "$250k – $500k"},
    {"id": "500k+", "name": "$500k+"},
]

_PROJECT_TYPE_IDS = frozenset(p["id"] for p in PROJECT_TYPES)
_BUDGET_RANGE_IDS = frozenset(b["id"] for b in BUDGET_RANGES)


class QuickIntakeRequest(BaseModel):
    """Contact details, project type/budget and an NDA-protected description."""

    full_name: str = Field(..., min_length=MIN_NAME_LENGTH, max_length=255)
    email: EmailStr = Field(..., description="Contact email address")
    phone: str
    consent: StrictBool
    project_type: str
    budget_range: str
    project_description: str = Field(..., max_length=5000)
    nda_agreement: StrictBool
    session_id: Optional[str] = None
    form_location: Literal["top", "bottom"] = "top"

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        if not validate_phone_number(v):
            raise ValueError("Please enter a valid US phone number")
        return format_phone_number(v)

    @field_validator("consent")
    @classmethod
    def check_consent(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("You must agree to the terms")
        return v

    @field_validator("nda_agreement")
    @classmethod
    def check_nda(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("You must agree to the NDA protection")
        return v

    @field_validator("project_type")
    @classmethod
    def check_project_type(cls, v: str) -> str:
        if v not in _PROJECT_TYPE_IDS:
            raise ValueError("Please select a project type")
        return v

    @field_validator("budget_range")
    @classmethod
    def check_budget_range(cls, v: str) -> str:
        if v not in _BUDGET_RANGE_IDS:
            raise ValueError("Please select a budget range")
        return v

    @field_validator("project_description")
    @classmethod
    def description_long_enough(cls, v: str) -> str:
        stripped = v.strip()
        if len(stripped) < MIN_IDEA_LENGTH:
            raise ValueError(f"Please provide at least {MIN_IDEA_LENGTH} characters")
        return stripped


class LeadResponse(BaseModel):
    success: bool
    session_id: str
    lead_id: Optional[str] = None
    message: str
