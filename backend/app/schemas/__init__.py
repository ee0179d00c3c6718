# Schemas package
from .assessment_schema import (
    AnswerRecord,
    CatalogOption,
    ContactInfo,
    ScoreResult,
    Segment,
    WizardSnapshot,
    WizardStage,
)
from .lead_schema import LeadResponse, QuickIntakeRequest

__all__ = [
    "AnswerRecord",
    "CatalogOption",
    "ContactInfo",
    "ScoreResult",
    "Segment",
    "WizardSnapshot",
    "WizardStage",
    "LeadResponse",
    "QuickIntakeRequest",
]
