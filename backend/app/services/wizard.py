"""Investment Readiness Assessment Wizard.

A strictly linear 12-step state machine with a virtual score-reveal stage
between steps 11 and 12 and a terminal ``submitted`` stage.

Rules
-----
- Only the active step's fields are writable
- Every mutation writes a full snapshot to the store (autosave)
- ``advance`` is gated by the active step's validation rules
- ``previous`` moves back exactly one position; step 1 stays put
- Changing the startup type clears every type-dependent answer
- Submitted records are read-only
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError

from ..constants import (
    FREETEXT_FIELDS,
    MIN_IDEA_LENGTH,
    MIN_NAME_LENGTH,
    MULTI_SELECT_FIELDS,
    STARTUP_TYPE_IDS,
    TYPED_CATALOGS,
)
from ..schemas.assessment_schema import (
    AnswerRecord,
    CatalogOption,
    ContactInfo,
    ScoreResult,
    WizardSnapshot,
    WizardStage,
)
from .catalog import catalog_for, catalog_ids, is_valid_option
from .form_validation import (
    format_phone_number,
    normalize_email,
    normalize_phone_number,
    validate_email,
    validate_phone_number,
)
from .request_context import RequestContext
from .scoring_engine import compute_score
from .wizard_store import WizardStore

logger = logging.getLogger(__name__)

TOTAL_STEPS = 12
SCORE_REVEAL_AFTER_STEP = 11

STEP_FIELDS: dict[int, str] = {
    1: "startup_type",
    2: "app_idea",
    3: "project_stage",
    4: "user_persona",
    5: "differentiation",
    6: "existing_materials",
    7: "business_model",
    8: "revenue_goal",
    9: "build_strategy",
    10: "help_needed",
    11: "investment_readiness",
    12: "contact",
}

SINGLE_CHOICE_FIELDS: frozenset[str] = frozenset({
    "startup_type",
    "project_stage",
    "user_persona",
    "differentiation",
    "business_model",
    "revenue_goal",
    "build_strategy",
    "investment_readiness",
})

# Freetext companion -> (parent field, unlocking option id)
_COMPANIONS: dict[str, tuple[str, str]] = {
    companion: (parent, unlock_id) for parent, (unlock_id, companion) in FREETEXT_FIELDS.items()
}

# Multi-select value of a question nobody has answered yet.
_UNANSWERED: dict[str, Any] = {"existing_materials": [], "help_needed": None}

_REQUIRED_MESSAGES: dict[str, str] = {
    "startup_type": "Please select your startup type",
    "project_stage": "Please select your project stage",
    "user_persona": "Please select your user persona understanding",
    "differentiation": "Please select what makes your idea stand out",
    "business_model": "Please select your business model",
    "revenue_goal": "Please select your revenue goal",
    "build_strategy": "Please select your build strategy",
    "investment_readiness": "Please select your investment readiness level",
}


class WizardError(Exception):
    """Base class for wizard failures."""


class StepValidationError(WizardError):
    """The active step (or a submitted value) failed validation."""

    def __init__(self, step: int, errors: dict[str, str]):
        self.step = step
        self.errors = errors
        super().__init__(f"Step {step} is invalid: {errors}")


class WizardStateError(WizardError):
    """The requested transition or mutation is not allowed in the current state."""


class SessionNotFound(WizardError):
    pass


# ---------------------------------------------------------------------------
# Per-step validation
# ---------------------------------------------------------------------------

def _validate_contact(contact: ContactInfo) -> dict[str, str]:
    errors: dict[str, str] = {}
    if len(contact.first_name.strip()) < MIN_NAME_LENGTH:
        errors["first_name"] = f"First name must be at least {MIN_NAME_LENGTH} characters"
    if len(contact.last_name.strip()) < MIN_NAME_LENGTH:
        errors["last_name"] = f"Last name must be at least {MIN_NAME_LENGTH} characters"
    if not validate_email(contact.email.strip()):
        errors["email"] = "Please enter a valid email address"
    if not contact.phone:
        errors["phone"] = "Phone number is required"
    elif not validate_phone_number(contact.phone):
        errors["phone"] = "Please enter a valid US phone number"
    if contact.consent is not True:
        errors["consent"] = "You must agree to the terms"
    return errors


def validate_step(step: int, answers: AnswerRecord) -> dict[str, str]:
    """Return ``{field: message}`` for every rule *answers* breaks at *step*."""
    field = STEP_FIELDS.get(step)
    if field is None:
        raise ValueError(f"Unknown step {step}")

    if field == "startup_type":
        if answers.startup_type not in STARTUP_TYPE_IDS:
            return {field: _REQUIRED_MESSAGES[field]}
        return {}

    if field == "app_idea":
        if len(answers.app_idea.strip()) < MIN_IDEA_LENGTH:
            return {
                field: f"Please provide at least {MIN_IDEA_LENGTH} characters describing your app idea"
            }
        return {}

    if field == "existing_materials":
        # No minimum: "nothing completed yet" is a valid answer.
        return {}

    if field == "help_needed":
        allowed = catalog_ids(answers.startup_type, field)
        if not any(option_id in allowed for option_id in answers.help_needed or []):
            return {field: "Please select at least one area where you need help"}
        return {}

    if field == "contact":
        return _validate_contact(answers.contact)

    if not is_valid_option(answers.startup_type, field, getattr(answers, field)):
        return {field: _REQUIRED_MESSAGES[field]}
    return {}


def validate_all_steps(answers: AnswerRecord) -> dict[int, dict[str, str]]:
    results = {step: validate_step(step, answers) for step in STEP_FIELDS}
    return {step: errors for step, errors in results.items() if errors}


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

class AssessmentWizard:
    """One assessment session, bound to its autosave slot."""

    def __init__(self, store: WizardStore, snapshot: WizardSnapshot, context: RequestContext):
        self.store = store
        self._snapshot = snapshot
        self.context = context

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def start(cls, store: WizardStore, context: RequestContext) -> "AssessmentWizard":
        """Resume the context's session when it exists, otherwise start empty."""
        existing = store.load(context.session_id)
        if existing is not None:
            snapshot, saved_context = existing
            logger.info("Resuming session %s at step %s", context.session_id, snapshot.current_step)
            return cls(store, snapshot, saved_context)

        wizard = cls(store, WizardSnapshot(session_id=context.session_id), context)
        wizard._persist()
        logger.info("Started assessment session %s", context.session_id)
        return wizard

    @classmethod
    def resume(cls, store: WizardStore, session_id: str) -> "AssessmentWizard":
        existing = store.load(session_id)
        if existing is None:
            raise SessionNotFound(f"No saved assessment for session {session_id}")
        snapshot, context = existing
        return cls(store, snapshot, context)

    # ── Read-only views ──────────────────────────────────────────────────

    @property
    def session_id(self) -> str:
        return self._snapshot.session_id

    @property
    def answers(self) -> AnswerRecord:
        return self._snapshot.answers

    @property
    def current_step(self) -> int:
        return self._snapshot.current_step

    @property
    def stage(self) -> WizardStage:
        return self._snapshot.stage

    @property
    def step_field(self) -> Optional[str]:
        if self.stage != WizardStage.QUESTION:
            return None
        return STEP_FIELDS[self.current_step]

    def snapshot(self) -> WizardSnapshot:
        return self._snapshot.model_copy(deep=True)

    def options_for_current_step(self) -> list[CatalogOption]:
        field = self.step_field
        if field is None or field in ("app_idea", "contact"):
            return []
        return catalog_for(self.answers.startup_type, field)

    def writable_fields(self) -> frozenset[str]:
        field = self.step_field
        if field is None:
            return frozenset()
        companions = {c for c, (parent, _) in _COMPANIONS.items() if parent == field}
        return frozenset({field, *companions})

    # ── Internals ────────────────────────────────────────────────────────

    def _persist(self) -> None:
        self.store.save(self._snapshot, self.context)

    def _ensure_open(self) -> None:
        if self.stage == WizardStage.SUBMITTED:
            raise WizardStateError("Assessment already submitted; answers are read-only")

    def _move(self, step: int, stage: WizardStage) -> None:
        self._snapshot = self._snapshot.model_copy(update={"current_step": step, "stage": stage})

    def _replace_answers(self, **changes: Any) -> None:
        answers = self.answers.model_copy(update=changes)
        self._snapshot = self._snapshot.model_copy(update={"answers": answers})

    def _coerce(self, field: str, value: Any) -> dict[str, Any]:
        """Validate one submitted value and return the record changes it implies."""
        step = self.current_step
        startup_type = self.answers.startup_type

        if field == "startup_type":
            if value not in STARTUP_TYPE_IDS:
                raise StepValidationError(step, {field: _REQUIRED_MESSAGES[field]})
            changes: dict[str, Any] = {field: value}
            if startup_type is not None and value != startup_type:
                changes.update(_cleared_type_dependent_fields())
                logger.info(
                    "Session %s switched startup type %s -> %s; cleared dependent answers",
                    self.session_id, startup_type, value,
                )
            return changes

        if field == "app_idea":
            if value is not None and not isinstance(value, str):
                raise StepValidationError(step, {field: "App idea must be text"})
            return {field: value or ""}

        if field in _COMPANIONS:
            parent, unlock_id = _COMPANIONS[field]
            parent_value = getattr(self.answers, parent)
            if parent in MULTI_SELECT_FIELDS:
                unlocked = unlock_id in (parent_value or [])
            else:
                unlocked = parent_value == unlock_id
            if value and not unlocked:
                raise StepValidationError(step, {field: "Select the matching option before adding details"})
            if value is not None and not isinstance(value, str):
                raise StepValidationError(step, {field: "Details must be text"})
            return {field: value or ""}

        if field in MULTI_SELECT_FIELDS:
            if value is None:
                return {field: _UNANSWERED[field]}
            if not isinstance(value, list):
                raise StepValidationError(step, {field: "Expected a list of option ids"})
            allowed = catalog_ids(startup_type, field)
            unknown = [v for v in value if v not in allowed]
            if unknown:
                raise StepValidationError(step, {field: f"Unknown option(s): {', '.join(map(str, unknown))}"})
            selected = list(dict.fromkeys(value))
            changes = {field: selected}
            unlock_id, companion = FREETEXT_FIELDS.get(field, (None, None))
            if companion and unlock_id not in selected:
                changes[companion] = ""
            return changes

        if field in SINGLE_CHOICE_FIELDS:
            if value is None:
                changes = {field: None}
            elif is_valid_option(startup_type, field, value):
                changes = {field: value}
            else:
                raise StepValidationError(step, {field: _REQUIRED_MESSAGES[field]})
            unlock_id, companion = FREETEXT_FIELDS.get(field, (None, None))
            if companion and value != unlock_id:
                changes[companion] = ""
            return changes

        if field == "contact":
            if not isinstance(value, dict):
                raise StepValidationError(step, {field: "Expected contact details"})
            merged = {**self.answers.contact.model_dump(), **value}
            if merged.get("phone"):
                merged["phone"] = format_phone_number(str(merged["phone"]))
            try:
                contact = ContactInfo(**merged)
            except ValidationError as exc:
                errors = {
                    str(error["loc"][0]) if error["loc"] else field: error["msg"] for error in exc.errors()
                }
                raise StepValidationError(step, errors) from exc
            return {field: contact}

        raise WizardStateError(f"Unknown answer field '{field}'")

    # ── Mutations ────────────────────────────────────────────────────────

    def set_answer(self, field: str, value: Any, auto_advance: bool = False) -> None:
        """Write one answer of the active step and autosave the full record."""
        self._ensure_open()
        if field not in self.writable_fields():
            raise WizardStateError(
                f"Field '{field}' cannot be changed at step {self.current_step} ({self.stage.value})"
            )

        self._replace_answers(**self._coerce(field, value))
        self._persist()

        if auto_advance and field in SINGLE_CHOICE_FIELDS and not validate_step(self.current_step, self.answers):
            self.advance()

    def toggle_option(self, field: str, option_id: str) -> None:
        """Add *option_id* to a multi-select answer, or remove it when present."""
        if field not in MULTI_SELECT_FIELDS:
            raise WizardStateError(f"Field '{field}' is not a multi-select question")
        current = list(getattr(self.answers, field) or [])
        if option_id in current:
            current.remove(option_id)
        else:
            current.append(option_id)
        self.set_answer(field, current)

    # ── Transitions ──────────────────────────────────────────────────────

    def advance(self) -> int:
        """Move forward one position; returns the step that was completed."""
        self._ensure_open()
        step = self.current_step

        if self.stage == WizardStage.SCORE_REVEAL:
            self._move(TOTAL_STEPS, WizardStage.QUESTION)
            self._persist()
            return step

        errors = validate_step(step, self.answers)
        if errors:
            raise StepValidationError(step, errors)

        if step == TOTAL_STEPS:
            raise WizardStateError("The final step is completed by submitting the assessment")
        if step == SCORE_REVEAL_AFTER_STEP:
            self._move(step, WizardStage.SCORE_REVEAL)
        else:
            self._move(step + 1, WizardStage.QUESTION)

        self._persist()
        return step

    def previous(self) -> None:
        self._ensure_open()
        if self.stage == WizardStage.SCORE_REVEAL:
            self._move(SCORE_REVEAL_AFTER_STEP, WizardStage.QUESTION)
        elif self.current_step == TOTAL_STEPS:
            self._move(SCORE_REVEAL_AFTER_STEP, WizardStage.SCORE_REVEAL)
        else:
            self._move(max(1, self.current_step - 1), WizardStage.QUESTION)
        self._persist()

    def reveal_score(self) -> ScoreResult:
        """Score shown on the reveal screen and recomputed identically at submit."""
        revealed = self.stage in (WizardStage.SCORE_REVEAL, WizardStage.SUBMITTED) or (
            self.current_step == TOTAL_STEPS
        )
        if not revealed:
            raise WizardStateError("The score is revealed after step 11")
        return compute_score(self.answers)

    def prepare_submission(self) -> tuple[AnswerRecord, ScoreResult]:
        """Validate everything and return the finalized record with its score.

        Does not change state: the caller marks the session submitted once
        delivery succeeded.
        """
        self._ensure_open()
        if self.stage != WizardStage.QUESTION or self.current_step != TOTAL_STEPS:
            raise WizardStateError("Only the final step can be submitted")

        failing = validate_all_steps(self.answers)
        if failing:
            step = min(failing)
            raise StepValidationError(step, failing[step])

        contact = self.answers.contact.model_copy(update={
            "first_name": self.answers.contact.first_name.strip(),
            "last_name": self.answers.contact.last_name.strip(),
            "email": normalize_email(self.answers.contact.email),
            "phone": normalize_phone_number(self.answers.contact.phone),
        })
        finalized = self.answers.model_copy(update={"contact": contact})
        return finalized, compute_score(finalized)

    def mark_submitted(self, finalized: AnswerRecord) -> None:
        self._ensure_open()
        self._snapshot = self._snapshot.model_copy(
            update={"answers": finalized, "stage": WizardStage.SUBMITTED}
        )
        self._persist()
        logger.info("Session %s submitted", self.session_id)


def _cleared_type_dependent_fields() -> dict[str, Any]:
    changes: dict[str, Any] = {}
    for field in TYPED_CATALOGS:
        changes[field] = _UNANSWERED.get(field)
        if field in FREETEXT_FIELDS:
            changes[FREETEXT_FIELDS[field][1]] = ""
    return changes
