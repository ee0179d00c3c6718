"""Investment Readiness Assessment routes.

Endpoints:
  GET   /assessment/catalogs/{startup_type}          — All option catalogs for a startup type
  POST  /assessment/sessions                         — Start (or resume) a wizard session
  GET   /assessment/sessions/{session_id}            — Current wizard state
  PATCH /assessment/sessions/{session_id}/answers    — Set one answer of the active step
  POST  /assessment/sessions/{session_id}/toggle     — Toggle one multi-select option
  POST  /assessment/sessions/{session_id}/advance    — Validate the active step and move on
  POST  /assessment/sessions/{session_id}/previous   — Go back one step
  GET   /assessment/sessions/{session_id}/score      — Score reveal
  POST  /assessment/sessions/{session_id}/submit     — Final submission
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request, status
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..constants import STARTUP_TYPE_IDS
from ..database import get_db
from ..schemas.assessment_schema import (
    CatalogResponse,
    SetAnswerRequest,
    StartSessionRequest,
    SubmitResponse,
    ToggleOptionRequest,
    WizardStage,
    WizardStateResponse,
)
from ..services.catalog import all_catalogs
from ..services.conversion_tracker import track_conversion
from ..services.integration_config import get_thank_you_url
from ..services.lead_client import build_lead_payload, capture_lead_best_effort
from ..services.request_context import RequestContext, client_ip
from ..services.submission_service import build_submission_payload, submit_assessment
from ..services.wizard import (
    TOTAL_STEPS,
    AssessmentWizard,
    SessionNotFound,
    StepValidationError,
    WizardError,
    WizardStateError,
)
from ..services.wizard_store import WizardStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/assessment",
    tags=["Assessment"],
)

SUBMISSION_FAILED_MESSAGE = (
    "We couldn't submit your assessment right now. Your answers are saved, please try again."
)


# ── Helpers ──────────────────────────────────────────────────────────────

def _to_http(exc: WizardError) -> HTTPException:
    """Translate wizard failures into HTTP errors."""
    if isinstance(exc, StepValidationError):
        return HTTPException(
            status_code=422,
            detail={"step": exc.step, "errors": exc.errors},
        )
    if isinstance(exc, SessionNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


def _load_wizard(session_id: str, db: Session) -> AssessmentWizard:
    try:
        return AssessmentWizard.resume(WizardStore(db), session_id)
    except SessionNotFound as exc:
        raise _to_http(exc) from exc


def _state_response(wizard: AssessmentWizard) -> WizardStateResponse:
    score = None
    if wizard.stage != WizardStage.QUESTION or wizard.current_step == TOTAL_STEPS:
        score = wizard.reveal_score()

    return WizardStateResponse(
        session_id=wizard.session_id,
        current_step=wizard.current_step,
        total_steps=TOTAL_STEPS,
        stage=wizard.stage,
        step_field=wizard.step_field,
        answers=wizard.answers,
        options=wizard.options_for_current_step(),
        score=score,
    )


async def _capture_lead_task(payload: dict[str, Any], bind: Engine, session_id: str) -> None:
    """Background lead capture; records the returned lead id when there is one."""
    lead_id = await capture_lead_best_effort(payload)
    if not lead_id:
        return
    db = sessionmaker(bind=bind)()
    try:
        WizardStore(db).record_lead_id(session_id, lead_id)
    finally:
        db.close()


async def _track_step_conversion(context: RequestContext) -> None:
    await track_conversion(context, event="assessment_started")


# ── Routes ───────────────────────────────────────────────────────────────

@router.get(
    "/catalogs/{startup_type}",
    response_model=CatalogResponse,
    summary="Option Catalogs",
    response_description="Every option list, worded for the startup type",
)
async def get_catalogs(startup_type: str) -> CatalogResponse:
    if startup_type not in STARTUP_TYPE_IDS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown startup type '{startup_type}'",
        )
    return CatalogResponse(startup_type=startup_type, catalogs=all_catalogs(startup_type))


@router.post(
    "/sessions",
    response_model=WizardStateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start or Resume an Assessment",
)
async def start_session(
    payload: StartSessionRequest,
    request: Request,
    db: Session = Depends(get_db),
) -> WizardStateResponse:
    """Create the request context once and bind it to a new (or saved) session."""
    tracking = payload.model_dump(exclude={"session_id"})
    tracking["referrer"] = payload.referrer or request.headers.get("referer")
    context = RequestContext.create(
        payload.session_id,
        user_agent=request.headers.get("user-agent"),
        ip=client_ip(request.headers),
        **tracking,
    )
    wizard = AssessmentWizard.start(WizardStore(db), context)
    return _state_response(wizard)


@router.get(
    "/sessions/{session_id}",
    response_model=WizardStateResponse,
    summary="Resume an Assessment",
)
async def get_session(session_id: str, db: Session = Depends(get_db)) -> WizardStateResponse:
    return _state_response(_load_wizard(session_id, db))


@router.patch(
    "/sessions/{session_id}/answers",
    response_model=WizardStateResponse,
    summary="Set an Answer",
)
async def set_answer(
    session_id: str,
    payload: SetAnswerRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> WizardStateResponse:
    wizard = _load_wizard(session_id, db)
    step_before = wizard.current_step
    try:
        wizard.set_answer(payload.field, payload.value, auto_advance=payload.auto_advance)
    except WizardError as exc:
        raise _to_http(exc) from exc

    if step_before == 1 and wizard.current_step == 2:
        _schedule_step_one_side_effects(wizard, background_tasks, db)
    return _state_response(wizard)


@router.post(
    "/sessions/{session_id}/toggle",
    response_model=WizardStateResponse,
    summary="Toggle a Multi-select Option",
)
async def toggle_option(
    session_id: str,
    payload: ToggleOptionRequest,
    db: Session = Depends(get_db),
) -> WizardStateResponse:
    wizard = _load_wizard(session_id, db)
    try:
        wizard.toggle_option(payload.field, payload.option_id)
    except WizardError as exc:
        raise _to_http(exc) from exc
    return _state_response(wizard)


def _schedule_step_one_side_effects(
    wizard: AssessmentWizard,
    background_tasks: BackgroundTasks,
    db: Session,
) -> None:
    """Lead capture + conversion ping after step 1; neither blocks the wizard."""
    lead_payload = build_lead_payload(wizard.answers, wizard.context, step=1)
    background_tasks.add_task(_capture_lead_task, lead_payload, db.get_bind(), wizard.session_id)
    background_tasks.add_task(_track_step_conversion, wizard.context)


@router.post(
    "/sessions/{session_id}/advance",
    response_model=WizardStateResponse,
    summary="Advance to the Next Step",
    responses={422: {"description": "Active step failed validation"}},
)
async def advance(
    session_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> WizardStateResponse:
    wizard = _load_wizard(session_id, db)
    try:
        completed_step = wizard.advance()
    except WizardError as exc:
        raise _to_http(exc) from exc

    if completed_step == 1:
        _schedule_step_one_side_effects(wizard, background_tasks, db)
    return _state_response(wizard)


@router.post(
    "/sessions/{session_id}/previous",
    response_model=WizardStateResponse,
    summary="Go Back One Step",
)
async def previous(session_id: str, db: Session = Depends(get_db)) -> WizardStateResponse:
    wizard = _load_wizard(session_id, db)
    try:
        wizard.previous()
    except WizardError as exc:
        raise _to_http(exc) from exc
    return _state_response(wizard)


@router.get(
    "/sessions/{session_id}/score",
    summary="Score Reveal",
    response_description="Readiness score, segment and per-component breakdown",
)
async def get_score(session_id: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    wizard = _load_wizard(session_id, db)
    try:
        result = wizard.reveal_score()
    except WizardStateError as exc:
        raise _to_http(exc) from exc
    return {"session_id": wizard.session_id, **result.model_dump(mode="json")}


@router.post(
    "/sessions/{session_id}/submit",
    response_model=SubmitResponse,
    summary="Submit the Assessment",
    responses={
        422: {"description": "A step failed validation"},
        502: {"description": "Primary and fallback delivery both failed; answers kept for retry"},
    },
)
async def submit(
    session_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> SubmitResponse:
    """Score, deliver (primary → fallback), then track the conversion and redirect."""
    wizard = _load_wizard(session_id, db)
    try:
        finalized, result = wizard.prepare_submission()
    except WizardError as exc:
        raise _to_http(exc) from exc

    payload = build_submission_payload(finalized, result, wizard.context)
    lead_id: Optional[str] = wizard.store.lead_id(session_id)
    if lead_id:
        payload["lead_id"] = lead_id

    outcome = await submit_assessment(payload)
    if not outcome.delivered:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=SUBMISSION_FAILED_MESSAGE,
        )

    wizard.mark_submitted(finalized)

    lead_payload = build_lead_payload(finalized, wizard.context, step=TOTAL_STEPS)
    background_tasks.add_task(_capture_lead_task, lead_payload, db.get_bind(), session_id)

    conversion_tracked = await track_conversion(wizard.context, event="assessment_submitted")

    return SubmitResponse(
        success=True,
        session_id=session_id,
        score=result.score,
        segment=result.segment,
        delivery_path=outcome.path,
        conversion_tracked=conversion_tracked,
        redirect_url=get_thank_you_url(),
    )
