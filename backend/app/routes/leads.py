"""Quick intake route — the short three-step lead form.

Endpoint:
  POST /leads/quick-intake — Validate and forward a lead to lead capture
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Request, status

from ..schemas.lead_schema import LeadResponse, QuickIntakeRequest
from ..services.conversion_tracker import track_conversion
from ..services.lead_client import capture_lead_best_effort
from ..services.request_context import RequestContext, client_ip

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/leads",
    tags=["Leads"],
)

QUICK_INTAKE_FINAL_STEP = 3


@router.post(
    "/quick-intake",
    response_model=LeadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit the Quick Intake Form",
)
async def quick_intake(
    payload: QuickIntakeRequest,
    request: Request,
    background_tasks: BackgroundTasks,
) -> LeadResponse:
    """Lead capture failures are logged; the visitor still gets a success response."""
    context = RequestContext.create(
        payload.session_id,
        user_agent=request.headers.get("user-agent"),
        ip=client_ip(request.headers),
        form_location=payload.form_location,
        referrer=request.headers.get("referer"),
    )

    lead_payload = {
        **payload.model_dump(exclude={"session_id", "form_location"}),
        "app_idea": payload.project_description,
        "step": QUICK_INTAKE_FINAL_STEP,
        **context.tracking_fields(),
    }
    lead_id = await capture_lead_best_effort(lead_payload)
    background_tasks.add_task(track_conversion, context, "quick_intake_submitted")

    return LeadResponse(
        success=True,
        session_id=context.session_id,
        lead_id=lead_id,
        message="Thanks! We'll reach out to schedule a call.",
    )
