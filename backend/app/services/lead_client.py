"""Lead capture collaborator.

Posts whatever contact data exists so far (plus a step marker and the
tracking context) to the lead-capture Edge Function.  The endpoint is
expected to upsert by session id, so repeated calls per session are fine.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..schemas.assessment_schema import AnswerRecord
from .http_client import post_json
from .integration_config import (
    IntegrationNotConfigured,
    get_lead_capture_timeout,
    get_submit_lead_url,
    get_supabase_anon_key,
)
from .race import race
from .request_context import RequestContext

logger = logging.getLogger(__name__)


def build_lead_payload(answers: AnswerRecord, context: RequestContext, step: int) -> dict[str, Any]:
    contact = answers.contact
    return {
        "full_name": contact.full_name,
        "email": contact.email,
        "phone": contact.phone,
        "consent": contact.consent,
        "startup_type": answers.startup_type or "",
        "app_idea": answers.app_idea,
        "step": step,
        **context.tracking_fields(),
    }


def _auth_headers() -> dict[str, str]:
    anon_key = get_supabase_anon_key()
    return {"Authorization": f"Bearer {anon_key}", "apikey": anon_key} if anon_key else {}


async def capture_lead(payload: dict[str, Any]) -> Optional[str]:
    """Send a lead payload and return the lead id echoed by the endpoint."""
    response = await post_json(
        get_submit_lead_url(),
        payload,
        service="lead_capture",
        headers=_auth_headers(),
    )
    body = response.json() if response.content else {}
    return body.get("lead_id") or body.get("session_id")


async def capture_lead_best_effort(payload: dict[str, Any]) -> Optional[str]:
    """Fire-and-forget wrapper: logs failures and never raises."""
    try:
        get_submit_lead_url()
    except IntegrationNotConfigured as exc:
        logger.info("Lead capture skipped: %s", exc)
        return None

    result = await race(capture_lead(payload), get_lead_capture_timeout(), label="lead_capture")
    if not result.completed:
        logger.error(
            "Lead capture failed for session %s at step %s (%s)",
            payload.get("session_id"),
            payload.get("step"),
            result.status,
        )
        return None

    logger.info("Lead captured for step %s: %s", payload.get("step"), result.value)
    return result.value
