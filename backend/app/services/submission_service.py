"""Assessment submission with graceful degradation.

Delivery order
--------------
1. Primary: Supabase ``submit-assessment`` function, raced against a
   short timer (1.5s by default).
2. Fallback: direct webhook POST of the same payload with
   ``fallback: true``.
3. Both failed: logged and reported as undelivered.  The caller keeps the
   record in durable storage so the user can retry.

The score is always computed before this module is called.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from ..schemas.assessment_schema import AnswerRecord, ScoreResult
from .catalog import option_label
from .http_client import post_json
from .integration_config import (
    get_assessment_webhook_url,
    get_fallback_submission_timeout,
    get_primary_submission_timeout,
    get_submit_assessment_url,
    get_supabase_anon_key,
)
from .race import race
from .request_context import RequestContext
from .timing import async_timer

logger = logging.getLogger(__name__)

SUBMISSION_EVENT = "investment_readiness_assessment"


@dataclass(frozen=True)
class SubmissionOutcome:
    delivered: bool
    path: Optional[Literal["primary", "fallback"]] = None
    error: Optional[str] = None


def _labels(answers: AnswerRecord) -> dict[str, Any]:
    t = answers.startup_type
    return {
        "startup_type": option_label(t, "startup_type", t),
        "project_stage": option_label(t, "project_stage", answers.project_stage),
        "user_persona": option_label(t, "user_persona", answers.user_persona),
        "differentiation": option_label(t, "differentiation", answers.differentiation),
        "existing_materials": [
            label for label in (option_label(t, "existing_materials", m) for m in answers.existing_materials) if label
        ],
        "business_model": option_label(t, "business_model", answers.business_model),
        "revenue_goal": option_label(t, "revenue_goal", answers.revenue_goal),
        "build_strategy": option_label(t, "build_strategy", answers.build_strategy),
        "help_needed": [
            label for label in (option_label(t, "help_needed", h) for h in answers.help_needed or []) if label
        ],
        "investment_readiness": option_label(t, "investment_readiness", answers.investment_readiness),
    }


def build_submission_payload(
    answers: AnswerRecord,
    result: ScoreResult,
    context: RequestContext,
) -> dict[str, Any]:
    """Assemble answers + score + session metadata into one payload."""
    contact = answers.contact
    answer_fields = answers.model_dump(exclude={"contact"})

    return {
        "event": SUBMISSION_EVENT,
        "session_id": context.session_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "referrer": context.referrer,
        "full_name": contact.full_name,
        "first_name": contact.first_name,
        "last_name": contact.last_name,
        "email": contact.email,
        "phone": contact.phone,
        "consent": contact.consent,
        "assessment": {
            **answer_fields,
            "labels": _labels(answers),
            "investment_readiness_score": result.score,
            "segment": result.segment.value,
            "score_breakdown": result.breakdown,
        },
        "score": result.score,
        "segment": result.segment.value,
        **context.tracking_fields(),
    }


async def deliver_primary(payload: dict[str, Any]) -> None:
    anon_key = get_supabase_anon_key()
    headers = {"Authorization": f"Bearer {anon_key}", "apikey": anon_key} if anon_key else {}
    await post_json(get_submit_assessment_url(), payload, service="submission", headers=headers)


async def deliver_fallback(payload: dict[str, Any]) -> None:
    await post_json(get_assessment_webhook_url(), {**payload, "fallback": True}, service="webhook")


async def submit_assessment(payload: dict[str, Any]) -> SubmissionOutcome:
    """Try primary, then fallback; never raises."""
    async with async_timer("submit_assessment", "DELIVERY"):
        primary = await race(
            deliver_primary(payload),
            get_primary_submission_timeout(),
            label="submit_assessment.primary",
        )
        if primary.completed:
            return SubmissionOutcome(delivered=True, path="primary")

        logger.warning(
            "Primary assessment delivery %s for session %s; using webhook fallback",
            primary.status,
            payload.get("session_id"),
        )
        fallback = await race(
            deliver_fallback(payload),
            get_fallback_submission_timeout(),
            label="submit_assessment.fallback",
        )
        if fallback.completed:
            return SubmissionOutcome(delivered=True, path="fallback")

    error = str(fallback.error) if fallback.error else fallback.status
    logger.error(
        "Assessment delivery failed for session %s (primary=%s, fallback=%s)",
        payload.get("session_id"),
        primary.status,
        error,
    )
    return SubmissionOutcome(delivered=False, error=error)
