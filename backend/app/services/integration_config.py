"""External integration settings — all read from environment variables.

Every URL is optional.  An unset endpoint is reported with
``IntegrationNotConfigured`` so callers can treat it like any other
delivery failure instead of crashing the wizard.
"""

from __future__ import annotations

import os


class IntegrationNotConfigured(RuntimeError):
    """Raised when an integration endpoint is missing from the environment."""


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_url(key: str) -> str:
    url = os.getenv(key, "").strip()
    if not url:
        raise IntegrationNotConfigured(f"{key} environment variable not set")
    return url


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

def get_submit_lead_url() -> str:
    """Supabase Edge Function that upserts partial leads."""
    return _env_url("SUBMIT_LEAD_URL")


def get_submit_assessment_url() -> str:
    """Primary delivery path for finalized assessments."""
    return _env_url("SUBMIT_ASSESSMENT_URL")


def get_assessment_webhook_url() -> str:
    """Direct webhook used when the primary delivery path fails."""
    return _env_url("ASSESSMENT_WEBHOOK_URL")


def get_conversion_tracking_url() -> str:
    return _env_url("CONVERSION_TRACKING_URL")


def get_supabase_anon_key() -> str:
    return os.getenv("SUPABASE_ANON_KEY", "").strip()


def get_conversion_send_to() -> str:
    return os.getenv("CONVERSION_SEND_TO", "").strip()


def get_thank_you_url() -> str:
    return os.getenv("THANK_YOU_URL", "/thank-you").strip()


# ---------------------------------------------------------------------------
# Timeouts (seconds)
# ---------------------------------------------------------------------------

def get_primary_submission_timeout() -> float:
    return _env_float("SUBMISSION_PRIMARY_TIMEOUT", 1.5)


def get_fallback_submission_timeout() -> float:
    return _env_float("SUBMISSION_FALLBACK_TIMEOUT", 5.0)


def get_conversion_timeout() -> float:
    return _env_float("CONVERSION_TRACKING_TIMEOUT", 2.0)


def get_lead_capture_timeout() -> float:
    return _env_float("LEAD_CAPTURE_TIMEOUT", 8.0)
