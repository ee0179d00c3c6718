"""
Shared Async HTTP Client for Integration Calls

One pooled httpx.AsyncClient serves lead capture, assessment delivery
and conversion tracking.  Transport timeouts per service come from the
same environment settings the race timers use, so a request never
outlives the timer waiting on it.
"""

from typing import Callable, Optional

import httpx

from .integration_config import (
    get_conversion_timeout,
    get_fallback_submission_timeout,
    get_lead_capture_timeout,
)

CONNECT_TIMEOUT = 3.0

_SERVICE_TIMEOUTS: dict[str, Callable[[], float]] = {
    "lead_capture": get_lead_capture_timeout,
    "submission": get_fallback_submission_timeout,
    "webhook": get_fallback_submission_timeout,
    "conversion": get_conversion_timeout,
}

# Shared client instance (lazily initialized)
_client: Optional[httpx.AsyncClient] = None


async def get_client() -> httpx.AsyncClient:
    global _client
    if _client is None or _client.is_closed:
        _client = httpx.AsyncClient(
            timeout=httpx.Timeout(10.0, connect=CONNECT_TIMEOUT),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            follow_redirects=True,
        )
    return _client


async def close_client():
    """Close the shared client (call on app shutdown)."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def get_timeout(service: str) -> httpx.Timeout:
    seconds_for = _SERVICE_TIMEOUTS.get(service.lower())
    seconds = seconds_for() if seconds_for else 10.0
    return httpx.Timeout(seconds, connect=min(CONNECT_TIMEOUT, seconds))


async def post_json(url: str, payload: dict, *, service: str, headers: Optional[dict] = None) -> httpx.Response:
    """POST *payload* as JSON; non-2xx responses raise ``httpx.HTTPStatusError``."""
    client = await get_client()
    response = await client.post(
        url,
        json=payload,
        headers={"Content-Type": "application/json", **(headers or {})},
        timeout=get_timeout(service),
    )
    response.raise_for_status()
    return response
