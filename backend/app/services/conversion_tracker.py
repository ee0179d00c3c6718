"""Conversion tracking call with a timeout-bounded completion callback.

Mirrors the tag-manager contract: ``fire_conversion(event, callback)``
reports completion only through the callback.  ``track_conversion``
waits for that callback for a fixed time and then moves on regardless.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from .http_client import post_json
from .integration_config import (
    IntegrationNotConfigured,
    get_conversion_send_to,
    get_conversion_timeout,
    get_conversion_tracking_url,
)
from .race import race
from .request_context import RequestContext

logger = logging.getLogger(__name__)


async def fire_conversion(event: str, context: RequestContext, on_complete: Callable[[], None]) -> None:
    """Send a conversion event; *on_complete* runs once the endpoint accepts it."""
    await post_json(
        get_conversion_tracking_url(),
        {
            "event": event,
            "send_to": get_conversion_send_to(),
            "session_id": context.session_id,
            "gclid": context.gclid,
        },
        service="conversion",
    )
    on_complete()


async def track_conversion(context: RequestContext, event: str = "conversion") -> bool:
    """Return True when the completion callback fired before the timeout."""
    try:
        get_conversion_tracking_url()
    except IntegrationNotConfigured as exc:
        logger.info("Conversion tracking skipped: %s", exc)
        return False

    fired = asyncio.Event()
    sender = asyncio.ensure_future(fire_conversion(event, context, fired.set))

    result = await race(fired.wait(), get_conversion_timeout(), label="conversion_callback")
    if not sender.done():
        sender.cancel()
    elif sender.exception() is not None:
        logger.warning("Conversion tracking call failed: %s", sender.exception())

    if not result.completed:
        logger.info("Conversion callback did not fire for session %s; continuing", context.session_id)
    return result.completed
