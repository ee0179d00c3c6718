"""Timeout-raced side effects.

``race(task, timeout)`` runs one awaitable against a timer and reports
what happened instead of raising.  Callers decide whether a timeout or a
failure matters; the "best-effort, never block" paths (fallback delivery,
conversion tracking) all go through here.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Literal, Optional

logger = logging.getLogger(__name__)

RaceStatus = Literal["completed", "timed_out", "failed"]


@dataclass(frozen=True)
class RaceResult:
    """Outcome of a raced task: its value, a timeout, or the error it raised."""

    status: RaceStatus
    value: Any = None
    error: Optional[BaseException] = None
    duration_ms: float = 0.0

    @property
    def completed(self) -> bool:
        return self.status == "completed"

    @property
    def timed_out(self) -> bool:
        return self.status == "timed_out"


async def race(task: Awaitable[Any], timeout_s: float, label: str = "task") -> RaceResult:
    """Await *task* for at most *timeout_s* seconds.

    The task is cancelled when the timer wins.  Exceptions raised by the
    task are captured in the result; cancellation of the caller still
    propagates.
    """
    start = time.perf_counter()
    try:
        value = await asyncio.wait_for(task, timeout=timeout_s)
    except asyncio.TimeoutError:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.warning("[RACE] %s timed out after %.0fms", label, duration_ms)
        return RaceResult(status="timed_out", duration_ms=duration_ms)
    except Exception as exc:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.warning("[RACE] %s failed after %.0fms: %s", label, duration_ms, exc)
        return RaceResult(status="failed", error=exc, duration_ms=duration_ms)

    duration_ms = (time.perf_counter() - start) * 1000
    return RaceResult(status="completed", value=value, duration_ms=duration_ms)
