"""Immutable request context created once when a wizard session starts.

Holds the session id plus the tracking/session metadata that ends up in
the submission payload.  It is persisted alongside the autosave snapshot
and passed explicitly to every integration call.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

_TABLET_RE = re.compile(r"ipad|tablet", re.IGNORECASE)
_MOBILE_RE = re.compile(r"mobile|android|iphone|phone", re.IGNORECASE)


def detect_device(user_agent: Optional[str]) -> str:
    """Classify a User-Agent as mobile, tablet or desktop."""
    ua = user_agent or ""
    if _TABLET_RE.search(ua):
        return "tablet"
    if _MOBILE_RE.search(ua):
        return "mobile"
    return "desktop"


def client_ip(headers: Mapping[str, str]) -> str:
    """First hop of X-Forwarded-For, then X-Real-IP."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return headers.get("x-real-ip") or "unknown"


@dataclass(frozen=True)
class RequestContext:
    session_id: str
    created_at: str
    form_location: str = "top"
    landing_page: str = "startup-validation-landing"
    referrer: Optional[str] = None
    gclid: Optional[str] = None
    keyword: Optional[str] = None
    match_type: Optional[str] = None
    utm_source: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_medium: Optional[str] = None
    device: str = "desktop"
    city: Optional[str] = None
    ip: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        session_id: Optional[str] = None,
        *,
        user_agent: Optional[str] = None,
        ip: Optional[str] = None,
        **tracking: Any,
    ) -> "RequestContext":
        known = set(cls.__dataclass_fields__) - {"session_id", "created_at", "device", "ip", "extra"}
        values = {k: v for k, v in tracking.items() if k in known and v is not None}
        return cls(
            session_id=session_id or str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc).isoformat(),
            device=detect_device(user_agent),
            ip=ip,
            **values,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RequestContext":
        known = set(cls.__dataclass_fields__)
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def tracking_fields(self) -> dict[str, Any]:
        """Flat tracking params merged into outbound payloads."""
        data = self.to_dict()
        data.pop("extra", None)
        data.pop("created_at", None)
        return {k: v for k, v in data.items() if v is not None}
