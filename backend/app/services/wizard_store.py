"""Durable key-value store backing wizard autosave/resume.

One row per session.  Every ``save`` overwrites the full JSON snapshot;
there are no partial updates of the answer record.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ..models.wizard_progress import WizardProgress
from ..schemas.assessment_schema import WizardSnapshot, WizardStage
from .request_context import RequestContext

logger = logging.getLogger(__name__)

AUTOSAVE_KEY = "investment_readiness_progress"


def storage_key(session_id: str) -> str:
    return f"{AUTOSAVE_KEY}:{session_id}"


class WizardStore:
    """SQLAlchemy-backed autosave slots keyed by ``AUTOSAVE_KEY:<session_id>``."""

    def __init__(self, db: Session):
        self.db = db

    def _row(self, session_id: str) -> Optional[WizardProgress]:
        return self.db.get(WizardProgress, storage_key(session_id))

    def save(self, snapshot: WizardSnapshot, context: RequestContext) -> None:
        """Write the full snapshot (answers + step + stage)."""
        now = datetime.utcnow()
        snapshot = snapshot.model_copy(update={"updated_at": now})
        row = self._row(snapshot.session_id)
        if row is None:
            row = WizardProgress(
                storage_key=storage_key(snapshot.session_id),
                session_id=snapshot.session_id,
                context_json=json.dumps(context.to_dict()),
            )
            self.db.add(row)

        row.current_step = snapshot.current_step
        row.stage = snapshot.stage.value
        row.snapshot_json = snapshot.model_dump_json()
        row.updated_at = now
        if snapshot.stage == WizardStage.SUBMITTED and row.submitted_at is None:
            row.submitted_at = now
        self.db.commit()

    def load(self, session_id: str) -> Optional[tuple[WizardSnapshot, RequestContext]]:
        row = self._row(session_id)
        if row is None:
            return None
        snapshot = WizardSnapshot.model_validate_json(row.snapshot_json)
        context = RequestContext.from_dict(json.loads(row.context_json))
        return snapshot, context

    def lead_id(self, session_id: str) -> Optional[str]:
        row = self._row(session_id)
        return row.lead_id if row is not None else None

    def record_lead_id(self, session_id: str, lead_id: str) -> None:
        row = self._row(session_id)
        if row is None:
            logger.warning("No autosave slot for session %s; lead id %s not recorded", session_id, lead_id)
            return
        row.lead_id = lead_id
        self.db.commit()

