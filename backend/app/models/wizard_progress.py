from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from ..database import Base


class WizardProgress(Base):
    """Durable autosave slot for one assessment session.

    ``storage_key`` is ``investment_readiness_progress:<session_id>``.
    ``snapshot_json`` always holds the full record, never a diff.
    """

    __tablename__ = "wizard_progress"

    storage_key = Column(String(128), primary_key=True)
    session_id = Column(String(64), nullable=False, index=True)
    current_step = Column(Integer, nullable=False, default=1)
    stage = Column(String(32), nullable=False, default="question")  # question | score_reveal | submitted
    snapshot_json = Column(Text, nullable=False)
    context_json = Column(Text, nullable=False)
    lead_id = Column(String(128), nullable=True, default=None)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    submitted_at = Column(DateTime, nullable=True, default=None)
