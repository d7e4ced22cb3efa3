"""SQLAlchemy ORM models for saved liquidity snapshots"""

from sqlalchemy import Column, DateTime, JSON, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

CURRENT_FORM_STATE_ID = "current"


class SavedSnapshot(Base):
    """Named entries snapshot; saving an existing name replaces it"""

    __tablename__ = "saved_snapshot"

    name = Column(Text, primary_key=True)
    data = Column(JSON, nullable=False)  # camelCase ClientEntry[] payload
    saved_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class FormState(Base):
    """Unnamed working copy of the form, kept for session continuity"""

    __tablename__ = "form_state"

    id = Column(Text, primary_key=True, default=CURRENT_FORM_STATE_ID)
    data = Column(JSON, nullable=False)
    saved_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
