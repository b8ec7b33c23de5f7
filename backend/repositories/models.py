"""
SQLAlchemy ORM models for persistence.
"""
from datetime import datetime
from sqlalchemy import Column, DateTime, JSON, String

from db import Base


class LayoutSettingsORM(Base):
    """
    Stored layout settings for one scope.

    scope is "global" for the default record or "album:<album_id>".
    """
    __tablename__ = "layout_settings"

    scope = Column(String, primary_key=True, index=True)
    settings_json = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
