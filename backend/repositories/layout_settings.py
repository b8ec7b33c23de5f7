"""
Layout settings repository backed by SQLAlchemy/SQLite.

Two scopes are stored: a global default and one record per album. Values
are normalized (clamped) before they are written, so what is persisted is
always what the layout engine will use.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.orm import Session

from domain.models import LayoutConfig
from repositories.models import LayoutSettingsORM
from services.layout_config import (
    ALBUM_KEYS,
    GLOBAL_KEYS,
    filter_known_keys,
    layout_config_from_dict,
    layout_config_to_dict,
    merge_layout_settings,
)

logger = logging.getLogger(__name__)

GLOBAL_SCOPE = "global"


def album_scope(album_id: str) -> str:
    return f"album:{album_id}"


class LayoutSettingsRepository:
    """Read/write operations for layout settings."""

    def _get_raw(self, session: Session, scope: str) -> Optional[Dict[str, Any]]:
        orm = session.get(LayoutSettingsORM, scope)
        if not orm:
            return None
        return dict(orm.settings_json or {})

    def _put_raw(self, session: Session, scope: str, data: Dict[str, Any]) -> None:
        orm = session.get(LayoutSettingsORM, scope)
        if not orm:
            orm = LayoutSettingsORM(scope=scope)
        orm.settings_json = data
        orm.updated_at = datetime.utcnow()
        session.add(orm)
        session.commit()

    def get_global(self, session: Session) -> Dict[str, Any]:
        """Stored global settings (known keys only); empty if none saved."""
        return filter_known_keys(self._get_raw(session, GLOBAL_SCOPE), GLOBAL_KEYS)

    def save_global(self, session: Session, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Save the global default.

        Merges over the current record, clamps, and drops album-only keys.
        Returns the persisted values.
        """
        merged = self.get_global(session)
        merged.update(filter_known_keys(data, GLOBAL_KEYS))
        config = layout_config_from_dict(merged)
        stored = layout_config_to_dict(config, GLOBAL_KEYS)
        self._put_raw(session, GLOBAL_SCOPE, stored)
        logger.info("[layout_settings] saved global settings")
        return stored

    def get_album(self, session: Session, album_id: str) -> Optional[Dict[str, Any]]:
        raw = self._get_raw(session, album_scope(album_id))
        if raw is None:
            return None
        return filter_known_keys(raw, ALBUM_KEYS)

    def save_album(self, session: Session, album_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Save an album record.

        The update is merged over the album's current record so partial
        updates keep earlier overrides. Only keys the album has set are
        stored; the rest keep following the global default. Returns the
        persisted (clamped) values.
        """
        record = self.get_album(session, album_id) or {}
        record.update(filter_known_keys(data, ALBUM_KEYS))
        config = merge_layout_settings(self.get_global(session), record)
        stored = layout_config_to_dict(config, tuple(k for k in ALBUM_KEYS if k in record))
        self._put_raw(session, album_scope(album_id), stored)
        logger.info("[layout_settings] saved settings for album %s", album_id)
        return stored

    def delete_album(self, session: Session, album_id: str) -> None:
        orm = session.get(LayoutSettingsORM, album_scope(album_id))
        if orm:
            session.delete(orm)
            session.commit()

    def load_effective_config(self, session: Session, album_id: Optional[str] = None) -> LayoutConfig:
        """Defaults <- global record <- album record, normalized."""
        album = self.get_album(session, album_id) if album_id else None
        return merge_layout_settings(self.get_global(session), album)
