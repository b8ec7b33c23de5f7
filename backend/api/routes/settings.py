"""
Settings API routes.

Global default settings and per-album settings (which add the override
maps). Submitted values are clamped; responses return what was stored.
"""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, HTTPException, Response
from pydantic import BaseModel

from db import SessionLocal
from repositories import LayoutSettingsRepository
from services.layout_config import ALBUM_KEYS, GLOBAL_KEYS, layout_config_to_dict
from services.manifest import move_asset

router = APIRouter()
settings_repo = LayoutSettingsRepository()
logger = logging.getLogger(__name__)


class MoveAssetRequest(BaseModel):
    order: List[str]
    asset_id: str
    new_index: int


@router.get("/settings")
async def get_global_settings() -> Dict[str, Any]:
    """Effective global settings (defaults merged with the stored record)."""
    with SessionLocal() as session:
        config = settings_repo.load_effective_config(session)
    return layout_config_to_dict(config, GLOBAL_KEYS)


@router.put("/settings")
async def put_global_settings(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    with SessionLocal() as session:
        return settings_repo.save_global(session, payload)


@router.get("/albums/{album_id}/settings")
async def get_album_settings(album_id: str) -> Dict[str, Any]:
    """Effective settings for an album, including its override maps."""
    with SessionLocal() as session:
        config = settings_repo.load_effective_config(session, album_id)
    return layout_config_to_dict(config, ALBUM_KEYS)


@router.put("/albums/{album_id}/settings")
async def put_album_settings(album_id: str, payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    with SessionLocal() as session:
        return settings_repo.save_album(session, album_id, payload)


@router.delete("/albums/{album_id}/settings", status_code=204)
async def delete_album_settings(album_id: str):
    """Drop an album's record so it follows the global default again."""
    with SessionLocal() as session:
        settings_repo.delete_album(session, album_id)
    return Response(status_code=204)


@router.post("/albums/{album_id}/order/move")
async def move_album_asset(album_id: str, request: MoveAssetRequest) -> Dict[str, Any]:
    """Commit a reorder gesture into the album's manual order."""
    try:
        manual_order = move_asset(request.order, request.asset_id, request.new_index)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    with SessionLocal() as session:
        stored = settings_repo.save_album(session, album_id, {"manual_order": manual_order})
    logger.info("[settings] album %s: moved %s to %s", album_id, request.asset_id, request.new_index)
    return stored
