"""
Layout API routes.

Computes page layouts for an album's assets, in capture-time order, and
renders them as an HTML preview or a PDF export. The asset list is supplied
by the caller; configuration comes from the stored album settings overlaid
with any values sent in the request.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field

from db import SessionLocal
from domain.models import Asset, AssetMetadata, AssetType, LayoutConfig
from repositories import LayoutSettingsRepository
from services.layout_config import ALBUM_KEYS, filter_known_keys, layout_config_from_dict
from services.layout_engine import calculate_page_layout, pages_to_dict
from services.manifest import sort_by_capture_time
from services.metadata_extractor import extract_exif_metadata
from services.render_pdf import DEFAULT_PREVIEW_SCALE, render_pages_to_html, render_pages_to_pdf
from services.units import resolve_page_dimensions
from settings import settings
from storage.file_storage import FileStorage

router = APIRouter()
settings_repo = LayoutSettingsRepository()
storage = FileStorage(settings.MEDIA_ROOT)
logger = logging.getLogger(__name__)


class AssetIn(BaseModel):
    id: str
    type: str = "image"
    width: Optional[int] = None
    height: Optional[int] = None
    exif_orientation: Optional[int] = None
    taken_at: Optional[datetime] = None
    description: Optional[str] = None
    original_file_name: Optional[str] = None
    file_path: Optional[str] = None


class LayoutRequest(BaseModel):
    assets: List[AssetIn]
    album_id: Optional[str] = None
    config: Dict[str, Any] = Field(default_factory=dict)


class PreviewRequest(LayoutRequest):
    scale: float = Field(default=DEFAULT_PREVIEW_SCALE, gt=0, le=4)


class LayoutResponse(BaseModel):
    album_id: Optional[str] = None
    page_count: int
    page_width: int
    page_height: int
    pages: List[dict]


class PreviewHtmlResponse(BaseModel):
    html: str


def asset_from_request(item: AssetIn) -> Asset:
    """Convert an API asset into the domain Asset."""
    try:
        asset_type = AssetType(item.type)
    except ValueError:
        asset_type = AssetType.IMAGE
    return Asset(
        id=item.id,
        type=asset_type,
        metadata=AssetMetadata(
            width=item.width,
            height=item.height,
            exif_orientation=item.exif_orientation,
            taken_at=item.taken_at,
            description=item.description,
            original_file_name=item.original_file_name,
        ),
        file_path=item.file_path,
    )


def _resolve_config(album_id: Optional[str], overrides: Dict[str, Any]) -> LayoutConfig:
    with SessionLocal() as session:
        base = settings_repo.load_effective_config(session, album_id)
    return layout_config_from_dict(filter_known_keys(overrides, ALBUM_KEYS), base=base)


def _compute(request: LayoutRequest):
    config = _resolve_config(request.album_id, request.config)
    # Capture-time order; the engine applies manual positions on top
    assets = sort_by_capture_time([asset_from_request(a) for a in request.assets])
    return config, calculate_page_layout(assets, config)


@router.post("", response_model=LayoutResponse)
async def compute_layout(request: LayoutRequest):
    """Compute the page geometry for the given assets."""
    config, pages = _compute(request)
    page_width, page_height = resolve_page_dimensions(config)
    return LayoutResponse(
        album_id=request.album_id,
        page_count=len(pages),
        page_width=page_width,
        page_height=page_height,
        pages=pages_to_dict(pages),
    )


@router.post("/preview", response_model=PreviewHtmlResponse)
async def preview_layout(request: PreviewRequest):
    """Render the layout as preview HTML."""
    config, pages = _compute(request)
    html = render_pages_to_html(pages, config, scale=request.scale, media_base_url=settings.MEDIA_BASE_URL)
    return PreviewHtmlResponse(html=html)


@router.post("/export")
async def export_layout(request: LayoutRequest):
    """Render the layout to a PDF and return the file."""
    config, pages = _compute(request)
    if not pages:
        raise HTTPException(status_code=400, detail="No assets to export")

    try:
        pdf_relative_path = storage.get_pdf_path(request.album_id or "untitled")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    pdf_absolute_path = str(storage.get_absolute_path(pdf_relative_path))
    render_pages_to_pdf(pages, config, pdf_absolute_path, media_root=str(storage.media_root))
    logger.info("[layout] exported %s pages to %s", len(pages), pdf_relative_path)
    return FileResponse(pdf_absolute_path, media_type="application/pdf", filename="album.pdf")


@router.post("/inspect", response_model=AssetIn)
async def inspect_asset(file: UploadFile = File(...)):
    """Extract layout metadata (dimensions, orientation, capture time, caption) from an image."""
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")
    metadata = extract_exif_metadata(content, file_name=file.filename)
    stem = (file.filename or "asset").rsplit(".", 1)[0]
    return AssetIn(
        id=stem,
        width=metadata.width,
        height=metadata.height,
        exif_orientation=metadata.exif_orientation,
        taken_at=metadata.taken_at,
        description=metadata.description,
        original_file_name=metadata.original_file_name,
    )
