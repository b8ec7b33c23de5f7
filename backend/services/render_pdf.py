"""
Page rendering service.

Renders computed pages either as an HTML preview or as a print-ready PDF.
Both renderers consume the same Page geometry and convert it with one
uniform scale factor through `scale_box`, so preview and export match.

- HTML preview: pixels * display scale, absolutely positioned boxes
- PDF export: pixels * 72/300 (points), drawn with reportlab
"""
import html
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError
from reportlab.lib.colors import Color
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from domain.models import Asset, CaptionPosition, LayoutConfig, Page, PhotoBox
from services.aspect_ratios import resolve_caption_position, split_caption_box
from services.units import EXPORT_DPI, WORKING_DPI

logger = logging.getLogger(__name__)

EXPORT_SCALE = EXPORT_DPI / WORKING_DPI
DEFAULT_PREVIEW_SCALE = 0.25

# Longest side (px) of images embedded in the PDF
MAX_EMBED_PIXELS = 2400

OVERLAY_COLOR = Color(0, 0, 0, alpha=0.5)
PLACEHOLDER_COLOR = Color(0.88, 0.88, 0.88)
CAPTION_FONT = "Helvetica"

Rect = Tuple[float, float, float, float]


def scale_box(rect: Rect, factor: float) -> Rect:
    """Scale an (x, y, width, height) rectangle by a uniform factor."""
    x, y, width, height = rect
    return x * factor, y * factor, width * factor, height * factor


def format_capture_date(asset: Asset) -> Optional[str]:
    """Short capture date label, e.g. 'Mar 4, 2024'."""
    taken_at = asset.metadata.taken_at
    if not taken_at:
        return None
    return f"{taken_at:%b} {taken_at.day}, {taken_at.year}"


def _photo_rects(photo: PhotoBox, config: LayoutConfig) -> Tuple[Rect, Optional[Rect], CaptionPosition]:
    position = resolve_caption_position(photo.asset, config)
    image_rect, caption_rect = split_caption_box(photo, position)
    return image_rect, caption_rect, position


# ============================================
# HTML preview
# ============================================

def _resolve_image_url(asset: Asset, media_base_url: str) -> str:
    if not asset.file_path:
        return ""
    normalized = asset.file_path.replace("\\", "/").lstrip("/")
    return f"{media_base_url.rstrip('/')}/{normalized}"


def _render_photo_html(photo: PhotoBox, config: LayoutConfig, scale: float, media_base_url: str) -> str:
    image_rect, caption_rect, position = _photo_rects(photo, config)
    x, y, w, h = scale_box(image_rect, scale)
    asset = photo.asset
    url = _resolve_image_url(asset, media_base_url)
    alt = html.escape(asset.metadata.original_file_name or asset.id)
    parts = [
        f'<div class="photo" data-asset-id="{html.escape(asset.id)}" '
        f'style="position:absolute;left:{x:.2f}px;top:{y:.2f}px;width:{w:.2f}px;height:{h:.2f}px;overflow:hidden;background:#e0e0e0;">'
    ]
    if url:
        parts.append(f'<img src="{html.escape(url)}" alt="{alt}" style="width:100%;height:100%;object-fit:cover;" loading="lazy">')

    date_label = format_capture_date(asset) if config.show_dates else None
    if date_label:
        parts.append(
            '<div class="date" style="position:absolute;top:4px;right:4px;padding:2px 4px;'
            f'background:rgba(0,0,0,0.5);color:#fff;font-size:10px;">{html.escape(date_label)}</div>'
        )
    description = html.escape(asset.metadata.description or "")
    if position in (CaptionPosition.BOTTOM, CaptionPosition.TOP):
        edge = "bottom" if position == CaptionPosition.BOTTOM else "top"
        parts.append(
            f'<div class="caption" style="position:absolute;{edge}:0;left:0;right:0;padding:4px 8px;'
            f'background:rgba(0,0,0,0.5);color:#fff;font-size:11px;">{description}</div>'
        )
    parts.append("</div>")

    if caption_rect is not None:
        cx, cy, cw, ch = scale_box(caption_rect, scale)
        parts.append(
            f'<div class="caption side-caption" style="position:absolute;left:{cx:.2f}px;top:{cy:.2f}px;'
            f'width:{cw:.2f}px;height:{ch:.2f}px;padding:8px;overflow:hidden;font-size:11px;color:#1a1a1a;">'
            f"{description}</div>"
        )
    return "".join(parts)


def render_pages_to_html(
    pages: Sequence[Page],
    config: LayoutConfig,
    scale: float = DEFAULT_PREVIEW_SCALE,
    media_base_url: str = "/media",
) -> str:
    """
    Generate preview HTML for computed pages.
    Does not touch disk.
    """
    pages_html: List[str] = []
    total = len(pages)
    for page in pages:
        width, height = page.width * scale, page.height * scale
        photos_html = "".join(
            _render_photo_html(photo, config, scale, media_base_url) for photo in page.photos
        )
        pages_html.append(
            f'<div class="page" data-page-number="{page.page_number}" '
            f'style="position:relative;width:{width:.2f}px;height:{height:.2f}px;background:#fff;'
            f'margin:0 auto 32px;box-shadow:0 1px 4px rgba(0,0,0,0.2);">'
            f'<div class="page-label no-print" style="position:absolute;top:8px;left:8px;font-size:10px;color:#666;">'
            f"Page {page.page_number} of {total}</div>"
            f"{photos_html}</div>"
        )
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        "<style>body{margin:0;padding:16px;background:#f3f4f6;font-family:Arial,sans-serif;}"
        "@media print{.no-print{display:none;}body{padding:0;background:#fff;}}</style>"
        f"</head><body>{''.join(pages_html)}</body></html>"
    )


# ============================================
# PDF export
# ============================================

def _load_cover_image(path: Path, width_pt: float, height_pt: float) -> Optional[ImageReader]:
    """Load an image cropped to fill the box (object-fit: cover)."""
    try:
        with Image.open(path) as img:
            img = ImageOps.exif_transpose(img)
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
            # Embed at working resolution, capped
            target_w = max(1, int(round(width_pt / EXPORT_SCALE)))
            target_h = max(1, int(round(height_pt / EXPORT_SCALE)))
            longest = max(target_w, target_h)
            if longest > MAX_EMBED_PIXELS:
                target_w = max(1, int(target_w * MAX_EMBED_PIXELS / longest))
                target_h = max(1, int(target_h * MAX_EMBED_PIXELS / longest))
            return ImageReader(ImageOps.fit(img, (target_w, target_h)))
    except (FileNotFoundError, UnidentifiedImageError, OSError) as exc:
        logger.warning("[render_pdf] Could not load image %s: %s", path, exc)
        return None


def _draw_text_block(pdf: canvas.Canvas, text: str, rect: Rect, page_height_pt: float, font_size: float, color) -> None:
    x, y, w, h = rect
    padding = font_size * 0.6
    lines = simpleSplit(text, CAPTION_FONT, font_size, max(w - 2 * padding, 1))
    pdf.setFillColor(color)
    pdf.setFont(CAPTION_FONT, font_size)
    baseline = page_height_pt - y - padding - font_size
    for line in lines:
        if baseline < page_height_pt - y - h:
            break
        pdf.drawString(x + padding, baseline, line)
        baseline -= font_size * 1.2


def _draw_photo(
    pdf: canvas.Canvas,
    photo: PhotoBox,
    config: LayoutConfig,
    page_height_pt: float,
    media_root: Optional[Path],
) -> None:
    image_rect, caption_rect, position = _photo_rects(photo, config)
    x, y, w, h = scale_box(image_rect, EXPORT_SCALE)
    bottom = page_height_pt - y - h
    asset = photo.asset

    image = None
    if media_root is not None and asset.file_path:
        image = _load_cover_image(media_root / asset.file_path, w, h)
    if image is not None:
        pdf.drawImage(image, x, bottom, width=w, height=h)
    else:
        pdf.setFillColor(PLACEHOLDER_COLOR)
        pdf.rect(x, bottom, w, h, stroke=0, fill=1)

    date_label = format_capture_date(asset) if config.show_dates else None
    if date_label:
        font_size = 7
        label_w = pdf.stringWidth(date_label, CAPTION_FONT, font_size) + 6
        pdf.setFillColor(OVERLAY_COLOR)
        pdf.rect(x + w - label_w - 4, page_height_pt - y - 4 - font_size - 4, label_w, font_size + 4, stroke=0, fill=1)
        pdf.setFillColor(Color(1, 1, 1))
        pdf.setFont(CAPTION_FONT, font_size)
        pdf.drawString(x + w - label_w - 1, page_height_pt - y - 4 - font_size - 1, date_label)

    description = asset.metadata.description or ""
    if position in (CaptionPosition.BOTTOM, CaptionPosition.TOP):
        font_size = 8
        band_h = min(h, font_size * 2.4)
        band_y = y + h - band_h if position == CaptionPosition.BOTTOM else y
        pdf.setFillColor(OVERLAY_COLOR)
        pdf.rect(x, page_height_pt - band_y - band_h, w, band_h, stroke=0, fill=1)
        _draw_text_block(pdf, description, (x, band_y, w, band_h), page_height_pt, font_size, Color(1, 1, 1))
    elif caption_rect is not None:
        _draw_text_block(
            pdf, description, scale_box(caption_rect, EXPORT_SCALE), page_height_pt, 8, Color(0.1, 0.1, 0.1)
        )


def render_pages_to_pdf(
    pages: Sequence[Page],
    config: LayoutConfig,
    output_path: str,
    media_root: Optional[str] = None,
) -> str:
    """
    Render computed pages to a PDF file.

    Args:
        pages: Pages (or spreads) from the layout engine
        config: The layout config the pages were computed with
        output_path: Where to save the PDF
        media_root: Root directory for asset files; missing images are drawn
            as placeholders

    Returns:
        Path to the generated PDF
    """
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    root = Path(media_root) if media_root else None

    pdf = canvas.Canvas(output_path)
    for page in pages:
        width_pt = page.width * EXPORT_SCALE
        height_pt = page.height * EXPORT_SCALE
        pdf.setPageSize((width_pt, height_pt))
        logger.debug("[render_pdf] page %s: %s photos", page.page_number, len(page.photos))
        for photo in page.photos:
            _draw_photo(pdf, photo, config, height_pt, root)
        pdf.showPage()
    pdf.save()
    logger.info("[render_pdf] wrote %s pages to %s", len(pages), output_path)
    return output_path
