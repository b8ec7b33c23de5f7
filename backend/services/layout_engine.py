"""
Layout engine service.

Computes the paginated photo layout of an album. This is the single
source of truth for geometry: the HTML preview and the PDF export both
render the pages it returns.

Pipeline:
1. Normalize (clamp) the configuration
2. Apply manual ordering
3. Resolve packing aspect ratios (overrides, rotation, caption space)
4. Pack justified rows into one continuous strip
5. Paginate and reconstruct rows
6. Apply row-height overrides
7. Align each page
8. Combine page pairs into spreads (optional)

The whole pipeline is a pure function of (assets, config).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from domain.models import Asset, LayoutConfig, Page
from services.alignment import align_pages
from services.aspect_ratios import resolve_packing_ratios
from services.layout_config import normalize_layout_config
from services.manifest import apply_manual_order
from services.paginator import paginate
from services.row_heights import apply_row_height_overrides
from services.row_packer import RowPacker, pack_rows
from services.spreads import combine_spreads
from services.units import resolve_page_dimensions

logger = logging.getLogger(__name__)


def calculate_page_layout(
    assets: Sequence[Asset],
    config: LayoutConfig,
    packer: RowPacker = pack_rows,
) -> List[Page]:
    """
    Compute the pages for an ordered list of assets.

    Args:
        assets: Assets in album order
        config: Layout configuration; invalid values are clamped
        packer: Row packer producing the continuous strip

    Returns:
        Pages (or spreads when combine_pages is set); empty for no assets
    """
    if not assets:
        return []

    config = normalize_layout_config(config)
    page_width, page_height = resolve_page_dimensions(config)
    content_width = page_width - 2 * config.margin

    ordered = apply_manual_order(assets, config.manual_order)
    ratios = resolve_packing_ratios(ordered, config)
    packed = packer(ratios, content_width, config.row_height, config.spacing, config.height_tolerance)

    pages = paginate(ordered, packed, page_width, page_height, config.margin)
    if config.row_heights:
        pages = [apply_row_height_overrides(page, config.row_heights) for page in pages]
    pages = align_pages(pages, config)
    if config.combine_pages:
        pages = combine_spreads(pages, page_width)

    logger.info(
        "[layout_engine] %s assets -> %s %s (%sx%s px, margin=%s, row_height=%s)",
        len(assets),
        len(pages),
        "spreads" if config.combine_pages else "pages",
        page_width,
        page_height,
        config.margin,
        config.row_height,
    )
    return pages


def pages_to_dict(pages: Sequence[Page]) -> List[Dict[str, Any]]:
    """JSON-safe representation of computed pages."""
    return [page.to_dict() for page in pages]
