"""
Unit conversion for the 300 DPI working resolution.

All layout geometry is computed in pixels at 300 DPI; physical page presets
are converted once here and exposed as constants.
"""
import math
from typing import Dict, Tuple

from domain.models import LayoutConfig, Orientation, PageSizeName

WORKING_DPI = 300
EXPORT_DPI = 72  # PDF points
MM_PER_INCH = 25.4
PIXELS_PER_MM = WORKING_DPI / MM_PER_INCH


def mm_to_pixels(mm: float) -> int:
    """Convert millimeters to working-resolution pixels (round half up)."""
    return int(math.floor(mm * PIXELS_PER_MM + 0.5))


def pixels_to_points(pixels: float) -> float:
    """Convert working-resolution pixels to PDF points."""
    return pixels * EXPORT_DPI / WORKING_DPI


def _preset(width_mm: float, height_mm: float) -> Dict[Orientation, Tuple[int, int]]:
    portrait = (mm_to_pixels(width_mm), mm_to_pixels(height_mm))
    return {
        Orientation.PORTRAIT: portrait,
        Orientation.LANDSCAPE: (portrait[1], portrait[0]),
    }


# Page sizes in pixels (at 300 DPI)
PAGE_SIZES: Dict[PageSizeName, Dict[Orientation, Tuple[int, int]]] = {
    PageSizeName.A4: _preset(210, 297),
    PageSizeName.LETTER: _preset(215.9, 279.4),  # 8.5" x 11"
    PageSizeName.A3: _preset(297, 420),
}

FALLBACK_PAGE_SIZE = PAGE_SIZES[PageSizeName.A4][Orientation.PORTRAIT]


def resolve_page_dimensions(config: LayoutConfig) -> Tuple[int, int]:
    """
    Resolve the page width/height in pixels for a configuration.

    CUSTOM uses the explicit dimensions when both are given and falls back
    to A4 portrait otherwise.
    """
    if config.page_size == PageSizeName.CUSTOM:
        if config.custom_width and config.custom_height:
            return int(config.custom_width), int(config.custom_height)
        return FALLBACK_PAGE_SIZE
    return PAGE_SIZES[config.page_size][config.orientation]
