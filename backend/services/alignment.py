"""
Alignment pass.

Shifts a page's photo group horizontally within the content area.
Uses a registry pattern keyed by alignment mode.
"""
from __future__ import annotations

import dataclasses
from typing import Callable, Dict, List

from domain.models import Alignment, LayoutConfig, Page, PhotoBox, Row

# (min_left, max_right, content_left, content_width) -> horizontal shift
ShiftFunction = Callable[[float, float, float, float], float]

_alignment_registry: Dict[Alignment, ShiftFunction] = {}


def register_alignment(alignment: Alignment):
    """Decorator to register a shift function for an alignment mode."""
    def decorator(func: ShiftFunction) -> ShiftFunction:
        _alignment_registry[alignment] = func
        return func
    return decorator


@register_alignment(Alignment.LEFT)
def _shift_left(min_left: float, max_right: float, content_left: float, content_width: float) -> float:
    # Packed rows already start at the left content edge
    return 0.0


@register_alignment(Alignment.RIGHT)
def _shift_right(min_left: float, max_right: float, content_left: float, content_width: float) -> float:
    return (content_left + content_width) - max_right


@register_alignment(Alignment.CENTER)
def _shift_center(min_left: float, max_right: float, content_left: float, content_width: float) -> float:
    used_width = max_right - min_left
    return content_left + (content_width - used_width) / 2 - min_left


def alignment_for_page(page_number: int, config: LayoutConfig) -> Alignment:
    return config.page_alignments.get(page_number, config.default_alignment)


def shift_page(page: Page, dx: float) -> Page:
    """Translate every photo and row of a page horizontally."""
    if dx == 0:
        return page
    rows: List[Row] = []
    photos: List[PhotoBox] = []
    for row in page.rows:
        shifted = [dataclasses.replace(photo, x=photo.x + dx) for photo in row.photos]
        rows.append(dataclasses.replace(row, photos=shifted))
        photos.extend(shifted)
    return dataclasses.replace(page, photos=photos, rows=rows)


def align_page(page: Page, alignment: Alignment, margin: float) -> Page:
    """
    Align a single logical page.

    Raises:
        ValueError: If no shift function is registered for the alignment
    """
    shift_func = _alignment_registry.get(alignment)
    if not shift_func:
        raise ValueError(f"No alignment registered for mode: {alignment}")
    if not page.photos:
        return page
    min_left = min(photo.x for photo in page.photos)
    max_right = max(photo.right for photo in page.photos)
    content_width = page.width - 2 * margin
    return shift_page(page, shift_func(min_left, max_right, margin, content_width))


def align_pages(pages: List[Page], config: LayoutConfig) -> List[Page]:
    """Align every page using its configured mode, before spread combination."""
    return [
        align_page(page, alignment_for_page(page.page_number, config), config.margin)
        for page in pages
    ]
