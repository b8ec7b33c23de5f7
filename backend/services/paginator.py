"""
Paginator service.

Slices the row packer's continuous strip into fixed-size pages and
reconstructs rows while placing boxes.

Algorithm:
1. Walk the packed boxes in order, tracking the strip y at which the
   current page begins.
2. If a box's packed bottom edge would pass the content height and the
   current page already holds a box, close the page and start a new one
   at that box's packed top. A page is never emitted empty and a row is
   never split.
3. Translate each box into page space (+margin horizontally,
   -page_top + margin vertically).
4. Group boxes into rows by shared top edge (within ROW_EPSILON).
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from domain.models import Asset, PackedBox, Page, PhotoBox, Row

logger = logging.getLogger(__name__)

# Sub-pixel tolerance when deciding whether two boxes share a row
ROW_EPSILON = 1.0


def group_rows(photos: Sequence[PhotoBox]) -> List[Row]:
    """
    Rebuild rows from positioned photos.

    Consecutive photos whose top edges are within ROW_EPSILON of the open
    row's top share that row; the row height is the tallest member.
    """
    rows: List[Row] = []
    current: Optional[Row] = None
    for photo in photos:
        if current is not None and abs(photo.y - current.y) < ROW_EPSILON:
            current.photos.append(photo)
            current.height = max(current.height, photo.height)
            continue
        current = Row(y=photo.y, height=photo.height, photos=[photo])
        rows.append(current)
    return rows


def paginate(
    assets: Sequence[Asset],
    packed: Sequence[PackedBox],
    page_width: int,
    page_height: int,
    margin: float,
) -> List[Page]:
    """
    Place packed boxes onto pages.

    Args:
        assets: Assets in packed order
        packed: One packed box per asset
        page_width: Page width in pixels
        page_height: Page height in pixels
        margin: Margin on every side in pixels

    Returns:
        Pages numbered from 1, each with its photos and reconstructed rows
    """
    if len(assets) != len(packed):
        raise ValueError(f"Expected one packed box per asset, got {len(packed)} for {len(assets)} assets")
    if not assets:
        return []

    content_height = page_height - 2 * margin
    pages: List[Page] = []
    current = Page(page_number=1, width=page_width, height=page_height)
    current_page_top = 0.0

    for asset, box in zip(assets, packed):
        if current.photos and box.top + box.height - current_page_top > content_height:
            pages.append(current)
            current = Page(page_number=len(pages) + 1, width=page_width, height=page_height)
            current_page_top = box.top

        photo = PhotoBox(
            asset=asset,
            x=box.left + margin,
            y=box.top - current_page_top + margin,
            width=box.width,
            height=box.height,
        )
        current.photos.append(photo)

    if current.photos:
        pages.append(current)
    for page in pages:
        page.rows = group_rows(page.photos)

    logger.debug("[paginator] placed %s boxes onto %s pages", len(packed), len(pages))
    return pages
