"""
Manual row-height overrides.

Overrides are keyed by the id of the first asset in a row. Applying one
scales the heights of the row's photos and pushes every later row on the
page down by the accumulated difference.
"""
from __future__ import annotations

import dataclasses
import logging
from typing import Dict, List

from domain.models import Page, PhotoBox, Row

logger = logging.getLogger(__name__)


def apply_row_height_overrides(page: Page, row_heights: Dict[str, float]) -> Page:
    """
    Apply row-height overrides to one page in a single top-to-bottom pass.

    Rows without an override are only shifted by the offset accumulated
    from the rows above them.
    """
    if not row_heights or not any(row.key in row_heights for row in page.rows):
        return page

    offset = 0.0
    photos: List[PhotoBox] = []
    rows: List[Row] = []
    for row in page.rows:
        override = row_heights.get(row.key)
        natural = row.height
        scale = override / natural if override and natural > 0 else 1.0
        row_photos = [
            dataclasses.replace(photo, y=photo.y + offset, height=photo.height * scale)
            for photo in row.photos
        ]
        new_row = Row(
            y=row.y + offset,
            height=natural * scale,
            photos=row_photos,
            custom_height=override if override else None,
        )
        rows.append(new_row)
        photos.extend(row_photos)
        if override:
            logger.debug(
                "[row_heights] page %s row %s height %.1f -> %.1f",
                page.page_number, row.key, natural, override,
            )
            offset += new_row.height - natural

    return dataclasses.replace(page, photos=photos, rows=rows)
