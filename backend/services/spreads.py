"""
Spread combiner.

Merges consecutive page pairs into double-width spreads for dual-page
print layouts. Rows stay within their original half.
"""
from __future__ import annotations

import dataclasses
from typing import List, Tuple

from domain.models import Page
from services.alignment import shift_page


def logical_page_numbers(spread_number: int) -> Tuple[int, int]:
    """Display page numbers of the two halves of a spread."""
    return spread_number * 2 - 1, spread_number * 2


def combine_spreads(pages: List[Page], page_width: int) -> List[Page]:
    """
    Combine pages (2k+1, 2k+2) into spread k+1.

    The right page's photos move by one page width; a trailing odd page is
    emitted alone with its photos unshifted but still reports the doubled
    width so downstream sizing stays uniform.
    """
    spreads: List[Page] = []
    for i in range(0, len(pages), 2):
        left = pages[i]
        spread_number = i // 2 + 1
        photos = list(left.photos)
        rows = list(left.rows)
        if i + 1 < len(pages):
            right = shift_page(pages[i + 1], page_width)
            photos.extend(right.photos)
            rows.extend(right.rows)
        spreads.append(dataclasses.replace(
            left,
            page_number=spread_number,
            width=page_width * 2,
            photos=photos,
            rows=rows,
            is_spread=True,
        ))
    return spreads
