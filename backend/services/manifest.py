"""
Asset ordering service.

Assets arrive from the album in arbitrary order. The layout uses them
sorted ascending by capture time, with any manual positions from the
album's override map taking precedence.
"""
from datetime import datetime
from typing import Dict, List, Sequence, Tuple

from domain.models import Asset


def sort_by_capture_time(assets: Sequence[Asset]) -> List[Asset]:
    """
    Sort assets ascending by capture time.

    Assets without a timestamp go last; ties are broken by id so the
    order is stable across runs.
    """
    def sort_key(asset: Asset) -> Tuple[int, datetime, str]:
        taken_at = asset.metadata.taken_at
        if taken_at is None:
            return (1, datetime.min, asset.id)
        # Compare aware and naive timestamps on the same footing
        return (0, taken_at.replace(tzinfo=None), asset.id)

    return sorted(assets, key=sort_key)


def apply_manual_order(assets: Sequence[Asset], manual_order: Dict[str, int]) -> List[Asset]:
    """
    Reorder assets using manual positions.

    An asset with a manual position is placed at that position; the rest
    keep their natural index. On equal positions, manually placed assets
    come first.
    """
    if not manual_order:
        return list(assets)

    def sort_key(item: Tuple[int, Asset]) -> Tuple[int, int, int]:
        index, asset = item
        position = manual_order.get(asset.id)
        if position is None:
            return (index, 1, index)
        return (position, 0, index)

    return [asset for _, asset in sorted(enumerate(assets), key=sort_key)]


def move_asset(order: Sequence[str], asset_id: str, new_index: int) -> Dict[str, int]:
    """
    Move an asset within an ordered id list.

    Returns a complete manual-order map for the new order, ready to be
    stored in the album's settings.

    Raises:
        ValueError: If the asset is not part of the order
    """
    ids = list(order)
    if asset_id not in ids:
        raise ValueError(f"Asset not in order: {asset_id}")
    ids.remove(asset_id)
    new_index = max(0, min(new_index, len(ids)))
    ids.insert(new_index, asset_id)
    return {aid: position for position, aid in enumerate(ids)}
