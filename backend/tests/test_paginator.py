import pytest

from domain.models import Asset, AssetMetadata, PackedBox, PhotoBox
from services.paginator import group_rows, paginate
from services.row_packer import pack_rows


def _asset(i: int) -> Asset:
    return Asset(id=f"a{i}", metadata=AssetMetadata(width=100, height=100))


def _squares(count: int):
    assets = [_asset(i) for i in range(count)]
    packed = pack_rows([1.0] * count, row_width=1000, row_height=300, spacing=0, height_tolerance=0.1)
    return assets, packed


def test_no_assets_no_pages():
    assert paginate([], [], 1100, 500, 50) == []


def test_length_mismatch_raises():
    with pytest.raises(ValueError):
        paginate([_asset(0)], [], 1100, 500, 50)


def test_rows_never_split_across_pages():
    assets, packed = _squares(5)
    pages = paginate(assets, packed, page_width=1100, page_height=500, margin=50)
    assert [len(p.photos) for p in pages] == [4, 1]
    assert [p.page_number for p in pages] == [1, 2]
    assert [len(p.rows) for p in pages] == [1, 1]

    first_row = pages[0].rows[0]
    assert [p.asset.id for p in first_row.photos] == ["a0", "a1", "a2", "a3"]
    assert first_row.y == 50

    second = pages[1]
    assert [(p.x, p.y, p.width, p.height) for p in second.photos] == [(50, 50, 300, 300)]


def test_boxes_stay_within_content_area():
    assets, packed = _squares(23)
    pages = paginate(assets, packed, page_width=1100, page_height=800, margin=50)
    for page in pages:
        for photo in page.photos:
            assert photo.x >= 50
            assert photo.right <= 1050 + 1e-6
            assert photo.y >= 50
            assert photo.bottom <= 750 + 1e-6


def test_every_asset_placed_once_in_order():
    assets, packed = _squares(17)
    pages = paginate(assets, packed, 1100, 800, 50)
    placed = [photo.asset.id for page in pages for photo in page.photos]
    assert placed == [a.id for a in assets]


def test_oversized_row_gets_its_own_page():
    assets = [_asset(0), _asset(1)]
    packed = [
        PackedBox(top=0, left=0, width=500, height=900),
        PackedBox(top=900, left=0, width=500, height=900),
    ]
    pages = paginate(assets, packed, 600, 500, 50)
    assert [len(p.photos) for p in pages] == [1, 1]


def test_group_rows_by_top_edge():
    a, b, c = _asset(0), _asset(1), _asset(2)
    photos = [
        PhotoBox(asset=a, x=50, y=50, width=100, height=100),
        PhotoBox(asset=b, x=150, y=50.4, width=100, height=120),
        PhotoBox(asset=c, x=50, y=180, width=100, height=100),
    ]
    rows = group_rows(photos)
    assert [len(r.photos) for r in rows] == [2, 1]
    assert rows[0].height == 120
    assert rows[0].key == "a0"
    assert rows[1].key == "a2"


def test_each_page_starts_with_a_box_that_did_not_fit_before():
    ratios = [1.5, 0.66, 1.0, 1.33, 0.75, 1.78, 1.0, 1.5, 0.8, 1.2, 2.0, 5.0, 0.5, 0.7, 1.1, 3.0, 0.9]
    assets = [_asset(i) for i in range(len(ratios))]
    packed = pack_rows(ratios, row_width=1000, row_height=180, spacing=6, height_tolerance=0.2)
    content_height = 700
    pages = paginate(assets, packed, page_width=1100, page_height=content_height + 100, margin=50)
    assert len(pages) > 1

    index = {a.id: i for i, a in enumerate(assets)}
    page_tops = [packed[index[page.photos[0].asset.id]].top for page in pages]
    for previous_top, page in zip(page_tops, pages[1:]):
        first = packed[index[page.photos[0].asset.id]]
        assert first.top + first.height - previous_top > content_height
