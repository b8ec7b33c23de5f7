from domain.models import Asset, AssetMetadata, Page, PhotoBox
from services.paginator import group_rows
from services.spreads import combine_spreads, logical_page_numbers


def _page(number: int) -> Page:
    photo = PhotoBox(asset=Asset(id=f"p{number}"), x=50, y=50, width=200, height=200)
    return Page(page_number=number, width=1000, height=800, photos=[photo], rows=group_rows([photo]))


def test_pairs_pages_into_double_width_spreads():
    spreads = combine_spreads([_page(1), _page(2), _page(3)], page_width=1000)
    assert len(spreads) == 2
    assert all(s.is_spread for s in spreads)
    assert all(s.width == 2000 for s in spreads)
    assert [s.page_number for s in spreads] == [1, 2]

    first = spreads[0]
    assert [p.asset.id for p in first.photos] == ["p1", "p2"]
    assert [p.x for p in first.photos] == [50, 1050]
    assert [p.y for p in first.photos] == [50, 50]
    assert len(first.rows) == 2
    assert first.rows[1].photos[0].x == 1050


def test_trailing_odd_page_keeps_positions():
    spreads = combine_spreads([_page(1), _page(2), _page(3)], page_width=1000)
    last = spreads[1]
    assert [p.asset.id for p in last.photos] == ["p3"]
    assert last.photos[0].x == 50
    assert last.width == 2000


def test_no_pages():
    assert combine_spreads([], 1000) == []


def test_logical_page_numbers():
    assert logical_page_numbers(1) == (1, 2)
    assert logical_page_numbers(3) == (5, 6)


def test_spread_round_trip_recovers_pages():
    pages = [_page(1), _page(2), _page(3), _page(4)]
    spreads = combine_spreads(pages, page_width=1000)
    recovered = []
    for spread in spreads:
        left_ids = {p.asset.id for p in spread.photos if p.x < 1000}
        right = [p for p in spread.photos if p.x >= 1000]
        recovered.append(sorted(left_ids))
        recovered.append([p.asset.id for p in right])
        assert all(p.x - 1000 == 50 for p in right)
    assert recovered == [["p1"], ["p2"], ["p3"], ["p4"]]
