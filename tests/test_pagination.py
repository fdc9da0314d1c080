import pytest

from shop.catalog import CatalogStore
from shop.models import SortKey, ViewMode
from shop.pagination import page_slice, page_window, result_range, total_pages


@pytest.mark.parametrize(
    "count, expected",
    [(0, 1), (1, 1), (20, 1), (21, 2), (40, 2), (41, 3), (100, 5)],
)
def test_total_pages(count, expected):
    assert total_pages(count, 20) == expected


def test_page_slice():
    items = list(range(45))
    assert page_slice(items, 1, 20) == list(range(20))
    assert page_slice(items, 3, 20) == list(range(40, 45))
    assert page_slice(items, 4, 20) == []


@pytest.mark.parametrize(
    "current, total, expected",
    [
        (1, 1, [1]),
        (1, 3, [1, 2, 3]),
        (1, 10, [1, 2, 3, 4, 5]),
        (2, 10, [1, 2, 3, 4, 5]),
        (5, 10, [3, 4, 5, 6, 7]),
        (9, 10, [6, 7, 8, 9, 10]),
        (10, 10, [6, 7, 8, 9, 10]),
        (4, 5, [1, 2, 3, 4, 5]),
    ],
)
def test_page_window(current, total, expected):
    assert page_window(current, total) == expected


def test_result_range():
    assert result_range(0, 1, 20) == (0, 0)
    assert result_range(45, 1, 20) == (1, 20)
    assert result_range(45, 3, 20) == (41, 45)


@pytest.fixture
def store(make_products):
    s = CatalogStore(page_size=20)
    s.set_products(make_products(45))
    return s


def test_scenario_f_out_of_range_pages_are_noops(store):
    assert store.total_pages == 3
    assert store.change_page(2) is True
    assert store.change_page(0) is False
    assert store.change_page(store.total_pages + 1) is False
    assert store.current_page == 2


def test_page_view_for_last_page(store):
    store.change_page(3)
    view = store.page_view()
    assert [p.id for p in view.products] == [41, 42, 43, 44, 45]
    assert view.page_window == [1, 2, 3]
    assert view.results_text == "Showing 41-45 of 45 products"


@pytest.mark.parametrize(
    "mutate",
    [
        lambda s: s.set_search("p0"),
        lambda s: s.set_category("all"),
        lambda s: s.set_sort(SortKey.PRICE_HIGH),
        lambda s: s.clear_filters(),
    ],
)
def test_criteria_changes_reset_page(store, mutate):
    store.change_page(3)
    mutate(store)
    assert store.current_page == 1


def test_view_mode_does_not_touch_data(store):
    store.change_page(2)
    before = list(store.filtered_products)
    assert store.set_view_mode("list") is True
    assert store.set_view_mode(ViewMode.LIST) is False
    assert store.filtered_products == before
    assert store.current_page == 2


def test_empty_results_still_have_one_page(store):
    store.set_search("nothing matches this")
    view = store.page_view()
    assert view.total_pages == 1
    assert view.products == []
    assert view.results_text == "No products found"
    assert store.change_page(1) is True
    assert store.change_page(2) is False


def test_needs_render_tracks_changes(store):
    store.page_view()
    assert store.needs_render is False
    store.change_page(0)
    assert store.needs_render is False
    store.change_page(2)
    assert store.needs_render is True
