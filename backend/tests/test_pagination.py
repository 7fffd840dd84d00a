from complaint_desk.schemas.complaint import ResultPage
from complaint_desk.schemas.filters import FilterState
from complaint_desk.services.filter_state import FilterStateStore
from complaint_desk.services.pagination import (
    PaginationController,
    derive_total_pages,
    page_window,
)


def _controller(page=1, page_size=25, total_items=250, total_pages=10):
    store = FilterStateStore(FilterState(page=page, page_size=page_size))
    pagination = PaginationController(store)
    pagination.apply_result(
        ResultPage(items=[], total_items=total_items, total_pages=total_pages), clamp=False
    )
    return store, pagination


def test_page_window_is_centred():
    assert page_window(6, 10) == [4, 5, 6, 7, 8]


def test_page_window_clamped_at_edges():
    assert page_window(1, 10) == [1, 2, 3, 4, 5]
    assert page_window(10, 10) == [6, 7, 8, 9, 10]
    assert page_window(2, 3) == [1, 2, 3]
    assert page_window(1, 1) == [1]


def test_total_pages_derivation():
    assert derive_total_pages(0, None, 25) == 1
    assert derive_total_pages(51, None, 25) == 3
    assert derive_total_pages(51, 0, 25) == 1
    assert derive_total_pages(51, 7, 25) == 7


def test_empty_result_resets_to_first_page():
    store, pagination = _controller(page=3)

    moved = pagination.apply_result(ResultPage(items=[], total_items=0, total_pages=1))

    assert moved is True
    assert store.state.page == 1


def test_page_clamped_to_last_available_page():
    store, pagination = _controller(page=7)

    pagination.apply_result(ResultPage(items=[], total_items=100, total_pages=4))

    assert store.state.page == 4


def test_in_range_page_untouched():
    store, pagination = _controller(page=2)

    assert pagination.apply_result(ResultPage(items=[], total_items=100, total_pages=4)) is False
    assert store.state.page == 2


def test_navigation_clamps_to_bounds():
    store, pagination = _controller(page=1)

    assert pagination.prev() == 1
    assert pagination.go_to(42) == 10
    assert pagination.next() == 10
    assert pagination.first() == 1
    assert pagination.next() == 2
    assert pagination.last() == 10
    assert pagination.go_to(-3) == 1


def test_set_page_size_returns_to_first_page():
    store, pagination = _controller(page=5)

    pagination.set_page_size(100)

    assert pagination.page_size == 100
    assert pagination.current_page == 1


def test_view_reports_showing_range():
    _, pagination = _controller(page=10, page_size=25, total_items=240, total_pages=10)

    view = pagination.view()

    assert (view.range_start, view.range_end) == (226, 240)
    assert view.page_numbers == [6, 7, 8, 9, 10]
    assert view.has_prev and not view.has_next


def test_view_for_empty_result():
    _, pagination = _controller(total_items=0, total_pages=1)

    view = pagination.view()

    assert (view.range_start, view.range_end, view.total_pages) == (0, 0, 1)
