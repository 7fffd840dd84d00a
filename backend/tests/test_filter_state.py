import pytest
from pydantic import ValidationError

from complaint_desk.schemas.filters import ALL, FilterState
from complaint_desk.services.filter_state import FilterStateStore


FILTER_SETTERS = [
    ("set_search", "pothole"),
    ("set_status", "RESOLVED"),
    ("set_priority", "HIGH"),
    ("set_ward", "ward-7"),
    ("set_sub_zone", "zone-2"),
    ("set_sla_status", "OVERDUE"),
    ("set_needs_assignment", True),
]


@pytest.mark.parametrize("setter, value", FILTER_SETTERS)
def test_filter_setters_reset_page(setter, value):
    store = FilterStateStore(FilterState(page=5, ward_id="ward-1"))

    getattr(store, setter)(value)

    assert store.state.page == 1


def test_setting_same_value_still_returns_to_first_page():
    store = FilterStateStore(FilterState(page=4, status="RESOLVED"))

    store.set_status("RESOLVED")

    assert store.state.page == 1


def test_ward_change_clears_sub_zone():
    store = FilterStateStore(FilterState(ward_id="ward-1", sub_zone_id="zone-9"))

    store.set_ward("ward-2")

    assert store.state.ward_id == "ward-2"
    assert store.state.sub_zone_id == ALL


def test_page_setter_keeps_filters():
    store = FilterStateStore(FilterState(status="ASSIGNED"))

    store.set_page(3)

    assert store.state.page == 3
    assert store.state.status == "ASSIGNED"


def test_page_size_change_returns_to_first_page():
    store = FilterStateStore(FilterState(page=3))

    store.set_page_size(50)

    assert store.state.page_size == 50
    assert store.state.page == 1


def test_page_size_outside_domain_is_rejected():
    store = FilterStateStore()

    with pytest.raises(ValidationError):
        store.set_page_size(30)
    assert store.state.page_size == 25


def test_listeners_fire_only_on_real_changes():
    store = FilterStateStore()
    seen = []
    store.subscribe(seen.append)

    store.set_status("all")
    store.set_status("CLOSED")

    assert [s.status for s in seen] == ["CLOSED"]


def test_reset_filters_keeps_page_size_and_url_priorities():
    store = FilterStateStore(
        FilterState(
            search="leak",
            status="CLOSED",
            priority="high_critical",
            priority_override=("HIGH", "CRITICAL"),
            needs_assignment=True,
            page=2,
            page_size=50,
        )
    )

    store.reset_filters()

    state = store.state
    assert (state.search, state.status, state.priority) == ("", ALL, ALL)
    assert state.needs_assignment is False
    assert state.page == 1
    assert state.page_size == 50
    assert state.priority_override == ("HIGH", "CRITICAL")
