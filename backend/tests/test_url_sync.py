from complaint_desk.schemas.filters import ALL, HIGH_CRITICAL, FilterState
from complaint_desk.services.url_sync import parse_url_filters, seed_filter_state


def test_recognized_keys_seed_state():
    state = seed_filter_state(
        "search=streetlight&status=assigned&priority=LOW&ward=w1&subZone=z1"
        "&needsMaintenanceAssignment=true&slaStatus=OVERDUE"
    )

    assert state.search == "streetlight"
    assert state.status == "assigned"
    assert state.priority == "LOW"
    assert state.ward_id == "w1"
    assert state.sub_zone_id == "z1"
    assert state.needs_assignment is True
    assert state.sla_status == "OVERDUE"
    assert state.priority_override is None


def test_comma_separated_priority_becomes_combined_sentinel():
    state = seed_filter_state("priority=high, critical")

    assert state.priority == HIGH_CRITICAL
    assert state.priority_override == ("HIGH", "CRITICAL")


def test_unknown_keys_are_ignored():
    fields = parse_url_filters("foo=bar&page=9&limit=100&officerId=someone")

    assert fields == {}


def test_missing_keys_keep_defaults():
    state = seed_filter_state("")

    assert state == FilterState()


def test_needs_assignment_requires_literal_true():
    assert seed_filter_state("needsMaintenanceAssignment=1").needs_assignment is False


def test_sub_zone_without_ward_is_dropped():
    state = seed_filter_state("subZone=z1")

    assert state.ward_id == ALL
    assert state.sub_zone_id == ALL


def test_seed_keeps_base_page_size_and_restarts_paging():
    state = seed_filter_state("status=CLOSED", base=FilterState(page=4, page_size=50))

    assert state.page == 1
    assert state.page_size == 50
