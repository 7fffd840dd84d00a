import pytest

from complaint_desk.schemas.filters import (
    ALL,
    DEFAULT_VOCABULARY,
    HIGH_CRITICAL,
    FilterState,
    Identity,
    Vocabulary,
)
from complaint_desk.services.query_builder import build_query

ADMIN = Identity(role="ADMINISTRATOR", user_id="A1", is_authenticated=True)
CITIZEN = Identity(role="CITIZEN", user_id="C1", is_authenticated=True)
OFFICER = Identity(role="WARD_OFFICER", user_id="U1", is_authenticated=True)
CREW = Identity(role="MAINTENANCE_TEAM", user_id="M1", is_authenticated=True)


def _params(state, identity=ADMIN, vocabulary=DEFAULT_VOCABULARY):
    return build_query(state, vocabulary, identity).to_params()


def test_all_sentinels_are_omitted():
    params = _params(FilterState(status=ALL, priority=ALL))

    assert params == {"page": 1, "limit": 25}


def test_values_are_upper_cased():
    params = _params(FilterState(status="in_progress", priority="low", sla_status="overdue"))

    assert params["status"] == "IN_PROGRESS"
    assert params["priority"] == "LOW"
    assert params["slaStatus"] == "OVERDUE"


def test_combined_sentinel_expands_to_high_and_critical():
    params = _params(FilterState(priority=HIGH_CRITICAL))

    assert params["priority"] == ["HIGH", "CRITICAL"]


def test_url_priority_list_wins_over_sentinel_expansion():
    state = FilterState(priority=HIGH_CRITICAL, priority_override=("CRITICAL", "HIGH"))

    assert _params(state)["priority"] == ["CRITICAL", "HIGH"]


def test_url_priority_list_applies_even_if_selection_changed():
    state = FilterState(priority="LOW", priority_override=("HIGH", "CRITICAL"))

    assert _params(state)["priority"] == ["HIGH", "CRITICAL"]


def test_unrecognized_values_fall_back_to_all():
    vocabulary = Vocabulary(statuses=("OPEN", "DONE"), priorities=("P1", "P2"))
    params = _params(
        FilterState(status="REGISTERED", priority="URGENT", sla_status="LATE"),
        vocabulary=vocabulary,
    )

    assert "status" not in params
    assert "priority" not in params
    assert "slaStatus" not in params


def test_remote_vocabulary_drives_accepted_values():
    vocabulary = Vocabulary(statuses=("OPEN", "DONE"), priorities=("P1", "P2"))

    params = _params(FilterState(status="open", priority="p2"), vocabulary=vocabulary)

    assert params["status"] == "OPEN"
    assert params["priority"] == "P2"


def test_search_is_trimmed_and_blank_search_omitted():
    assert _params(FilterState(search="  broken pipe "))["search"] == "broken pipe"
    assert "search" not in _params(FilterState(search="   "))


@pytest.mark.parametrize(
    "state",
    [
        FilterState(),
        FilterState(status="CLOSED", search="x"),
        FilterState(ward_id="W9", sub_zone_id="Z9", needs_assignment=True),
        FilterState(priority=HIGH_CRITICAL, page=3, page_size=100),
    ],
)
def test_ward_officer_always_scoped_to_self(state):
    params = _params(state, identity=OFFICER)

    assert params["officerId"] == "U1"


def test_maintenance_team_scoped_to_assigned_complaints():
    params = _params(FilterState(status="ASSIGNED"), identity=CREW)

    assert params["maintenanceTeamId"] == "M1"
    assert "officerId" not in params


def test_admin_ward_and_sub_zone_filters():
    params = _params(FilterState(ward_id="W1", sub_zone_id="Z3"))

    assert params["wardId"] == "W1"
    assert params["subZoneId"] == "Z3"
    assert "officerId" not in params


def test_sub_zone_ignored_without_ward():
    params = _params(FilterState(sub_zone_id="Z3"))

    assert "subZoneId" not in params


def test_ward_filter_not_available_to_other_roles():
    state = FilterState(ward_id="W1", sub_zone_id="Z3")

    for identity in (CITIZEN, OFFICER, CREW):
        params = _params(state, identity=identity)
        assert "wardId" not in params
        assert "subZoneId" not in params


def test_needs_assignment_only_for_ward_officers():
    state = FilterState(needs_assignment=True)

    assert _params(state, identity=OFFICER)["needsTeamAssignment"] is True
    assert "needsTeamAssignment" not in _params(state, identity=ADMIN)


def test_paging_always_present():
    params = _params(FilterState(page=4, page_size=10), identity=CITIZEN)

    assert params == {"page": 4, "limit": 10}


def test_identical_state_builds_equal_hashable_queries():
    state = FilterState(priority=HIGH_CRITICAL, status="CLOSED")

    first = build_query(state, DEFAULT_VOCABULARY, ADMIN)
    second = build_query(state, DEFAULT_VOCABULARY, ADMIN)

    assert first == second
    assert hash(first) == hash(second)
