"""Project filter state and caller identity into the server query."""

from __future__ import annotations

from typing import Any, Dict, Optional

from complaint_desk.schemas.filters import (
    ALL,
    HIGH_CRITICAL,
    SLA_STATUSES,
    ComplaintQuery,
    FilterState,
    Identity,
    Role,
    Vocabulary,
)
from complaint_desk.services.view_projection import enabled_filters, resolve_role

HIGH_CRITICAL_PRIORITIES = ("HIGH", "CRITICAL")

# Constraints the caller cannot lift: the query field pinned to their own id.
IMPLICIT_IDENTITY_FIELD = {
    Role.WARD_OFFICER: "officer_id",
    Role.MAINTENANCE_TEAM: "maintenance_team_id",
}


def _enum_value(value: str, allowed) -> Optional[str]:
    if not value or value == ALL:
        return None
    upper = value.strip().upper()
    return upper if upper in allowed else None


def _priority(state: FilterState, vocabulary: Vocabulary):
    if state.priority == ALL:
        return None
    if state.priority_override:
        return state.priority_override
    if state.priority == HIGH_CRITICAL:
        return HIGH_CRITICAL_PRIORITIES
    return _enum_value(state.priority, vocabulary.priorities)


def build_query(
    state: FilterState, vocabulary: Vocabulary, identity: Identity
) -> ComplaintQuery:
    """Pure projection; unrecognized filter values are treated as ``all``."""

    allowed = enabled_filters(identity.role)
    fields: Dict[str, Any] = {"page": state.page, "limit": state.page_size}

    fields["status"] = _enum_value(state.status, vocabulary.statuses)
    fields["priority"] = _priority(state, vocabulary)

    if "ward" in allowed and state.ward_id != ALL:
        fields["ward_id"] = state.ward_id
        if "sub_zone" in allowed and state.sub_zone_id != ALL:
            fields["sub_zone_id"] = state.sub_zone_id

    if "needs_maintenance_assignment" in allowed and state.needs_assignment:
        fields["needs_team_assignment"] = True

    if "sla_status" in allowed:
        fields["sla_status"] = _enum_value(state.sla_status, SLA_STATUSES)

    search = state.search.strip()
    if search:
        fields["search"] = search

    identity_field = IMPLICIT_IDENTITY_FIELD.get(resolve_role(identity.role))
    if identity_field and identity.user_id:
        fields[identity_field] = identity.user_id

    return ComplaintQuery(**fields)
