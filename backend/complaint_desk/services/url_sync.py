"""Seed the filter state from a shareable URL query string.

Only URL -> state is implemented; state changes are not written back into the
URL, so a view is bookmarkable at the moment it is opened but not after the
user changes filters.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple, Union

from starlette.datastructures import QueryParams

from complaint_desk.schemas.filters import ALL, HIGH_CRITICAL, FilterState

RECOGNIZED_KEYS = (
    "search",
    "status",
    "priority",
    "ward",
    "subZone",
    "needsMaintenanceAssignment",
    "slaStatus",
)

_FIELD_FOR_KEY = {
    "status": "status",
    "ward": "ward_id",
    "subZone": "sub_zone_id",
    "slaStatus": "sla_status",
}


def parse_priority_list(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip().upper() for part in raw.split(",") if part.strip())


def parse_url_filters(query: Union[str, Mapping[str, str], QueryParams]) -> Dict[str, Any]:
    """Map recognized query-string keys to FilterState fields; others are ignored."""

    params = query if isinstance(query, QueryParams) else QueryParams(query)
    fields: Dict[str, Any] = {}

    search = params.get("search")
    if search:
        fields["search"] = search

    for key, field in _FIELD_FOR_KEY.items():
        value = params.get(key)
        if value:
            fields[field] = value

    priority = params.get("priority")
    if priority:
        if "," in priority:
            fields["priority"] = HIGH_CRITICAL
            fields["priority_override"] = parse_priority_list(priority)
        else:
            fields["priority"] = priority

    if params.get("needsMaintenanceAssignment") == "true":
        fields["needs_assignment"] = True

    return fields


def seed_filter_state(
    query: Union[str, Mapping[str, str], QueryParams],
    base: Optional[FilterState] = None,
) -> FilterState:
    """Build the initial FilterState for a view opened at ``query``."""

    base = base or FilterState()
    fields = parse_url_filters(query)
    seeded = {**base.model_dump(), "page": 1, **fields}
    if fields.get("ward_id", base.ward_id) == ALL:
        seeded["sub_zone_id"] = ALL
    return FilterState.model_validate(seeded)
