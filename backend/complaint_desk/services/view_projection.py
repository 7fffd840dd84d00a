"""Role-based view projection: visible columns and enabled filters per role."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple

from complaint_desk.schemas.complaint import Complaint
from complaint_desk.schemas.filters import Role
from complaint_desk.utils.complaints import display_complaint_id, row_sla_status

# Column order as rendered.
ALL_COLUMNS = (
    "complaint_id",
    "description",
    "location",
    "status",
    "priority",
    "team",
    "officer",
    "rating",
    "sla",
    "registered_on",
    "updated",
    "closed",
    "actions",
)
_BASE_COLUMNS = ("complaint_id", "description", "location", "status", "priority")
_STAFF_COLUMNS = ("rating", "sla", "registered_on", "updated", "closed")

# Advanced filters; search/status/priority are open to every role.
ADVANCED_FILTERS = ("ward", "sub_zone", "sla_status", "needs_maintenance_assignment")


@dataclass(frozen=True)
class RoleView:
    title: str
    columns: Tuple[str, ...]
    filters: FrozenSet[str]

    @property
    def ordered_filters(self) -> Tuple[str, ...]:
        return tuple(f for f in ADVANCED_FILTERS if f in self.filters)


ROLE_VIEWS: Dict[Role, RoleView] = {
    Role.CITIZEN: RoleView(
        title="Complaints",
        columns=_BASE_COLUMNS + ("actions",),
        filters=frozenset({"sla_status"}),
    ),
    Role.WARD_OFFICER: RoleView(
        title="Complaints",
        columns=_BASE_COLUMNS + ("team",) + _STAFF_COLUMNS + ("actions",),
        filters=frozenset({"sla_status", "needs_maintenance_assignment"}),
    ),
    Role.MAINTENANCE_TEAM: RoleView(
        title="My Complaints",
        columns=_BASE_COLUMNS + _STAFF_COLUMNS + ("actions",),
        filters=frozenset({"sla_status"}),
    ),
    Role.ADMINISTRATOR: RoleView(
        title="Complaints",
        columns=_BASE_COLUMNS + ("team", "officer") + _STAFF_COLUMNS + ("actions",),
        filters=frozenset({"ward", "sub_zone", "sla_status"}),
    ),
}


def resolve_role(role: Optional[str]) -> Role:
    """Unknown or missing roles get citizen visibility."""
    try:
        return Role(role)
    except ValueError:
        return Role.CITIZEN


def project_view(role: Optional[str]) -> RoleView:
    return ROLE_VIEWS[resolve_role(role)]


def visible_columns(role: Optional[str]) -> Tuple[str, ...]:
    return project_view(role).columns


def enabled_filters(role: Optional[str]) -> FrozenSet[str]:
    return project_view(role).filters


def _rating(c: Complaint) -> Optional[float]:
    return c.rating if c.rating is not None and c.rating > 0 else None


_CELL: Dict[str, Callable[[Complaint], Any]] = {
    "complaint_id": display_complaint_id,
    "description": lambda c: c.description,
    "location": lambda c: c.area,
    "status": lambda c: c.status,
    "priority": lambda c: c.priority,
    "team": lambda c: c.maintenance_team.full_name if c.maintenance_team else None,
    "officer": lambda c: c.ward_officer.full_name if c.ward_officer else None,
    "rating": _rating,
    "sla": row_sla_status,
    "registered_on": lambda c: c.submitted_on,
    "updated": lambda c: c.updated_at,
    "closed": lambda c: c.closed_on,
}


def project_row(complaint: Complaint, columns: Tuple[str, ...]) -> Dict[str, Any]:
    """Only the fields for visible columns, plus the id needed for row actions."""
    row: Dict[str, Any] = {"id": complaint.id}
    for column in columns:
        cell = _CELL.get(column)
        if cell is not None:
            row[column] = cell(complaint)
    return row
