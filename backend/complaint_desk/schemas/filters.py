"""Filter state, identity, vocabulary and query models for the complaints list."""

from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

ALL = "all"
HIGH_CRITICAL = "high_critical"
PAGE_SIZES = (10, 25, 50, 100)
SLA_STATUSES = ("ON_TIME", "WARNING", "OVERDUE", "COMPLETED")

DEFAULT_PRIORITIES = ("LOW", "MEDIUM", "HIGH", "CRITICAL")
DEFAULT_STATUSES = (
    "REGISTERED",
    "ASSIGNED",
    "IN_PROGRESS",
    "RESOLVED",
    "CLOSED",
    "REOPENED",
)


class Role(str, Enum):
    CITIZEN = "CITIZEN"
    WARD_OFFICER = "WARD_OFFICER"
    MAINTENANCE_TEAM = "MAINTENANCE_TEAM"
    ADMINISTRATOR = "ADMINISTRATOR"


class Identity(BaseModel):
    """Identity facts supplied by the upstream auth layer."""

    model_config = ConfigDict(frozen=True)

    role: Optional[str] = None
    user_id: Optional[str] = None
    is_authenticated: bool = False

    @property
    def can_query(self) -> bool:
        return self.is_authenticated and bool(self.user_id)


ANONYMOUS = Identity()


class Vocabulary(BaseModel):
    """Valid status and priority values, in display order."""

    model_config = ConfigDict(frozen=True)

    statuses: Tuple[str, ...] = DEFAULT_STATUSES
    priorities: Tuple[str, ...] = DEFAULT_PRIORITIES

    @property
    def supports_high_critical(self) -> bool:
        return "HIGH" in self.priorities and "CRITICAL" in self.priorities


DEFAULT_VOCABULARY = Vocabulary()


class FilterState(BaseModel):
    """Current user selections; the single source of truth for the query.

    ``search`` holds the stabilized (debounced) text, not raw keystrokes.
    ``priority_override`` is the verbatim comma-separated priority list seeded
    from the URL, if any.
    """

    model_config = ConfigDict(frozen=True)

    search: str = ""
    status: str = ALL
    priority: str = ALL
    ward_id: str = ALL
    sub_zone_id: str = ALL
    sla_status: str = ALL
    needs_assignment: bool = False
    page: int = Field(default=1, ge=1)
    page_size: int = 25
    priority_override: Optional[Tuple[str, ...]] = None

    @field_validator("page_size")
    @classmethod
    def _page_size_in_domain(cls, value: int) -> int:
        if value not in PAGE_SIZES:
            raise ValueError(f"page_size must be one of {PAGE_SIZES}")
        return value


class ComplaintQuery(BaseModel):
    """Normalized server query; hashable so identical queries share results."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: int
    limit: int
    status: Optional[str] = None
    priority: Optional[Union[str, Tuple[str, ...]]] = None
    ward_id: Optional[str] = Field(default=None, alias="wardId")
    sub_zone_id: Optional[str] = Field(default=None, alias="subZoneId")
    officer_id: Optional[str] = Field(default=None, alias="officerId")
    maintenance_team_id: Optional[str] = Field(default=None, alias="maintenanceTeamId")
    needs_team_assignment: Optional[bool] = Field(default=None, alias="needsTeamAssignment")
    sla_status: Optional[str] = Field(default=None, alias="slaStatus")
    search: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        """Server parameter names; omitted keys mean "no constraint"."""
        params = self.model_dump(by_alias=True, exclude_none=True)
        if isinstance(params.get("priority"), tuple):
            params["priority"] = list(params["priority"])
        return params
