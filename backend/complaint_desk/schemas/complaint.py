"""Pydantic models for complaint records returned by the remote service."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PersonRef(BaseModel):
    """Officer or maintenance team member attached to a complaint."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    full_name: Optional[str] = Field(default=None, alias="fullName")


class Complaint(BaseModel):
    """A single complaint row as served by the list endpoint."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    complaint_id: Optional[str] = Field(default=None, alias="complaintId")
    type: Optional[str] = None
    description: str = ""
    area: Optional[str] = None
    status: str
    priority: str
    maintenance_team: Optional[PersonRef] = Field(default=None, alias="maintenanceTeam")
    ward_officer: Optional[PersonRef] = Field(default=None, alias="wardOfficer")
    rating: Optional[float] = None
    sla_status: Optional[str] = Field(default=None, alias="slaStatus")
    sla_hours: Optional[float] = Field(default=None, alias="slaHours")
    submitted_on: Optional[datetime] = Field(default=None, alias="submittedOn")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    closed_on: Optional[datetime] = Field(default=None, alias="closedOn")


class PaginationMeta(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    total_items: int = Field(default=0, ge=0, alias="totalItems")
    total_pages: Optional[int] = Field(default=None, alias="totalPages")


class ResultPage(BaseModel):
    """One page of complaints; replaced wholesale on every successful fetch."""

    model_config = ConfigDict(frozen=True)

    items: List[Complaint] = Field(default_factory=list)
    total_items: int = Field(default=0, ge=0)
    total_pages: int = Field(default=1, ge=1)
