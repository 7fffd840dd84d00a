"""Small helpers for complaint labels, identifiers and SLA classification."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from complaint_desk.schemas.complaint import Complaint

RESOLVED_STATUSES = {"RESOLVED", "CLOSED"}


def pretty_label(value: str) -> str:
    """``IN_PROGRESS`` -> ``In Progress``."""
    return " ".join(part.capitalize() for part in value.lower().split("_"))


def is_resolved(status: str) -> bool:
    return status.upper() in RESOLVED_STATUSES


def display_complaint_id(complaint: Complaint) -> str:
    return complaint.complaint_id or complaint.id[-6:]


def calculate_sla_status(
    submitted_at: datetime,
    sla_hours: float,
    status: str,
    now: Optional[datetime] = None,
) -> str:
    """Classify a complaint against its SLA deadline.

    Naive datetimes are treated as UTC.
    """
    if is_resolved(status):
        return "COMPLETED"

    now = now or datetime.now(timezone.utc)
    if submitted_at.tzinfo is None:
        submitted_at = submitted_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    hours_elapsed = (now - submitted_at).total_seconds() / 3600
    if hours_elapsed > sla_hours:
        return "OVERDUE"
    if hours_elapsed > sla_hours * 0.8:
        return "WARNING"
    return "ON_TIME"


def row_sla_status(complaint: Complaint, now: Optional[datetime] = None) -> Optional[str]:
    """The server's SLA status, or one derived from ``slaHours`` when it is absent."""
    if complaint.sla_status:
        return complaint.sla_status
    if complaint.submitted_on is None or not complaint.sla_hours:
        return None
    return calculate_sla_status(complaint.submitted_on, complaint.sla_hours, complaint.status, now)
