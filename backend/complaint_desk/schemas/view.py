"""Response models for the complaints list view endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from complaint_desk.schemas.filters import FilterState


class PaginationOut(BaseModel):
    current_page: int = Field(description="1-based page currently shown")
    total_pages: int = Field(description="Always at least 1")
    total_items: int = Field(description="Total rows matching the query")
    page_size: int = Field(description="Rows per page")
    page_numbers: List[int] = Field(description="Sliding window of page buttons")
    range_start: int = Field(description="1-based index of the first row shown, 0 when empty")
    range_end: int = Field(description="1-based index of the last row shown, 0 when empty")
    has_prev: bool
    has_next: bool


class FilterOption(BaseModel):
    value: str
    label: str


class FilterOptionsOut(BaseModel):
    """Selectable filter values and the advanced filters enabled for the caller."""

    statuses: List[FilterOption] = Field(default_factory=list)
    priorities: List[FilterOption] = Field(default_factory=list)
    sla_statuses: List[FilterOption] = Field(default_factory=list)
    advanced_filters: List[str] = Field(default_factory=list)


class ComplaintListView(BaseModel):
    """Everything a client needs to draw the complaints list for one role."""

    title: str
    columns: List[str]
    filters: List[str]
    state: FilterState
    items: List[Dict[str, Any]] = Field(default_factory=list)
    pagination: PaginationOut
    is_loading: bool = False
    is_stale: bool = False
    error: Optional[str] = None
    can_retry: bool = False


class VocabularyOut(BaseModel):
    statuses: List[str]
    priorities: List[str]
    initialized: bool
