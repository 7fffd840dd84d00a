"""Pagination controller for the complaints list.

Page position lives in the filter state store; this module derives totals
from the latest result page and keeps the position inside them.
"""

from __future__ import annotations

import math
from typing import List, Optional

from loguru import logger

from complaint_desk.schemas.complaint import ResultPage
from complaint_desk.schemas.view import PaginationOut
from complaint_desk.services.filter_state import FilterStateStore

MAX_PAGE_BUTTONS = 5


def derive_total_pages(total_items: int, total_pages: Optional[int], page_size: int) -> int:
    """Server total when present, else computed from the item count; never below 1."""
    if total_pages is None:
        total_pages = math.ceil(total_items / page_size) if page_size else 1
    return max(1, total_pages)


def clamp_page(current_page: int, total_pages: int, total_items: int) -> int:
    if current_page > total_pages:
        current_page = total_pages
    if total_items == 0 and current_page != 1:
        current_page = 1
    return max(1, current_page)


def page_window(current_page: int, total_pages: int, max_buttons: int = MAX_PAGE_BUTTONS) -> List[int]:
    """Up to ``max_buttons`` page numbers centred on the current page."""
    start = max(1, current_page - max_buttons // 2)
    end = min(total_pages, start + max_buttons - 1)
    if end - start < max_buttons - 1:
        start = max(1, end - max_buttons + 1)
    return list(range(start, end + 1))


class PaginationController:
    def __init__(self, store: FilterStateStore):
        self._store = store
        self._total_items = 0
        self._total_pages = 1

    @property
    def current_page(self) -> int:
        return self._store.state.page

    @property
    def page_size(self) -> int:
        return self._store.state.page_size

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def total_items(self) -> int:
        return self._total_items

    def apply_result(self, result: ResultPage, *, clamp: bool = True) -> bool:
        """Adopt totals from a result; returns True when the page had to move."""
        self._total_items = result.total_items
        self._total_pages = max(1, result.total_pages)
        if not clamp:
            return False
        clamped = clamp_page(self.current_page, self._total_pages, self._total_items)
        if clamped == self.current_page:
            return False
        logger.bind(
            from_page=self.current_page,
            to_page=clamped,
            total_pages=self._total_pages,
            total_items=self._total_items,
        ).info("page_clamped")
        self._store.set_page(clamped)
        return True

    def go_to(self, page: int) -> int:
        self._store.set_page(min(max(1, page), self._total_pages))
        return self.current_page

    def next(self) -> int:
        return self.go_to(self.current_page + 1)

    def prev(self) -> int:
        return self.go_to(self.current_page - 1)

    def first(self) -> int:
        return self.go_to(1)

    def last(self) -> int:
        return self.go_to(self._total_pages)

    def set_page_size(self, size: int) -> None:
        self._store.set_page_size(size)

    def page_numbers(self) -> List[int]:
        return page_window(self.current_page, self._total_pages)

    def view(self) -> PaginationOut:
        page, size, total = self.current_page, self.page_size, self._total_items
        if total == 0:
            range_start = range_end = 0
        else:
            range_start = (page - 1) * size + 1
            range_end = min(page * size, total)
        return PaginationOut(
            current_page=page,
            total_pages=self._total_pages,
            total_items=total,
            page_size=size,
            page_numbers=self.page_numbers(),
            range_start=range_start,
            range_end=range_end,
            has_prev=page > 1,
            has_next=page < self._total_pages,
        )
