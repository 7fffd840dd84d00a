"""Filter state store: the current filter, search and page selections."""

from __future__ import annotations

from typing import Any, Callable, List, Optional

from complaint_desk.schemas.filters import ALL, FilterState

Listener = Callable[[FilterState], None]

# Changing any of these invalidates the current page position.
_FILTER_FIELDS = frozenset(
    {
        "search",
        "status",
        "priority",
        "ward_id",
        "sub_zone_id",
        "sla_status",
        "needs_assignment",
    }
)


class FilterStateStore:
    """Holds an immutable FilterState and replaces it on every change.

    Listeners are notified only when the state actually differs.
    """

    def __init__(self, initial: Optional[FilterState] = None):
        self._state = initial or FilterState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> FilterState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _apply(self, **changes: Any) -> FilterState:
        if _FILTER_FIELDS.intersection(changes):
            changes.setdefault("page", 1)
        # Validate through the model so page/page_size domains hold.
        new_state = FilterState.model_validate({**self._state.model_dump(), **changes})
        if new_state != self._state:
            self._state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self._state

    def replace(self, state: FilterState) -> FilterState:
        return self._apply(**state.model_dump())

    def set_search(self, value: str) -> FilterState:
        return self._apply(search=value)

    def set_status(self, value: str) -> FilterState:
        return self._apply(status=value or ALL)

    def set_priority(self, value: str) -> FilterState:
        return self._apply(priority=value or ALL)

    def set_ward(self, value: str) -> FilterState:
        return self._apply(ward_id=value or ALL, sub_zone_id=ALL)

    def set_sub_zone(self, value: str) -> FilterState:
        return self._apply(sub_zone_id=value or ALL)

    def set_sla_status(self, value: str) -> FilterState:
        return self._apply(sla_status=value or ALL)

    def set_needs_assignment(self, value: bool) -> FilterState:
        return self._apply(needs_assignment=bool(value))

    def set_page(self, page: int) -> FilterState:
        return self._apply(page=page)

    def set_page_size(self, size: int) -> FilterState:
        return self._apply(page_size=size, page=1)

    def reset_filters(self) -> FilterState:
        """Back to defaults, keeping page size and any URL priority list."""
        return self._apply(
            search="",
            status=ALL,
            priority=ALL,
            ward_id=ALL,
            sub_zone_id=ALL,
            sla_status=ALL,
            needs_assignment=False,
        )
