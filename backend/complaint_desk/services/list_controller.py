"""Complaints list controller.

Wires the filter store, search debounce, query builder, fetcher, pagination
and role projection together on a single asyncio loop. Every event handler
runs to completion synchronously; network work is scheduled as tasks and
``settle()`` waits for it.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Set

from complaint_desk.schemas.complaint import ResultPage
from complaint_desk.schemas.filters import ComplaintQuery, FilterState, Identity
from complaint_desk.schemas.view import ComplaintListView
from complaint_desk.services.debounce import Scheduler, SearchDebouncer
from complaint_desk.services.fetcher import FetchState, Loader, ResultFetcher, ResultStore
from complaint_desk.services.filter_state import FilterStateStore
from complaint_desk.services.pagination import PaginationController
from complaint_desk.services.query_builder import build_query
from complaint_desk.services.url_sync import seed_filter_state
from complaint_desk.services.view_projection import RoleView, project_row, project_view
from complaint_desk.services.vocabulary import VocabularySource


class ComplaintsListController:
    def __init__(
        self,
        identity: Identity,
        loader: Loader,
        *,
        vocabulary: Optional[VocabularySource] = None,
        store: Optional[ResultStore] = None,
        scheduler: Optional[Scheduler] = None,
        debounce_delay: Optional[float] = None,
        initial: Optional[FilterState] = None,
    ):
        self.identity = identity
        self.role_view: RoleView = project_view(identity.role)
        self.vocabulary = vocabulary or VocabularySource()
        self.filters = FilterStateStore(initial)
        self.pagination = PaginationController(self.filters)
        self.fetcher = ResultFetcher(loader, identity, store=store)
        self.search = SearchDebouncer(
            self.filters.set_search, delay=debounce_delay, scheduler=scheduler
        )
        self.search.reset(self.filters.state.search)
        self._tasks: Set[asyncio.Task] = set()
        self.filters.subscribe(lambda _state: self._schedule())

    # -- state ---------------------------------------------------------

    @property
    def state(self) -> FilterState:
        return self.filters.state

    def current_query(self) -> ComplaintQuery:
        return build_query(self.filters.state, self.vocabulary.current, self.identity)

    def seed_from_url(self, query_string: str) -> FilterState:
        """Initialize from the address bar; call before the first load."""
        seeded = seed_filter_state(query_string, base=self.filters.state)
        self.search.reset(seeded.search)
        return self.filters.replace(seeded)

    # -- user events ---------------------------------------------------

    def type_search(self, text: str) -> None:
        self.search.push(text)

    def clear_search(self) -> None:
        self.search.reset("")
        self.filters.set_search("")

    def set_status(self, value: str) -> None:
        self.filters.set_status(value)

    def set_priority(self, value: str) -> None:
        self.filters.set_priority(value)

    def set_ward(self, value: str) -> None:
        self.filters.set_ward(value)

    def set_sub_zone(self, value: str) -> None:
        self.filters.set_sub_zone(value)

    def set_sla_status(self, value: str) -> None:
        self.filters.set_sla_status(value)

    def set_needs_assignment(self, value: bool) -> None:
        self.filters.set_needs_assignment(value)

    def clear_filters(self) -> None:
        self.search.reset("")
        self.filters.reset_filters()

    def go_to(self, page: int) -> None:
        self.pagination.go_to(page)

    def next_page(self) -> None:
        self.pagination.next()

    def prev_page(self) -> None:
        self.pagination.prev()

    def first_page(self) -> None:
        self.pagination.first()

    def last_page(self) -> None:
        self.pagination.last()

    def set_page_size(self, size: int) -> None:
        self.pagination.set_page_size(size)

    # -- fetching ------------------------------------------------------

    def restore(self, query: ComplaintQuery, page: ResultPage) -> None:
        """Show ``page`` as the last-known-good result until a fetch succeeds."""
        self.fetcher.restore(query, page)
        self.pagination.apply_result(page, clamp=False)

    async def load(self) -> FetchState:
        """Fetch the current query and wait for any follow-up it causes."""
        self._schedule()
        await self.settle()
        return self.fetcher.state

    async def refetch(self) -> FetchState:
        state = await self.fetcher.refetch()
        self._apply(state)
        await self.settle()
        return self.fetcher.state

    async def settle(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _schedule(self) -> None:
        task = asyncio.get_running_loop().create_task(self._run(self.current_query()))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, query: ComplaintQuery) -> None:
        self._apply(await self.fetcher.fetch(query))

    def _apply(self, state: FetchState) -> None:
        # Clamping moves the page, which notifies the store and issues a new query.
        page = state.current_data
        if page is not None and state.query == self.fetcher.latest_query:
            self.pagination.apply_result(page)

    # -- view ----------------------------------------------------------

    def snapshot(self) -> ComplaintListView:
        fetch = self.fetcher.state
        page = fetch.data
        columns = self.role_view.columns
        return ComplaintListView(
            title=self.role_view.title,
            columns=list(columns),
            filters=list(self.role_view.ordered_filters),
            state=self.filters.state,
            items=[project_row(c, columns) for c in page.items] if page else [],
            pagination=self.pagination.view(),
            is_loading=fetch.is_loading,
            is_stale=fetch.is_stale,
            error=fetch.error,
            can_retry=fetch.error is not None,
        )
