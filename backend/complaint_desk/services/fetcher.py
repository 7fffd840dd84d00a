"""Result fetcher: executes list queries and tracks loading/error/data state."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Dict, Optional, Protocol, Tuple

from loguru import logger

from complaint_desk.clients.complaints_api import ComplaintsApiError
from complaint_desk.core.cache import generate_cache_key, get_cache, set_cache
from complaint_desk.core.config import settings
from complaint_desk.schemas.complaint import ResultPage
from complaint_desk.schemas.filters import ComplaintQuery, Identity

Loader = Callable[[ComplaintQuery], Awaitable[ResultPage]]


@dataclass(frozen=True)
class FetchState:
    """``data`` is the last successful page, which may belong to an older query."""

    query: Optional[ComplaintQuery] = None
    data: Optional[ResultPage] = None
    data_query: Optional[ComplaintQuery] = None
    is_loading: bool = False
    error: Optional[str] = None

    @property
    def current_data(self) -> Optional[ResultPage]:
        return self.data if self.data is not None and self.data_query == self.query else None

    @property
    def is_stale(self) -> bool:
        return self.data is not None and self.data_query != self.query

    @property
    def skipped(self) -> bool:
        return self.query is None


class ResultStore(Protocol):
    async def get(self, query: ComplaintQuery) -> Optional[ResultPage]: ...

    async def set(self, query: ComplaintQuery, page: ResultPage) -> None: ...


class MemoryResultStore:
    """Per-controller freshness cache keyed by query equality.

    Expired entries are pruned on every write, and at most ``max_entries``
    are kept (oldest first out).
    """

    def __init__(
        self,
        ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        *,
        max_entries: int = 100,
    ):
        self._ttl = settings.RESULT_CACHE_TTL_SEC if ttl is None else ttl
        self._clock = clock
        self._max_entries = max_entries
        self._entries: Dict[ComplaintQuery, Tuple[ResultPage, float]] = {}

    async def get(self, query: ComplaintQuery) -> Optional[ResultPage]:
        entry = self._entries.get(query)
        if entry is None:
            return None
        page, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[query]
            return None
        return page

    async def set(self, query: ComplaintQuery, page: ResultPage) -> None:
        now = self._clock()
        for stale in [q for q, (_, expires_at) in self._entries.items() if now >= expires_at]:
            del self._entries[stale]
        self._entries.pop(query, None)
        while len(self._entries) >= self._max_entries:
            del self._entries[next(iter(self._entries))]
        self._entries[query] = (page, now + self._ttl)

    def __len__(self) -> int:
        return len(self._entries)


class SharedResultStore:
    """Result pages in the shared cache, namespaced per user.

    Citizen queries carry no identity field, so the user id must be part of
    the key.
    """

    def __init__(self, user_id: str, ttl: int | None = None):
        self._user_id = user_id
        self._ttl = settings.RESULT_CACHE_TTL_SEC if ttl is None else ttl

    def key_for(self, query: ComplaintQuery) -> str:
        return generate_cache_key("complaints", user=self._user_id, **query.to_params())

    @property
    def last_good_key(self) -> str:
        return generate_cache_key("complaints:last", user=self._user_id)

    async def get(self, query: ComplaintQuery) -> Optional[ResultPage]:
        cached = await get_cache(self.key_for(query))
        return ResultPage.model_validate(cached) if cached else None

    async def set(self, query: ComplaintQuery, page: ResultPage) -> None:
        dumped = page.model_dump(mode="json", by_alias=True)
        await set_cache(self.key_for(query), dumped, self._ttl)
        await set_cache(
            self.last_good_key,
            {"query": query.to_params(), "page": dumped},
            settings.LAST_GOOD_TTL_SEC,
        )

    async def last_good(self) -> Optional[Tuple[ComplaintQuery, ResultPage]]:
        """The most recent successful page for this user, whatever its query."""
        cached = await get_cache(self.last_good_key)
        if not cached:
            return None
        return (
            ComplaintQuery.model_validate(cached["query"]),
            ResultPage.model_validate(cached["page"]),
        )


class ResultFetcher:
    """Runs queries through ``loader`` and exposes the state for the latest one.

    - identical queries share an in-flight request and reuse fresh results;
    - only the response for the most recently issued query is adopted;
    - a failure keeps the previous page and records the error;
    - nothing is fetched without an authenticated identity.
    """

    def __init__(self, loader: Loader, identity: Identity, *, store: ResultStore | None = None):
        self._loader = loader
        self._identity = identity
        self._store = store if store is not None else MemoryResultStore()
        self._inflight: Dict[ComplaintQuery, asyncio.Future] = {}
        self._latest: Optional[ComplaintQuery] = None
        self._state = FetchState()

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def latest_query(self) -> Optional[ComplaintQuery]:
        return self._latest

    async def fetch(self, query: ComplaintQuery, *, force: bool = False) -> FetchState:
        if not self._identity.can_query:
            self._state = replace(self._state, query=None, is_loading=False, error=None)
            return self._state

        self._latest = query
        if not force:
            cached = await self._store.get(query)
            if cached is not None:
                if query == self._latest:
                    self._adopt(query, cached)
                return self._state

        self._state = replace(self._state, query=query, is_loading=True, error=None)
        try:
            page = await asyncio.shield(self._request(query, force))
        except ComplaintsApiError as exc:
            if query == self._latest:
                logger.bind(query=query.to_params(), error=str(exc)).warning(
                    "complaints_fetch_failed"
                )
                self._state = replace(self._state, is_loading=False, error=str(exc))
            return self._state

        await self._store.set(query, page)
        if query == self._latest:
            self._adopt(query, page)
        else:
            logger.bind(query=query.to_params()).debug("complaints_response_suppressed")
        return self._state

    def restore(self, query: ComplaintQuery, page: ResultPage) -> None:
        """Seed the last-known-good page, kept on display if the next fetch fails."""
        self._state = replace(self._state, data=page, data_query=query)

    async def refetch(self) -> FetchState:
        """Manual retry of the latest query, bypassing freshness."""
        if self._latest is None:
            return self._state
        return await self.fetch(self._latest, force=True)

    def _request(self, query: ComplaintQuery, force: bool) -> asyncio.Future:
        task = self._inflight.get(query)
        if task is None or force:
            task = asyncio.ensure_future(self._loader(query))
            self._inflight[query] = task

            def _forget(done: asyncio.Future, query: ComplaintQuery = query) -> None:
                if self._inflight.get(query) is done:
                    del self._inflight[query]

            task.add_done_callback(_forget)
        return task

    def _adopt(self, query: ComplaintQuery, page: ResultPage) -> None:
        self._state = FetchState(
            query=query, data=page, data_query=query, is_loading=False, error=None
        )
