"""Filter vocabulary: valid statuses and priorities from remote configuration."""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, Optional, Tuple

from loguru import logger

from complaint_desk.clients.complaints_api import ComplaintsApiError
from complaint_desk.core.cache import get_cache, set_cache
from complaint_desk.core.config import settings
from complaint_desk.schemas.filters import (
    DEFAULT_PRIORITIES,
    DEFAULT_STATUSES,
    DEFAULT_VOCABULARY,
    Vocabulary,
)

PRIORITIES_KEY = "COMPLAINT_PRIORITIES"
STATUSES_KEY = "COMPLAINT_STATUSES"
CACHE_KEY = "system_config:public"

ConfigLoader = Callable[[], Awaitable[list[dict[str, Any]]]]


def entries_to_map(entries: Iterable[Mapping[str, Any]]) -> Dict[str, str]:
    """``[{key, value}, ...]`` -> ``{key: value}``; later keys win."""
    return {
        str(entry["key"]): entry.get("value")
        for entry in entries
        if isinstance(entry, Mapping) and "key" in entry
    }


def parse_value_list(raw: Any, fallback: Tuple[str, ...], *, key: str = "") -> Tuple[str, ...]:
    """Decode a JSON list of strings; anything else yields ``fallback``."""
    if raw is None:
        return fallback
    try:
        parsed = json.loads(raw) if isinstance(raw, str) else raw
    except ValueError:
        logger.bind(key=key).warning("vocabulary_fallback")
        return fallback
    if not isinstance(parsed, list) or not parsed or not all(isinstance(v, str) for v in parsed):
        logger.bind(key=key).warning("vocabulary_fallback")
        return fallback
    # Keep first occurrence order
    return tuple(dict.fromkeys(v.strip().upper() for v in parsed if v.strip())) or fallback


def parse_vocabulary(config: Mapping[str, Any]) -> Vocabulary:
    return Vocabulary(
        statuses=parse_value_list(config.get(STATUSES_KEY), DEFAULT_STATUSES, key=STATUSES_KEY),
        priorities=parse_value_list(
            config.get(PRIORITIES_KEY), DEFAULT_PRIORITIES, key=PRIORITIES_KEY
        ),
    )


class VocabularySource:
    """Serves the default vocabulary until the remote configuration resolves.

    The parsed configuration is shared through the cache so every worker
    fetches it at most once per ``VOCABULARY_CACHE_TTL_SEC``.
    """

    def __init__(self, loader: Optional[ConfigLoader] = None, *, ttl: int | None = None):
        self._loader = loader
        self._ttl = settings.VOCABULARY_CACHE_TTL_SEC if ttl is None else ttl
        self._config: Dict[str, Any] = {}
        self._vocabulary = DEFAULT_VOCABULARY
        self._initialized = False

    @classmethod
    def fixed(cls, vocabulary: Vocabulary) -> "VocabularySource":
        source = cls()
        source._vocabulary = vocabulary
        source._initialized = True
        return source

    @property
    def current(self) -> Vocabulary:
        return self._vocabulary

    @property
    def config(self) -> Dict[str, Any]:
        return dict(self._config)

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def load(self) -> Vocabulary:
        if self._loader is None:
            self._initialized = True
            return self._vocabulary

        config = await get_cache(CACHE_KEY)
        if not isinstance(config, dict):
            config = await self._fetch()
        self._adopt(config)
        return self._vocabulary

    async def refresh(self) -> Vocabulary:
        """Re-read the remote configuration, skipping the cache.

        A failed fetch keeps whatever was loaded before, and the cached entry
        is only overwritten by a successful one.
        """
        if self._loader is None:
            return self._vocabulary
        config = await self._fetch()
        if config is None and self._initialized:
            logger.bind(statuses=list(self._vocabulary.statuses)).warning(
                "vocabulary_refresh_kept_previous"
            )
            return self._vocabulary
        self._adopt(config)
        return self._vocabulary

    async def _fetch(self) -> Optional[Dict[str, Any]]:
        try:
            config = entries_to_map(await self._loader())
        except ComplaintsApiError as exc:
            logger.bind(error=str(exc)).warning("system_config_fetch_failed")
            return None
        await set_cache(CACHE_KEY, config, self._ttl)
        return config

    def _adopt(self, config: Optional[Dict[str, Any]]) -> None:
        # A failed fetch still counts as initialized: defaults are the answer.
        self._config = config or {}
        self._vocabulary = parse_vocabulary(self._config)
        self._initialized = True
