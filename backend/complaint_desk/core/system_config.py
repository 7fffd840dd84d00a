"""Process-wide system configuration, initialized once at startup."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import Request

from complaint_desk.schemas.filters import Vocabulary
from complaint_desk.services.vocabulary import VocabularySource

# Display defaults used until (or instead of) the remote configuration.
DEFAULT_CONFIG: Dict[str, str] = {
    "APP_NAME": "Kochi Smart City",
    "APP_LOGO_URL": "/logo.png",
    "APP_LOGO_SIZE": "medium",
    "COMPLAINT_ID_PREFIX": "KSC",
    "COMPLAINT_ID_START_NUMBER": "1",
    "COMPLAINT_ID_LENGTH": "4",
}


class SystemConfigProvider:
    """Read-only view over the public configuration after ``initialize()``.

    The only mutation after startup is an explicit ``refresh()``.
    """

    def __init__(self, source: VocabularySource):
        self._source = source
        self._values: Dict[str, Any] = dict(DEFAULT_CONFIG)

    @property
    def is_initialized(self) -> bool:
        return self._source.initialized

    @property
    def vocabulary(self) -> Vocabulary:
        return self._source.current

    @property
    def vocabulary_source(self) -> VocabularySource:
        return self._source

    async def initialize(self) -> None:
        await self._source.load()
        self._values = {**DEFAULT_CONFIG, **self._non_empty(self._source.config)}

    async def refresh(self) -> Vocabulary:
        vocabulary = await self._source.refresh()
        self._values = {**DEFAULT_CONFIG, **self._non_empty(self._source.config)}
        return vocabulary

    def get(self, key: str, default: str = "") -> str:
        return self._values.get(key) or default

    @property
    def app_name(self) -> str:
        return self.get("APP_NAME", DEFAULT_CONFIG["APP_NAME"])

    @property
    def app_logo_url(self) -> str:
        return self.get("APP_LOGO_URL", DEFAULT_CONFIG["APP_LOGO_URL"])

    @staticmethod
    def _non_empty(values: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in values.items() if v not in (None, "")}


def get_system_config(request: Request) -> SystemConfigProvider:
    return request.app.state.system_config
