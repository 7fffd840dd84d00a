"""HTTP client for the remote complaints service."""

from __future__ import annotations

from typing import Any, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from complaint_desk.core.config import settings
from complaint_desk.schemas.complaint import Complaint, PaginationMeta, ResultPage
from complaint_desk.schemas.filters import ComplaintQuery
from complaint_desk.services.pagination import derive_total_pages


class ComplaintsApiError(Exception):
    """Raised for transport failures and unusable responses from the remote service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _unwrap(payload: Any) -> Any:
    # The service wraps bodies as {"success": ..., "data": ...}; accept both forms.
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class ComplaintsApiClient:
    """Thin async wrapper over the list and public-config endpoints.

    Timeouts and transport-level retries are configured here; callers never
    retry on their own.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=(base_url or settings.COMPLAINTS_API_BASE_URL).rstrip("/"),
            timeout=timeout if timeout is not None else settings.COMPLAINTS_API_TIMEOUT_SEC,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get_json(self, path: str, *, params=None, token: str | None = None) -> Any:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            response = await self._http.get(path, params=params, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise ComplaintsApiError(
                f"{path} returned HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ComplaintsApiError(f"{path} request failed: {exc}") from exc
        except ValueError as exc:
            raise ComplaintsApiError(f"{path} returned a non-JSON body") from exc

    async def list_complaints(
        self, query: ComplaintQuery, token: str | None = None
    ) -> ResultPage:
        """Fetch one page of complaints for the given query."""

        data = _unwrap(await self._get_json("/complaints", params=query.to_params(), token=token))
        if not isinstance(data, dict) or not isinstance(data.get("complaints"), list):
            raise ComplaintsApiError("/complaints response has no complaints list")
        try:
            items = [Complaint.model_validate(row) for row in data["complaints"]]
            meta = PaginationMeta.model_validate(data.get("pagination") or {})
        except ValidationError as exc:
            raise ComplaintsApiError(f"/complaints response is malformed: {exc}") from exc

        total_items = meta.total_items if data.get("pagination") else len(items)
        logger.bind(page=query.page, limit=query.limit, total_items=total_items).debug(
            "complaints_page_loaded"
        )
        return ResultPage(
            items=items,
            total_items=total_items,
            total_pages=derive_total_pages(total_items, meta.total_pages, query.limit),
        )

    async def get_public_system_config(self) -> list[dict[str, Any]]:
        """Return the public ``{key, value}`` configuration entries."""

        data = _unwrap(await self._get_json("/system-config/public"))
        if not isinstance(data, list):
            raise ComplaintsApiError("/system-config/public response is not a list")
        return [entry for entry in data if isinstance(entry, dict) and "key" in entry]
