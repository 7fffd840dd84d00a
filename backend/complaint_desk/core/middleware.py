"""Custom ASGI middleware used by the FastAPI app."""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from complaint_desk.core.logging import bind_caller, request_id_ctx_var, reset_caller


class RequestContextLogMiddleware(BaseHTTPMiddleware):
    """Injects request IDs and emits structured access logs."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        request_token = request_id_ctx_var.set(request_id)
        caller_tokens = bind_caller("-", None)
        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            status_code = response.status_code if response else 500
            # The identity dependency runs in the endpoint task, so its
            # context var never reaches this frame; read it off the request.
            logger.bind(
                method=request.method,
                path=str(request.url.path),
                query=request.url.query,
                status=status_code,
                duration_ms=round(duration_ms, 2),
                user_id=getattr(request.state, "user_id", "-"),
                role=getattr(request.state, "role", "-"),
            ).info("request_completed")
            if response is not None:
                response.headers.setdefault("X-Request-ID", request_id)
            request_id_ctx_var.reset(request_token)
            reset_caller(caller_tokens)
