"""Application logging configuration helpers.

Every record carries the request id and the caller (user id and role) so the
list controller's events (``page_clamped``, ``complaints_fetch_failed``, ...)
can be traced back to the view request that produced them.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar, Token
from sys import stdout
from typing import Any, Optional, Tuple

from loguru import logger

from complaint_desk.core.config import settings

request_id_ctx_var: ContextVar[str] = ContextVar("request_id", default="-")
user_id_ctx_var: ContextVar[str] = ContextVar("user_id", default="-")
role_ctx_var: ContextVar[str] = ContextVar("role", default="-")


def bind_caller(user_id: str, role: Optional[str]) -> Tuple[Token, Token]:
    """Attach the authenticated caller to log records in the current context."""
    return user_id_ctx_var.set(user_id), role_ctx_var.set(role or "-")


def reset_caller(tokens: Tuple[Token, Token]) -> None:
    user_token, role_token = tokens
    user_id_ctx_var.reset(user_token)
    role_ctx_var.reset(role_token)


def _patch_record(record: dict[str, Any]) -> None:
    extra = record["extra"]
    extra.setdefault("service", settings.APP_NAME)
    extra.setdefault("env", settings.ENV)
    extra.setdefault("request_id", request_id_ctx_var.get())
    extra.setdefault("user_id", user_id_ctx_var.get())
    extra.setdefault("role", role_ctx_var.get())


def setup_logging() -> None:
    """Configure the standard logging module and Loguru sinks."""

    level = "DEBUG" if settings.DEBUG and settings.ENV == "dev" else "INFO"
    logging.basicConfig(level=logging.INFO)
    # Request lines from the outbound client duplicate complaints_page_loaded.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logger.remove()
    logger.configure(patcher=_patch_record)
    logger.add(
        stdout,
        level=level,
        enqueue=True,
        backtrace=False,
        diagnose=False,
        serialize=True,
    )
