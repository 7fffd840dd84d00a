"""JWT helpers for tokens issued by the upstream auth service."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import jwt

from complaint_desk.core.config import settings

ALGORITHM = "HS256"


def create_access_token(data: Dict[str, Any], expires: timedelta = timedelta(minutes=60)) -> str:
    """Mint an access token the same way the auth service does (dev and tests)."""

    now = datetime.now(timezone.utc)
    to_encode = data.copy()
    to_encode.update(
        {
            "type": "access",
            "exp": now + expires,
            "iat": now,
            "nbf": now,
            "iss": settings.JWT_ISSUER,
            "aud": settings.JWT_AUDIENCE,
        }
    )
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Validate signature, audience and issuer; raises ``JWTError`` on failure."""

    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
    )
