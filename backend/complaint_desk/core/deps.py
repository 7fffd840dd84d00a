from typing import Callable

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError

from complaint_desk.clients.complaints_api import ComplaintsApiClient
from complaint_desk.core.logging import bind_caller
from complaint_desk.core.security import decode_access_token
from complaint_desk.schemas.filters import Identity, Role


class CallerIdentity(Identity):
    """Identity plus the bearer token to forward to the complaints service."""

    access_token: str


def _bearer_token(request: Request) -> str:
    auth = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )
    return auth.split(" ", 1)[1]


async def get_identity(request: Request) -> CallerIdentity:
    token = _bearer_token(request)
    try:
        payload = decode_access_token(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        )
    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type"
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token"
        )
    role = payload.get("role")
    request.state.user_id = user_id
    request.state.role = role or "-"
    bind_caller(user_id, role)
    return CallerIdentity(
        role=role, user_id=user_id, is_authenticated=True, access_token=token
    )


def require_role(*roles: Role) -> Callable:
    allowed = {r.value for r in roles}

    async def _check(identity: CallerIdentity = Depends(get_identity)) -> CallerIdentity:
        if identity.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Not permitted"
            )
        return identity

    return _check


def get_complaints_client(request: Request) -> ComplaintsApiClient:
    return request.app.state.complaints_client
