"""Rate limiting utilities using SlowAPI."""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


def caller_key(request: Request) -> str:
    """Limit per authenticated user; fall back to the client address.

    The identity dependency has already run when the route decorator checks
    the limit, so ``request.state.user_id`` is set for authenticated calls.
    """

    user_id = getattr(request.state, "user_id", None)
    return f"user:{user_id}" if user_id else get_remote_address(request)


limiter = Limiter(key_func=caller_key)


def init_rate_limiter(app: FastAPI) -> None:
    """Attach the rate limiter and exception handler to the FastAPI app."""

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"detail": "Too many list requests, slow down"},
        )

    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
