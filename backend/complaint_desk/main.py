"""Application entry point for the complaints list service."""

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from complaint_desk.api.routes.complaints import router as complaints_router
from complaint_desk.clients.complaints_api import ComplaintsApiClient
from complaint_desk.core.cache import close_redis_client, get_redis_client
from complaint_desk.core.config import settings
from complaint_desk.core.logging import setup_logging
from complaint_desk.core.middleware import RequestContextLogMiddleware
from complaint_desk.core.rate_limit import init_rate_limiter
from complaint_desk.core.system_config import SystemConfigProvider, get_system_config
from complaint_desk.services.vocabulary import VocabularySource

setup_logging()

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

init_rate_limiter(app)

app.add_middleware(RequestContextLogMiddleware)


def _cors_origins() -> list[str]:
    if settings.ENV == "prod":
        if not settings.CORS_ALLOWED_ORIGINS:
            raise RuntimeError("CORS_ALLOWED_ORIGINS must be configured for prod")
        return settings.CORS_ALLOWED_ORIGINS
    return settings.CORS_ALLOWED_ORIGINS or ["http://localhost:5173"]


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)


@app.on_event("startup")
async def startup_event():
    """Create the remote client and load the system configuration once."""
    client = ComplaintsApiClient()
    app.state.complaints_client = client
    system_config = SystemConfigProvider(VocabularySource(client.get_public_system_config))
    await get_redis_client()
    await system_config.initialize()
    app.state.system_config = system_config


@app.on_event("shutdown")
async def shutdown_event():
    await app.state.complaints_client.aclose()
    await close_redis_client()


@app.get("/api/healthz", tags=["system"], summary="Liveness probe")
def healthz() -> dict[str, str]:
    """Simple liveness probe that load balancers and monitors can call."""

    return {"status": "ok"}


@app.get("/api/readyz", tags=["system"], summary="Readiness probe")
async def readyz(system_config: SystemConfigProvider = Depends(get_system_config)):
    if not system_config.is_initialized:
        raise HTTPException(status_code=503, detail="System configuration not loaded")
    return {"ready": True, "app_name": system_config.app_name}


app.include_router(complaints_router, prefix="/api")
