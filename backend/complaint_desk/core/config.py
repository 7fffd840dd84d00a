"""Application configuration loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed settings exposed via dependency injection throughout the app."""

    # Read .env with BOM tolerance; case-sensitive keys
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=True,
    )

    APP_NAME: str = "Complaint Desk API"
    ENV: str = "dev"  # dev | staging | prod
    DEBUG: bool = True

    # JWT issued by the upstream auth service
    SECRET_KEY: str  # set via env/.env
    JWT_ISSUER: str = "municipal-auth"
    JWT_AUDIENCE: str = "municipal-clients"

    # CORS
    CORS_ALLOWED_ORIGINS: list[str] = Field(default_factory=list)

    # Remote complaints service
    COMPLAINTS_API_BASE_URL: str = "http://127.0.0.1:4005/api"
    COMPLAINTS_API_TIMEOUT_SEC: float = 10.0

    # List controller behaviour
    SEARCH_DEBOUNCE_MS: int = 300
    DEFAULT_PAGE_SIZE: int = 25
    # How long an identical query may reuse a previous result.
    RESULT_CACHE_TTL_SEC: int = 30
    # Last successful page per user, shown (flagged stale) when a fetch fails.
    LAST_GOOD_TTL_SEC: int = 3600
    VOCABULARY_CACHE_TTL_SEC: int = 900
    # See complaint_desk.core.rate_limit.limiter for syntax.
    COMPLAINTS_VIEW_RATE: str = "120/minute"

    # Redis Cache Configuration (optional - the service works without Redis)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str | None = None
    REDIS_ENABLED: bool = True  # Set to False to disable Redis caching

    @property
    def search_debounce_seconds(self) -> float:
        return self.SEARCH_DEBOUNCE_MS / 1000


settings = Settings()
