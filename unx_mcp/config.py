"""Application settings loaded from the environment and `.env`."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Shared secret for tools/call (Authorization: Bearer / X-API-Key)
    mcp_api_key: str = ""

    # Catalog scoping
    current_calendar: str = "2025-2"
    active_courses_category: str | None = None
    enable_recommendations: bool = True

    # Fallback content
    purchase_url: str = "https://unx.mx/cursos"
    default_image_url: str = "https://unx.mx/static/img/curso-default.png"
    default_recommended_course: str = "Curso Propedéutico PAA"

    # Repository
    repository_timeout_seconds: float = 10.0

    # MCP handshake
    protocol_version: str = "2024-11-05"
    server_name: str = "unx_mcp"

    # Streaming transport
    sse_keepalive_seconds: float = 15.0
    sse_max_pending_messages: int = 100

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"
    cors_allowed_origins: str = "*"
    sentry_dsn: str | None = None

    @property
    def cors_origins_list(self) -> list[str]:
        if self.cors_allowed_origins.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
