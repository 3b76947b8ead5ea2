from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "SiteGuard Risk Analyzer API"
    API_V1_STR: str = "/api/v1"

    # ── Environment ───────────────────────────────────────────
    # "dev"        - relaxed defaults (no API key required, CORS *).
    # "production" - API_KEY must be set, CORS wildcard is rejected.
    ENVIRONMENT: str = "dev"

    # ── Authentication ────────────────────────────────────────
    # Set via API_KEY env var or .env file. Leave empty to disable (dev mode).
    API_KEY: str = ""

    # ── CORS ──────────────────────────────────────────────────
    BACKEND_CORS_ORIGINS: list[str] = ["*"]

    # ── Rate Limiting ─────────────────────────────────────────
    # Requests per minute per IP address.
    RATE_LIMIT_PER_MINUTE: int = 30

    # ── Reverse Proxy ──────────────────────────────────────
    # How many trusted reverse proxy hops sit in front of this server.
    #   0 = no proxy - use the raw TCP peer address (request.client.host).
    #   N = N proxies - strip N entries from the right of X-Forwarded-For.
    TRUSTED_PROXY_COUNT: int = 0

    # ── Input Validation ──────────────────────────────────────
    MAX_URL_LENGTH: int = 2048
    ALLOWED_SCHEMES: list[str] = ["http", "https"]
    # Schemes that count as an encrypted transport for the protocol check
    # and the charitable certificate fallback.
    SECURE_SCHEMES: list[str] = ["https"]

    # ── Certificate Transparency lookup ───────────────────────
    CT_LOG_URL: str = "https://crt.sh/"
    CT_LOOKUP_TIMEOUT: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
