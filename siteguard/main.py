import logging
import math
import time
from collections import deque
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from siteguard.api.endpoints import analyze, health
from siteguard.api.middleware import RequestLoggingMiddleware
from siteguard.core.config import settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger(__name__)


# ── Rate limiting ─────────────────────────────────────────────

class SlidingWindowLimiter:
    """
    Per-client sliding window over request timestamps, kept in memory.

    Clients whose window has emptied are forgotten, both when they come
    back and in a sweep over all clients at most once per window.
    """

    def __init__(self, max_requests: int, window_seconds: float = 60, clock=time.monotonic):
        self.max_requests = max_requests
        self.window = window_seconds
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._next_sweep = clock() + window_seconds

    @property
    def tracked_clients(self) -> int:
        return len(self._hits)

    def reset(self) -> None:
        self._hits.clear()

    def check(self, client: str) -> int:
        """Record a request. Returns 0 if allowed, else seconds until a slot frees."""
        now = self._clock()
        if now >= self._next_sweep:
            self._sweep(now)

        hits = self._live_hits(client, now)
        if len(hits) >= self.max_requests:
            oldest = hits[0] if hits else now
            return max(1, math.ceil(self.window - (now - oldest)))

        hits.append(now)
        self._hits[client] = hits
        return 0

    def _live_hits(self, client: str, now: float) -> deque[float]:
        hits = self._hits.pop(client, deque())
        cutoff = now - self.window
        while hits and hits[0] <= cutoff:
            hits.popleft()
        if hits:
            self._hits[client] = hits
        return hits

    def _sweep(self, now: float) -> None:
        for client in list(self._hits):
            self._live_hits(client, now)
        self._next_sweep = now + self.window


rate_limiter = SlidingWindowLimiter(max_requests=settings.RATE_LIMIT_PER_MINUTE)


def client_ip(request: Request) -> str:
    """
    Address the rate limit is keyed on.

    X-Forwarded-For is only read when TRUSTED_PROXY_COUNT > 0; the client is
    then the entry just left of the trusted hops, or the first entry when
    the header is shorter than that.
    """
    trusted = settings.TRUSTED_PROXY_COUNT
    if trusted > 0:
        forwarded = request.headers.get("x-forwarded-for", "")
        hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
        if hops:
            return hops[max(0, len(hops) - trusted - 1)]
    return request.client.host if request.client else "unknown"


# ── Startup ───────────────────────────────────────────────────

def production_config_problems() -> list[str]:
    """Settings that make a production deployment unsafe to start."""
    problems = []
    if not settings.API_KEY:
        problems.append("API_KEY is empty")
    if "*" in settings.BACKEND_CORS_ORIGINS:
        problems.append("BACKEND_CORS_ORIGINS allows '*'")
    return problems


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.ENVIRONMENT == "production":
        problems = production_config_problems()
        if problems:
            raise RuntimeError("Refusing to start in production: " + "; ".join(problems))
    logger.info(
        "%s starting (env=%s, CT source=%s, auth=%s, rate limit=%d/min)",
        settings.PROJECT_NAME,
        settings.ENVIRONMENT,
        settings.CT_LOG_URL,
        "on" if settings.API_KEY else "off",
        settings.RATE_LIMIT_PER_MINUTE,
    )
    yield
    logger.info("Shutting down")


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# ── Middleware (last added = first executed) ──────────────────
app.add_middleware(RequestLoggingMiddleware)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    """Apply per-IP rate limiting to the analyze endpoint only."""
    if request.url.path.endswith("/analyze"):
        client = client_ip(request)
        retry_after = rate_limiter.check(client)
        if retry_after:
            logger.warning("Rate limit exceeded for %s", client)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "detail": f"Rate limit exceeded. Max {rate_limiter.max_requests} requests/minute.",
                    "retry_after": retry_after,
                },
                headers={"Retry-After": str(retry_after)},
            )
    return await call_next(request)


# ── Routes ────────────────────────────────────────────────────
app.include_router(analyze.router, prefix=settings.API_V1_STR)
app.include_router(health.router, prefix=settings.API_V1_STR)


@app.get("/")
def read_root():
    return {"status": "ok", "service": settings.PROJECT_NAME}
