"""Main FastAPI application for the sentiment backend."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from datetime import datetime, timezone
import time
from contextlib import asynccontextmanager
from typing import Optional

from .aggregator import SnapshotAggregator
from .api.rate_limit import RateLimiter
from .api.routes import router as api_router
from .cache import SentimentCache
from .config import Settings, settings as default_settings
from .core.config import get_config
from .core.logger import setup_logging, get_logger

logger = get_logger("loom.main")

# Hardening headers on every response; CSP and the cross-origin
# embedder/resource policies are left unset for cross-origin API clients
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
}


def create_app(
    cache: Optional[SentimentCache] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        cache: Cache to serve from; the lifespan builds the process-wide one
            backed by the live upstream sources when omitted
        settings: Settings override, mainly for tests
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app_instance: FastAPI):
        """Startup / shutdown lifecycle: owns the cache and its background refreshes."""
        setup_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
        if getattr(app_instance.state, "sentiment_cache", None) is None:
            aggregator = SnapshotAggregator()
            app_instance.state.sentiment_cache = SentimentCache(
                aggregator.fetch_fresh_snapshot,
                config=get_config(),
            )
        logger.info(
            "loom_backend_started",
            environment=settings.ENVIRONMENT,
            port=settings.PORT,
            ttl_seconds=app_instance.state.sentiment_cache.config.ttl_seconds,
        )

        yield  # FastAPI serves requests here

        await app_instance.state.sentiment_cache.aclose()
        logger.info("loom_backend_stopped")

    app = FastAPI(
        title="Loom of Society",
        description="Real-time social, tech and market sentiment for the Loom visualization",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.sentiment_cache = cache
    app.state.started_at = time.time()
    app.state.api_limiter = RateLimiter(settings.RATE_LIMIT_API)
    app.state.analyze_limiter = RateLimiter(
        settings.RATE_LIMIT_ANALYZE,
        message="Analyze rate limit exceeded. Please wait a moment.",
    )

    # Outside production any origin may call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS if settings.is_production else ["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": "Invalid request body"}, status_code=400)

    app.include_router(api_router)

    @app.get("/health")
    async def health(request: Request):
        """Health check with cache diagnostics."""
        cache: Optional[SentimentCache] = request.app.state.sentiment_cache
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": int(time.time() - request.app.state.started_at),
            "cache": cache.diagnostics() if cache is not None else None,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "loom.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG
    )
