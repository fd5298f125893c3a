"""FastAPI application factory.

create_app() returns a configured FastAPI instance. Everything a request
needs (settings, DB engine and session factory, token service, optional
Redis client) is built here from one Settings object and kept on
app.state; nothing is read from the environment at request time.

Run with: uvicorn --factory linkbio.main:create_app  (or `linkbio serve`)
"""

from contextlib import asynccontextmanager
from typing import Optional

import redis.asyncio as aioredis
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linkbio import __version__
from linkbio.api import api_router
from linkbio.auth.jwt import TokenService
from linkbio.config import Settings, get_settings
from linkbio.db.engine import build_engine, build_session_factory, create_schema
from linkbio.errors import register_error_handlers
from linkbio.log import configure_logging
from linkbio.middleware.rate_limit import RateLimitMiddleware
from linkbio.middleware.request_id import RequestIdMiddleware
from linkbio.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        "linkbio.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.create_schema:
        await create_schema(app.state.engine)

    if settings.redis_url:
        client = aioredis.from_url(
            settings.redis_url, encoding="utf-8", decode_responses=True
        )
        try:
            await client.ping()
            app.state.redis = client
            logger.info("linkbio.redis_connected")
        except Exception as e:
            # Redis only backs rate limiting; run without it.
            logger.warning("linkbio.redis_unavailable", error=str(e))
            await client.aclose()

    yield

    logger.info("linkbio.shutdown")
    if app.state.redis is not None:
        await app.state.redis.aclose()
        app.state.redis = None
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.debug)

    app = FastAPI(
        title="linkbio",
        description="Link-in-bio backend: accounts, owned links, public profiles",
        version=__version__,
        lifespan=lifespan,
        # Root-level paths belong to /{username} profiles.
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/openapi.json",
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)
    app.state.token_service = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )
    app.state.redis = None

    register_error_handlers(app)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RateLimit → Security → RequestId → handler
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        default_rpm=settings.rate_limit_rpm,
        auth_rpm=settings.rate_limit_auth_rpm,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    return app
