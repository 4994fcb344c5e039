from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.movieclub.api.middlewares import setup_middlewares
from src.movieclub.api.v1.router import api_router
from src.movieclub.core.config import get_settings
from src.movieclub.core.db import Database
from src.movieclub.core.exceptions import setup_exception_handlers
from src.movieclub.core.health import setup_health_endpoint, setup_metrics
from src.movieclub.core.logging import get_logger, setup_logging
from src.movieclub.core.movie_metadata import MovieMetadataClient
from src.movieclub.core.rate_limit import limiter
from src.movieclub.core.redis import close_redis
from src.movieclub.core.shutdown import request_tracker

logger = get_logger(__name__)


OPENAPI_TAGS = [
    {"name": "auth", "description": "Registration, login and the current user"},
    {"name": "users", "description": "Account approval and management (admin)"},
    {"name": "movies", "description": "TMDB proxy, per-movie ratings and rooms"},
    {"name": "rooms", "description": "Viewing sessions and memberships"},
    {"name": "ratings", "description": "Club-wide rating feeds"},
    {"name": "favorites", "description": "Per-user favorite movies"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown.

    Resources injected through create_app are left for their owner to close.
    """
    settings = get_settings()
    logger.info("Starting", app_name=settings.app_name, env=settings.app_env)

    owns_database = app.state.database is None
    if owns_database:
        app.state.database = Database.from_settings(settings)

    owns_movie_client = app.state.movie_client is None
    if owns_movie_client:
        app.state.movie_client = MovieMetadataClient.from_settings(settings)
    if not app.state.movie_client.is_configured:
        logger.warning("TMDB_API_KEY is not set; movie metadata endpoints will return 503")

    yield

    grace_period = settings.shutdown_grace_period
    logger.info(
        "Shutdown initiated",
        in_flight_requests=request_tracker.in_flight_count,
        grace_period=grace_period,
    )
    await request_tracker.start_shutdown()

    drained = await request_tracker.wait_for_drain(timeout=grace_period)
    if not drained:
        logger.warning(
            "Shutdown timeout, some requests may not have completed",
            grace_period=grace_period,
            in_flight_requests=request_tracker.in_flight_count,
        )

    logger.info("Closing connections")
    await close_redis()
    if owns_movie_client:
        await app.state.movie_client.aclose()
    if owns_database:
        await app.state.database.dispose()
    logger.info("Shutdown complete")


def create_app(
    database: Database | None = None,
    movie_client: MovieMetadataClient | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        database: Connection pool to use. Created at startup when omitted.
        movie_client: TMDB client to use. Created at startup when omitted.
    """
    settings = get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Movie club: rooms, ratings and favorites on top of TMDB",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        docs_url="/docs" if settings.enable_openapi else None,
        redoc_url="/redoc" if settings.enable_openapi else None,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
    )
    app.state.database = database
    app.state.movie_client = movie_client

    setup_exception_handlers(app)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    setup_middlewares(app, settings)

    app.include_router(api_router)

    setup_metrics(app)
    setup_health_endpoint(app)

    return app


app = create_app()
