"""Application middlewares."""

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.movieclub.core.config import Settings
from src.movieclub.core.rate_limit import global_rate_limit_middleware

from .logging_context import logging_context_middleware
from .request_tracking import request_tracking_middleware
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "setup_middlewares",
    "SecurityHeadersMiddleware",
    "global_rate_limit_middleware",
    "logging_context_middleware",
    "request_tracking_middleware",
]


def setup_middlewares(app: FastAPI, settings: Settings) -> None:
    """Install the middleware stack. Starlette runs the last-added one first."""
    # Innermost first: rate limit, then drain tracking, then log context
    for middleware in (
        global_rate_limit_middleware,
        request_tracking_middleware,
        logging_context_middleware,
    ):
        app.middleware("http")(middleware)

    # Swagger UI needs the relaxed default policy
    strict_csp = not settings.enable_openapi and bool(settings.csp_production)
    app.add_middleware(
        SecurityHeadersMiddleware,
        content_security_policy=settings.csp_production if strict_csp else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )

    # Outermost: generates/propagates X-Request-ID for everything below
    app.add_middleware(CorrelationIdMiddleware)
