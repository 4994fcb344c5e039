"""Security headers middleware (Helmet-style)."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

# Credentials and account data: never cached by browsers or proxies
NO_STORE_PREFIXES = ("/api/v1/auth/", "/api/v1/users")

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
}

# Swagger UI loads inline scripts from jsdelivr
DOCS_FRIENDLY_CSP = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline' cdn.jsdelivr.net",
        "style-src 'self' 'unsafe-inline' cdn.jsdelivr.net",
        "img-src 'self' data: cdn.jsdelivr.net image.tmdb.org",
        "frame-ancestors 'none'",
    ]
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stamps a fixed set of security headers onto every response."""

    def __init__(
        self,
        app: ASGIApp,
        content_security_policy: str | None = None,
        hsts_max_age: int = 31536000,
        referrer_policy: str = "strict-origin-when-cross-origin",
    ):
        super().__init__(app)
        self.headers = {
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
            "X-Permitted-Cross-Domain-Policies": "none",
            "Content-Security-Policy": content_security_policy or DOCS_FRIENDLY_CSP,
            "Referrer-Policy": referrer_policy,
        }
        if hsts_max_age > 0:
            self.headers["Strict-Transport-Security"] = f"max-age={hsts_max_age}; includeSubDomains"

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers.update(self.headers)
        if request.url.path.startswith(NO_STORE_PREFIXES):
            response.headers.update(NO_STORE_HEADERS)
        return response
