from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Movie Club API"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    log_level: str = "INFO"  # Ignored when debug is on
    enable_openapi: bool = True  # Set to False in production

    # Security
    log_user_identifiers: bool = False  # Adds username to log context when enabled
    # CSP for production (no unsafe-inline, no external CDN) - set to empty string to use default
    csp_production: str = "default-src 'self'; frame-ancestors 'none'"

    # Database
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_echo: bool = False

    # Shutdown
    shutdown_grace_period: int = 30

    # Auth
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 7
    argon2_time_cost: int = 3
    argon2_memory_cost: int = 65536
    argon2_parallelism: int = 1

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Redis (optional - app works without it)
    redis_url: str | None = None  # e.g., "redis://localhost:6379/0"
    redis_pool_size: int = 10

    # Rate Limiting (global middleware - DoS protection)
    global_rate_limit_per_second: int = 10  # Max requests/second per IP
    global_rate_limit_burst: int = 20  # Token bucket burst capacity

    # TMDB (movie metadata)
    tmdb_api_key: str | None = None  # Movie endpoints return 503 when unset
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_language: str = "fr-FR"
    tmdb_timeout_seconds: float = 10.0
    movie_details_cache_ttl: int = 86400  # 24 hours
    movie_search_cache_ttl: int = 3600  # 1 hour

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        if v == "change-this-to-a-secure-random-string":
            raise ValueError(
                "JWT_SECRET_KEY must be changed from default value. "
                "Generate a secure secret with: openssl rand -hex 32"
            )
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters")
        return v

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Validate CORS origins - reject wildcards when credentials are used."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings()
