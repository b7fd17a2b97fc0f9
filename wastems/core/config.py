"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend credentials and the JWT secret are validated
at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "your-super-secret-jwt-key"


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Everything has a development default. validate_backend_and_secret
    rejects a Firestore backend without credentials and the placeholder
    JWT secret in production.
    """

    # App
    app_name: str = "wastems"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"
    static_dir: str = "dist"

    # Process
    host: str = "0.0.0.0"
    port: int = 3001
    # Set by the serverless host; the app is exported without binding a socket.
    vercel: bool = False

    # Document store: "firestore" (REST API) or "memory" (in-process, for dev/tests)
    database_backend: str = "firestore"
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # Security
    jwt_secret: SecretStr = SecretStr(DEFAULT_JWT_SECRET)
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 30
    refresh_token_expire_days: int = 90
    bcrypt_rounds: int = 10

    # Seeded admin account
    admin_email: str = "admin@wastems.com"
    admin_default_password: SecretStr = SecretStr("admin123")
    admin_auto_repair: bool = True

    # CORS: FRONTEND_URLS (comma-separated) wins over FRONTEND_URL
    frontend_url: str = "http://localhost:5173"
    frontend_urls: str | None = None

    # Request limits
    rate_limit: str = "100 per 15 minutes"
    max_body_size: int = 10 * 1024 * 1024  # 10MB
    request_id_header: str = "X-Request-ID"

    # Lists
    default_page_size: int = 10
    max_page_size: int = 100
    max_list_fetch: int = 500

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def allowed_origins(self) -> list[str]:
        """Origins allowed by CORS, from FRONTEND_URLS or FRONTEND_URL."""
        raw = self.frontend_urls or self.frontend_url
        return [o.strip() for o in raw.split(",") if o.strip()]

    @model_validator(mode="after")
    def validate_backend_and_secret(self) -> "Settings":
        """Validate the document-store backend and the JWT secret.

        - Firestore: FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH required.
        - Memory: no credentials needed (data lives for the process lifetime).
        """
        if self.database_backend == "firestore":
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "When database_backend is 'firestore', set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                    "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
        elif self.database_backend != "memory":
            raise ValueError(
                f"database_backend must be 'firestore' or 'memory', got: {self.database_backend!r}"
            )
        secret = self.jwt_secret.get_secret_value()
        if not secret:
            raise ValueError(
                "JWT_SECRET is required. Generate with: openssl rand -hex 32."
            )
        if self.is_production and secret == DEFAULT_JWT_SECRET:
            raise ValueError(
                "JWT_SECRET must be changed from the default in production."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
