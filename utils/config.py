"""
Configuration management.
"""

import os
from dataclasses import dataclass, field
from typing import List


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _detect_production() -> bool:
    if os.getenv("RAILWAY_ENVIRONMENT") is not None:
        return True
    if _env_flag("PRODUCTION"):
        return True
    return "production" in (
        os.getenv("NODE_ENV", "").lower(),
        os.getenv("ENVIRONMENT", "").lower(),
    )


def _split_origins() -> List[str]:
    raw = os.getenv("ALLOWED_ORIGINS", "")
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    Secrets (password hash, session secret, store key) have no default and
    leave the admin surface locked when unset.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: _env_flag("DEBUG"))
    is_production: bool = field(default_factory=_detect_production)
    allowed_origins: List[str] = field(default_factory=_split_origins)

    # Admin login
    admin_username: str = field(default_factory=lambda: os.getenv("ADMIN_USERNAME", "admin"))
    admin_password_hash: str = field(default_factory=lambda: os.getenv("ADMIN_PASSWORD_HASH", ""))
    session_secret: str = field(default_factory=lambda: os.getenv("SESSION_SECRET", ""))

    # Persistence
    store_backend: str = field(default_factory=lambda: os.getenv("STORE_BACKEND", "memory").lower())
    supabase_url: str = field(default_factory=lambda: os.getenv("SUPABASE_URL", "").rstrip("/"))
    supabase_key: str = field(
        default_factory=lambda: os.getenv("SUPABASE_SERVICE_KEY") or os.getenv("SUPABASE_ANON_KEY", "")
    )
    storage_bucket: str = field(default_factory=lambda: os.getenv("STORAGE_BUCKET", "images"))
    data_dir: str = field(default_factory=lambda: os.getenv("DATA_DIR", ""))
    request_timeout: int = field(default_factory=lambda: int(os.getenv("REQUEST_TIMEOUT", "30")))

    # Messages
    default_locale: str = field(default_factory=lambda: os.getenv("DEFAULT_LOCALE", "ar"))

    # Rate limiting
    login_rate_limit: int = field(default_factory=lambda: int(os.getenv("LOGIN_RATE_LIMIT", "3")))
    submission_rate_limit: int = field(
        default_factory=lambda: int(os.getenv("SUBMISSION_RATE_LIMIT", "5"))
    )
    rate_limit_window_ms: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_WINDOW_MS", "60000"))
    )

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    @property
    def is_admin_configured(self) -> bool:
        return bool(self.admin_username and self.admin_password_hash and self.session_secret)

    def to_dict(self) -> dict:
        """Convert config to dictionary. Secrets are never included."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "is_production": self.is_production,
            "allowed_origins": list(self.allowed_origins),
            "admin_username": self.admin_username,
            "admin_configured": self.is_admin_configured,
            "store_backend": self.store_backend,
            "supabase_url": self.supabase_url,
            "storage_bucket": self.storage_bucket,
            "data_dir": self.data_dir,
            "default_locale": self.default_locale,
            "login_rate_limit": self.login_rate_limit,
            "submission_rate_limit": self.submission_rate_limit,
            "rate_limit_window_ms": self.rate_limit_window_ms,
        }
