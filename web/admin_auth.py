"""
Admin Authentication - Shared-Secret Session for the Dashboard

Implements:
- Username + password check against environment configuration
- Password verification against a PBKDF2 hash
- Session cookie whose value is the configured session secret

Known limitations:
- The session is a static shared secret, not a per-login signed token. It
  only expires through the 24 hour cookie lifetime and is rotated by
  changing SESSION_SECRET.
- Cross-site protection comes from SameSite=Strict plus the anti-forgery
  header check in web.guard, not from a CSRF token.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from typing import Final, Optional

from fastapi import Request, Response

from utils.config import Config


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

SESSION_COOKIE_NAME: Final[str] = "session_token"
SESSION_DURATION_HOURS: Final[int] = 24

PBKDF2_ITERATIONS: Final[int] = 100000


# =============================================================================
# Password Hashing
# =============================================================================


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """
    Hash a password using PBKDF2-HMAC-SHA256.

    Returns: salt$hash (both hex-encoded)
    """
    if salt is None:
        salt = secrets.token_hex(16)

    hash_bytes = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        PBKDF2_ITERATIONS,
    )
    return f"{salt}${hash_bytes.hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against a stored hash."""
    try:
        salt, _ = stored_hash.split("$", 1)
        return hmac.compare_digest(hash_password(password, salt), stored_hash)
    except (ValueError, AttributeError):
        return False


# =============================================================================
# Authentication Functions
# =============================================================================


def authenticate_admin(username: str, password: str, config: Optional[Config] = None) -> bool:
    """
    Check submitted credentials.

    Args:
        username: Submitted username (exact match)
        password: Plain text password

    Returns:
        True if both match the configured admin, False otherwise
    """
    config = config or Config.load()

    if not config.is_admin_configured:
        # Nothing configured - reject all
        logger.warning("Login attempted but admin credentials are not configured")
        return False

    if not hmac.compare_digest(username.encode("utf-8"), config.admin_username.encode("utf-8")):
        return False

    return verify_password(password, config.admin_password_hash)


def is_session_valid(token: Optional[str], config: Optional[Config] = None) -> bool:
    """
    Compare a session cookie value with the configured secret.

    An unset secret never matches, so an unconfigured deployment has no
    valid sessions.
    """
    config = config or Config.load()
    if not token or not config.session_secret:
        return False
    return hmac.compare_digest(token.encode("utf-8"), config.session_secret.encode("utf-8"))


def is_authenticated(request: Request) -> bool:
    """Whether the request carries a valid session cookie."""
    return is_session_valid(request.cookies.get(SESSION_COOKIE_NAME))


def set_session_cookie(response: Response, config: Optional[Config] = None) -> None:
    """Set the session cookie on a response."""
    config = config or Config.load()

    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=config.session_secret,
        max_age=SESSION_DURATION_HOURS * 3600,
        path="/",
        httponly=True,
        secure=config.is_production,
        samesite="strict",
    )


def clear_session_cookie(response: Response) -> None:
    """Clear the session cookie on a response."""
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")


# =============================================================================
# Helper: Generate Password Hash (for setup)
# =============================================================================


def generate_password_hash(password: str) -> str:
    """
    Generate a password hash for environment variable setup.

    Usage:
        python -c "from web.admin_auth import generate_password_hash; print(generate_password_hash('your-password'))"

    Then set: ADMIN_PASSWORD_HASH=<output>
    """
    return hash_password(password)


def is_admin_configured() -> bool:
    """Check if admin authentication is properly configured."""
    return Config.load().is_admin_configured
