"""
Request Guard - Early Rejection of Untrusted Requests

Checks, in order, each independently sufficient to reject:
1. Method: undeclared methods get 405 with an Allow header (see
   reject_undeclared_methods)
2. Anti-forgery: POST/PUT/DELETE must carry X-Requested-With: XMLHttpRequest (403)
3. Session: admin endpoints need the session cookie (401)

The anti-forgery check relies on browsers refusing to let a cross-site form
set custom headers. It is a header-presence check, not a token.
"""

from __future__ import annotations

from typing import Callable, Final, Sequence

from fastapi import APIRouter, HTTPException, Request

from core.intake.rate_limit import RateLimiter
from web.admin_auth import is_authenticated
from web.messages import message_for


# =============================================================================
# Constants
# =============================================================================

STATE_CHANGING_METHODS: Final[frozenset[str]] = frozenset({"POST", "PUT", "DELETE"})

ANTI_FORGERY_HEADER: Final[str] = "x-requested-with"
ANTI_FORGERY_VALUE: Final[str] = "XMLHttpRequest"

FORWARDED_FOR_HEADER: Final[str] = "x-forwarded-for"
UNKNOWN_CLIENT: Final[str] = "unknown"

# Methods answered with 405 when a path does not declare them
HTTP_METHODS: Final[tuple[str, ...]] = (
    "GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS",
)


# =============================================================================
# Client Identity
# =============================================================================


def client_identity(request: Request) -> str:
    """
    Best-effort client key for rate limiting.

    First address of X-Forwarded-For, else the connection address, else
    "unknown". Spoofable and shared behind NAT; never used for authorisation.
    """
    forwarded = request.headers.get(FORWARDED_FOR_HEADER, "")
    first = forwarded.split(",", 1)[0].strip()
    if first:
        return first
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


# =============================================================================
# Method Check
# =============================================================================


def reject_undeclared_methods(router: APIRouter, path: str, allowed: Sequence[str]) -> None:
    """
    Answer every method not in ``allowed`` on ``path`` with 405.

    The Allow header lists the methods declared for the path in the given
    order. Register it with the same router and path as the real endpoints.
    """
    allow = ", ".join(allowed)
    others = [m for m in HTTP_METHODS if m not in allowed]

    async def method_not_allowed(request: Request):
        raise HTTPException(
            status_code=405,
            detail=message_for(request, "method_not_allowed"),
            headers={"Allow": allow},
        )

    router.add_api_route(
        path,
        method_not_allowed,
        methods=others,
        include_in_schema=False,
        name=f"method_not_allowed:{router.prefix}{path}",
    )


# =============================================================================
# Dependencies
# =============================================================================


def require_anti_forgery(request: Request) -> None:
    """
    Dependency rejecting state-changing requests without the anti-forgery header.

    Raises:
        HTTPException(403)
    """
    if request.method not in STATE_CHANGING_METHODS:
        return
    if request.headers.get(ANTI_FORGERY_HEADER) != ANTI_FORGERY_VALUE:
        raise HTTPException(status_code=403, detail=message_for(request, "csrf_failed"))


def require_session(request: Request) -> None:
    """
    Dependency requiring a valid admin session cookie.

    Raises:
        HTTPException(401)
    """
    if not is_authenticated(request):
        raise HTTPException(status_code=401, detail=message_for(request, "unauthorized"))


class RateLimitGuard:
    """
    Dependency counting the request against a limiter.

    Args:
        get_limiter: Returns the limiter to use (resolved per request so tests
            can reset singletons)
        message_code: Message for the 429 response
    """

    def __init__(self, get_limiter: Callable[[], RateLimiter], message_code: str = "rate_limited"):
        self._get_limiter = get_limiter
        self._message_code = message_code

    def __call__(self, request: Request) -> None:
        if self._get_limiter().hit(client_identity(request)):
            raise HTTPException(
                status_code=429,
                detail=message_for(request, self._message_code),
            )
