"""
Admin Routes - Dashboard Login Gate

Routes:
- POST /login  - check credentials, set the session cookie
- POST /logout - clear the session cookie

Login sequence: method -> anti-forgery -> login rate limit (3/min per
client) -> credential check.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from core.intake import get_login_limiter
from web.admin_auth import authenticate_admin, clear_session_cookie, set_session_cookie
from web.guard import (
    RateLimitGuard,
    client_identity,
    reject_undeclared_methods,
    require_anti_forgery,
)
from web.responses import error_response, read_json_body


logger = logging.getLogger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

router = APIRouter(tags=["admin"])

for _path in ("/login", "/logout"):
    reject_undeclared_methods(router, _path, ("POST",))

login_rate_limit = RateLimitGuard(get_login_limiter, "login_rate_limited")


class LoginRequest(BaseModel):
    """Credentials posted by the dashboard login form."""

    username: Optional[str] = None
    password: Optional[str] = None


# =============================================================================
# Login/Logout Routes
# =============================================================================


@router.post("/login", dependencies=[Depends(require_anti_forgery), Depends(login_rate_limit)])
async def process_login(request: Request):
    """Process admin login."""
    payload = await read_json_body(request)
    try:
        credentials = LoginRequest.model_validate(payload)
    except ValidationError:
        credentials = LoginRequest()

    if not credentials.username or not credentials.password:
        return error_response(request, 400, "credentials_required")

    if not authenticate_admin(credentials.username, credentials.password):
        logger.warning("Failed login for %r from %s", credentials.username, client_identity(request))
        return error_response(request, 401, "invalid_credentials")

    response = JSONResponse({"success": True})
    set_session_cookie(response)
    logger.info("Admin login from %s", client_identity(request))
    return response


@router.post("/logout", dependencies=[Depends(require_anti_forgery)])
async def logout():
    """Log out the current admin user."""
    response = JSONResponse({"success": True})
    clear_session_cookie(response)
    return response
