"""
Request/Response Helpers shared by the route modules.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from web.messages import message_for


async def read_json_body(request: Request) -> Any:
    """
    Decode the JSON body, treating anything undecodable as an empty object.

    Malformed bodies then fail the normal field validation instead of
    surfacing parser errors.
    """
    body = await request.body()
    if not body:
        return {}
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return {}


def error_response(request: Request, status_code: int, code: str) -> JSONResponse:
    """``{"error": <localised message>}`` with the given status."""
    return JSONResponse({"error": message_for(request, code)}, status_code=status_code)
