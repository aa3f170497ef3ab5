"""
Settings Routes - Promotional Banner Toggle

Routes:
- GET /settings - current banner settings (public, defaults on failure)
- PUT /settings - save banner settings (anti-forgery + session)
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from core.listings import load_settings, save_settings
from core.storage import RecordStore, StoreError, get_record_store
from web.guard import reject_undeclared_methods, require_anti_forgery, require_session
from web.responses import error_response, read_json_body


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])

SETTINGS_METHODS = ("GET", "PUT")
reject_undeclared_methods(router, "", SETTINGS_METHODS)


class SettingsUpdate(BaseModel):
    banner5_visible: Optional[bool] = None
    banner5_image: Optional[str] = None


@router.get("")
async def get_settings(store: RecordStore = Depends(get_record_store)):
    return JSONResponse(await run_in_threadpool(load_settings, store))


@router.put("", dependencies=[Depends(require_anti_forgery), Depends(require_session)])
async def update_settings(
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    """Save the banner settings, creating the row on first save."""
    try:
        update = SettingsUpdate.model_validate(await read_json_body(request))
    except ValidationError:
        return error_response(request, 400, "invalid_body")

    try:
        saved = await run_in_threadpool(
            save_settings, store, update.banner5_visible, update.banner5_image
        )
    except StoreError:
        logger.exception("Error saving settings")
        return error_response(request, 500, "settings_save_failed")

    return JSONResponse(saved)
