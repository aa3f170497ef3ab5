"""
Upload Routes - Listing Image Upload

Routes:
- POST /upload - store a base64 image, return its public URL (anti-forgery + session)
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError
from starlette.concurrency import run_in_threadpool

from core.storage import ObjectStorage, StoreError, UploadError, get_object_storage, store_image
from web.guard import reject_undeclared_methods, require_anti_forgery, require_session
from web.responses import error_response, read_json_body


logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])

reject_undeclared_methods(router, "/upload", ("POST",))


class UploadRequest(BaseModel):
    """Base64 image posted by the dashboard."""

    file: Optional[str] = None
    file_name: Optional[str] = Field(None, alias="fileName")


@router.post("/upload", dependencies=[Depends(require_anti_forgery), Depends(require_session)])
async def upload_image(
    request: Request,
    storage: ObjectStorage = Depends(get_object_storage),
):
    """Decode and store the image. Returns ``{"url": <public url>}``."""
    try:
        upload = UploadRequest.model_validate(await read_json_body(request))
    except ValidationError:
        return error_response(request, 400, "upload_invalid")

    if not upload.file or not upload.file_name:
        return error_response(request, 400, "upload_invalid")

    try:
        url = await run_in_threadpool(store_image, storage, upload.file, upload.file_name)
    except UploadError as e:
        logger.warning("Rejected upload %r: %s", upload.file_name, e)
        return error_response(request, 400, "upload_invalid")
    except StoreError:
        logger.exception("Error uploading %r", upload.file_name)
        return error_response(request, 500, "upload_failed")

    return JSONResponse({"url": url})
