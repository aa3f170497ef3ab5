"""
Property Routes - Public Catalogue and Admin Listing Management

Routes:
- GET    /properties        - public listing catalogue, newest first
- POST   /properties        - create listing (anti-forgery + session)
- PUT    /properties        - update listing by body ``id`` (anti-forgery + session)
- DELETE /properties?id=... - delete listing (anti-forgery + session)
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from core.listings import LISTINGS_TABLE, normalize_listing, validate_listing
from core.listings.schema import ID_REQUIRED
from core.storage import RecordStore, StoreError, get_record_store
from web.guard import reject_undeclared_methods, require_anti_forgery, require_session
from web.responses import error_response, read_json_body


logger = logging.getLogger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

router = APIRouter(prefix="/properties", tags=["properties"])

PROPERTY_METHODS = ("GET", "POST", "PUT", "DELETE")
reject_undeclared_methods(router, "", PROPERTY_METHODS)

# Order matters: a missing anti-forgery header is a 403 even with a valid cookie
ADMIN_GUARDS = [Depends(require_anti_forgery), Depends(require_session)]


# =============================================================================
# Public Catalogue
# =============================================================================


@router.get("")
async def list_properties(
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    """All listings, newest first."""
    try:
        rows = await run_in_threadpool(store.list_rows, LISTINGS_TABLE)
    except StoreError:
        logger.exception("Error fetching properties")
        return error_response(request, 500, "properties_fetch_failed")

    return JSONResponse(rows)


# =============================================================================
# Admin Management
# =============================================================================


@router.post("", dependencies=ADMIN_GUARDS)
async def create_property(
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    """Create a listing from the dashboard form."""
    listing = normalize_listing(await read_json_body(request))

    reason = validate_listing(listing)
    if reason:
        return error_response(request, 400, reason)

    try:
        created = await run_in_threadpool(store.insert, LISTINGS_TABLE, listing.record)
    except StoreError:
        logger.exception("Error creating property")
        return error_response(request, 500, "property_save_failed")

    return JSONResponse(created, status_code=201)


@router.put("", dependencies=ADMIN_GUARDS)
async def update_property(
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    """Replace a listing's fields. The body carries the listing ``id``."""
    listing = normalize_listing(await read_json_body(request))

    if not listing.listing_id:
        return error_response(request, 400, ID_REQUIRED)

    try:
        updated = await run_in_threadpool(
            store.update, LISTINGS_TABLE, listing.listing_id, listing.record
        )
    except StoreError:
        logger.exception("Error updating property %s", listing.listing_id)
        return error_response(request, 500, "property_save_failed")

    if updated is None:
        return error_response(request, 404, "not_found")
    return JSONResponse(updated)


@router.delete("", dependencies=ADMIN_GUARDS)
async def delete_property(
    request: Request,
    id: Optional[str] = Query(None, description="Listing ID"),
    store: RecordStore = Depends(get_record_store),
):
    """Delete a listing. The id comes from the query string or the body."""
    listing_id = id
    if not listing_id:
        body = await read_json_body(request)
        if isinstance(body, dict) and body.get("id") not in (None, ""):
            listing_id = str(body["id"])

    if not listing_id:
        return error_response(request, 400, ID_REQUIRED)

    try:
        deleted = await run_in_threadpool(store.delete, LISTINGS_TABLE, listing_id)
    except StoreError:
        logger.exception("Error deleting property %s", listing_id)
        return error_response(request, 500, "property_delete_failed")

    if not deleted:
        return error_response(request, 404, "not_found")
    return JSONResponse({"success": True})
