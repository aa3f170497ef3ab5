"""
Submission Routes - Public Lead Capture and Admin Read Path

Routes:
- POST /submissions - public lead intake (ownership or interest form)
- GET  /submissions - all submissions, newest first (admin session required)

Intake sequence: method -> anti-forgery -> rate limit -> normalise ->
validate -> insert. Store failures are logged and answered with a generic
500; store error text never reaches the client.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from core.intake import (
    IntakeAccepted,
    SubmissionIntake,
    SUBMISSIONS_TABLE,
    get_submission_limiter,
)
from core.storage import RecordStore, StoreError, get_record_store
from web.guard import (
    client_identity,
    reject_undeclared_methods,
    require_anti_forgery,
    require_session,
)
from web.responses import error_response, read_json_body


logger = logging.getLogger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

router = APIRouter(prefix="/submissions", tags=["submissions"])

SUBMISSION_METHODS = ("GET", "POST")
reject_undeclared_methods(router, "", SUBMISSION_METHODS)


def get_submission_intake(store: RecordStore = Depends(get_record_store)) -> SubmissionIntake:
    """Dependency wiring the intake pipeline to the configured store and limiter."""
    return SubmissionIntake(store=store, limiter=get_submission_limiter())


# =============================================================================
# Public Intake
# =============================================================================


@router.post("", dependencies=[Depends(require_anti_forgery)])
async def create_submission(
    request: Request,
    intake: SubmissionIntake = Depends(get_submission_intake),
):
    """
    Accept a lead from either public form.

    Returns 201 ``{"success": true}`` on success; 400, 429 or 500 with a
    localised ``error`` message otherwise.
    """
    payload = await read_json_body(request)
    result = await run_in_threadpool(intake.submit, payload, client_identity(request))

    if isinstance(result, IntakeAccepted):
        return JSONResponse({"success": True}, status_code=result.status_code)

    return error_response(request, result.status_code, result.reason)


# =============================================================================
# Admin Read Path
# =============================================================================


@router.get("", dependencies=[Depends(require_session)])
async def list_submissions(
    request: Request,
    store: RecordStore = Depends(get_record_store),
):
    """All submissions, newest first."""
    try:
        rows = await run_in_threadpool(store.list_rows, SUBMISSIONS_TABLE)
    except StoreError:
        logger.exception("Error fetching submissions")
        return error_response(request, 500, "submissions_fetch_failed")

    return JSONResponse(rows)
