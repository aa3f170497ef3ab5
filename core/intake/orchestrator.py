"""
Submission Intake - End-to-End Lead Capture Pipeline

Sequences the stateful part of a public submission once the request has
passed the method and anti-forgery checks:

    rate limit -> normalise -> validate -> insert

Every failure is terminal for the request. Nothing is retried, and the
limiter count is not rolled back when a later step rejects the request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Final, Optional, Union

from core.intake.normalizer import normalize_submission
from core.intake.rate_limit import RateLimiter
from core.intake.schema import SUBMISSIONS_TABLE
from core.intake.validation import validate_submission
from core.storage.base import RecordStore, StoreError


logger = logging.getLogger(__name__)


# Reason codes for rejections outside field validation
RATE_LIMITED: Final[str] = "rate_limited"
SAVE_FAILED: Final[str] = "submission_save_failed"


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class IntakeAccepted:
    """Returned when the submission was stored."""

    record: dict[str, Any]
    status_code: int = 201


@dataclass(frozen=True)
class IntakeRejected:
    """Returned when the submission was refused."""

    status_code: int  # 400, 429 or 500
    reason: str
    field: Optional[str] = None


IntakeResult = Union[IntakeAccepted, IntakeRejected]


# =============================================================================
# Orchestrator
# =============================================================================


class SubmissionIntake:
    """
    Accepts public lead submissions.

    Args:
        store: Record store receiving the canonical row
        limiter: Submission-creation limiter keyed by client identity
    """

    def __init__(self, store: RecordStore, limiter: RateLimiter):
        self.store = store
        self.limiter = limiter

    def submit(self, payload: Any, client_id: str) -> IntakeResult:
        """
        Run one submission through the pipeline.

        Args:
            payload: Decoded request body (any JSON value)
            client_id: Best-effort client identity for rate limiting

        Returns:
            IntakeAccepted with the stored row, or IntakeRejected
        """
        if self.limiter.hit(client_id):
            return IntakeRejected(status_code=429, reason=RATE_LIMITED)

        submission = normalize_submission(payload)

        validation = validate_submission(submission)
        if validation.is_blocked:
            field, reason = validation.first_error
            logger.info(
                "Rejected %s submission from %s: %s",
                submission.kind.value,
                client_id,
                reason,
            )
            return IntakeRejected(status_code=400, reason=reason, field=field)

        try:
            stored = self.store.insert(SUBMISSIONS_TABLE, submission.to_record())
        except StoreError:
            logger.exception("Error saving %s submission", submission.kind.value)
            return IntakeRejected(status_code=500, reason=SAVE_FAILED)

        logger.info("Stored %s submission %s", submission.kind.value, stored.get("id"))
        return IntakeAccepted(record=stored)
