"""
Lead Desk - Submission Intake Module

Accepts untrusted public form input for the two lead forms (ownership
inquiry and per-property interest), sanitises and normalises it into a
canonical record, throttles abusive clients and hands the record to the
external store.
"""

from core.intake.sanitize import (
    sanitize_text,
    sanitize_number,
    sanitize_email,
    sanitize_phone,
    sanitize_record,
)
from core.intake.rate_limit import (
    RateLimitEntry,
    RateLimitStore,
    InMemoryRateLimitStore,
    RateLimiter,
    is_rate_limited,
    get_login_limiter,
    get_submission_limiter,
    reset_rate_limiters,
)
from core.intake.schema import (
    SubmissionKind,
    BaseSubmission,
    OwnershipSubmission,
    InterestSubmission,
    Submission,
    SUBMISSIONS_TABLE,
)
from core.intake.normalizer import (
    FieldRule,
    FlagRule,
    normalize_submission,
    is_interest_payload,
)
from core.intake.validation import (
    SubmissionValidationResult,
    validate_submission,
)
from core.intake.orchestrator import (
    IntakeAccepted,
    IntakeRejected,
    IntakeResult,
    SubmissionIntake,
)

__all__ = [
    # Sanitisation
    "sanitize_text",
    "sanitize_number",
    "sanitize_email",
    "sanitize_phone",
    "sanitize_record",
    # Rate limiting
    "RateLimitEntry",
    "RateLimitStore",
    "InMemoryRateLimitStore",
    "RateLimiter",
    "is_rate_limited",
    "get_login_limiter",
    "get_submission_limiter",
    "reset_rate_limiters",
    # Schema
    "SubmissionKind",
    "BaseSubmission",
    "OwnershipSubmission",
    "InterestSubmission",
    "Submission",
    "SUBMISSIONS_TABLE",
    # Normalisation
    "FieldRule",
    "FlagRule",
    "normalize_submission",
    "is_interest_payload",
    # Validation
    "SubmissionValidationResult",
    "validate_submission",
    # Orchestration
    "IntakeAccepted",
    "IntakeRejected",
    "IntakeResult",
    "SubmissionIntake",
]
