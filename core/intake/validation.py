"""
Submission Validation - Post-Normalisation Invariants

Sanitisation recovers from malformed input with safe defaults. Only the
invariants checked here turn a request into a client error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final, Optional

from core.intake.schema import InterestSubmission, Submission


# =============================================================================
# Constants
# =============================================================================

MIN_NAME_LENGTH: Final[int] = 2
MIN_OWNERSHIP_PHONE_LENGTH: Final[int] = 9
MIN_INTEREST_PHONE_LENGTH: Final[int] = 10

PHONE_PATTERN: Final = re.compile(r"^[0-9+\-() ]+$")

# Reason codes, resolved to localised messages by the web layer
NAME_REQUIRED: Final[str] = "name_required"
PHONE_INVALID: Final[str] = "phone_invalid"


# =============================================================================
# Validation Result
# =============================================================================


@dataclass(frozen=True)
class SubmissionValidationResult:
    """Outcome of validating a canonical submission."""

    valid: bool
    errors: tuple[tuple[str, str], ...]  # (field, reason code)

    @property
    def is_blocked(self) -> bool:
        return not self.valid

    @property
    def first_error(self) -> Optional[tuple[str, str]]:
        return self.errors[0] if self.errors else None

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": [{"field": f, "reason": r} for f, r in self.errors],
        }


# =============================================================================
# Validation Functions
# =============================================================================


def is_valid_phone(phone: str, strict: bool = False) -> bool:
    """
    Check phone length, and the character class when ``strict``.

    Interest forms go through the strict check; ownership forms only need
    the minimum length.
    """
    if strict:
        return len(phone) >= MIN_INTEREST_PHONE_LENGTH and bool(PHONE_PATTERN.match(phone))
    return len(phone) >= MIN_OWNERSHIP_PHONE_LENGTH


def validate_submission(submission: Submission) -> SubmissionValidationResult:
    """
    Validate name and phone of a normalised submission.

    Args:
        submission: Canonical record produced by normalize_submission

    Returns:
        SubmissionValidationResult with (field, reason) pairs in check order
    """
    errors: list[tuple[str, str]] = []

    if len(submission.name) < MIN_NAME_LENGTH:
        errors.append(("name", NAME_REQUIRED))

    strict = isinstance(submission, InterestSubmission)
    if not is_valid_phone(submission.phone, strict=strict):
        errors.append(("phone", PHONE_INVALID))

    return SubmissionValidationResult(valid=not errors, errors=tuple(errors))
