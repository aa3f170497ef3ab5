"""
Manzil Lead Desk - Core Business Logic

This package provides the lead intake pipeline and the plumbing around it:
1. Intake (sanitisation, rate limiting, normalisation, validation)
2. Listings and site settings
3. Storage (managed database and object storage backends)
"""

from .intake import (
    SubmissionKind,
    OwnershipSubmission,
    InterestSubmission,
    Submission,
    RateLimiter,
    SubmissionIntake,
    IntakeAccepted,
    IntakeRejected,
    normalize_submission,
    validate_submission,
)
from .listings import (
    ListingType,
    ListingCategory,
    normalize_listing,
    load_settings,
    save_settings,
)
from .storage import (
    RecordStore,
    ObjectStorage,
    StoreError,
    get_record_store,
    get_object_storage,
)

__all__ = [
    # Intake
    "SubmissionKind",
    "OwnershipSubmission",
    "InterestSubmission",
    "Submission",
    "RateLimiter",
    "SubmissionIntake",
    "IntakeAccepted",
    "IntakeRejected",
    "normalize_submission",
    "validate_submission",
    # Listings
    "ListingType",
    "ListingCategory",
    "normalize_listing",
    "load_settings",
    "save_settings",
    # Storage
    "RecordStore",
    "ObjectStorage",
    "StoreError",
    "get_record_store",
    "get_object_storage",
]
