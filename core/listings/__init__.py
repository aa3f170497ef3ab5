"""
Lead Desk - Listings and Site Settings

Sanitisation for admin-managed catalogue listings and the banner settings
row. Both are thin layers over the record store.
"""

from core.listings.schema import (
    ListingType,
    ListingCategory,
    ListingInput,
    LISTINGS_TABLE,
    PLACEHOLDER_IMAGE,
    normalize_listing,
    validate_listing,
)
from core.listings.settings import (
    BannerSettings,
    DEFAULT_SETTINGS,
    SETTINGS_TABLE,
    load_settings,
    save_settings,
)

__all__ = [
    "ListingType",
    "ListingCategory",
    "ListingInput",
    "LISTINGS_TABLE",
    "PLACEHOLDER_IMAGE",
    "normalize_listing",
    "validate_listing",
    "BannerSettings",
    "DEFAULT_SETTINGS",
    "SETTINGS_TABLE",
    "load_settings",
    "save_settings",
]
