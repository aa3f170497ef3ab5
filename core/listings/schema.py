"""
Listing Schema - Public Property Catalogue Records

Listings are created and edited from the admin dashboard. Input is sanitised
with the same field-table approach as lead submissions; enum-like fields fall
back to their first value rather than rejecting the request.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Final, Mapping, Optional

from core.intake.normalizer import FieldRule
from core.intake.sanitize import sanitize_number, sanitize_text


# =============================================================================
# Enums
# =============================================================================


class ListingType(Enum):
    """Whether the listing is offered for sale or for rent."""

    SALE = "sale"
    RENT = "rent"


class ListingCategory(Enum):
    """Kind of property."""

    APARTMENT = "apartment"
    VILLA = "villa"
    OFFICE = "office"
    LAND = "land"


# =============================================================================
# Constants
# =============================================================================

LISTINGS_TABLE: Final[str] = "properties"

PLACEHOLDER_IMAGE: Final[str] = "https://picsum.photos/seed/new/800/600"

MIN_TITLE_LENGTH: Final[int] = 2

TITLE_REQUIRED: Final[str] = "title_required"
ID_REQUIRED: Final[str] = "id_required"


def _enum_value(enum_cls, default):
    def coerce(value: Any) -> str:
        try:
            return enum_cls(value).value
        except (TypeError, ValueError):
            return default.value
    return coerce


def _features(value: Any) -> list[str]:
    """Feature lists arrive as arrays or as one comma-separated string."""
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return []
    features = [sanitize_text(item) for item in value]
    return [f for f in features if f]


def _image(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return PLACEHOLDER_IMAGE


def _show_price(value: Any) -> bool:
    # Only an explicit false hides the price
    return value is not False


LISTING_FIELDS: Final[tuple[FieldRule, ...]] = (
    FieldRule("title", ("title",), sanitize_text, ""),
    FieldRule("price", ("price",), sanitize_number, 0),
    FieldRule("location", ("location",), sanitize_text, ""),
    FieldRule("type", ("type",), _enum_value(ListingType, ListingType.SALE), ListingType.SALE.value),
    FieldRule(
        "category",
        ("category",),
        _enum_value(ListingCategory, ListingCategory.APARTMENT),
        ListingCategory.APARTMENT.value,
    ),
    FieldRule("bedrooms", ("bedrooms",), sanitize_number, 0),
    FieldRule("bathrooms", ("bathrooms",), sanitize_number, 0),
    FieldRule("area", ("area",), sanitize_number, 0),
    FieldRule("description", ("description",), sanitize_text, ""),
    FieldRule("features", ("features",), _features, []),
    FieldRule("image", ("image",), _image, PLACEHOLDER_IMAGE),
    FieldRule("show_price", ("showPrice", "show_price"), _show_price, True),
    FieldRule("property_number", ("propertyNumber", "property_number"), sanitize_text, ""),
    FieldRule("license_number", ("licenseNumber", "license_number"), sanitize_text, ""),
    FieldRule("sub_type", ("subType", "sub_type"), sanitize_text, ""),
)


# =============================================================================
# Normalisation
# =============================================================================


@dataclass(frozen=True)
class ListingInput:
    """A sanitised listing row and the id it targets (for updates)."""

    record: dict[str, Any]
    listing_id: Optional[str]

    @property
    def title(self) -> str:
        return self.record["title"]


def normalize_listing(payload: Any) -> ListingInput:
    """
    Sanitise a listing payload from the dashboard.

    Args:
        payload: Decoded request body

    Returns:
        ListingInput with the row to store and the optional ``id``
    """
    if not isinstance(payload, Mapping):
        payload = {}

    record = {rule.field: rule.resolve(payload) for rule in LISTING_FIELDS}
    record["features"] = list(record["features"])  # never hand out the shared default

    listing_id = payload.get("id")
    if listing_id is not None and listing_id != "":
        listing_id = str(listing_id)
    else:
        listing_id = None

    return ListingInput(record=record, listing_id=listing_id)


def validate_listing(listing: ListingInput) -> Optional[str]:
    """Return a reason code when the listing cannot be stored, else None."""
    if len(listing.title) < MIN_TITLE_LENGTH:
        return TITLE_REQUIRED
    return None
