"""
Submission Normalizer - Untyped Payload to Canonical Record

Forms in the wild post the same logical field under a newer camelCase name
and a legacy snake_case name. The mapping from canonical field to source
aliases lives in one table and is evaluated uniformly for every field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Final, Mapping

from core.intake.sanitize import (
    sanitize_email,
    sanitize_number,
    sanitize_phone,
    sanitize_text,
)
from core.intake.schema import (
    INTEREST_DISCRIMINATOR,
    InterestSubmission,
    OwnershipSubmission,
    Submission,
)


# =============================================================================
# Coercions
# =============================================================================


def coerce_flag(value: Any) -> bool:
    """
    Truthiness for yes/no fields.

    Legacy forms post the string "yes"; newer forms post a real boolean. Any
    other string ("no", "false", "") is false.
    """
    if isinstance(value, str):
        return value == "yes"
    return bool(value)


def coerce_identifier(value: Any) -> str:
    """Listing identifiers may arrive as numbers."""
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    return sanitize_text(value)


# =============================================================================
# Field Mapping Table
# =============================================================================


@dataclass(frozen=True)
class FieldRule:
    """How one canonical field is read from a raw payload."""

    field: str
    aliases: tuple[str, ...]
    coerce: Callable[[Any], Any]
    default: Any

    def resolve(self, payload: Mapping[str, Any]) -> Any:
        """Coerce the first present alias, or fall back to the default."""
        for alias in self.aliases:
            value = payload.get(alias)
            if value is None or value == "":
                continue
            return self.coerce(value)
        return self.default


@dataclass(frozen=True)
class NumberRule(FieldRule):
    """
    A numeric field.

    Any falsy raw value, 0 included, falls through to the next alias, so
    ``{"monthlyIncome": 0, "income": 5000}`` reads 5000.
    """

    coerce: Callable[[Any], Any] = sanitize_number
    default: Any = 0

    def resolve(self, payload: Mapping[str, Any]) -> Any:
        for alias in self.aliases:
            value = payload.get(alias)
            if not value:
                continue
            return self.coerce(value)
        return self.default


@dataclass(frozen=True)
class FlagRule:
    """A boolean field: true when any alias is truthy (either-truthy-wins)."""

    field: str
    aliases: tuple[str, ...]

    def resolve(self, payload: Mapping[str, Any]) -> bool:
        return any(coerce_flag(payload.get(alias)) for alias in self.aliases)


COMMON_FIELDS: Final[tuple[FieldRule, ...]] = (
    FieldRule("name", ("name",), sanitize_text, ""),
    FieldRule("email", ("email",), sanitize_email, ""),
    FieldRule("employer", ("employer",), sanitize_text, ""),
    FieldRule("job_title", ("jobTitle", "job_title"), sanitize_text, ""),
    FieldRule("phone", ("phone",), sanitize_phone, ""),
    FieldRule("contact_method", ("contactMethod", "contact_method"), sanitize_text, ""),
    NumberRule("age", ("age",)),
    NumberRule("property_value", ("propertyValue", "property_value")),
    NumberRule("area", ("area",)),
    NumberRule(
        "monthly_income",
        ("monthlyIncome", "monthly_income", "income"),
    ),
    NumberRule(
        "obligation_amount",
        ("obligationAmount", "obligation_amount", "commitment_amount"),
    ),
    NumberRule(
        "down_payment_amount",
        ("downPaymentAmount", "down_payment_amount", "downpayment_amount"),
    ),
    NumberRule(
        "joint_applicant_income",
        ("jointApplicantIncome", "joint_applicant_income", "cosigner_income"),
    ),
)

FLAG_FIELDS: Final[tuple[FlagRule, ...]] = (
    FlagRule("has_joint_applicants", ("hasJointApplicants", "has_joint_applicants", "has_cosigner")),
    FlagRule("has_obligations", ("hasObligations", "has_obligations", "has_commitments")),
    FlagRule("has_down_payment", ("hasDownPayment", "has_down_payment", "has_downpayment")),
)

OWNERSHIP_FIELDS: Final[tuple[FieldRule, ...]] = (
    FieldRule("property_type", ("propertyType", "property_type"), sanitize_text, ""),
    FieldRule("district", ("district",), sanitize_text, ""),
    FieldRule("city", ("city",), sanitize_text, ""),
)

INTEREST_FIELDS: Final[tuple[FieldRule, ...]] = (
    FieldRule("property_id", ("property_id", "propertyId"), coerce_identifier, ""),
    FieldRule("property_number", ("property_number", "propertyNumber"), coerce_identifier, ""),
    FieldRule("property_title", ("property_title", "propertyTitle"), sanitize_text, ""),
)


# =============================================================================
# Normalisation
# =============================================================================


def is_interest_payload(payload: Mapping[str, Any]) -> bool:
    """Interest submissions are tagged ``type: "interest"``."""
    return payload.get("type") == INTEREST_DISCRIMINATOR


def _apply(rules, payload: Mapping[str, Any]) -> dict[str, Any]:
    return {rule.field: rule.resolve(payload) for rule in rules}


def normalize_submission(payload: Any) -> Submission:
    """
    Turn a raw form payload into a canonical, sanitised submission.

    Never raises: missing or malformed fields take their defaults and a
    payload that is not a mapping normalises as an empty ownership inquiry.

    Args:
        payload: Decoded JSON body of the request

    Returns:
        InterestSubmission when the payload is tagged as interest,
        OwnershipSubmission otherwise
    """
    if not isinstance(payload, Mapping):
        payload = {}

    fields = _apply(COMMON_FIELDS, payload)
    fields.update(_apply(FLAG_FIELDS, payload))

    if is_interest_payload(payload):
        fields.update(_apply(INTEREST_FIELDS, payload))
        return InterestSubmission(**fields)

    fields.update(_apply(OWNERSHIP_FIELDS, payload))
    return OwnershipSubmission(**fields)
