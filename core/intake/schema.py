"""
Submission Schema - Canonical Lead Records

Two form shapes reach the intake endpoint:
- Ownership inquiry: "help me own a property" with the wanted property type
  and location.
- Interest: a lead for one listed property, tagged ``type: "interest"``.

Both are represented as frozen dataclasses sharing a common base and a
``kind`` tag. A record is built once per request, handed to the store and
discarded.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar, Final, Union


# =============================================================================
# Enums
# =============================================================================


class SubmissionKind(Enum):
    """Discriminator for the two submission shapes."""

    OWNERSHIP = "ownership"
    INTEREST = "interest"


# Table the external store writes submissions to
SUBMISSIONS_TABLE: Final[str] = "property_requests"

# Payload value of ``type`` that selects the interest shape
INTEREST_DISCRIMINATOR: Final[str] = "interest"


# =============================================================================
# Canonical Records
# =============================================================================


@dataclass(frozen=True)
class BaseSubmission:
    """Fields common to both lead forms."""

    name: str
    email: str
    employer: str
    job_title: str
    phone: str
    contact_method: str
    age: Union[int, float]
    property_value: Union[int, float]
    area: Union[int, float]
    monthly_income: Union[int, float]
    obligation_amount: Union[int, float]
    down_payment_amount: Union[int, float]
    joint_applicant_income: Union[int, float]
    has_joint_applicants: bool
    has_obligations: bool
    has_down_payment: bool

    kind: ClassVar[SubmissionKind]

    def to_record(self) -> dict[str, Any]:
        """Row handed to the store's insert."""
        return asdict(self)


@dataclass(frozen=True)
class OwnershipSubmission(BaseSubmission):
    """General ownership inquiry."""

    property_type: str
    district: str
    city: str

    kind: ClassVar[SubmissionKind] = SubmissionKind.OWNERSHIP


@dataclass(frozen=True)
class InterestSubmission(BaseSubmission):
    """Interest in a specific listed property."""

    property_id: str
    property_number: str
    property_title: str

    kind: ClassVar[SubmissionKind] = SubmissionKind.INTEREST

    def to_record(self) -> dict[str, Any]:
        record = super().to_record()
        record["type"] = INTEREST_DISCRIMINATOR
        return record


Submission = Union[OwnershipSubmission, InterestSubmission]
