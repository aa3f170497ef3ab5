"""
Tests for Submission Normalisation

Tests covering:
1. camelCase / snake_case / legacy alias resolution
2. Yes/no flags from strings and booleans
3. Ownership vs interest shape selection
4. Malformed payloads degrade to defaults
5. Normalising a stored record again changes nothing
"""

from __future__ import annotations

import pytest

from core.intake import (
    InterestSubmission,
    OwnershipSubmission,
    SubmissionKind,
    normalize_submission,
)
from core.intake.normalizer import FieldRule, NumberRule, coerce_flag, coerce_identifier
from core.intake.sanitize import sanitize_text


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def ownership_payload():
    """Ownership form as posted by the current site."""
    return {
        "name": "Sara Al-Qahtani",
        "email": "Sara@Example.com",
        "employer": "Aramco",
        "jobTitle": "Engineer",
        "phone": "0501234567",
        "contactMethod": "whatsapp",
        "age": "34",
        "propertyValue": "850000",
        "area": "220",
        "monthlyIncome": "18000",
        "obligationAmount": "2500",
        "downPaymentAmount": "100000",
        "jointApplicantIncome": "0",
        "hasJointApplicants": False,
        "hasObligations": True,
        "hasDownPayment": True,
        "propertyType": "villa",
        "district": "Al Malqa",
        "city": "Riyadh",
    }


@pytest.fixture
def interest_payload():
    """Interest form for a single listing."""
    return {
        "type": "interest",
        "name": "Omar",
        "phone": "+966501234567",
        "property_id": 12,
        "propertyNumber": "A-17",
        "propertyTitle": "Villa <Garden>",
    }


# =============================================================================
# Alias Resolution
# =============================================================================


class TestAliasResolution:
    """Each canonical field reads its aliases in order."""

    def test_camel_case_preferred(self):
        result = normalize_submission({"jobTitle": "Engineer", "job_title": "Other"})
        assert result.job_title == "Engineer"

    def test_empty_alias_falls_through(self):
        result = normalize_submission({"jobTitle": "", "job_title": "Developer"})
        assert result.job_title == "Developer"

    def test_legacy_income_alias(self):
        assert normalize_submission({"income": "5000"}).monthly_income == 5000

    def test_legacy_amount_aliases(self):
        result = normalize_submission({
            "commitment_amount": "1200",
            "downpayment_amount": "50000",
            "cosigner_income": "7000",
        })
        assert result.obligation_amount == 1200
        assert result.down_payment_amount == 50000
        assert result.joint_applicant_income == 7000

    def test_zero_amount_falls_through_to_next_alias(self):
        result = normalize_submission({"monthlyIncome": 0, "income": "5000"})
        assert result.monthly_income == 5000

    def test_string_zero_is_kept(self):
        result = normalize_submission({"monthlyIncome": "0", "income": "5000"})
        assert result.monthly_income == 0

    def test_missing_fields_take_defaults(self):
        result = normalize_submission({})
        assert result.name == ""
        assert result.email == ""
        assert result.age == 0
        assert result.has_obligations is False

    def test_unusable_numbers_become_zero(self):
        result = normalize_submission({"age": "thirty", "propertyValue": None})
        assert result.age == 0
        assert result.property_value == 0

    def test_field_rule_default(self):
        rule = FieldRule("city", ("city",), sanitize_text, "unknown")
        assert rule.resolve({}) == "unknown"
        assert rule.resolve({"city": "<Jeddah>"}) == "&lt;Jeddah&gt;"

    def test_number_rule_defaults(self):
        rule = NumberRule("area", ("area", "size"))
        assert rule.resolve({}) == 0
        assert rule.resolve({"area": False, "size": "120"}) == 120


# =============================================================================
# Flags
# =============================================================================


class TestFlags:
    """Yes/no fields accept booleans and the legacy "yes" string."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("yes", True),
            ("no", False),
            ("true", False),
            ("", False),
            (True, True),
            (False, False),
            (None, False),
            (1, True),
        ],
    )
    def test_coerce_flag(self, value, expected):
        assert coerce_flag(value) is expected

    def test_legacy_flag_aliases(self):
        result = normalize_submission({
            "has_cosigner": "yes",
            "has_commitments": "yes",
            "has_downpayment": "no",
        })
        assert result.has_joint_applicants is True
        assert result.has_obligations is True
        assert result.has_down_payment is False

    def test_either_truthy_alias_wins(self):
        result = normalize_submission({"hasObligations": False, "has_commitments": "yes"})
        assert result.has_obligations is True

        result = normalize_submission({"hasObligations": True, "has_commitments": "no"})
        assert result.has_obligations is True


# =============================================================================
# Shape Selection
# =============================================================================


class TestShapes:
    """The ``type`` tag selects the interest shape."""

    def test_ownership_submission(self, ownership_payload):
        result = normalize_submission(ownership_payload)

        assert isinstance(result, OwnershipSubmission)
        assert result.kind == SubmissionKind.OWNERSHIP
        assert result.email == "sara@example.com"
        assert result.property_value == 850000
        assert result.property_type == "villa"
        assert result.city == "Riyadh"
        assert result.has_obligations is True
        assert result.has_joint_applicants is False

    def test_ownership_record_has_no_type(self, ownership_payload):
        record = normalize_submission(ownership_payload).to_record()
        assert "type" not in record
        assert record["district"] == "Al Malqa"

    def test_interest_submission(self, interest_payload):
        result = normalize_submission(interest_payload)

        assert isinstance(result, InterestSubmission)
        assert result.kind == SubmissionKind.INTEREST
        assert result.property_id == "12"
        assert result.property_number == "A-17"
        assert result.property_title == "Villa &lt;Garden&gt;"

    def test_interest_record_is_tagged(self, interest_payload):
        record = normalize_submission(interest_payload).to_record()
        assert record["type"] == "interest"
        assert "district" not in record

    def test_kind_is_class_level(self):
        assert OwnershipSubmission.kind is SubmissionKind.OWNERSHIP
        assert InterestSubmission.kind is SubmissionKind.INTEREST

    def test_kind_not_in_record(self, ownership_payload, interest_payload):
        for payload in (ownership_payload, interest_payload):
            assert "kind" not in normalize_submission(payload).to_record()

    def test_other_type_is_ownership(self):
        assert isinstance(normalize_submission({"type": "sale"}), OwnershipSubmission)

    def test_numeric_identifier(self):
        assert coerce_identifier(42) == "42"
        assert coerce_identifier(True) == ""


# =============================================================================
# Robustness
# =============================================================================


class TestRobustness:
    """Nothing a client posts makes normalisation fail."""

    @pytest.mark.parametrize("payload", [None, [], ["name"], "text", 42, True])
    def test_non_mapping_payload(self, payload):
        result = normalize_submission(payload)
        assert isinstance(result, OwnershipSubmission)
        assert result.name == ""

    def test_unknown_fields_dropped(self):
        record = normalize_submission({"name": "Sara", "is_admin": True}).to_record()
        assert "is_admin" not in record

    def test_markup_is_escaped(self):
        result = normalize_submission({"name": "<img src=x onerror=alert(1)>"})
        assert "<" not in result.name
        assert result.name.startswith("&lt;img")

    def test_renormalising_record_is_stable(self, ownership_payload, interest_payload):
        for payload in (ownership_payload, interest_payload):
            first = normalize_submission(payload)
            assert normalize_submission(first.to_record()) == first
