"""
Tests for the Public Submission Endpoint

Tests covering:
1. Valid ownership and interest submissions are stored (201)
2. Missing anti-forgery header is rejected before anything else (403)
3. The sixth submission in a minute is throttled (429)
4. Undeclared methods get 405 with the full Allow list
5. Validation errors are localised (400)
6. Store failures are generic (500)
7. The admin read path requires a session (401)
"""

from __future__ import annotations

import pytest

from conftest import XHR, XHR_EN
from core.intake import SUBMISSIONS_TABLE
from core.storage import InMemoryRecordStore, StoreError, get_record_store


# =============================================================================
# Fixtures
# =============================================================================


class FailingRecordStore(InMemoryRecordStore):
    """Record store that always fails."""

    def insert(self, table, record):
        raise StoreError("duplicate key value violates unique constraint \"pk\"")

    def list_rows(self, table, order_by="created_at", descending=True):
        raise StoreError("permission denied for table property_requests")


@pytest.fixture
def ownership_form():
    return {
        "name": "Sara",
        "email": "sara@example.com",
        "phone": "0501234567",
        "jobTitle": "Engineer",
        "monthlyIncome": "18000",
        "hasObligations": "yes",
        "propertyType": "villa",
        "city": "Riyadh",
    }


@pytest.fixture
def interest_form():
    return {
        "type": "interest",
        "name": "Omar",
        "phone": "0551234567",
        "propertyId": 4,
        "propertyTitle": "Villa Al Malqa",
    }


@pytest.fixture
def failing_store(app):
    store = FailingRecordStore()
    app.dependency_overrides[get_record_store] = lambda: store
    return store


# =============================================================================
# Accepted Submissions
# =============================================================================


class TestAccepted:
    """Valid leads are stored."""

    def test_ownership_submission(self, client, record_store, ownership_form):
        response = client.post("/submissions", json=ownership_form, headers=XHR)

        assert response.status_code == 201
        assert response.json() == {"success": True}

        row = record_store.list_rows(SUBMISSIONS_TABLE)[0]
        assert row["name"] == "Sara"
        assert row["job_title"] == "Engineer"
        assert row["monthly_income"] == 18000
        assert row["has_obligations"] is True
        assert "type" not in row

    def test_interest_submission(self, client, record_store, interest_form):
        response = client.post("/submissions", json=interest_form, headers=XHR)

        assert response.status_code == 201
        row = record_store.list_rows(SUBMISSIONS_TABLE)[0]
        assert row["type"] == "interest"
        assert row["property_id"] == "4"

    def test_markup_is_escaped_before_storage(self, client, record_store, ownership_form):
        ownership_form["name"] = "<b>Sara</b>"
        client.post("/submissions", json=ownership_form, headers=XHR)

        row = record_store.list_rows(SUBMISSIONS_TABLE)[0]
        assert row["name"] == "&lt;b&gt;Sara&lt;&#x2F;b&gt;"

    def test_display_name_email_is_stored_as_address(self, client, record_store, ownership_form):
        ownership_form["email"] = "Sara Ali <sara@example.com>"
        response = client.post("/submissions", json=ownership_form, headers=XHR)

        assert response.status_code == 201
        row = record_store.list_rows(SUBMISSIONS_TABLE)[0]
        assert row["email"] == "sara@example.com"


# =============================================================================
# Rejections
# =============================================================================


class TestAntiForgery:
    """State-changing requests need the X-Requested-With header."""

    def test_missing_header(self, client, record_store, ownership_form):
        response = client.post(
            "/submissions", json=ownership_form, headers={"Accept-Language": "en"}
        )

        assert response.status_code == 403
        assert response.json() == {"error": "CSRF validation failed"}
        assert record_store.count(SUBMISSIONS_TABLE) == 0

    def test_wrong_header_value(self, client, ownership_form):
        response = client.post(
            "/submissions", json=ownership_form, headers={"X-Requested-With": "fetch"}
        )
        assert response.status_code == 403

    def test_arabic_by_default(self, client, ownership_form):
        response = client.post("/submissions", json=ownership_form)
        assert response.json() == {"error": "فشل التحقق من مصدر الطلب"}

    def test_rejected_requests_are_not_counted(self, client, ownership_form):
        for _ in range(10):
            client.post("/submissions", json=ownership_form)

        response = client.post("/submissions", json=ownership_form, headers=XHR)
        assert response.status_code == 201


class TestRateLimit:
    """Five submissions per minute per client."""

    def test_sixth_submission_throttled(self, client, record_store, ownership_form):
        statuses = [
            client.post("/submissions", json=ownership_form, headers=XHR_EN).status_code
            for _ in range(6)
        ]

        assert statuses == [201, 201, 201, 201, 201, 429]
        assert record_store.count(SUBMISSIONS_TABLE) == 5

    def test_throttled_message(self, client, ownership_form):
        for _ in range(5):
            client.post("/submissions", json=ownership_form, headers=XHR)

        response = client.post("/submissions", json=ownership_form, headers=XHR_EN)
        assert response.json() == {"error": "Too many requests. Please try again in a minute."}

    def test_forwarded_clients_counted_separately(self, client, ownership_form):
        for _ in range(6):
            client.post(
                "/submissions",
                json=ownership_form,
                headers={**XHR, "X-Forwarded-For": "203.0.113.1"},
            )

        response = client.post(
            "/submissions",
            json=ownership_form,
            headers={**XHR, "X-Forwarded-For": "203.0.113.2"},
        )
        assert response.status_code == 201


class TestMethodNotAllowed:
    """Undeclared methods list every declared method."""

    @pytest.mark.parametrize("method", ["PATCH", "PUT", "DELETE"])
    def test_submissions(self, client, method):
        response = client.request(method, "/submissions", headers=XHR_EN)

        assert response.status_code == 405
        assert response.headers["allow"] == "GET, POST"
        assert response.json() == {"error": "Method not allowed"}

    def test_method_checked_before_anti_forgery(self, client):
        response = client.put("/submissions")
        assert response.status_code == 405


class TestValidationErrors:
    """Field errors are reported one at a time."""

    def test_name_required(self, client, ownership_form):
        ownership_form["name"] = "S"
        response = client.post("/submissions", json=ownership_form, headers=XHR_EN)

        assert response.status_code == 400
        assert response.json() == {"error": "Name is required"}

    def test_phone_invalid(self, client, ownership_form):
        ownership_form["phone"] = "0501"
        response = client.post("/submissions", json=ownership_form, headers=XHR_EN)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid mobile number"}

    def test_interest_phone_is_stricter(self, client, interest_form):
        interest_form["phone"] = "501234567"
        response = client.post("/submissions", json=interest_form, headers=XHR)
        assert response.status_code == 400

    @pytest.mark.parametrize("body", [b"", b"{not json", b"[1, 2]", b"\"text\""])
    def test_malformed_body(self, client, body):
        response = client.post(
            "/submissions",
            content=body,
            headers={**XHR_EN, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Name is required"}


class TestStoreFailure:
    """Store errors never reach the client."""

    def test_insert_failure(self, client, failing_store, ownership_form):
        response = client.post("/submissions", json=ownership_form, headers=XHR_EN)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to save submission"}
        assert "constraint" not in response.text

    def test_list_failure(self, admin_client, failing_store):
        response = admin_client.get("/submissions", headers={"Accept-Language": "en"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch submissions"}


# =============================================================================
# Admin Read Path
# =============================================================================


class TestListSubmissions:
    """GET /submissions is for the dashboard only."""

    def test_requires_session(self, client):
        response = client.get("/submissions", headers={"Accept-Language": "en"})

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_wrong_session_value(self, client):
        client.cookies.set("session_token", "guess")
        assert client.get("/submissions").status_code == 401

    def test_newest_first(self, admin_client, ownership_form, interest_form):
        admin_client.post("/submissions", json=ownership_form, headers=XHR)
        admin_client.post("/submissions", json=interest_form, headers=XHR)

        response = admin_client.get("/submissions")

        assert response.status_code == 200
        assert [row["name"] for row in response.json()] == ["Omar", "Sara"]
