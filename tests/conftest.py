"""
Shared fixtures for the HTTP tests.

Each test gets a fresh app, fresh limiters and in-memory storage, with admin
credentials configured through the environment.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from core.intake import reset_rate_limiters
from core.storage import (
    InMemoryObjectStorage,
    InMemoryRecordStore,
    get_object_storage,
    get_record_store,
    reset_storage,
)
from web.admin_auth import SESSION_COOKIE_NAME, hash_password


ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct horse battery"
SESSION_SECRET = "s3ssion-secret-value"

XHR = {"X-Requested-With": "XMLHttpRequest"}
XHR_EN = {**XHR, "Accept-Language": "en"}

_PASSWORD_HASH = hash_password(ADMIN_PASSWORD)


@pytest.fixture
def admin_env(monkeypatch):
    """Development environment with the admin login configured."""
    for name in (
        "RAILWAY_ENVIRONMENT",
        "PRODUCTION",
        "NODE_ENV",
        "ENVIRONMENT",
        "DEFAULT_LOCALE",
        "LOGIN_RATE_LIMIT",
        "SUBMISSION_RATE_LIMIT",
        "RATE_LIMIT_WINDOW_MS",
        "STORE_BACKEND",
        "DATA_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ADMIN_USERNAME", ADMIN_USERNAME)
    monkeypatch.setenv("ADMIN_PASSWORD_HASH", _PASSWORD_HASH)
    monkeypatch.setenv("SESSION_SECRET", SESSION_SECRET)


@pytest.fixture
def record_store():
    return InMemoryRecordStore()


@pytest.fixture
def object_storage():
    return InMemoryObjectStorage()


@pytest.fixture
def app(admin_env, record_store, object_storage):
    from web.app import create_app

    reset_rate_limiters()
    reset_storage()
    application = create_app()
    application.dependency_overrides[get_record_store] = lambda: record_store
    application.dependency_overrides[get_object_storage] = lambda: object_storage
    yield application
    reset_rate_limiters()
    reset_storage()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_client(client):
    """Client carrying a valid session cookie."""
    client.cookies.set(SESSION_COOKIE_NAME, SESSION_SECRET)
    return client
