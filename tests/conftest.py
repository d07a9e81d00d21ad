from __future__ import annotations

import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

import pytest
from fastapi.testclient import TestClient

from src.core.config import get_settings
from src.main import create_app


@pytest.fixture()
def app():
    get_settings.cache_clear()
    application = create_app()
    try:
        yield application
    finally:
        application.dependency_overrides.clear()
        get_settings.cache_clear()


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)
