"""
Shared fixtures for ABA Coach tests.
"""

import pytest
from fastapi.testclient import TestClient

from api_server import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
