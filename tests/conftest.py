import os

# Settings are read at import time, the key has to be there first
os.environ.setdefault("GEMINI_API_KEY", "test-key")

import base64

import pytest
from fastapi.testclient import TestClient

from backend.app import app, get_editor, sessions
from fakes import PNG_BYTES, FakeEditor


@pytest.fixture
def fake_editor():
    return FakeEditor()


@pytest.fixture
def client(fake_editor):
    """TestClient with Gemini swapped for FakeEditor"""
    app.dependency_overrides[get_editor] = lambda: fake_editor
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    sessions._sessions.clear()


@pytest.fixture
def png_b64():
    return base64.b64encode(PNG_BYTES).decode()
