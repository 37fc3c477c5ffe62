"""
Shared test configuration and fixtures for lookup tests.

Provides an isolated settings object and the in-memory document loader used
across the lookup, traversal and vocabulary test files.
"""

import pytest

from social.graze.fedi.config import Settings
from tests.test_helpers import StaticDocumentLoader


@pytest.fixture
def settings(monkeypatch):
    """Settings that ignore the developer's environment."""
    for name in ("DEBUG", "USER_AGENT", "HTTP_TIMEOUT", "SENTRY_DSN"):
        monkeypatch.delenv(name, raising=False)
    return Settings(user_agent="graze-fedi-test/1.0", http_timeout=5.0)


@pytest.fixture
def document_loader():
    """Empty in-memory document loader; tests add documents by URL."""
    return StaticDocumentLoader()


@pytest.fixture(autouse=True)
def no_sentry(monkeypatch):
    """Keep captured exceptions away from any configured Sentry client."""
    monkeypatch.setattr("sentry_sdk.capture_exception", lambda *args, **kwargs: None)
