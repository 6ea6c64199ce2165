"""
Shared fixtures for the feedly test suite.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from feedly.client import FeedlyClient


# ── Token fixtures ───────────────────────────────────────────

@pytest.fixture
def refresh_token():
    return "A1b2C3refresh:feedlydev"


@pytest.fixture
def access_token():
    return "A1b2C3access:feedlydev"


@pytest.fixture
def new_access_token():
    return "abc123"


# ── Mock response factories ──────────────────────────────────

@pytest.fixture
def make_response():
    """Build a MagicMock shaped like requests.Response."""

    def _make(body=None, status=200, headers=None, invalid_json=False):
        resp = MagicMock(spec=requests.Response)
        resp.status_code = status
        resp.ok = status < 400
        resp.headers = headers if headers is not None else {}
        if invalid_json:
            resp.json.side_effect = requests.JSONDecodeError("Expecting value", "<html>", 0)
        else:
            resp.json.return_value = body
            resp.content = json.dumps(body).encode()
        if status >= 400:
            resp.raise_for_status.side_effect = requests.HTTPError(str(status))
        else:
            resp.raise_for_status.return_value = None
        return resp

    return _make


@pytest.fixture
def mock_token_body(new_access_token):
    """Response from /v3/auth/token."""
    return {
        "id": "c805fcbf-3acf-4302-a97e-d82f9d7c897f",
        "access_token": new_access_token,
        "expires_in": 604800,
        "token_type": "Bearer",
        "plan": "standard",
        "provider": "google",
    }


@pytest.fixture
def mock_profile_body():
    """Response from /v3/profile."""
    return {
        "id": "c805fcbf-3acf-4302-a97e-d82f9d7c897f",
        "email": "reader@example.com",
        "fullName": "Test Reader",
    }


@pytest.fixture
def ratelimit_headers():
    return {"X-Ratelimit-Count": "200", "X-Ratelimit-Reset": "1700000000"}


# ── Client fixtures ─────────────────────────────────────────

@pytest.fixture
def client(refresh_token, access_token):
    """Client that already holds an access token."""
    return FeedlyClient(refresh_token=refresh_token, access_token=access_token)


@pytest.fixture
def fresh_client(refresh_token):
    """Client that holds only a refresh token."""
    return FeedlyClient(refresh_token=refresh_token)
