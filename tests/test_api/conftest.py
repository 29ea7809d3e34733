"""Fixtures for endpoint tests."""

import pytest
from unittest.mock import patch


@pytest.fixture(autouse=True)
def api_gateway(gateway):
    """Every handler request gets the in-memory gateway."""
    with patch("api._handler.create_gateway", return_value=gateway) as mock_create:
        yield mock_create


@pytest.fixture
def login(gateway):
    """Issue an access token for a profile."""
    def _login(profile) -> str:
        return gateway.auth.issue_token(profile.id)
    return _login
