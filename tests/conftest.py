"""Shared pytest fixtures and configuration."""

import os
import pytest
from freezegun import freeze_time

from src.models.profile import UserProfile
from tests.utils.factories import create_agent_data, create_company_data, create_profile_data
from tests.utils.fake_supabase import make_fake_gateway

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "json")


@pytest.fixture
def gateway():
    """Gateway backed by an in-memory Supabase fake."""
    return make_fake_gateway()


@pytest.fixture
def db(gateway):
    """Row storage behind the gateway fixture."""
    return gateway.client.db


@pytest.fixture
def make_user(db):
    """Insert a profile and return it as a UserProfile."""
    def _make_user(role: str = "user") -> UserProfile:
        row = db.add("profiles", create_profile_data(role=role))
        return UserProfile.model_validate(row)
    return _make_user


@pytest.fixture
def agent_user(db, make_user):
    """Agent-role user with an agents row; returns (profile, agent_id)."""
    profile = make_user("agent")
    agent = db.add("agents", create_agent_data(profile.id))
    return profile, agent["id"]


@pytest.fixture
def company_user(db, make_user):
    """Agent-role user that only has a real_estate_companies row; returns (profile, company row)."""
    profile = make_user("agent")
    company = db.add("real_estate_companies", create_company_data(profile.id))
    return profile, company


@pytest.fixture
def admin_user(make_user):
    return make_user("admin")


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time


@pytest.fixture(scope="function")
def reset_environment(monkeypatch):
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
