"""
Fixtures for live tests against a real Supabase instance.

Every test here is skipped unless SUPABASE_URL and SUPABASE_ANON_KEY are set
and the auth API answers its health endpoint.
"""

import os
import uuid

import pytest
import requests

from auth.client import AuthClient


def _supabase_reachable(api_url: str, anon_key: str) -> bool:
    try:
        response = requests.get(
            f"{api_url.rstrip('/')}/auth/v1/health",
            headers={"apikey": anon_key},
            timeout=3,
        )
    except requests.exceptions.RequestException:
        return False
    return response.ok


@pytest.fixture(scope="session")
def live_client():
    api_url = os.getenv("SUPABASE_URL", "")
    anon_key = os.getenv("SUPABASE_ANON_KEY", "")
    if not api_url or not anon_key:
        pytest.skip("SUPABASE_URL / SUPABASE_ANON_KEY not set")
    if not _supabase_reachable(api_url, anon_key):
        pytest.skip(f"Supabase not reachable at {api_url}")

    auth_client = AuthClient.from_env()
    yield auth_client
    auth_client.close()


@pytest.fixture(scope="session")
def live_admin_client(live_client):
    if not live_client.has_service_role_key:
        pytest.skip("SUPABASE_SERVICE_ROLE_KEY not set")
    return live_client


@pytest.fixture
def fresh_email():
    """Unique address per test so reruns never collide."""
    return f"it-{uuid.uuid4().hex[:12]}@test.local"
