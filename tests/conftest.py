"""Shared test fixtures for the auth client test suite."""

from pathlib import Path
from uuid import UUID

import pytest
from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
# override=True ensures .env takes precedence over shell env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

from auth.client import AuthClient


# =============================================================================
# TEST CONSTANTS
# =============================================================================

API_URL = "https://project.example.supabase.co"
ANON_KEY = "test-anon-key"
SERVICE_ROLE_KEY = "test-service-role-key"

TEST_USER_ID = UUID("00000000-0000-0000-0000-000000000001")
TEST_USER_B_ID = UUID("00000000-0000-0000-0000-000000000002")
TEST_USER_EMAIL = "testuser@test.local"


def _user_payload(user_id: UUID = TEST_USER_ID, email: str | None = TEST_USER_EMAIL, **extra) -> dict:
    """JSON body of a user as the auth API returns it."""
    payload = {
        "id": str(user_id),
        "aud": "authenticated",
        "role": "authenticated",
        "email": email,
        "phone": "",
        "confirmation_sent_at": "2024-05-01T10:00:00.123456Z",
        "app_metadata": {"provider": "email", "providers": ["email"]},
        "user_metadata": {},
        "identities": [],
        "created_at": "2024-05-01T10:00:00.123456Z",
        "updated_at": "2024-05-01T10:00:00.123456Z",
    }
    payload.update(extra)
    return payload


def _token_payload(**extra) -> dict:
    """JSON body of a token response as the auth API returns it."""
    payload = {
        "access_token": "access-token-1",
        "token_type": "bearer",
        "expires_in": 3600,
        "expires_at": 1_714_560_000,
        "refresh_token": "refresh-token-1",
        "user": _user_payload(),
    }
    payload.update(extra)
    return payload


# =============================================================================
# CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def client():
    """Client with only the public key (no admin operations)."""
    auth_client = AuthClient(API_URL, ANON_KEY)
    yield auth_client
    auth_client.close()


@pytest.fixture
def admin_client():
    """Client built with a service role key."""
    auth_client = (
        AuthClient.builder()
        .api_url(API_URL)
        .anon_key(ANON_KEY)
        .service_role_key(SERVICE_ROLE_KEY)
        .build()
    )
    yield auth_client
    auth_client.close()


# =============================================================================
# PAYLOAD FIXTURES
# =============================================================================


@pytest.fixture
def user_payload():
    """Factory for user JSON bodies: user_payload(user_id=..., email=..., **overrides)."""
    return _user_payload


@pytest.fixture
def token_payload():
    """Factory for token JSON bodies: token_payload(**overrides)."""
    return _token_payload


@pytest.fixture
def test_user_id() -> UUID:
    """The primary test user's ID."""
    return TEST_USER_ID


@pytest.fixture
def test_user_b_id() -> UUID:
    """A second user ID (for duplicate-row tests)."""
    return TEST_USER_B_ID
