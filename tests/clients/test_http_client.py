"""
Tests for HttpClient.

Focus on the transport contract: statuses pass through untouched,
connection-level failures become TransportError.
"""

import pytest
import requests
import responses
from responses import matchers

from clients.http_client import HttpClient, TransportError, bearer_headers


BASE_URL = "https://project.example.supabase.co"


class TestHttpClientInit:
    """Client initialization - fail-fast on invalid config."""

    def test_init_with_base_url(self):
        client = HttpClient(BASE_URL)
        assert client.base_url == BASE_URL

    def test_init_strips_trailing_slash(self):
        client = HttpClient(f"{BASE_URL}/")
        assert client.base_url == BASE_URL

    def test_init_rejects_empty_base_url(self):
        with pytest.raises(ValueError, match="base_url"):
            HttpClient("")

    def test_shares_injected_session(self):
        session = requests.Session()
        client = HttpClient(BASE_URL, session=session)
        assert client.session is session


class TestUrlFor:
    def test_joins_path(self):
        assert HttpClient(BASE_URL).url_for("auth/v1/user") == f"{BASE_URL}/auth/v1/user"

    def test_tolerates_leading_slash(self):
        assert HttpClient(BASE_URL).url_for("/auth/v1/user") == f"{BASE_URL}/auth/v1/user"


class TestRequest:
    """request() - uses responses library for HTTP mocking."""

    @pytest.fixture
    def client(self):
        return HttpClient(BASE_URL, timeout=2.0)

    @responses.activate
    def test_sends_headers_json_and_params(self, client):
        responses.add(
            responses.POST,
            f"{BASE_URL}/auth/v1/token",
            json={"ok": True},
            status=200,
            match=[
                matchers.query_param_matcher({"grant_type": "password"}),
                matchers.json_params_matcher({"email": "a@example.com"}),
                matchers.header_matcher({"apikey": "k"}),
            ],
        )

        response = client.request(
            "POST",
            "auth/v1/token",
            headers={"apikey": "k"},
            json={"email": "a@example.com"},
            params={"grant_type": "password"},
        )

        assert response.json() == {"ok": True}

    @pytest.mark.parametrize("status", [400, 401, 404, 500])
    @responses.activate
    def test_error_statuses_pass_through(self, client, status):
        responses.add(responses.GET, f"{BASE_URL}/auth/v1/user", body="nope", status=status)

        response = client.request("GET", "auth/v1/user")

        assert response.status_code == status
        assert response.text == "nope"

    @responses.activate
    def test_connection_failure_raises_transport_error(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/auth/v1/user",
            body=requests.exceptions.ConnectionError("Network unreachable"),
        )

        with pytest.raises(TransportError, match="Network unreachable"):
            client.request("GET", "auth/v1/user")

    @responses.activate
    def test_timeout_raises_transport_error(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/auth/v1/user",
            body=requests.exceptions.ReadTimeout("timed out"),
        )

        with pytest.raises(TransportError):
            client.request("GET", "auth/v1/user")

    @responses.activate
    def test_chains_original_exception(self, client):
        responses.add(
            responses.GET,
            f"{BASE_URL}/auth/v1/user",
            body=requests.exceptions.ConnectionError("refused"),
        )

        with pytest.raises(TransportError) as exc_info:
            client.request("GET", "auth/v1/user")

        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)


class TestBearerHeaders:
    def test_builds_apikey_and_authorization(self):
        assert bearer_headers("anon", "token") == {
            "apikey": "anon",
            "Authorization": "Bearer token",
        }
