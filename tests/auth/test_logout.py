"""Tests for AuthClient.logout."""

import pytest
import responses
from responses import matchers

from auth.exceptions import InvalidParametersError, NotAuthorizedError


@pytest.fixture
def logout_url(client):
    return f"{client.api_url}/auth/v1/logout"


class TestLogout:
    """Logout posts the access token; invalidation is remote."""

    @responses.activate
    def test_empty_token_rejected(self, client):
        with pytest.raises(InvalidParametersError):
            client.logout("")
        assert len(responses.calls) == 0

    @responses.activate
    def test_sends_token_as_bearer(self, client, logout_url):
        responses.add(
            responses.POST,
            logout_url,
            status=204,
            match=[
                matchers.header_matcher(
                    {"apikey": "test-anon-key", "Authorization": "Bearer user-access-token"}
                ),
            ],
        )

        result = client.logout("user-access-token")

        assert result is None
        assert len(responses.calls) == 1

    @responses.activate
    def test_no_body_is_fine(self, client, logout_url):
        """Logout decodes nothing, so an empty 204 body is success."""
        responses.add(responses.POST, logout_url, body="", status=204)

        client.logout("user-access-token")

    @responses.activate
    def test_rejected_token_not_authorized(self, client, logout_url):
        responses.add(responses.POST, logout_url, json={"msg": "invalid JWT"}, status=401)

        with pytest.raises(NotAuthorizedError):
            client.logout("expired-token")
