"""Auth API client - one method per remote capability.

Every operation follows the same exchange:
1. Check local preconditions (empty inputs, missing service role key)
2. Send the request over the REST transport or the table-query transport
3. Classify the status; failures raise before the body is decoded
4. Decode the body into typed models; shape mismatches raise InternalError

The client holds only immutable configuration and the transports built from
it, so one instance can be shared freely across threads.
"""

import json
import logging
from typing import Any, TypeVar
from uuid import UUID

import requests
from pydantic import TypeAdapter, ValidationError

from auth.config import AuthConfig
from auth.exceptions import (
    AuthErrorKind,
    HttpError,
    InternalError,
    InvalidParametersError,
    ServiceRoleKeyRequiredError,
    error_for_kind,
)
from auth.status import classify_status
from auth.types import (
    Email,
    ErrorResponse,
    Identifier,
    Phone,
    SignupResponse,
    TokenPair,
    User,
)
from clients.http_client import HttpClient, TransportError, bearer_headers
from clients.table_client import TableQueryClient, TableQueryError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SIGNUP_PATH = "auth/v1/signup"
TOKEN_PATH = "auth/v1/token"
USER_PATH = "auth/v1/user"
LOGOUT_PATH = "auth/v1/logout"
ADMIN_USERS_PATH = "auth/v1/admin/users"

USERS_TABLE = "users"
AUTH_SCHEMA = "auth"

_SIGNUP_RESPONSE = TypeAdapter(SignupResponse)
_TOKEN_PAIR = TypeAdapter(TokenPair)
_USER = TypeAdapter(User)
_USER_ROWS = TypeAdapter(list[User])


def _identifier_field(identifier: Identifier, phone_field: str) -> tuple[str, str]:
    """Request field name and value for the active identifier form.

    Raises:
        InvalidParametersError: Unknown identifier type or empty value
    """
    if isinstance(identifier, Email):
        field = "email"
    elif isinstance(identifier, Phone):
        field = phone_field
    else:
        raise InvalidParametersError(
            f"identifier must be Email or Phone, got {type(identifier).__name__}"
        )

    if not identifier.value:
        logger.warning(f"Rejected empty {field}")
        raise InvalidParametersError(f"empty {field}")

    return field, identifier.value


def _require(value: str, name: str) -> None:
    if not value:
        logger.warning(f"Rejected empty {name}")
        raise InvalidParametersError(f"empty {name}")


def _require_json(value: Any, name: str) -> None:
    try:
        json.dumps(value)
    except (TypeError, ValueError) as e:
        logger.warning(f"Rejected {name} that is not JSON serializable")
        raise InvalidParametersError(f"{name} is not JSON serializable", detail=str(e)) from e


def _parse_user_id(user_id: UUID | str) -> UUID:
    if isinstance(user_id, UUID):
        return user_id
    try:
        return UUID(str(user_id))
    except ValueError as e:
        raise InvalidParametersError(f"invalid user id: {user_id!r}") from e


def _error_detail(body: str) -> str | None:
    """Best-effort message from an error body. Never raises."""
    if not body:
        return None
    try:
        return ErrorResponse.model_validate_json(body).message
    except ValidationError:
        return None


class AuthClient:
    """Client for the auth REST API and the auth schema's users table.

    Usage:
        client = AuthClient("https://xyz.supabase.co", "anon-key")
        user, access_token = client.signup(Email("a@example.com"), "hunter22")
        tokens = client.signin_with_password(Email("a@example.com"), "hunter22")

        admin = (
            AuthClient.builder()
            .api_url("https://xyz.supabase.co")
            .anon_key("anon-key")
            .service_role_key("service-role-key")
            .build()
        )
        admin.hard_delete_user(user.id)
    """

    def __init__(
        self,
        api_url: str,
        anon_key: str,
        *,
        service_role_key: str | None = None,
        timeout_seconds: float = 10.0,
        session: requests.Session | None = None,
    ):
        """
        Args:
            api_url: Base URL of the deployment
            anon_key: Public key
            service_role_key: Privileged key; enables admin operations
            timeout_seconds: Transport timeout for each call
            session: requests.Session to use (a new one if omitted)

        Raises:
            InvalidParametersError: If api_url or anon_key is empty, or timeout is out of range
        """
        try:
            config = AuthConfig(
                api_url=api_url,
                anon_key=anon_key,
                service_role_key=service_role_key,
                request_timeout_seconds=timeout_seconds,
            )
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise InvalidParametersError(f"invalid client configuration: {fields}") from e

        self._config = config
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._http = HttpClient(
            config.api_url,
            session=self._session,
            timeout=config.request_timeout_seconds,
        )
        self._table = TableQueryClient(
            config.rest_url,
            config.anon_key,
            schema=AUTH_SCHEMA,
            timeout=config.request_timeout_seconds,
        )

    @classmethod
    def from_config(
        cls, config: AuthConfig, session: requests.Session | None = None
    ) -> "AuthClient":
        return cls(
            config.api_url,
            config.anon_key,
            service_role_key=config.service_role_key,
            timeout_seconds=config.request_timeout_seconds,
            session=session,
        )

    @classmethod
    def from_env(cls) -> "AuthClient":
        """Client configured from SUPABASE_* environment variables.

        Raises:
            InvalidParametersError: If a required variable is missing or a value is invalid
        """
        try:
            config = AuthConfig.from_env()
        except ValueError as e:
            raise InvalidParametersError("invalid environment configuration", detail=str(e)) from e
        return cls.from_config(config)

    @staticmethod
    def builder() -> "AuthClientBuilder":
        return AuthClientBuilder()

    @property
    def config(self) -> AuthConfig:
        return self._config

    @property
    def api_url(self) -> str:
        return self._config.api_url

    @property
    def has_service_role_key(self) -> bool:
        return self._config.has_service_role_key

    def __repr__(self) -> str:
        return f"AuthClient(api_url={self._config.api_url!r})"

    def close(self) -> None:
        """Close the table-query transport, and the session if this client created it."""
        self._table.close()
        if self._owns_session:
            self._session.close()

    # ------------------------------------------------------------------
    # Exchange helpers
    # ------------------------------------------------------------------

    def _send(
        self,
        operation: str,
        method: str,
        path: str,
        *,
        headers: dict[str, str],
        json: Any = None,
        params: dict[str, str] | None = None,
    ) -> str:
        """Send a REST request, classify its status, and return the body text.

        Raises:
            HttpError: Transport failure
            AuthError: Classified non-success status
        """
        try:
            response = self._http.request(
                method, path, headers=headers, json=json, params=params
            )
        except TransportError as e:
            raise HttpError(f"{operation} request failed") from e

        return self._checked_body(operation, response)

    def _checked_body(self, operation: str, response: requests.Response) -> str:
        body = response.text
        kind = classify_status(response.status_code)
        if kind is not None:
            logger.debug(f"{operation} failed with {response.status_code}: {body}")
            raise error_for_kind(
                kind, status_code=response.status_code, detail=_error_detail(body)
            )
        return body

    def _decode(self, operation: str, adapter: TypeAdapter[T], body: str) -> T:
        try:
            return adapter.validate_json(body)
        except ValidationError as e:
            logger.error(f"{operation} returned an unexpected payload: {e}")
            raise InternalError(f"unexpected {operation} response") from e

    def _require_service_role_key(self) -> str:
        if self._config.service_role_key is None:
            logger.warning("Admin operation attempted without service role key")
            raise ServiceRoleKeyRequiredError()
        return self._config.service_role_key

    def _anon_headers(self) -> dict[str, str]:
        return bearer_headers(self._config.anon_key, self._config.anon_key)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def signup(
        self,
        identifier: Identifier,
        password: str,
        metadata: dict[str, Any] | None = None,
    ) -> tuple[User, str]:
        """Create an account.

        Args:
            identifier: Email or Phone for the new account
            password: Account password
            metadata: User-controlled metadata stored as user_metadata

        Returns:
            Tuple of (created user, access token)

        Raises:
            InvalidParametersError: Empty identifier/password, metadata that is not JSON, or rejected by the API
            InternalError: Success response missing required fields
            HttpError: Transport failure
        """
        field, value = _identifier_field(identifier, phone_field="phone_number")
        _require(password, "password")

        body: dict[str, Any] = {field: value, "password": password}
        if metadata is not None:
            _require_json(metadata, "metadata")
            body["data"] = metadata

        text = self._send(
            "signup", "POST", SIGNUP_PATH, headers=self._anon_headers(), json=body
        )
        created = self._decode("signup", _SIGNUP_RESPONSE, text)

        logger.info(f"Created user {created.user.id}")
        return created.user, created.access_token

    def signin_with_password(self, identifier: Identifier, password: str) -> TokenPair:
        """Exchange identifier + password for a token pair (password grant).

        Raises:
            InvalidParametersError: Empty password or identifier
            NotAuthorizedError: Credentials rejected
            InternalError: Undecodable success response
            HttpError: Transport failure
        """
        _require(password, "password")
        field, value = _identifier_field(identifier, phone_field="phone")

        logger.info(f"Password sign-in for {field} {value}")
        text = self._send(
            "signin_with_password",
            "POST",
            TOKEN_PATH,
            headers=self._anon_headers(),
            json={field: value, "password": password},
            params={"grant_type": "password"},
        )
        tokens = self._decode("signin_with_password", _TOKEN_PAIR, text)

        logger.info(
            f"Signed in, tokens_are_nonempty={bool(tokens.access_token and tokens.refresh_token)}"
        )
        return tokens

    def refresh_token(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new token pair.

        Whether the new tokens differ from the old ones is up to the remote
        service; nothing here asserts it.

        Raises:
            InvalidParametersError: Empty refresh token
            NotAuthorizedError: Refresh token invalid, expired, or already used
            InternalError: Undecodable success response
            HttpError: Transport failure
        """
        _require(refresh_token, "refresh token")

        text = self._send(
            "refresh_token",
            "POST",
            TOKEN_PATH,
            headers=self._anon_headers(),
            json={"refresh_token": refresh_token},
            params={"grant_type": "refresh_token"},
        )
        tokens = self._decode("refresh_token", _TOKEN_PAIR, text)

        logger.info(
            f"Refreshed session, tokens_are_nonempty={bool(tokens.access_token and tokens.refresh_token)}"
        )
        return tokens

    def get_user_by_token(self, access_token: str) -> User:
        """Fetch the user an access token belongs to.

        Raises:
            InvalidParametersError: Empty token
            NotAuthorizedError: Token invalid or expired
            InternalError: Undecodable success response
            HttpError: Transport failure
        """
        _require(access_token, "access token")

        text = self._send(
            "get_user_by_token",
            "GET",
            USER_PATH,
            headers=bearer_headers(self._config.anon_key, access_token),
        )
        return self._decode("get_user_by_token", _USER, text)

    def get_user_by_id(self, user_id: UUID | str) -> User | None:
        """Look a user up by id straight from the auth schema's users table.

        Unlike get_user_by_token this authenticates with the public key and
        treats absence as a normal result.

        Returns:
            The user, or None if no row matches

        Raises:
            InvalidParametersError: Malformed user id
            InternalError: More than one row for the id, or undecodable rows
            AuthError: Other classified failure status
            HttpError: Transport failure
        """
        uid = _parse_user_id(user_id)

        try:
            rows = self._table.select(USERS_TABLE, filters={"id": str(uid)})
        except TransportError as e:
            raise HttpError("get_user_by_id query failed") from e
        except TableQueryError as e:
            if e.status_code == 404:
                logger.debug(f"users table reported 404 for {uid}")
                return None
            kind = classify_status(e.status_code) or AuthErrorKind.GENERAL_ERROR
            if kind is AuthErrorKind.NOT_FOUND:
                return None
            raise error_for_kind(kind, status_code=e.status_code, detail=e.message) from e

        try:
            users = _USER_ROWS.validate_python(rows)
        except ValidationError as e:
            logger.error(f"get_user_by_id returned an unexpected payload: {e}")
            raise InternalError("unexpected get_user_by_id response") from e

        if len(users) > 1:
            user_ids = ", ".join(str(user.id) for user in users)
            logger.error(f"Multiple users returned for single user_id {uid}: [ {user_ids} ]")
            raise InternalError(f"{len(users)} rows returned for user id {uid}")

        return users[0] if users else None

    def logout(self, access_token: str) -> None:
        """Invalidate the session behind an access token.

        Invalidation happens remotely; the token may remain usable for a
        while depending on the service.

        Raises:
            InvalidParametersError: Empty token
            NotAuthorizedError: Token rejected
            HttpError: Transport failure
        """
        _require(access_token, "access token")

        self._send(
            "logout",
            "POST",
            LOGOUT_PATH,
            headers=bearer_headers(self._config.anon_key, access_token),
        )
        logger.info("Logged out session")

    def soft_delete_user(self, user_id: UUID | str) -> None:
        """Mark a user deleted while retaining their data. Requires the service role key.

        Raises:
            ServiceRoleKeyRequiredError: Client built without a service role key
            InvalidParametersError: Malformed user id
            AuthError: Classified failure status
            HttpError: Transport failure
        """
        self._delete_user(user_id, soft=True)

    def hard_delete_user(self, user_id: UUID | str) -> None:
        """Permanently delete a user and their data. Irreversible. Requires the service role key.

        Raises:
            ServiceRoleKeyRequiredError: Client built without a service role key
            InvalidParametersError: Malformed user id
            AuthError: Classified failure status
            HttpError: Transport failure
        """
        self._delete_user(user_id, soft=False)

    def _delete_user(self, user_id: UUID | str, *, soft: bool) -> None:
        # Key check precedes id validation
        service_role_key = self._require_service_role_key()
        uid = _parse_user_id(user_id)
        operation = "soft_delete_user" if soft else "hard_delete_user"

        self._send(
            operation,
            "DELETE",
            f"{ADMIN_USERS_PATH}/{uid}",
            headers=bearer_headers(service_role_key, service_role_key),
            json={"should_soft_delete": soft},
        )
        logger.info(f"{'Soft' if soft else 'Hard'} deleted user {uid}")


class AuthClientBuilder:
    """Accumulates client settings; build() validates and returns the client.

    Settings cannot be changed on a built client - build a new one instead.
    """

    def __init__(self):
        self._api_url: str | None = None
        self._anon_key: str | None = None
        self._service_role_key: str | None = None
        self._timeout_seconds: float | None = None
        self._session: requests.Session | None = None

    def api_url(self, url: str) -> "AuthClientBuilder":
        self._api_url = url
        return self

    def anon_key(self, key: str) -> "AuthClientBuilder":
        self._anon_key = key
        return self

    def service_role_key(self, key: str) -> "AuthClientBuilder":
        self._service_role_key = key
        return self

    def timeout(self, seconds: float) -> "AuthClientBuilder":
        self._timeout_seconds = seconds
        return self

    def http_session(self, session: requests.Session) -> "AuthClientBuilder":
        self._session = session
        return self

    def build(self) -> AuthClient:
        """
        Raises:
            InvalidParametersError: If api_url or anon_key is missing or empty
        """
        if not self._api_url:
            raise InvalidParametersError("api_url is required")
        if not self._anon_key:
            raise InvalidParametersError("anon_key is required")

        kwargs: dict[str, Any] = {
            "service_role_key": self._service_role_key,
            "session": self._session,
        }
        if self._timeout_seconds is not None:
            kwargs["timeout_seconds"] = self._timeout_seconds

        return AuthClient(self._api_url, self._anon_key, **kwargs)
