"""
Direct table-query transport built on postgrest.

Bypasses the REST auth endpoints and reads rows straight from the data
store's HTTP interface. The client is scoped to one schema and always carries
the public key as both `apikey` and bearer credential.

postgrest reports failures as APIError without the HTTP status. The status is
recovered here so callers keep classifying failures by status code.
"""

import logging
from typing import Any

import httpx
from postgrest import APIError, SyncPostgrestClient

from clients.http_client import TransportError

logger = logging.getLogger(__name__)

# PostgREST error codes -> HTTP status PostgREST answers them with.
# Used when the error body is well-formed and postgrest drops the status.
_STATUS_BY_POSTGREST_CODE = {
    "PGRST106": 406,  # schema not exposed
    "PGRST116": 406,  # singular response expected
    "PGRST205": 404,  # table not in schema cache
    "42P01": 404,  # undefined table
    "PGRST301": 401,  # JWT invalid
    "PGRST302": 401,  # anonymous access disabled
    "PGRST303": 401,  # JWT claims invalid
    "42501": 403,  # insufficient privilege
    "22P02": 400,  # invalid text representation
}


class TableQueryError(Exception):
    """A table query answered with a failure status."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{status_code}] {message or 'table query failed'}")


def status_for_api_error(error: APIError) -> int:
    """HTTP status behind a postgrest APIError (500 when unknown)."""
    # postgrest puts the raw status in `code` when the body is not a PostgREST error
    if isinstance(error.code, int):
        return error.code
    return _STATUS_BY_POSTGREST_CODE.get(error.code or "", 500)


class TableQueryClient:
    """Read-only row queries against one schema."""

    def __init__(
        self,
        rest_url: str,
        api_key: str,
        schema: str = "auth",
        http_client: httpx.Client | None = None,
        timeout: float = 10.0,
    ):
        """
        Args:
            rest_url: Root of the table endpoints, e.g. https://xyz.supabase.co/rest/v1
            api_key: Key sent as the apikey header and bearer on every query
            schema: Schema the queried tables live in
            http_client: httpx client to send through (a new one if omitted)
            timeout: Per-request timeout in seconds for a client created here

        Raises:
            ValueError: If rest_url, api_key or schema is empty
        """
        if not rest_url:
            raise ValueError("rest_url is required")
        if not api_key:
            raise ValueError("api_key is required")
        if not schema:
            raise ValueError("schema is required")

        self.schema = schema
        self._rest_url = rest_url.rstrip("/")
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._postgrest = SyncPostgrestClient(
            self._rest_url,
            schema=schema,
            headers={"apikey": api_key, "Accept": "application/json"},
            http_client=self._http_client,
        ).auth(api_key)

    @property
    def rest_url(self) -> str:
        return self._rest_url

    def close(self) -> None:
        """Close the httpx client if this transport created it."""
        if self._owns_http_client:
            self._http_client.close()

    def select(
        self,
        table: str,
        *,
        filters: dict[str, str] | None = None,
        columns: str = "*",
    ) -> Any:
        """
        Select rows where every filter column equals its value.

        Args:
            table: Table name within the schema
            filters: column -> value equality filters
            columns: Column list for the select clause

        Returns:
            Decoded response data; a list of rows unless the server sent
            something else, which the caller validates.

        Raises:
            TableQueryError: On a failure status
            TransportError: On connection-level failure
        """
        query = self._postgrest.from_(table).select(columns)
        for column, value in (filters or {}).items():
            query = query.eq(column, value)

        logger.debug(f"Selecting from {self.schema}.{table} with filters {sorted(filters or {})}")
        try:
            response = query.retry(False).execute()
        except APIError as e:
            status_code = status_for_api_error(e)
            logger.debug(f"Query on {self.schema}.{table} failed with {status_code}: {e.message}")
            raise TableQueryError(status_code, e.message) from e
        except httpx.HTTPError as e:
            logger.error(f"Query on {self.schema}.{table} failed: {e}")
            raise TransportError(f"GET {self._rest_url}/{table} failed: {e}") from e

        return response.data
