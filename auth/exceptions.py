"""Typed exceptions for auth API failures."""

from enum import Enum


class AuthErrorKind(Enum):
    """The seven ways an auth operation can fail."""

    NOT_AUTHORIZED = "not_authorized"
    INVALID_PARAMETERS = "invalid_parameters"
    HTTP = "http"
    INTERNAL = "internal"
    NOT_FOUND = "not_found"
    SERVICE_ROLE_KEY_REQUIRED = "service_role_key_required"
    GENERAL_ERROR = "general_error"


class AuthError(Exception):
    """
    Base class for auth client errors.

    Attributes:
        kind: Which of the seven failure kinds this is
        status_code: HTTP status that produced the error, if any
        detail: Message from the remote error body, if one could be read
    """

    kind: AuthErrorKind = AuthErrorKind.GENERAL_ERROR
    default_message = "general gotrue error"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ):
        self.status_code = status_code
        self.detail = detail
        text = message or self.default_message
        if status_code is not None:
            text = f"[{status_code}] {text}"
        if detail:
            text = f"{text}: {detail}"
        super().__init__(text)


class NotAuthorizedError(AuthError):
    """Caller is not authorized (401/403): bad credentials, invalid or expired token."""

    kind = AuthErrorKind.NOT_AUTHORIZED
    default_message = "not authorized"


class InvalidParametersError(AuthError):
    """
    Request parameters rejected.

    Raised locally for empty required inputs (before any network call)
    and remotely for 400/422 responses.
    """

    kind = AuthErrorKind.INVALID_PARAMETERS
    default_message = "invalid parameters"


class HttpError(AuthError):
    """Transport-level failure: connection refused, timeout, unreadable body."""

    kind = AuthErrorKind.HTTP
    default_message = "http error"


class InternalError(AuthError):
    """
    Successful exchange whose payload violates the expected shape.

    Signals an API-contract mismatch (undecodable JSON, duplicate rows for
    a unique id) rather than a caller or authorization problem.
    """

    kind = AuthErrorKind.INTERNAL
    default_message = "internal library error"


class NotFoundError(AuthError):
    """Requested resource was not found (406)."""

    kind = AuthErrorKind.NOT_FOUND
    default_message = "resource not found"


class ServiceRoleKeyRequiredError(AuthError):
    """Admin operation attempted on a client built without a service role key."""

    kind = AuthErrorKind.SERVICE_ROLE_KEY_REQUIRED
    default_message = "service role key required for admin operations"


class GeneralError(AuthError):
    """Any non-success status without a more specific mapping."""


_ERRORS_BY_KIND: dict[AuthErrorKind, type[AuthError]] = {
    cls.kind: cls
    for cls in (
        NotAuthorizedError,
        InvalidParametersError,
        HttpError,
        InternalError,
        NotFoundError,
        ServiceRoleKeyRequiredError,
        GeneralError,
    )
}


def error_for_kind(
    kind: AuthErrorKind,
    message: str | None = None,
    *,
    status_code: int | None = None,
    detail: str | None = None,
) -> AuthError:
    """Build the exception matching an error kind."""
    return _ERRORS_BY_KIND[kind](message, status_code=status_code, detail=detail)
