"""Maps remote HTTP status codes onto auth error kinds."""

import logging

from auth.exceptions import AuthErrorKind, error_for_kind

logger = logging.getLogger(__name__)

_KIND_BY_STATUS: dict[int, AuthErrorKind] = {
    401: AuthErrorKind.NOT_AUTHORIZED,
    403: AuthErrorKind.NOT_AUTHORIZED,
    400: AuthErrorKind.INVALID_PARAMETERS,
    422: AuthErrorKind.INVALID_PARAMETERS,
    406: AuthErrorKind.NOT_FOUND,
    500: AuthErrorKind.GENERAL_ERROR,
}


def is_success(status_code: int) -> bool:
    """True for 2xx statuses."""
    return 200 <= status_code < 300


def classify_status(status_code: int) -> AuthErrorKind | None:
    """
    Classify a response status.

    Returns None for 2xx, otherwise the error kind. Total over all integers:
    anything without a specific mapping is GENERAL_ERROR.
    """
    if is_success(status_code):
        return None
    return _KIND_BY_STATUS.get(status_code, AuthErrorKind.GENERAL_ERROR)


def raise_for_status(status_code: int, detail: str | None = None) -> None:
    """Raise the classified AuthError for a non-success status. No-op on 2xx."""
    kind = classify_status(status_code)
    if kind is None:
        return
    logger.debug(f"Non-success status {status_code} from auth API classified as {kind.value}")
    raise error_for_kind(kind, status_code=status_code, detail=detail)
