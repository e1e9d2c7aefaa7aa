"""Client for the Supabase/GoTrue auth API."""

from auth.exceptions import (
    AuthError,
    AuthErrorKind,
    NotAuthorizedError,
    InvalidParametersError,
    HttpError,
    InternalError,
    NotFoundError,
    ServiceRoleKeyRequiredError,
    GeneralError,
)
from auth.types import (
    Email,
    Phone,
    Identifier,
    User,
    MFAFactor,
    MFAFactorStatus,
    TokenPair,
    WeakPassword,
    ErrorResponse,
)
from auth.status import classify_status, raise_for_status
from auth.config import AuthConfig
from auth.client import AuthClient, AuthClientBuilder
