"""Pydantic models for auth domain."""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Annotated, Any
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, BeforeValidator, Field, field_validator

from utils.timezone import from_epoch, now_utc, to_utc

NIL_UUID = UUID(int=0)

_RFC3339 = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)


def _require_rfc3339(value: Any) -> Any:
    """Only RFC3339 strings (or datetimes already built) are timestamps."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not _RFC3339.fullmatch(value):
        raise ValueError(f"expected an RFC3339 timestamp, got {value!r}")
    return value


# Timezone is mandatory; epoch numbers and naive strings are rejected.
Timestamp = Annotated[AwareDatetime, BeforeValidator(_require_rfc3339)]


@dataclass(frozen=True)
class Email:
    """Email address used to address an account."""

    value: str


@dataclass(frozen=True)
class Phone:
    """Phone number used to address an account."""

    value: str


# Exactly one form is active per operation.
Identifier = Email | Phone


class MFAFactorStatus(str, Enum):
    """Verification state of an MFA factor."""

    VERIFIED = "verified"
    UNVERIFIED = "unverified"


class MFAFactor(BaseModel):
    """A multi-factor authentication factor enrolled on a user."""

    factor_type: str | None = None
    friendly_name: str | None = None
    id: UUID | None = None
    status: MFAFactorStatus = MFAFactorStatus.UNVERIFIED

    model_config = {"frozen": True}

    @field_validator("status", mode="before")
    @classmethod
    def _default_missing_status(cls, value: Any) -> Any:
        return MFAFactorStatus.UNVERIFIED if value is None else value


class User(BaseModel):
    """
    A user account as reported by the auth API.

    Every field defaults so that payloads omitting fields still decode.
    Only `id` is a stable identity; email and phone may be null.
    Timestamps are None when the event never occurred.
    """

    id: UUID = NIL_UUID
    aud: str = ""
    role: str = ""
    email: str | None = None
    phone: str | None = None

    email_confirmed_at: Timestamp | None = None
    invited_at: Timestamp | None = None
    phone_confirmed_at: Timestamp | None = None
    confirmation_sent_at: Timestamp | None = None
    confirmed_at: Timestamp | None = None
    recovery_sent_at: Timestamp | None = None
    email_change_sent_at: Timestamp | None = None
    phone_change_sent_at: Timestamp | None = None
    reauthentication_sent_at: Timestamp | None = None
    last_sign_in_at: Timestamp | None = None

    # Unconfirmed change in flight
    new_email: str | None = None
    new_phone: str | None = None

    user_metadata: dict[str, Any] | None = None
    app_metadata: dict[str, Any] | None = None
    factors: list[MFAFactor] = Field(default_factory=list)
    identities: list[dict[str, Any]] | None = None

    banned_until: Timestamp | None = None
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None
    deleted_at: Timestamp | None = None

    model_config = {"frozen": True}

    @field_validator("aud", "role", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("id", mode="before")
    @classmethod
    def _null_as_nil(cls, value: Any) -> Any:
        return NIL_UUID if value is None else value

    @field_validator("factors", mode="before")
    @classmethod
    def _null_as_no_factors(cls, value: Any) -> Any:
        return [] if value is None else value


class WeakPassword(BaseModel):
    """Advisory returned when the password was accepted but is weak."""

    message: str = ""
    reasons: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class TokenPair(BaseModel):
    """
    Access/refresh credential set returned by signup, sign-in and refresh.

    String and numeric fields default to empty/zero when absent.
    `expires_in` is relative seconds; `expires_at` is absolute epoch seconds.
    """

    access_token: str = ""
    token_type: str = ""
    expires_in: int = 0
    expires_at: int = 0
    refresh_token: str = ""
    user: User | None = None
    provider_token: str = ""
    provider_refresh_token: str = ""
    weak_password: WeakPassword | None = None

    model_config = {"frozen": True}

    @field_validator(
        "access_token",
        "token_type",
        "refresh_token",
        "provider_token",
        "provider_refresh_token",
        mode="before",
    )
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("expires_in", "expires_at", mode="before")
    @classmethod
    def _null_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @property
    def expires_at_datetime(self) -> datetime | None:
        """Absolute expiry as a UTC datetime, None when the server sent none."""
        if not self.expires_at:
            return None
        return from_epoch(self.expires_at)

    def is_expired(self, now: datetime | None = None) -> bool:
        """Whether the access token is past `expires_at`. Unknown expiry counts as expired."""
        expires = self.expires_at_datetime
        if expires is None:
            return True
        current = to_utc(now) if now is not None else now_utc()
        return current >= expires


class SignupResponse(BaseModel):
    """Body of a successful signup. All fields are required."""

    access_token: str
    token_type: str
    expires_in: int
    expires_at: int
    refresh_token: str
    user: User


class ErrorResponse(BaseModel):
    """Error body returned by the auth API on failures."""

    code: int | str | None = None
    error: str | None = None
    error_description: str | None = None
    msg: str | None = None

    @property
    def message(self) -> str | None:
        """First available human-readable message."""
        return self.error or self.error_description or self.msg
