"""Auth client configuration."""

import os

from pydantic import BaseModel, Field, field_validator


class AuthConfig(BaseModel):
    """
    Connection settings for one auth API deployment.

    Validated once at construction and immutable afterwards. The service
    role key is optional; its presence is what enables admin operations.
    """

    api_url: str = Field(
        ...,
        description="Base URL of the deployment, e.g. https://xyz.supabase.co",
        min_length=1,
    )
    anon_key: str = Field(
        ...,
        description="Public (anon) key usable by any client",
        min_length=1,
        repr=False,
    )
    service_role_key: str | None = Field(
        default=None,
        description="Privileged key required for admin operations",
        repr=False,
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied by the transport to each outbound call",
        gt=0,
        le=300,
    )

    model_config = {"frozen": True}

    @field_validator("api_url", mode="before")
    @classmethod
    def normalize_api_url(cls, value: object) -> object:
        """Strip whitespace and trailing slashes so paths join cleanly."""
        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value

    @field_validator("anon_key", mode="before")
    @classmethod
    def strip_anon_key(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("service_role_key", mode="before")
    @classmethod
    def empty_service_role_key_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def auth_url(self) -> str:
        """Root of the REST auth endpoints."""
        return f"{self.api_url}/auth/v1"

    @property
    def rest_url(self) -> str:
        """Root of the direct table-query endpoints."""
        return f"{self.api_url}/rest/v1"

    @property
    def has_service_role_key(self) -> bool:
        return self.service_role_key is not None

    @classmethod
    def from_env(cls) -> "AuthConfig":
        """
        Load configuration from environment variables.

        Required: SUPABASE_URL, SUPABASE_ANON_KEY.
        Optional: SUPABASE_SERVICE_ROLE_KEY, SUPABASE_REQUEST_TIMEOUT.

        Raises:
            ValueError: If a required variable is missing or empty
        """
        api_url = os.getenv("SUPABASE_URL")
        anon_key = os.getenv("SUPABASE_ANON_KEY")

        if not api_url:
            raise ValueError("SUPABASE_URL environment variable is required")
        if not anon_key:
            raise ValueError("SUPABASE_ANON_KEY environment variable is required")

        kwargs: dict = {
            "api_url": api_url,
            "anon_key": anon_key,
            "service_role_key": os.getenv("SUPABASE_SERVICE_ROLE_KEY"),
        }
        timeout = os.getenv("SUPABASE_REQUEST_TIMEOUT")
        if timeout:
            kwargs["request_timeout_seconds"] = float(timeout)

        return cls(**kwargs)
