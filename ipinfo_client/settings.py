import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = "https://ipinfo.io"
DEFAULT_CACHE_TTL = 3600
DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_BATCH_TIMEOUT_SECONDS = 5.0


class ClientSettings(BaseModel):
    """Immutable configuration for IPInfoClient.

    Derive a changed configuration with `updated()` (or the client's `with_*`
    helpers) instead of mutating an existing one.
    """

    model_config = ConfigDict(frozen=True)

    token: str = Field(min_length=1, repr=False)
    cache_enabled: bool = True
    cache_ttl: int = Field(default=DEFAULT_CACHE_TTL, ge=0)
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    batch_timeout_seconds: float = Field(default=DEFAULT_BATCH_TIMEOUT_SECONDS, gt=0)

    @field_validator("token", mode="before")
    @classmethod
    def _strip_token(cls, value: str) -> str:
        return str(value).strip()

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def updated(self, **changes) -> "ClientSettings":
        """Return a validated copy of these settings with `changes` applied."""
        return ClientSettings(**{**self.model_dump(), **changes})

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Build settings from IPINFO_* environment variables.

        Raises pydantic.ValidationError when IPINFO_TOKEN is missing or a value
        cannot be coerced.
        """
        values: dict[str, str] = {"token": os.getenv("IPINFO_TOKEN", "")}
        optional = {
            "cache_enabled": "IPINFO_CACHE_ENABLED",
            "cache_ttl": "IPINFO_CACHE_TTL",
            "base_url": "IPINFO_BASE_URL",
        }
        for field, env_var in optional.items():
            value = os.getenv(env_var)
            if value is not None and value.strip():
                values[field] = value.strip()
        return cls(**values)
