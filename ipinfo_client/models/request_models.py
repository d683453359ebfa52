from pydantic import BaseModel, Field, field_validator

from ipinfo_client.utils import BATCH_MAX_SIZE, is_valid_ip


class IPLookupRequest(BaseModel):
    """Query parameters for a full IP lookup."""

    ip: str = Field(
        description="IPv4 or IPv6 address to look up.",
        examples=["8.8.8.8", "2001:4860:4860::8888"],
    )

    @field_validator("ip", mode="before")
    @classmethod
    def _validate_ip(cls, value: str) -> str:
        """Strip surrounding whitespace and require a valid IPv4 or IPv6 literal.

        An invalid value raises a validation error, so the endpoint handler is
        never invoked and no request reaches ipinfo.io.
        """
        value_str = str(value).strip()
        if not is_valid_ip(value_str):
            raise ValueError("ip must be a valid IPv4 or IPv6 address")
        return value_str


class BatchLookupRequest(BaseModel):
    """Body of a batch lookup.

    `batch_size` is not range-checked here; the client clamps it to 1..1000.
    """

    ips: list[str] = Field(
        default_factory=list,
        description="IP addresses to look up. Cached addresses are not sent upstream.",
        examples=[["8.8.8.8", "1.1.1.1"]],
    )
    batch_size: int = Field(default=BATCH_MAX_SIZE, description="Maximum IPs per upstream request.")
    filter: bool = Field(default=False, description="Ask ipinfo.io to filter the batch response.")
    timeout: float = Field(default=5.0, gt=0, description="Per-request timeout in seconds.")
