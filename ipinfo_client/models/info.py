"""Plan-gated sub-objects of an ipinfo.io payload.

Which of these appear depends on the token's plan:

- Basic: ASN
- Business: Company, Privacy, Abuse
- Premium: Domains

Continent, CountryFlag and CountryCurrency are added by the API for all plans
that return country details. Each model is a frozen view over one slice of the
raw payload and is only built when that slice exists.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class _InfoModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # JSON null falls back to the field default (False, 0, [] or None).
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class ASN(_InfoModel):
    """Autonomous system details (Basic plan and above)."""

    asn: str | None = None
    name: str | None = None
    domain: str | None = None
    route: str | None = None
    type: str | None = None


class Company(_InfoModel):
    """Company owning the address range (Business plan and above)."""

    name: str | None = None
    domain: str | None = None
    type: str | None = None


class Privacy(_InfoModel):
    """Anonymisation flags (Business plan and above)."""

    vpn: bool = False
    proxy: bool = False
    tor: bool = False
    relay: bool = False
    hosting: bool = False
    service: str | None = None


class Abuse(_InfoModel):
    """Abuse contact for the network (Business plan and above)."""

    address: str | None = None
    country: str | None = None
    email: str | None = None
    name: str | None = None
    network: str | None = None
    phone: str | None = None


class Domains(_InfoModel):
    """Hosted domains on the address (Premium plan)."""

    ip: str | None = None
    total: int = 0
    page: int = 0
    domains: list[str] = []


class Continent(_InfoModel):
    code: str | None = None
    name: str | None = None


class CountryFlag(_InfoModel):
    emoji: str | None = None
    unicode: str | None = None


class CountryCurrency(_InfoModel):
    code: str | None = None
    symbol: str | None = None
