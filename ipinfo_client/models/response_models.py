from typing import Any

from pydantic import BaseModel

from ipinfo_client.models.info import ASN, Abuse, Company, Domains, Privacy
from ipinfo_client.models.lookup_result import LookupResult


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""

    status: str


class IPLookupResponse(BaseModel):
    """Summary of a lookup plus the raw ipinfo.io payload.

    Plan-gated sections are null when the token's plan does not include them.
    """

    ip: str | None = None
    hostname: str | None = None
    city: str | None = None
    region: str | None = None
    country: str | None = None
    country_name: str | None = None
    postal_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    timezone: str | None = None
    org: str | None = None
    asn: ASN | None = None
    company: Company | None = None
    privacy: Privacy | None = None
    abuse: Abuse | None = None
    domains: Domains | None = None
    raw: dict[str, Any]

    @classmethod
    def from_result(cls, result: LookupResult) -> "IPLookupResponse":
        return cls(
            ip=result.get_ip(),
            hostname=result.get_hostname(),
            city=result.get_city(),
            region=result.get_region(),
            country=result.get_country(),
            country_name=result.get_country_name(),
            postal_code=result.get_postal(),
            latitude=result.get_latitude(),
            longitude=result.get_longitude(),
            timezone=result.get_timezone(),
            org=result.get_org(),
            asn=result.get_asn(),
            company=result.get_company(),
            privacy=result.get_privacy(),
            abuse=result.get_abuse(),
            domains=result.get_domains(),
            raw=result.get_all(),
        )


class FieldLookupResponse(BaseModel):
    ip: str
    field: str
    value: str


class BatchLookupResponse(BaseModel):
    """Raw payloads keyed by IP address."""

    results: dict[str, dict[str, Any]]


class CacheClearResponse(BaseModel):
    cleared: bool
