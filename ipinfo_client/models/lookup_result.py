import copy
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, TypeVar

from pydantic import BaseModel

from ipinfo_client.models.common import Coordinates, coerce_float, parse_loc
from ipinfo_client.models.info import (
    ASN,
    Abuse,
    Company,
    Continent,
    CountryCurrency,
    CountryFlag,
    Domains,
    Privacy,
)

InfoModelT = TypeVar("InfoModelT", bound=BaseModel)


class LookupResult:
    """Read-only view over one ipinfo.io lookup payload.

    The payload is deep-copied on construction, so neither the cache entry nor
    the caller's dict can change it afterwards. Every accessor returns None when
    the field is missing; plan-gated sub-objects (ASN, Privacy, ...) are only
    built when their key is present in the payload.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data: Mapping[str, Any] = MappingProxyType(copy.deepcopy(dict(data)))

    def __repr__(self) -> str:
        return f"LookupResult(ip={self.get_ip()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LookupResult):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def _get_str(self, key: str) -> str | None:
        value = self._data.get(key)
        return None if value is None else str(value)

    def _get_info(self, key: str, model: type[InfoModelT]) -> InfoModelT | None:
        raw = self._data.get(key)
        # Lite responses carry some of these keys as plain strings (e.g. "asn": "AS15169").
        if not isinstance(raw, Mapping):
            return None
        return model.model_validate(dict(raw))

    def get_ip(self) -> str | None:
        return self._get_str("ip")

    def get_hostname(self) -> str | None:
        return self._get_str("hostname")

    def is_anycast(self) -> bool:
        return bool(self._data.get("anycast", False))

    def get_city(self) -> str | None:
        return self._get_str("city")

    def get_region(self) -> str | None:
        return self._get_str("region")

    def get_country(self) -> str | None:
        """Two-letter ISO country code, e.g. "US"."""
        return self._get_str("country")

    def get_country_name(self) -> str | None:
        return self._get_str("country_name")

    def get_country_flag(self) -> CountryFlag | None:
        return self._get_info("country_flag", CountryFlag)

    def get_country_flag_url(self) -> str | None:
        return self._get_str("country_flag_url")

    def get_country_currency(self) -> CountryCurrency | None:
        return self._get_info("country_currency", CountryCurrency)

    def is_eu(self) -> bool:
        return bool(self._data.get("is_eu", False))

    def get_continent(self) -> Continent | None:
        return self._get_info("continent", Continent)

    def get_coordinates(self) -> Coordinates | None:
        """Return latitude/longitude, preferring explicit fields over `loc`.

        A missing or non-numeric half of `loc` yields None for that component.
        Returns None when the payload has no location at all.
        """
        if self._data.get("latitude") is not None and self._data.get("longitude") is not None:
            return Coordinates(
                latitude=coerce_float(self._data["latitude"]),
                longitude=coerce_float(self._data["longitude"]),
            )
        if self._data.get("loc") is not None:
            return parse_loc(self._data["loc"])
        return None

    def get_latitude(self) -> float | None:
        coordinates = self.get_coordinates()
        return coordinates["latitude"] if coordinates else None

    def get_longitude(self) -> float | None:
        coordinates = self.get_coordinates()
        return coordinates["longitude"] if coordinates else None

    def get_org(self) -> str | None:
        """Organisation string, e.g. "AS15169 Google LLC"."""
        return self._get_str("org")

    def get_postal(self) -> str | None:
        return self._get_str("postal")

    def get_timezone(self) -> str | None:
        return self._get_str("timezone")

    def get_asn(self) -> ASN | None:
        return self._get_info("asn", ASN)

    def get_company(self) -> Company | None:
        return self._get_info("company", Company)

    def get_privacy(self) -> Privacy | None:
        return self._get_info("privacy", Privacy)

    def get_abuse(self) -> Abuse | None:
        return self._get_info("abuse", Abuse)

    def get_domains(self) -> Domains | None:
        return self._get_info("domains", Domains)

    def get_all(self) -> dict[str, Any]:
        """Return a copy of the full payload, including fields with no accessor."""
        return copy.deepcopy(dict(self._data))
