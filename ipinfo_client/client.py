from collections.abc import Iterable
from http import HTTPStatus
from typing import Any

import httpx

from ipinfo_client.cache.base import BaseCache
from ipinfo_client.cache.disk_cache import DiskCache
from ipinfo_client.errors import ApiError, InvalidIpError, NetworkError, ParseError
from ipinfo_client.logger import logger
from ipinfo_client.models.lookup_result import LookupResult
from ipinfo_client.settings import DEFAULT_CACHE_TTL, ClientSettings
from ipinfo_client.utils import (
    BATCH_MAX_SIZE,
    CACHE_KEY_PREFIX,
    chunked,
    clamp_batch_size,
    is_valid_ip,
    make_cache_key,
    strip_field_value,
)


class IPInfoClient:
    """Client for the https://ipinfo.io API.

    Every lookup goes through the same steps: validate the IP, consult the
    cache, call the API on a miss, store the raw payload and wrap it in a
    LookupResult. Failures are raised as IPInfoError subclasses; nothing is
    retried.

    The configuration is immutable. `with_token`, `with_cache_enabled` and
    `with_cache_ttl` return a new client that shares this client's cache.

    Without an explicit backend the client creates a temporary DiskCache on
    first use and owns it; call `close()` (or use the client as a context
    manager) to release it. Injected backends, and the
    backend a `with_*` client inherits, are never closed by that client.
    """

    def __init__(self, settings: ClientSettings, cache: BaseCache | None = None) -> None:
        self._settings = settings
        self._cache = cache
        self._owns_cache = False

    def __enter__(self) -> "IPInfoClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @classmethod
    def create(
        cls,
        token: str,
        cache_enabled: bool = True,
        cache_ttl: int = DEFAULT_CACHE_TTL,
        cache: BaseCache | None = None,
    ) -> "IPInfoClient":
        """Build a client from a token and the basic cache options.

        When `cache` is omitted a temporary DiskCache is created lazily;
        release it with `close()` once the client is no longer needed.
        """
        settings = ClientSettings(token=token, cache_enabled=cache_enabled, cache_ttl=cache_ttl)
        return cls(settings, cache=cache)

    @classmethod
    def from_env(cls, cache: BaseCache | None = None) -> "IPInfoClient":
        """Build a client from IPINFO_* environment variables."""
        return cls(ClientSettings.from_env(), cache=cache)

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def cache(self) -> BaseCache:
        """The cache backend; a temporary DiskCache is created on first use."""
        if self._cache is None:
            self._cache = DiskCache()
            self._owns_cache = True
        return self._cache

    def close(self) -> None:
        """Close the cache backend if this client created it."""
        if not self._owns_cache:
            return
        self._cache.close()
        logger.debug("Closed temporary ipinfo disk cache")
        self._cache = None
        self._owns_cache = False

    def with_token(self, token: str) -> "IPInfoClient":
        return IPInfoClient(self._settings.updated(token=token), cache=self.cache)

    def with_cache_enabled(self, enabled: bool) -> "IPInfoClient":
        return IPInfoClient(self._settings.updated(cache_enabled=enabled), cache=self.cache)

    def with_cache_ttl(self, seconds: int) -> "IPInfoClient":
        return IPInfoClient(self._settings.updated(cache_ttl=seconds), cache=self.cache)

    def lookup(self, ip: str) -> LookupResult:
        """Return all data available to this token's plan for `ip`."""
        self._validate_ip(ip)
        cache_key = make_cache_key(ip, self._settings.token)

        cached = self._cache_get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for ipinfo lookup ip={ip}")
            return LookupResult(cached)

        logger.info(f"Requesting ipinfo lookup ip={ip}")
        response = self._get(f"{self._settings.base_url}/{ip}")
        data = self._parse_json(response)
        self._handle_provider_error(data)

        self._cache_set(cache_key, data)
        return LookupResult(data)

    def lookup_batch(
        self,
        ips: Iterable[str],
        batch_size: int = BATCH_MAX_SIZE,
        filter: bool = False,
        timeout: float | None = None,
    ) -> dict[str, LookupResult]:
        """Look up many IPs, using the batch endpoint for everything not cached.

        IPs are sent in chunks of at most `batch_size` (clamped to 1..1000).
        A chunk answered with an `error` object counts as failed.
        The first failing chunk aborts the whole call: its error is raised and
        results from chunks fetched earlier in the same call are discarded
        (they are still written to the cache).
        """
        pending = list(dict.fromkeys(ips))
        results: dict[str, LookupResult] = {}
        if not pending:
            return results

        batch_size = clamp_batch_size(batch_size)
        if timeout is None:
            timeout = self._settings.batch_timeout_seconds

        if self._settings.cache_enabled:
            remaining = []
            for ip in pending:
                cached = self._cache_get(make_cache_key(ip, self._settings.token))
                if cached is not None:
                    results[ip] = LookupResult(cached)
                else:
                    remaining.append(ip)
            if results:
                logger.debug(f"Cache hits for ipinfo batch count={len(results)} remaining={len(remaining)}")
            pending = remaining

        url = f"{self._settings.base_url}/batch"
        if filter:
            url += "?filter=1"

        for chunk in chunked(pending, batch_size):
            logger.info(f"Requesting ipinfo batch size={len(chunk)} filter={filter}")
            response = self._post(url, chunk, timeout)
            data = self._parse_json(response)
            self._handle_provider_error(data)
            for ip, payload in data.items():
                if not isinstance(payload, dict):
                    logger.warning(f"Skipping non-object ipinfo batch entry ip={ip}")
                    continue
                self._cache_set(make_cache_key(ip, self._settings.token), payload)
                results[ip] = LookupResult(payload)

        return results

    def lookup_field(self, ip: str, field: str) -> str:
        """Return a single field (e.g. "city", "loc", "org") as a plain string."""
        self._validate_ip(ip)
        cache_key = make_cache_key(f"{ip}/{field}", self._settings.token)

        cached = self._cache_get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for ipinfo field ip={ip} field={field}")
            return cached

        logger.info(f"Requesting ipinfo field ip={ip} field={field}")
        response = self._get(f"{self._settings.base_url}/{ip}/{field}")
        value = strip_field_value(response.text)

        self._cache_set(cache_key, value)
        return value

    def lookup_fields(self, ip: str, fields: Iterable[str]) -> dict[str, str]:
        """Return several fields for `ip`; the first failing field aborts the call."""
        self._validate_ip(ip)
        return {field: self.lookup_field(ip, field) for field in fields}

    def clear_cache(self, ip: str | None = None) -> bool:
        """Clear the cached lookup for `ip`, or every ipinfo cache entry.

        Only the full lookup entry for `ip` is removed; entries written by
        `lookup_field` for that IP stay until they expire or the whole cache is
        cleared.
        """
        if ip is not None:
            return self.cache.delete(make_cache_key(ip, self._settings.token))
        logger.info("Clearing all ipinfo cache entries")
        return self.cache.delete_prefix(CACHE_KEY_PREFIX)

    @staticmethod
    def _validate_ip(ip: str) -> None:
        if not is_valid_ip(ip):
            logger.info(f"Rejected invalid IP address ip={ip!r}")
            raise InvalidIpError(ip)

    def _cache_get(self, key: str) -> Any | None:
        if not self._settings.cache_enabled:
            return None
        return self.cache.get(key)

    def _cache_set(self, key: str, value: Any) -> None:
        if self._settings.cache_enabled:
            self.cache.set(key, value, self._settings.cache_ttl)

    def _headers(self, with_body: bool = False) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._settings.token}",
            "Accept": "application/json",
        }
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _get(self, url: str) -> httpx.Response:
        try:
            with httpx.Client(timeout=self._settings.timeout_seconds) as client:
                response = client.get(url, headers=self._headers())
        except httpx.RequestError as exc:
            logger.error(f"ipinfo request failed url={url} error={exc!r}")
            raise NetworkError(f"ipinfo API request failed: {exc!r}") from exc

        self._handle_http_errors(response)
        return response

    def _post(self, url: str, payload: list[str], timeout: float) -> httpx.Response:
        try:
            with httpx.Client(timeout=timeout) as client:
                response = client.post(url, headers=self._headers(with_body=True), json=payload)
        except httpx.RequestError as exc:
            logger.error(f"ipinfo batch request failed url={url} error={exc!r}")
            raise NetworkError(f"ipinfo batch request failed: {exc!r}") from exc

        self._handle_http_errors(response)
        return response

    def _handle_http_errors(self, response: httpx.Response) -> None:
        """Map any non-200 status to ApiError, keeping the service message if there is one."""
        status_code = response.status_code
        if status_code == HTTPStatus.OK:
            return

        message = f"ipinfo API returned error code: {status_code}"
        detail = self._error_detail(response)
        if detail:
            message = f"{message} ({detail})"
        logger.error(f"ipinfo API error status={status_code} detail={detail}")
        raise ApiError(message, status_code=status_code)

    @staticmethod
    def _error_detail(response: httpx.Response) -> str | None:
        try:
            data = response.json()
        except ValueError:
            return None
        if not isinstance(data, dict) or "error" not in data:
            return None
        return _error_message(data["error"])

    @staticmethod
    def _parse_json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise ParseError(f"Failed to parse ipinfo API response: {exc}") from exc
        if not isinstance(data, dict):
            raise ParseError(f"Unexpected ipinfo API response type: {type(data).__name__}")
        return data

    @staticmethod
    def _handle_provider_error(data: dict[str, Any]) -> None:
        """ipinfo.io reports some failures as {"error": {"title": ..., "message": ...}}."""
        if "error" not in data:
            return
        status = data.get("status")
        raise ApiError(_error_message(data["error"]), status_code=status if isinstance(status, int) else None)


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message") or error.get("title") or "Unknown API error")
    if isinstance(error, str) and error:
        return error
    return "Unknown API error"
