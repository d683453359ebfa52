import json
from dataclasses import dataclass
from typing import Any

import httpx

from ipinfo_client.cache.base import BaseCache


class MockResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self) -> Any:
        if self._payload is not None:
            return self._payload
        return json.loads(self.text)


@dataclass
class RecordedCall:
    method: str
    url: str
    headers: dict[str, str]
    body: Any
    timeout: Any


class MockClientFactory:
    """Stand-in for the httpx.Client class that records every request.

    Responses are returned in order; the last one is repeated once the others
    are used up.
    """

    def __init__(self, *responses: MockResponse) -> None:
        self._responses = list(responses)
        self.calls: list[RecordedCall] = []

    def __call__(self, *args: Any, **kwargs: Any) -> "MockClient":
        return MockClient(self, kwargs.get("timeout"))

    def respond(self, call: RecordedCall) -> MockResponse:
        self.calls.append(call)
        if len(self._responses) > 1:
            return self._responses.pop(0)
        return self._responses[0]


class MockClient:
    """Minimal context-manager mock for httpx.Client."""

    def __init__(self, factory: MockClientFactory, timeout: Any) -> None:
        self._factory = factory
        self._timeout = timeout

    def __enter__(self) -> "MockClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def get(self, url: str, headers: dict[str, str] | None = None) -> MockResponse:
        return self._factory.respond(RecordedCall("GET", url, headers or {}, None, self._timeout))

    def post(self, url: str, headers: dict[str, str] | None = None, json: Any = None) -> MockResponse:
        return self._factory.respond(RecordedCall("POST", url, headers or {}, json, self._timeout))


class FailingClient:
    """Client whose requests raise a ConnectError to simulate network failure."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        pass

    def __enter__(self) -> "FailingClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def get(self, url: str, **kwargs: Any) -> MockResponse:
        raise httpx.ConnectError("Network failure", request=httpx.Request("GET", url))

    def post(self, url: str, **kwargs: Any) -> MockResponse:
        raise httpx.ConnectError("Network failure", request=httpx.Request("POST", url))


class FakeCache(BaseCache):
    """In-memory BaseCache that counts reads and writes."""

    def __init__(self) -> None:
        self.store: dict[str, Any] = {}
        self.ttls: dict[str, int] = {}
        self.gets = 0
        self.sets = 0
        self.closes = 0

    def get(self, key: str) -> Any | None:
        self.gets += 1
        return self.store.get(key)

    def set(self, key: str, value: Any, ttl: int) -> None:
        self.sets += 1
        self.store[key] = value
        self.ttls[key] = ttl

    def delete(self, key: str) -> bool:
        self.ttls.pop(key, None)
        return self.store.pop(key, None) is not None

    def delete_prefix(self, prefix: str) -> bool:
        for key in [k for k in self.store if k.startswith(prefix)]:
            self.delete(key)
        return True

    def close(self) -> None:
        self.closes += 1


GOOGLE_DNS_PAYLOAD: dict[str, Any] = {
    "ip": "8.8.8.8",
    "hostname": "dns.google",
    "anycast": True,
    "city": "Mountain View",
    "region": "California",
    "country": "US",
    "loc": "37.4056,-122.0775",
    "org": "AS15169 Google LLC",
    "postal": "94043",
    "timezone": "America/Los_Angeles",
}
