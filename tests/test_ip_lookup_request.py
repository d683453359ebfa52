from typing import Any

import pytest
from pydantic import ValidationError

from ipinfo_client.models.request_models import BatchLookupRequest, IPLookupRequest


def _build_request(ip: Any) -> IPLookupRequest:
    """Helper to construct IPLookupRequest, used to keep tests small."""
    return IPLookupRequest(ip=ip)


def test_ip_lookup_request_allows_valid_ipv4() -> None:
    """Explicit valid IPv4 address is accepted as-is."""
    req = _build_request("8.8.8.8")
    assert req.ip == "8.8.8.8"


def test_ip_lookup_request_allows_valid_ipv6() -> None:
    """Explicit valid IPv6 address is accepted as-is."""
    req = _build_request("2001:4860:4860::8888")
    assert req.ip == "2001:4860:4860::8888"


def test_ip_lookup_request_strips_whitespace() -> None:
    req = _build_request(" 8.8.8.8 ")
    assert req.ip == "8.8.8.8"


@pytest.mark.parametrize("value", ["qwerty", "999.999.999.999", "   "])
def test_ip_lookup_request_rejects_invalid_ip(value: str) -> None:
    """Non-IP strings, including blanks, are rejected by validation."""
    with pytest.raises(ValidationError):
        _build_request(value)


def test_batch_request_defaults() -> None:
    req = BatchLookupRequest()

    assert req.ips == []
    assert req.batch_size == 1000
    assert req.filter is False
    assert req.timeout == 5.0


def test_batch_request_rejects_non_positive_timeout() -> None:
    with pytest.raises(ValidationError):
        BatchLookupRequest(ips=["8.8.8.8"], timeout=0)
