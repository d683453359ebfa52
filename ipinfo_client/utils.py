import hashlib
from ipaddress import ip_address

CACHE_KEY_PREFIX = "ipinfo_"
BATCH_MAX_SIZE = 1000

# Characters stripped from raw single-field responses, e.g. "\"Mountain View\"\n".
FIELD_VALUE_STRIP_CHARS = "\" \t\n\r\0\x0b"


def is_valid_ip(value: str) -> bool:
    """Return True if `value` is a literal IPv4 or IPv6 address."""
    if not isinstance(value, str):
        return False
    try:
        ip_address(value)
    except ValueError:
        return False
    return True


def make_cache_key(subject: str, token: str) -> str:
    """Derive the cache key for an IP (or "ip/field") and API token.

    The token is part of the digest so clients with different tokens sharing
    one cache backend never read each other's entries. A NUL separator keeps
    pairs such as ("1.1.1.1", "2abc") and ("1.1.1.12", "abc") apart.
    """
    digest = hashlib.sha256(f"{subject}\0{token}".encode()).hexdigest()
    return f"{CACHE_KEY_PREFIX}{digest}"


def clamp_batch_size(batch_size: int) -> int:
    return min(max(1, batch_size), BATCH_MAX_SIZE)


def chunked(items: list[str], size: int) -> list[list[str]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


def strip_field_value(body: str) -> str:
    return body.strip(FIELD_VALUE_STRIP_CHARS)
