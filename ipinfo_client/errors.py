class IPInfoError(Exception):
    """Base error for ipinfo.io client failures."""


class InvalidIpError(IPInfoError):
    """Raised when the supplied IP address is syntactically invalid."""

    def __init__(self, ip: str) -> None:
        super().__init__(f"Invalid IP address: {ip}")
        self.ip = ip


class NetworkError(IPInfoError):
    """Raised when the ipinfo.io API cannot be reached."""


class ApiError(IPInfoError):
    """Raised when ipinfo.io answers with a non-200 status or an error payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(IPInfoError):
    """Raised when an ipinfo.io response body is not valid JSON."""
