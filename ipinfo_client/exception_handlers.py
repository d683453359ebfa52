from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ipinfo_client.errors import ApiError, InvalidIpError, IPInfoError, NetworkError, ParseError
from ipinfo_client.logger import logger

# Most specific classes first; the first isinstance match wins.
ERROR_RESPONSES: list[tuple[type[IPInfoError], int, str]] = [
    (InvalidIpError, status.HTTP_400_BAD_REQUEST, "invalid_ip"),
    (ApiError, status.HTTP_502_BAD_GATEWAY, "upstream_error"),
    (NetworkError, status.HTTP_502_BAD_GATEWAY, "network_error"),
    (ParseError, status.HTTP_502_BAD_GATEWAY, "parse_error"),
]


# Field-specific validation codes, checked in this order.
VALIDATION_CODES: list[tuple[str, str, str]] = [
    ("ip", "invalid_ip", "The supplied IP address is not a valid IPv4 or IPv6 address."),
    ("ips", "invalid_batch_ips", "`ips` must be a list of IP address strings."),
    ("batch_size", "invalid_batch_size", "`batch_size` must be an integer."),
    ("timeout", "invalid_timeout", "`timeout` must be a positive number of seconds."),
]

# Leading loc entries naming where FastAPI found the value, not the field.
_LOC_SOURCES = {"body", "query", "path"}


def _get_ip_from_request(request: Request) -> str | None:
    """Best-effort extraction of the looked-up IP from the incoming request.

    The field endpoint carries it as a path parameter, the lookup endpoint as
    the `ip` query parameter. For other endpoints this will typically be None.
    """
    return request.path_params.get("ip") or request.query_params.get("ip")


def _invalid_field(error: dict[str, Any]) -> str | None:
    """Name of the request field an error points at, e.g. "ips" for ("body", "ips", 0)."""
    for part in error.get("loc", ()):
        if isinstance(part, str) and part not in _LOC_SOURCES:
            return part
    return None


def _build_validation_error_payload(errors: list[dict[str, Any]]) -> dict:
    """Turn request validation errors into the tester's error payload.

    `fields` lists every rejected request field. `code` and `message` describe
    the first of them in VALIDATION_CODES order, or fall back to a generic
    "invalid_request" when the body itself is missing or malformed.
    """
    fields = sorted({field for field in map(_invalid_field, errors) if field is not None})

    for field, code, message in VALIDATION_CODES:
        if field in fields:
            break
    else:
        code, message = "invalid_request", "Invalid request parameters"

    return {"code": code, "message": message, "fields": fields}


async def pydantic_validation_exception_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle validation errors raised while building request models.

    Registered for both pydantic's ValidationError (query models built through
    Depends) and FastAPI's RequestValidationError (request bodies).
    """
    ip = _get_ip_from_request(request)
    logger.info(
        "Validation error during request handling "
        f"path={request.url.path} method={request.method} ip={ip} errors={exc.errors()}"
    )
    payload = _build_validation_error_payload(exc.errors())
    payload["ip"] = ip
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)


async def ipinfo_error_exception_handler(request: Request, exc: IPInfoError) -> JSONResponse:
    """Map client errors to HTTP responses; upstream failures become 502."""
    ip = _get_ip_from_request(request)
    status_code, code = status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error"
    for error_cls, mapped_status, mapped_code in ERROR_RESPONSES:
        if isinstance(exc, error_cls):
            status_code, code = mapped_status, mapped_code
            break

    log = logger.error if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.info
    log(f"ipinfo error during lookup path={request.url.path} method={request.method} ip={ip} error={exc!r}")

    content: dict[str, Any] = {"code": code, "message": str(exc), "ip": ip}
    if isinstance(exc, ApiError):
        content["upstream_status"] = exc.status_code
    return JSONResponse(status_code=status_code, content=content)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected errors to return a structured 500 response."""
    ip = _get_ip_from_request(request)
    logger.exception(
        "Unhandled exception while processing request: "
        f"{repr(exc)} path={request.url.path} method={request.method} ip={ip}"
    )
    content: dict[str, Any] = {
        "code": "internal_error",
        "message": "An unexpected error occurred while processing the request.",
        "ip": ip,
    }
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
    )
