from functools import lru_cache
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from ipinfo_client.client import IPInfoClient
from ipinfo_client.errors import IPInfoError
from ipinfo_client.exception_handlers import (
    ipinfo_error_exception_handler,
    pydantic_validation_exception_handler,
    unhandled_exception_handler,
)
from ipinfo_client.logger import configure_logging, logger
from ipinfo_client.models.request_models import BatchLookupRequest, IPLookupRequest
from ipinfo_client.models.response_models import (
    BatchLookupResponse,
    CacheClearResponse,
    FieldLookupResponse,
    HealthResponse,
    IPLookupResponse,
)

configure_logging()

app = FastAPI(
    title="IPInfo Tester",
    version="0.1.0",
    description="Small HTTP front end for trying ipinfo.io lookups through the cached client.",
)
logger.info("Started IPInfo Tester")


@lru_cache(maxsize=1)
def _build_client() -> IPInfoClient:
    return IPInfoClient.from_env()


def get_ipinfo_client() -> IPInfoClient:
    """Dependency providing the process-wide client configured from IPINFO_* variables."""
    try:
        return _build_client()
    except ValidationError as exc:
        logger.error(f"ipinfo client is not configured: {exc.errors()}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "code": "not_configured",
                "message": "Set IPINFO_TOKEN to enable lookups.",
            },
        ) from exc


ClientDep = Annotated[IPInfoClient, Depends(get_ipinfo_client)]

# Register global exception handlers using the shared handlers module.
app.add_exception_handler(ValidationError, pydantic_validation_exception_handler)
app.add_exception_handler(RequestValidationError, pydantic_validation_exception_handler)
app.add_exception_handler(IPInfoError, ipinfo_error_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get(
    "/health",
    tags=["health"],
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
def health() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(status="ok")


@app.get(
    "/v1/ip/lookup",
    response_model=IPLookupResponse,
    status_code=status.HTTP_200_OK,
    tags=["ip"],
    summary="Look up everything the token's plan returns for an IP address.",
)
def ip_lookup(
    request: Request,
    query: Annotated[IPLookupRequest, Depends()],
    client: ClientDep,
) -> IPLookupResponse:
    """Full lookup; served from the cache when a fresh entry exists."""
    logger.info(f"Performing IP lookup path={request.url.path} method={request.method} ip={query.ip}")
    result = client.lookup(query.ip)
    return IPLookupResponse.from_result(result)


@app.get(
    "/v1/ip/{ip}/fields/{field}",
    response_model=FieldLookupResponse,
    status_code=status.HTTP_200_OK,
    tags=["ip"],
    summary="Look up a single field (e.g. city, loc, org) for an IP address.",
)
def field_lookup(request: Request, ip: str, field: str, client: ClientDep) -> FieldLookupResponse:
    logger.info(f"Performing field lookup path={request.url.path} method={request.method} ip={ip} field={field}")
    value = client.lookup_field(ip, field)
    return FieldLookupResponse(ip=ip, field=field, value=value)


@app.post(
    "/v1/ip/batch",
    response_model=BatchLookupResponse,
    status_code=status.HTTP_200_OK,
    tags=["ip"],
    summary="Look up many IP addresses at once.",
)
def batch_lookup(request: Request, body: BatchLookupRequest, client: ClientDep) -> BatchLookupResponse:
    """Batch lookup.

    If any upstream chunk fails the whole request fails; no partial results
    are returned.
    """
    logger.info(
        "Performing batch lookup "
        f"path={request.url.path} method={request.method} count={len(body.ips)} "
        f"batch_size={body.batch_size} filter={body.filter}"
    )
    results = client.lookup_batch(body.ips, batch_size=body.batch_size, filter=body.filter, timeout=body.timeout)
    return BatchLookupResponse(results={ip: result.get_all() for ip, result in results.items()})


@app.delete(
    "/v1/cache",
    response_model=CacheClearResponse,
    status_code=status.HTTP_200_OK,
    tags=["cache"],
    summary="Clear the cached lookup for one IP, or all cached ipinfo entries.",
)
def clear_cache(
    request: Request,
    client: ClientDep,
    ip: Annotated[str | None, Query(description="IP whose cached lookup should be removed.")] = None,
) -> CacheClearResponse:
    logger.info(f"Clearing cache path={request.url.path} method={request.method} ip={ip}")
    return CacheClearResponse(cleared=client.clear_cache(ip))
