"""Map domain errors to user-facing HTTP responses"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from closure_watch.domain.exceptions import ConfigurationError, UpstreamError, UpstreamProtocolError

FRIENDLY_STATUS_MESSAGES = {
    401: "Ledger API rejected the credentials (401). Check LEDGER_API_TOKEN.",
    403: "Ledger API token is not permitted to read accounts (403). Check the token scopes.",
    404: "Ledger API endpoint not found (404). Check LEDGER_API_BASE.",
}


def describe_upstream_error(exc: UpstreamError) -> str:
    return FRIENDLY_STATUS_MESSAGES.get(exc.status_code, str(exc))


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logging.error(f"Configuration error: {exc}", extra={"path": request.url.path})
    return _error(500, str(exc))


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logging.error(f"Ledger API error: {exc}", extra={"path": request.url.path, "status_code": exc.status_code})
    return _error(502, describe_upstream_error(exc))


async def upstream_protocol_error_handler(request: Request, exc: UpstreamProtocolError) -> JSONResponse:
    logging.error(f"Ledger API protocol error: {exc}", extra={"path": request.url.path})
    return _error(502, f"Ledger API returned an unreadable response: {exc}")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)
    app.add_exception_handler(UpstreamProtocolError, upstream_protocol_error_handler)
