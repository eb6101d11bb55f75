"""Exception handlers for the FastAPI application.

Routes normally return rendered gateway results, so these handlers only see
errors raised outside the gateway: dependency failures and upload bodies that
outgrow the size cap.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from pgs3.core.exceptions import GatewayError, UploadTooLargeError

logger = logging.getLogger(__name__)


def _get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


async def upload_too_large_handler(request: Request, exc: UploadTooLargeError) -> PlainTextResponse:
    """Answer an oversized upload with 413."""
    logger.warning(
        "Upload rejected: %s",
        exc.detail,
        extra={"request_id": _get_request_id(request), **exc.extra},
    )
    return PlainTextResponse(exc.detail, status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)


async def gateway_exception_handler(request: Request, exc: GatewayError) -> PlainTextResponse:
    """Render a gateway error with the same status mapping as gateway results."""
    logger.log(
        logging.ERROR if exc.http_status >= 500 else logging.INFO,
        "Request failed: %s",
        exc.detail,
        extra={
            "request_id": _get_request_id(request),
            "status": str(exc.status),
            **exc.extra,
        },
    )
    return PlainTextResponse(exc.detail, status_code=exc.http_status)


def configure_exception_handlers(app: FastAPI) -> None:
    """Register the handlers, most specific first."""
    app.add_exception_handler(UploadTooLargeError, upload_too_large_handler)  # type: ignore[arg-type]
    app.add_exception_handler(GatewayError, gateway_exception_handler)  # type: ignore[arg-type]
