"""HTTP routes for buckets and objects.

Routes live at the application root so that object URLs read like S3 paths
(``/public/reports/2024.pdf``). Every method/path combination that is not an
object operation falls through to a plain-text 404.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import PlainTextResponse, Response

from pgs3.core.enums import GatewayStatus

from .buffer import UploadBuffer
from .dependencies import GatewayDep, MaxUploadBytesDep
from .schemas import GatewayResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["objects"])

FALLBACK_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]


def _not_found() -> PlainTextResponse:
    return PlainTextResponse("Not Found", status_code=status.HTTP_404_NOT_FOUND)


def render_result(result: GatewayResult) -> Response:
    """Turn a gateway result into an HTTP response.

    Success payloads are sent with their declared content type, untouched.
    Failures send the error message as plain text with the mapped status.
    """
    if result.ok:
        headers = {"content-type": result.content_type} if result.content_type else None
        return Response(content=result.data or b"", status_code=status.HTTP_200_OK, headers=headers)
    return PlainTextResponse(
        result.error_message or result.status.value,
        status_code=result.status.http_status,
    )


@router.get("/", summary="List buckets")
async def list_buckets(gateway: GatewayDep) -> Response:
    return render_result(await gateway.list_buckets())


@router.get("/{bucket}", summary="List objects in a bucket")
async def list_objects(
    bucket: str,
    gateway: GatewayDep,
    prefix: Annotated[str | None, Query(description="Only list keys starting with this")] = None,
) -> Response:
    return render_result(await gateway.list_objects(bucket, prefix))


@router.get("/{bucket}/{key:path}", summary="Download an object")
async def get_object(bucket: str, key: str, gateway: GatewayDep) -> Response:
    """Return the object bytes. An empty key (``GET /public/``) is not a route."""
    if not key:
        return _not_found()
    return render_result(await gateway.get_object(bucket, key))


@router.put("/{bucket}/{key:path}", summary="Upload an object")
async def put_object(
    bucket: str,
    key: str,
    request: Request,
    gateway: GatewayDep,
    max_upload_bytes: MaxUploadBytesDep,
) -> Response:
    """Store the request body under ``key``.

    The body is accumulated chunk by chunk; a body that grows past the upload
    cap raises ``UploadTooLargeError``, which the app renders as 413.
    """
    if not key:
        return _not_found()

    buffer = UploadBuffer(max_upload_bytes)
    try:
        async for chunk in request.stream():
            buffer.extend(chunk)
        content = buffer.getvalue()
    except MemoryError:
        logger.error("Out of memory while buffering upload", extra={"key": key})
        return render_result(GatewayResult.failure(GatewayStatus.OUT_OF_MEMORY, "Out of memory"))
    finally:
        buffer.clear()

    result = await gateway.put_object(bucket, key, content, request.headers.get("content-type"))
    response = render_result(result)
    if result.ok:
        response.headers["ETag"] = f'"{result.json()["ETag"]}"'
    return response


@router.delete("/{bucket}/{key:path}", summary="Delete an object")
async def delete_object(bucket: str, key: str, gateway: GatewayDep) -> Response:
    if not key:
        return _not_found()
    return render_result(await gateway.delete_object(bucket, key))


@router.api_route("/{path:path}", methods=FALLBACK_METHODS, include_in_schema=False)
async def not_found(path: str) -> PlainTextResponse:
    return _not_found()
