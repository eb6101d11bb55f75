"""Dependencies for object endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from pgs3.core.exceptions import StoreConnectionError

from .gateway import ObjectGateway


def get_gateway(request: Request) -> ObjectGateway:
    """Return the gateway built by the application lifespan."""
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        raise StoreConnectionError("Object store is not initialized")
    return gateway


def get_max_upload_bytes(request: Request) -> int:
    """Return the upload cap from the application settings."""
    return request.app.state.app_settings.max_upload_bytes


GatewayDep = Annotated[ObjectGateway, Depends(get_gateway)]
MaxUploadBytesDep = Annotated[int, Depends(get_max_upload_bytes)]

__all__ = ["GatewayDep", "MaxUploadBytesDep", "get_gateway", "get_max_upload_bytes"]
