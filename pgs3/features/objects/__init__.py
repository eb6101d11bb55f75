"""Object storage feature: store adapter, gateway and HTTP routes."""

from .gateway import ObjectGateway
from .schemas import GatewayResult
from .store import ObjectStore

__all__ = ["GatewayResult", "ObjectGateway", "ObjectStore"]
