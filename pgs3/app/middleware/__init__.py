"""ASGI middleware for the HTTP gateway."""

from .request_id import RequestIDMiddleware
from .size_limit import RequestSizeLimitMiddleware

__all__ = ["RequestIDMiddleware", "RequestSizeLimitMiddleware"]
