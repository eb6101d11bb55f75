"""HTTP binding for the object gateway."""

from .main import create_app

__all__ = ["create_app"]
