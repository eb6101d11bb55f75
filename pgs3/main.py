"""ASGI entry point.

Run with ``uvicorn pgs3.main:app`` or through ``pgs3 serve``.
"""

from __future__ import annotations

from pgs3.app.main import create_app

app = create_app()
